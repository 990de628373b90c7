"""Unit tests for the requirement planner (nextforge.planner.requirements).

Tests cover:
- parse_plan (plain JSON, fenced JSON, invalid JSON, non-object, schema errors)
- analyze_requirements (prompt content, system prompt, completion failure)
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from nextforge.chat_client import ChatResponse
from nextforge.planner import PlanningError, PlanParseError, analyze_requirements, parse_plan
from nextforge.prompts import PLAN_SYSTEM_PROMPT


# ---------------------------------------------------------------------------
# parse_plan
# ---------------------------------------------------------------------------


class TestParsePlan:
    @pytest.mark.unit
    def test_plain_json(self, landing_plan_json: str):
        plan = parse_plan(landing_plan_json)
        assert plan.component_names() == ["Hero", "Pricing"]

    @pytest.mark.unit
    def test_json_fence_matches_plain(self, landing_plan_json: str):
        fenced = parse_plan(f"```json\n{landing_plan_json}\n```")
        plain = parse_plan(landing_plan_json)
        assert fenced == plain

    @pytest.mark.unit
    def test_bare_fence(self, landing_plan_json: str):
        plan = parse_plan(f"```\n{landing_plan_json}\n```")
        assert len(plan.components) == 2

    @pytest.mark.unit
    def test_invalid_json_carries_raw_text(self):
        with pytest.raises(PlanParseError) as exc_info:
            parse_plan("```json\nSure! Here is your plan: {components: []}\n```")
        assert exc_info.value.raw == "Sure! Here is your plan: {components: []}"
        assert "Failed to parse project requirements" in str(exc_info.value)

    @pytest.mark.unit
    def test_top_level_array_rejected(self):
        with pytest.raises(PlanParseError) as exc_info:
            parse_plan("[1, 2, 3]")
        assert "expected a JSON object" in str(exc_info.value)

    @pytest.mark.unit
    def test_schema_violation(self):
        raw = json.dumps({"components": [{"name": "../../etc/passwd", "type": "ui"}]})
        with pytest.raises(PlanParseError) as exc_info:
            parse_plan(raw)
        assert exc_info.value.raw == raw
        assert "plan schema" in str(exc_info.value)

    @pytest.mark.unit
    def test_null_fields_accepted(self):
        plan = parse_plan(
            '{"components": [{"name": "Hero", "type": null, "props": null}],'
            ' "pages": null, "features": null, "dataStructures": null}'
        )
        assert plan.component_names() == ["Hero"]
        assert plan.components[0].type == ""
        assert plan.data_structures == []

    @pytest.mark.unit
    def test_parse_error_is_planning_error(self):
        with pytest.raises(PlanningError):
            parse_plan("not json")


# ---------------------------------------------------------------------------
# analyze_requirements
# ---------------------------------------------------------------------------


class TestAnalyzeRequirements:
    @pytest.mark.unit
    async def test_returns_plan(self, scripted_client, landing_plan_json: str):
        client = scripted_client(landing_plan_json)
        plan = await analyze_requirements(
            client, "a landing page with a hero and pricing table"
        )
        assert plan.component_names() == ["Hero", "Pricing"]

    @pytest.mark.unit
    async def test_single_completion_with_prompt(self, scripted_client, landing_plan_json: str):
        client = scripted_client(landing_plan_json)
        await analyze_requirements(client, "a portfolio site", theme="dark", style="bold")

        client.complete.assert_awaited_once()
        prompt = client.complete.call_args[0][0]
        assert 'Description: "a portfolio site"' in prompt
        assert "Theme: dark" in prompt
        assert "Style: bold" in prompt
        assert client.complete.call_args[1]["system"] == PLAN_SYSTEM_PROMPT

    @pytest.mark.unit
    async def test_default_theme_and_style(self, scripted_client, landing_plan_json: str):
        client = scripted_client(landing_plan_json)
        await analyze_requirements(client, "x")
        prompt = client.complete.call_args[0][0]
        assert "Theme: modern" in prompt
        assert "Style: minimal" in prompt

    @pytest.mark.unit
    async def test_completion_failure(self, scripted_client):
        client = scripted_client(ChatResponse(success=False, error="Endpoint returned HTTP 401: nope"))
        with pytest.raises(PlanningError, match="HTTP 401"):
            await analyze_requirements(client, "x")

    @pytest.mark.unit
    async def test_invalid_json_not_retried(self, scripted_client):
        client = scripted_client("I cannot help with that.")
        with pytest.raises(PlanParseError):
            await analyze_requirements(client, "x")
        assert client.complete.await_count == 1

    @pytest.mark.unit
    async def test_data_structures_parsed(self, scripted_client, landing_plan: dict[str, Any]):
        landing_plan["dataStructures"] = ["PricingPlan", "Testimonial"]
        client = scripted_client(json.dumps(landing_plan))
        plan = await analyze_requirements(client, "x")
        assert plan.data_structures == ["PricingPlan", "Testimonial"]
