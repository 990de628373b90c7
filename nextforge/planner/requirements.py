"""Requirement planner.

Turns a free-text project description into a ``ProjectPlan`` with a single
chat completion. The model is asked for bare JSON; any markdown fencing it
adds anyway is stripped before parsing. There is no retry and no repair: a
response that does not parse or validate fails the run.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from nextforge.chat_client import ChatClient
from nextforge.prompts import PLAN_SYSTEM_PROMPT, PromptRenderer
from nextforge.utils import strip_json_fences

from .models import ProjectPlan


class PlanningError(Exception):
    """Raised when the plan could not be obtained from the model."""


class PlanParseError(PlanningError):
    """Raised when the model's answer is not a valid plan.

    Attributes:
        raw: The cleaned response text, kept for manual debugging.
    """

    def __init__(self, message: str, raw: str) -> None:
        self.raw = raw
        super().__init__(message)


def parse_plan(content: str) -> ProjectPlan:
    """Strip fencing from *content*, parse it as JSON and validate the shape.

    Raises:
        PlanParseError: If the text is not JSON, not an object, or does not
            fit the plan schema.
    """
    cleaned = strip_json_fences(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise PlanParseError(f"Failed to parse project requirements: {exc}", cleaned) from exc

    if not isinstance(data, dict):
        raise PlanParseError(
            f"Failed to parse project requirements: expected a JSON object, got {type(data).__name__}",
            cleaned,
        )

    try:
        return ProjectPlan.model_validate(data)
    except ValidationError as exc:
        raise PlanParseError(
            f"Project requirements do not match the plan schema: {exc.error_count()} error(s)\n{exc}",
            cleaned,
        ) from exc


async def analyze_requirements(
    client: ChatClient,
    description: str,
    theme: str = "modern",
    style: str = "minimal",
    renderer: PromptRenderer | None = None,
) -> ProjectPlan:
    """Ask the model to classify *description* into a ``ProjectPlan``.

    Args:
        client: Chat client used for the single completion.
        description: Free-text project description, embedded verbatim.
        theme: Theme colour scheme hint.
        style: Design style hint.
        renderer: Prompt renderer; a default one is created if omitted.

    Raises:
        PlanningError: If the completion request failed.
        PlanParseError: If the response is not a valid plan.
    """
    renderer = renderer or PromptRenderer()
    prompt = renderer.plan_prompt(description, theme, style)

    response = await client.complete(prompt, system=PLAN_SYSTEM_PROMPT)
    if not response.success:
        raise PlanningError(response.error or "Completion request failed")

    return parse_plan(response.text)
