"""Shared pytest fixtures for the nextforge test suite.

Provides reusable fixtures for:
- A Config pointing at a temporary output directory
- Sample plans (as dicts and as JSON text)
- Chat clients whose completions are scripted
- Mocked httpx transport for the chat-completion endpoint
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from nextforge.chat_client import ChatClient, ChatResponse
from nextforge.config import ChatConfig, Config, ScaffoldConfig


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config for a project named ``demo`` under ``tmp_path``, scaffolding off."""
    return Config(
        project_name="demo",
        output_dir=tmp_path,
        chat=ChatConfig(api_key="test-key"),
        scaffold=ScaffoldConfig(enabled=False),
    )


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

@pytest.fixture
def landing_plan() -> dict[str, Any]:
    """Plan for 'a landing page with a hero and pricing table'."""
    return {
        "components": [
            {
                "name": "Hero",
                "type": "section",
                "description": "Full-width hero with headline and call to action",
                "props": ["title", "subtitle", "ctaLabel"],
                "dependencies": ["next/link"],
            },
            {
                "name": "Pricing",
                "type": "feature",
                "description": "Three-tier pricing table with monthly/yearly toggle",
                "props": ["plans"],
                "dependencies": [],
            },
        ],
        "pages": [
            {"name": "Home", "route": "/", "components": ["Hero", "Pricing"]},
        ],
        "features": ["hero banner", "pricing table"],
        "dataStructures": [],
    }


@pytest.fixture
def landing_plan_json(landing_plan: dict[str, Any]) -> str:
    return json.dumps(landing_plan, indent=2)


# ---------------------------------------------------------------------------
# Chat clients
# ---------------------------------------------------------------------------

def _ok(text: str) -> ChatResponse:
    return ChatResponse(text=text, model="grok-2-1212", success=True)


@pytest.fixture
def scripted_client():
    """Factory for a ``ChatClient`` whose ``complete`` returns the given texts in order.

    Strings become successful responses; ``ChatResponse`` objects are returned
    as-is.

    Usage:
        def test_something(scripted_client):
            client = scripted_client(plan_json, "export default function Hero() {}")
    """

    def _make(*replies: str | ChatResponse) -> ChatClient:
        client = ChatClient(api_key="test-key")
        client.complete = AsyncMock(
            side_effect=[r if isinstance(r, ChatResponse) else _ok(r) for r in replies]
        )
        return client

    return _make


def make_completion_payload(content: str, model: str = "grok-2-1212") -> dict[str, Any]:
    """Build an OpenAI-shaped ``/chat/completions`` response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
    }


@pytest.fixture
def mock_chat_api():
    """Patch ``httpx.AsyncClient`` so every POST returns a canned completion.

    Returns ``(patcher, mock_client)``; set ``mock_client.post`` to change
    the behaviour.

    Usage:
        def test_something(mock_chat_api):
            patcher, http = mock_chat_api
            with patcher:
                ...
    """
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = make_completion_payload("hello")
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock()
    mock_client.post = AsyncMock(return_value=mock_response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)

    return patch("httpx.AsyncClient", return_value=mock_client), mock_client
