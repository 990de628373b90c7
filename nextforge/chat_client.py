"""Async client for an OpenAI-compatible chat-completion API.

Wraps ``POST /chat/completions`` with proper timeout handling and a
structured response. The default endpoint is x.ai, but any server that speaks
the same request shape works. All methods are async so they integrate cleanly
with the rest of the pipeline.

Typical usage::

    client = ChatClient(api_key="xai-...")
    resp = await client.complete("Write a hello world component", system="Be terse.")
    if resp.success:
        print(resp.text)
"""

from __future__ import annotations

import time

import httpx
from pydantic import BaseModel, Field


class ChatResponse(BaseModel):
    """Structured response from a chat-completion call."""

    text: str = Field(default="", description="Content of the first choice")
    model: str = Field(default="", description="Model that produced the response")
    duration_ms: float = Field(default=0.0, description="Client-side round-trip time in ms")
    success: bool = Field(default=True, description="Whether the request succeeded")
    error: str | None = Field(default=None, description="Error message on failure")


class ChatClient:
    """Async client for a chat-completion REST API.

    One instance is built from ``Config`` and handed to every call site; it
    holds no connection state between requests.
    """

    def __init__(
        self,
        base_url: str = "https://api.x.ai/v1",
        api_key: str = "",
        model: str = "grok-2-1212",
        timeout: int = 120,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL, auth and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Pull the generated text out of a /chat/completions JSON response.

        Only the first choice is read; we always ask for exactly one.
        """
        choices = data.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def complete(
        self,
        prompt: str,
        system: str = "",
        model: str | None = None,
    ) -> ChatResponse:
        """Request a single, non-streaming chat completion.

        Args:
            prompt: The user message.
            system: Optional system message placed before the user message.
            model: Override for the client's default model.

        Returns:
            A ``ChatResponse`` with the generated text or an error.
        """
        model = model or self.model
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload: dict = {
            "model": model,
            "messages": messages,
            "n": 1,
            "stream": False,
        }

        start = time.monotonic()
        try:
            async with self._client() as client:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                data = response.json()
                return ChatResponse(
                    text=self._extract_text(data),
                    model=data.get("model", model),
                    duration_ms=(time.monotonic() - start) * 1000.0,
                    success=True,
                )
        except httpx.ConnectError:
            return ChatResponse(
                model=model,
                success=False,
                error=f"Cannot connect to {self.base_url}.",
            )
        except httpx.TimeoutException:
            return ChatResponse(
                model=model,
                success=False,
                error=f"Completion request timed out after {self.timeout}s.",
            )
        except httpx.HTTPStatusError as exc:
            return ChatResponse(
                model=model,
                success=False,
                error=f"Endpoint returned HTTP {exc.response.status_code}: {exc.response.text[:500]}",
            )
        except Exception as exc:  # noqa: BLE001
            return ChatResponse(
                model=model,
                success=False,
                error=f"Unexpected error during chat completion: {exc}",
            )
