"""Type-definition synthesizer: one prompt, one file."""

from __future__ import annotations

from pathlib import Path

from nextforge.chat_client import ChatClient
from nextforge.prompts import TYPES_SYSTEM_PROMPT, PromptRenderer
from nextforge.utils import strip_code_fences, write_text


class TypeDefinitionError(Exception):
    """Raised when the model did not return type definitions."""


async def synthesize_types(
    client: ChatClient,
    data_structures: list[str],
    output_path: str | Path,
    renderer: PromptRenderer | None = None,
) -> Path:
    """Generate type definitions for *data_structures* and write them to *output_path*.

    The answer is unwrapped from a markdown fence the same way component code
    is.

    Raises:
        TypeDefinitionError: If the completion request failed.
    """
    renderer = renderer or PromptRenderer()
    prompt = renderer.types_prompt(data_structures)

    response = await client.complete(prompt, system=TYPES_SYSTEM_PROMPT)
    if not response.success:
        raise TypeDefinitionError(
            f"Failed to generate type definitions: {response.error or 'completion request failed'}"
        )

    return await write_text(output_path, strip_code_fences(response.text))
