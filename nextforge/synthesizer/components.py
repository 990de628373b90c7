"""Component synthesizer.

Sends one prompt per planned component, unwraps any markdown fence around the
answer, and writes the text verbatim to a path derived from the component's
declared type. Names are not deduplicated: two components resolving to the
same path leave the later one (in plan order) on disk.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from pathlib import Path

from nextforge.chat_client import ChatClient
from nextforge.planner.models import ComponentSpec
from nextforge.prompts import COMPONENT_SYSTEM_PROMPT, PromptRenderer
from nextforge.utils import strip_code_fences, write_text


# ---------------------------------------------------------------------------
# Output layout
# ---------------------------------------------------------------------------

COMPONENT_DIRECTORIES: dict[str, str] = {
    "section": "sections",
    "layout": "layout",
    "feature": "features",
    "ui": "ui",
}


def component_directory(component_type: str) -> str:
    """Map a declared component type to its subdirectory; unknown types map to ``""``."""
    return COMPONENT_DIRECTORIES.get(component_type, "")


class SynthesisError(Exception):
    """Raised when the model did not return code for a component."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Failed to generate {name}: {message}")


# ---------------------------------------------------------------------------
# Synthesizer
# ---------------------------------------------------------------------------


class ComponentSynthesizer:
    """Generates and writes component source files.

    Attributes:
        client: Chat client shared with the rest of the run.
        components_dir: The project's ``components/`` directory.
        extension: File extension for generated components, without the dot.
        max_concurrent: Upper bound on in-flight completion requests. ``1``
            means strictly sequential generate-then-write per component.
    """

    def __init__(
        self,
        client: ChatClient,
        components_dir: str | Path,
        renderer: PromptRenderer | None = None,
        extension: str = "tsx",
        max_concurrent: int = 1,
    ) -> None:
        self.client = client
        self.components_dir = Path(components_dir)
        self.renderer = renderer or PromptRenderer()
        self.extension = extension
        self.max_concurrent = max(1, max_concurrent)

    def component_path(self, component: ComponentSpec) -> Path:
        """Return ``<components>/<subdir>/<name>.<ext>`` for *component*."""
        subdir = component_directory(component.type)
        return self.components_dir / subdir / f"{component.name}.{self.extension}"

    async def generate(self, component: ComponentSpec) -> str:
        """Request source text for one component.

        Raises:
            SynthesisError: If the completion request failed.
        """
        prompt = self.renderer.component_prompt(
            component.name, component.type, component.description, component.props
        )
        response = await self.client.complete(prompt, system=COMPONENT_SYSTEM_PROMPT)
        if not response.success:
            raise SynthesisError(component.name, response.error or "completion request failed")
        return strip_code_fences(response.text)

    async def synthesize(self, component: ComponentSpec) -> Path:
        """Generate one component and write it to disk."""
        code = await self.generate(component)
        return await write_text(self.component_path(component), code)

    async def synthesize_all(
        self,
        components: Iterable[ComponentSpec],
        on_component: Callable[[ComponentSpec], None] | None = None,
    ) -> list[Path]:
        """Generate and write every component, in plan order.

        With ``max_concurrent > 1`` completions are fetched concurrently,
        then written one by one in plan order so the last duplicate wins.

        Args:
            components: Components from the plan.
            on_component: Called with each component as its generation starts.

        Returns:
            Written paths in plan order (duplicates included).
        """
        components = list(components)

        if self.max_concurrent == 1:
            written: list[Path] = []
            for component in components:
                if on_component is not None:
                    on_component(component)
                written.append(await self.synthesize(component))
            return written

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def _generate(component: ComponentSpec) -> str:
            async with semaphore:
                if on_component is not None:
                    on_component(component)
                return await self.generate(component)

        codes = await asyncio.gather(*(_generate(c) for c in components))

        written = []
        for component, code in zip(components, codes):
            written.append(await write_text(self.component_path(component), code))
        return written
