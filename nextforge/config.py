"""nextforge configuration.

Centralised, typed configuration for the whole generation run. All settings
use Pydantic v2 models so they can be validated at construction time and
built from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ChatConfig(BaseModel):
    """Configuration for the OpenAI-compatible chat-completion endpoint."""

    base_url: str = Field(default="https://api.x.ai/v1")
    model: str = Field(default="grok-2-1212")
    api_key: str = Field(default="", description="Bearer credential for the endpoint")
    timeout: int = Field(default=120, ge=10, description="Per-request timeout in seconds")


class ScaffoldConfig(BaseModel):
    """How the baseline Next.js application is laid down."""

    enabled: bool = Field(default=True, description="Run the scaffolding command at all")
    command: list[str] = Field(default=["npx", "create-next-app@latest"])
    flags: list[str] = Field(default=["--typescript", "--tailwind", "--eslint"])
    timeout: int = Field(default=900, ge=30, description="Scaffold process timeout in seconds")


class GenerationConfig(BaseModel):
    """Tuning knobs for planning and code synthesis."""

    theme: str = Field(default="modern")
    style: str = Field(default="minimal")
    component_extension: str = Field(default="tsx")
    types_extension: str = Field(default="ts")
    max_concurrent_components: int = Field(
        default=1, ge=1, description="Maximum in-flight component completions"
    )


class Config(BaseModel):
    """Global nextforge configuration.

    Holds every tuneable parameter and derived path used by the pipeline.
    Instances are created once by the CLI entry point and then passed through
    the rest of the system.
    """

    project_name: str = Field(default="")
    output_dir: Path = Field(default=Path("."))
    chat: ChatConfig = Field(default_factory=ChatConfig)
    scaffold: ScaffoldConfig = Field(default_factory=ScaffoldConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_path(self) -> Path:
        """Root of the generated project."""
        return self.output_dir / self.project_name

    @property
    def components_path(self) -> Path:
        """Directory that receives synthesised components."""
        return self.project_path / "components"

    @property
    def types_path(self) -> Path:
        """The single type-definitions file."""
        return self.project_path / "types" / f"index.{self.generation.types_extension}"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            XAI_API_KEY, NEXTFORGE_BASE_URL, NEXTFORGE_MODEL, NEXTFORGE_TIMEOUT,
            NEXTFORGE_OUTPUT_DIR, NEXTFORGE_THEME, NEXTFORGE_STYLE,
            NEXTFORGE_MAX_CONCURRENT.
        """
        chat_kwargs: dict[str, Any] = {}
        if os.environ.get("XAI_API_KEY"):
            chat_kwargs["api_key"] = os.environ["XAI_API_KEY"]
        if os.environ.get("NEXTFORGE_BASE_URL"):
            chat_kwargs["base_url"] = os.environ["NEXTFORGE_BASE_URL"]
        if os.environ.get("NEXTFORGE_MODEL"):
            chat_kwargs["model"] = os.environ["NEXTFORGE_MODEL"]
        if os.environ.get("NEXTFORGE_TIMEOUT"):
            chat_kwargs["timeout"] = int(os.environ["NEXTFORGE_TIMEOUT"])

        generation_kwargs: dict[str, Any] = {}
        if os.environ.get("NEXTFORGE_THEME"):
            generation_kwargs["theme"] = os.environ["NEXTFORGE_THEME"]
        if os.environ.get("NEXTFORGE_STYLE"):
            generation_kwargs["style"] = os.environ["NEXTFORGE_STYLE"]
        if os.environ.get("NEXTFORGE_MAX_CONCURRENT"):
            generation_kwargs["max_concurrent_components"] = int(
                os.environ["NEXTFORGE_MAX_CONCURRENT"]
            )

        return cls(
            output_dir=Path(os.environ.get("NEXTFORGE_OUTPUT_DIR", ".")),
            chat=ChatConfig(**chat_kwargs),
            generation=GenerationConfig(**generation_kwargs),
        )

    def scaffold_command(self) -> list[str]:
        """Return the full argv used to lay down the baseline application."""
        return [*self.scaffold.command, self.project_name, *self.scaffold.flags]
