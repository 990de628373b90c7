"""Jinja2 rendering for model prompts.

Provides the PromptRenderer class which loads Jinja2 templates from the
``nextforge/templates/`` directory and renders them with plan data. Values are
embedded verbatim: autoescaping is off, so a description that itself contains
template-looking markup reaches the model unchanged.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

PLAN_TEMPLATE = "plan.j2"
COMPONENT_TEMPLATE = "component.j2"
TYPES_TEMPLATE = "types.j2"

PLAN_SYSTEM_PROMPT = "You are an expert Next.js developer. Respond with valid JSON only."
COMPONENT_SYSTEM_PROMPT = (
    "You are an expert Next.js developer. "
    "Provide only the component code without any explanation."
)
TYPES_SYSTEM_PROMPT = (
    "You are an expert TypeScript developer. "
    "Provide only the type definitions without any explanation."
)


class PromptRenderer:
    """Renders the prompt templates sent to the chat-completion endpoint."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["tojson_compact"] = _tojson_compact_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory.
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def plan_prompt(self, description: str, theme: str, style: str) -> str:
        return self.render(
            PLAN_TEMPLATE,
            {"description": description, "theme": theme, "style": style},
        )

    def component_prompt(
        self, name: str, type_: str, description: str, props: list[str]
    ) -> str:
        return self.render(
            COMPONENT_TEMPLATE,
            {"name": name, "type": type_, "description": description, "props": props},
        )

    def types_prompt(self, data_structures: list[str]) -> str:
        return self.render(TYPES_TEMPLATE, {"data_structures": data_structures})


def _tojson_compact_filter(value: Any) -> str:
    """Serialise *value* as compact JSON (``["a","b"]``), matching JS ``JSON.stringify``."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
