"""Pydantic v2 models for the project plan.

The plan is whatever the model returns for the planning prompt, checked for
shape. Only the component ``name`` is validated beyond type, because it ends
up in a file path. An explicit ``null`` for an optional field reads the same
as a missing field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def validate_file_stem(value: str, what: str = "name") -> str:
    """Return *value* if it is usable as a single path component.

    Raises:
        ValueError: If *value* is blank, ``.``/``..``, or contains a path
            separator or NUL.
    """
    if not value.strip():
        raise ValueError(f"{what} must not be empty")
    if value in (".", "..") or any(sep in value for sep in ("/", "\\", "\x00")):
        raise ValueError(f"{what} is not a valid file name: {value!r}")
    return value


# ---------------------------------------------------------------------------
# Component & page models
# ---------------------------------------------------------------------------

class ComponentSpec(BaseModel):
    """A single component the synthesizer will generate."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Component name, also the output file stem")
    type: str = Field(default="", description="section, layout, feature, ui or free text")
    description: str = Field(default="", description="What the component does")
    props: list[str] = Field(default_factory=list, description="Prop names")
    dependencies: list[str] = Field(default_factory=list, description="Packages it relies on")

    @field_validator("name")
    @classmethod
    def name_is_a_file_stem(cls, value: str) -> str:
        return validate_file_stem(value, "component name")

    @field_validator("type", "description", mode="before")
    @classmethod
    def null_text_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("props", "dependencies", mode="before")
    @classmethod
    def null_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class PageSpec(BaseModel):
    """A page and the components it is composed of."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Page name")
    route: str = Field(default="/", description="URL route, e.g. '/pricing'")
    components: list[str] = Field(default_factory=list, description="Component names")

    @field_validator("route", mode="before")
    @classmethod
    def null_route_is_root(cls, value: Any) -> Any:
        return "/" if value is None else value

    @field_validator("components", mode="before")
    @classmethod
    def null_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------

class ProjectPlan(BaseModel):
    """Parsed plan describing what to generate for one project.

    Serialises back to the camelCase wire shape with ``by_alias=True``.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    components: list[ComponentSpec] = Field(default_factory=list)
    pages: list[PageSpec] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    data_structures: list[str] = Field(default_factory=list, alias="dataStructures")

    @field_validator("components", "pages", "features", "data_structures", mode="before")
    @classmethod
    def null_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def component_names(self) -> list[str]:
        """Return component names in plan order, duplicates included."""
        return [c.name for c in self.components]
