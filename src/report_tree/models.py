"""Core data models for extracted report sections and render results."""

from dataclasses import MISSING, dataclass, field
from typing import Any, Optional


def schema_field(
    description: str,
    *,
    default: Any = MISSING,
    default_factory: Any = MISSING,
    json_schema: dict[str, Any] | None = None,
) -> Any:
    """Create a dataclass field with reusable JSON Schema metadata."""

    metadata: dict[str, Any] = {"description": description}
    if json_schema is not None:
        metadata["json_schema"] = json_schema

    kwargs: dict[str, Any] = {"metadata": metadata}
    if default is not MISSING:
        kwargs["default"] = default
    if default_factory is not MISSING:
        kwargs["default_factory"] = default_factory
    return field(**kwargs)


@dataclass
class Section:
    """One structural block of a rendered report, possibly holding nested sections."""

    id: Optional[str] = schema_field(default=None, description="Identifier taken from the markup `id` attribute.")
    type: Optional[str] = schema_field(
        default=None,
        description="Category tag taken from the markup `class` attribute; picks a rendering strategy.",
    )
    content: Optional[str] = schema_field(
        default=None,
        description="Concatenated raw markup of all children that are neither sections nor properties.",
    )
    properties: dict[str, Any] = schema_field(
        default_factory=dict,
        description=(
            "Named values from `<prop>` markers keyed by category: parsed JSON for `data`, "
            "a list of strings for pipe-delimited text, raw markup otherwise."
        ),
    )
    sections: Optional[list["Section"]] = schema_field(
        default=None,
        description="Nested sections; absent for leaf sections, never an empty list.",
    )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        if self.type is not None:
            data["type"] = self.type
        if self.content is not None:
            data["content"] = self.content
        if self.properties:
            data["properties"] = dict(self.properties)
        if self.sections is not None:
            data["sections"] = [section.to_dict() for section in self.sections]
        return data


@dataclass
class RenderResult:
    """Output envelope for one template render; failures are reported through `error`."""

    sections: list[Section] = schema_field(
        default_factory=list,
        description="Top-level sections in document order; empty when the render failed.",
    )
    place: Optional[dict[str, Any]] = schema_field(
        default=None,
        description="Place record the report was rendered for; absent for overview renders.",
    )
    region: Optional[dict[str, Any]] = schema_field(
        default=None,
        description="Lookup record for the place's parent area, when known.",
    )
    country: Optional[dict[str, Any]] = schema_field(
        default=None,
        description="Lookup record for the place's country, derived from the first letter of its code.",
    )
    notes: list[str] = schema_field(
        default_factory=list,
        description="Text of top-level HTML comments with the comment delimiters stripped.",
    )
    error: Optional[str] = schema_field(
        default=None,
        description="Stringified failure from the render pipeline; presence means `sections` is empty.",
    )

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"sections": [section.to_dict() for section in self.sections]}
        if self.place is not None:
            data["place"] = dict(self.place)
        if self.region is not None:
            data["region"] = dict(self.region)
        if self.country is not None:
            data["country"] = dict(self.country)
        if self.notes:
            data["notes"] = list(self.notes)
        if self.error is not None:
            data["error"] = self.error
        return data
