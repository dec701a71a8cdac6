"""Wrap extracted sections with place context into a RenderResult."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from report_tree.models import RenderResult, Section
from report_tree.places import get_country, get_parent


def _find_record(lookup: Mapping[Any, Mapping[str, Any]], code: Any) -> Mapping[str, Any] | None:
    # Auto-typed CSV cells holding "|" become lists, which cannot be lookup keys.
    if code is None:
        return None
    try:
        return lookup.get(code)
    except TypeError:
        return None


def assemble(
    place: Mapping[str, Any] | None,
    places: Sequence[Mapping[str, Any]],
    lookup: Mapping[Any, Mapping[str, Any]],
    sections: list[Section],
    notes: list[str],
    error: str | None = None,
) -> RenderResult:
    """
    Build the output envelope for one render.

    `places` is accepted for symmetry with the render call; only `lookup` is
    consulted to resolve the region and country records.
    """
    result = RenderResult(sections=list(sections), notes=list(notes), error=error)
    if place is None:
        return result

    result.place = place
    result.region = _find_record(lookup, get_parent(place))
    result.country = _find_record(lookup, get_country(place))
    return result
