"""High-level library API: render a report template into a JSON document tree."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from report_tree.assembler import assemble
from report_tree.contrast import resolve_contrast
from report_tree.engine import DEFAULT_LANGUAGE, RenderFunction, build_context, jinja_render
from report_tree.extractor import extract
from report_tree.models import RenderResult, Section
from report_tree.places import Place, PlaceList, build_lookup, get_code, get_name
from report_tree.text_repair import prepare_template, repair

logger = logging.getLogger(__name__)

NO_PLACE_LABEL = "no area selected"


def render_html(
    template: str,
    place: Place | None,
    places: Iterable[Place],
    lookup: Mapping[Any, Place],
    *,
    render: RenderFunction = jinja_render,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Render a template and return repaired, contrast-resolved HTML."""
    context = build_context(place, places, lookup, language=language)
    html = render(prepare_template(template), context)
    return resolve_contrast(repair(html))


def render_json(
    template: str,
    place: Place | None = None,
    places: Iterable[Place] = (),
    lookup: Mapping[Any, Place] | None = None,
    *,
    render: RenderFunction | None = None,
    language: str = DEFAULT_LANGUAGE,
) -> RenderResult:
    """
    Render `template` for `place` and extract the document tree.

    Never raises: any failure in rendering or extraction is returned as
    `RenderResult.error` with empty sections.
    """
    rows = PlaceList()
    sections: list[Section] = []
    notes: list[str] = []
    error: str | None = None
    try:
        rows = places if isinstance(places, PlaceList) else PlaceList(places)
        if lookup is None:
            lookup = build_lookup(rows)
        html = render_html(
            template,
            place,
            rows,
            lookup,
            render=render or jinja_render,
            language=language,
        )
        sections, notes = extract(html)
    except Exception as e:
        error = str(e)
        label = get_name(place, "the") if place else NO_PLACE_LABEL
        logger.warning("Template error. No HTML generated for %s: %s", label, error)

    return assemble(place, rows, lookup or {}, sections, notes, error)


def render_places(
    template: str,
    places: Iterable[Place],
    lookup: Mapping[Any, Place] | None = None,
    *,
    render: RenderFunction | None = None,
    include_overview: bool = True,
    language: str = DEFAULT_LANGUAGE,
) -> dict[Any, RenderResult]:
    """Render once per place, plus an overview render keyed by None."""
    rows = places if isinstance(places, PlaceList) else PlaceList(places)
    if lookup is None:
        lookup = build_lookup(rows)

    targets: list[Place | None] = [None] if include_overview else []
    targets.extend(row if isinstance(row, Place) else Place(row) for row in rows)

    results: dict[Any, RenderResult] = {}
    for place in targets:
        key = get_code(place) if place is not None else None
        results[key] = render_json(template, place, rows, lookup, render=render, language=language)
    return results
