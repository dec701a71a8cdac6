"""Compatibility tests for the package public API."""

from __future__ import annotations


def test_package_public_imports() -> None:
    import report_tree

    for name in (
        "render_json",
        "render_html",
        "render_places",
        "assemble",
        "extract",
        "repair",
        "prepare_template",
        "resolve_contrast",
        "jinja_render",
        "Place",
        "PlaceList",
        "RenderResult",
        "Section",
        "PropertyDataError",
    ):
        assert hasattr(report_tree, name), name
