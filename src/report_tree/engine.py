"""Jinja2 adapter used as the default template engine."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from jinja2 import Environment, TemplateSyntaxError

from report_tree.exceptions import TemplateError
from report_tree.helpers import HELPERS
from report_tree.places import Place, PlaceList

DEFAULT_LANGUAGE = "en_US"

RenderFunction = Callable[[str, Mapping[str, Any]], str]

_environment: Environment | None = None


def create_environment(**options: Any) -> Environment:
    """Build an Environment that escapes output and trims block whitespace."""
    settings: dict[str, Any] = {"autoescape": True, "trim_blocks": True, "lstrip_blocks": True}
    settings.update(options)
    return Environment(**settings)


def _default_environment() -> Environment:
    global _environment
    if _environment is None:
        _environment = create_environment()
    return _environment


def jinja_render(template: str, context: Mapping[str, Any], environment: Environment | None = None) -> str:
    env = environment or _default_environment()
    try:
        compiled = env.from_string(template)
    except TemplateSyntaxError as e:
        raise TemplateError(f"Template syntax error on line {e.lineno}: {e.message}") from e
    return compiled.render(dict(context))


def make_renderer(environment: Environment) -> RenderFunction:
    """Bind `jinja_render` to a specific Environment."""

    def render(template: str, context: Mapping[str, Any]) -> str:
        return jinja_render(template, context, environment)

    return render


def build_context(
    place: Place | None,
    places: Iterable[Place],
    lookup: Mapping[Any, Place],
    language: str = DEFAULT_LANGUAGE,
) -> dict[str, Any]:
    """Assemble the variables a report template can reference."""
    rows = places if isinstance(places, PlaceList) else PlaceList(places)
    return {
        "place": place,
        "places": rows,
        "row": place,
        "rows": rows,
        "lookup": lookup,
        **HELPERS,
        "Place": Place,
        "PlaceList": PlaceList,
        "language": language,
    }
