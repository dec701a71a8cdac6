"""Place records, key discovery and name formatting used by templates and the assembler."""

from __future__ import annotations

import csv
import logging
import math
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

COUNTRY_CODES = {
    "E": "E92000001",
    "N": "N92000002",
    "S": "S92000003",
    "W": "W92000004",
}

_CODE_KEYS = ("areacd", "code", "id")
_NAME_KEYS = ("hclnm", "areanm", "name", "label", "areacd")
_PARENT_KEYS = ("parentcd", "parent", "regioncd", "region")
_THE_NAMES = {
    "united kingdom",
    "north east",
    "north west",
    "east midlands",
    "west midlands",
    "east of england",
    "south east",
    "south west",
    "derbyshire dales",
}
_DATE_RE = re.compile(
    r"^([-+]\d{2})?\d{4}(-\d{2}(-\d{2})?)?(T\d{2}:\d{2}(:\d{2}(\.\d{3})?)?(Z|[-+]\d{2}:\d{2})?)?$"
)


def _find_key(obj: Mapping[str, Any], candidates: Iterable[str], suffix: str | None) -> str | None:
    keys = list(obj.keys())
    lowered = [key.lower() for key in keys]
    for candidate in candidates:
        if candidate in lowered:
            return keys[lowered.index(candidate)]
    if suffix:
        for key, lc in zip(keys, lowered):
            if lc.endswith(suffix):
                return key
    return None


def get_code_key(obj: Mapping[str, Any]) -> str | None:
    key = _find_key(obj, _CODE_KEYS, "cd")
    return key if key is not None else next(iter(obj), None)


def get_name_key(obj: Mapping[str, Any]) -> str | None:
    key = _find_key(obj, _NAME_KEYS, "nm")
    return key if key is not None else next(iter(obj), None)


def get_parent_key(obj: Mapping[str, Any]) -> str | None:
    return _find_key(obj, _PARENT_KEYS, None)


def format_name(name: str, context: str | None = None, mode: str = "default") -> str:
    """
    Format an area name for use in running text.

    `context` may be "in", "the" or "its". With any mode other than "default"
    only the prefix (without trailing space) is returned.
    """
    if name == "East":
        name = "East of England"
    name = name.replace("&", "and", 1).replace(", City of", "", 1).replace(", County of", "", 1)
    prefix = ""
    lc = name.lower()
    island = lc.startswith("isle")
    the = lc in _THE_NAMES or lc.startswith("city of") or lc.startswith("vale of")

    if context in ("in", "the", "its") and (island or the):
        prefix = "the "
    if context == "in":
        prefix = ("on " if island else "in ") + prefix
    elif context == "its":
        name = name + ("'" if name.endswith("s") else "'s")

    return prefix + name if mode == "default" else prefix[:-1]


def get_code(place: Mapping[str, Any]) -> Any:
    return place.get(get_code_key(place))


def get_name(place: Mapping[str, Any], context: str | None = None, mode: str = "default") -> str:
    return format_name(str(place.get(get_name_key(place), "")), context, mode)


def get_parent(place: Mapping[str, Any]) -> Any:
    key = get_parent_key(place)
    return place.get(key) if key is not None else None


def get_country(place: Mapping[str, Any]) -> str | None:
    code = get_code(place)
    if not code:
        return None
    return COUNTRY_CODES.get(str(code)[0])


class Place(dict):
    """A single area record, e.g. one row of a statistics CSV."""

    def get_code(self) -> Any:
        return get_code(self)

    def get_name(self, context: str | None = None, mode: str = "default") -> str:
        return get_name(self, context, mode)

    def get_parent(self) -> Any:
        return get_parent(self)

    def get_country(self) -> str | None:
        return get_country(self)

    def to_data(self, props: Mapping[str, Any], mode: str | None = None) -> Any:
        from report_tree.helpers import to_data

        return to_data([self], props, mode)


class PlaceList(list):
    """Ordered collection of places as passed to templates."""

    def find(self, code: Any) -> Place | None:
        for place in self:
            if get_code(place) == code:
                return place
        return None

    def to_data(self, props: Mapping[str, Any], mode: str | None = None) -> Any:
        from report_tree.helpers import to_data

        return to_data(self, props, mode)


def _parse_number(value: str) -> float | int | None:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return None
    return None if math.isnan(number) else number


def auto_type(row: Mapping[str, Any]) -> Place:
    """Coerce CSV string values into booleans, numbers, dates and lists."""
    typed: dict[str, Any] = {}
    for key, raw in row.items():
        if not isinstance(raw, str):
            typed[key] = raw
            continue
        value = raw.strip()
        if not value:
            typed[key] = None
        elif value == "true":
            typed[key] = True
        elif value == "false":
            typed[key] = False
        elif value == "NaN":
            typed[key] = math.nan
        elif (number := _parse_number(value)) is not None:
            typed[key] = number
        elif _DATE_RE.match(value):
            try:
                typed[key] = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                typed[key] = value
        elif key.endswith("_array") or "|" in value:
            items = value.split("|")
            if items and not items[-1]:
                items.pop()
            typed[key] = items
        else:
            typed[key] = value
    return Place(typed)


def load_places(path: str | Path) -> PlaceList:
    """Read a places CSV (BOM tolerated) into a PlaceList of auto-typed records."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        return PlaceList(auto_type(row) for row in reader)


def build_lookup(places: Iterable[Mapping[str, Any]]) -> dict[Any, Place]:
    lookup: dict[Any, Place] = {}
    for place in places:
        record = place if isinstance(place, Place) else Place(place)
        code = record.get_code()
        try:
            lookup[code] = record
        except TypeError:
            logger.warning("Skipping place with unhashable code %r", code)
    return lookup
