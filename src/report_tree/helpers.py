"""Word, list and table helpers exposed to report templates."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from report_tree.places import (
    format_name,
    get_code,
    get_code_key,
    get_name,
    get_parent,
)

logger = logging.getLogger(__name__)

_EXTREME_MODES = (
    "highest",
    "lowest",
    "max",
    "min",
    "absolute_highest",
    "absolute_lowest",
    "absolute_max",
    "absolute_min",
)


def _encode_rows(rows: list[dict[str, Any]], mode: str | None) -> Any:
    if mode == "protect":
        return f"§{json.dumps(rows, default=str)}§"
    if mode == "stringify":
        return json.dumps(rows, default=str)
    return rows


def to_data(rows: Sequence[Mapping[str, Any]], props: Mapping[str, Any], mode: str | None = None) -> Any:
    """
    Flatten rows into chart-ready records.

    String props copy one column into the record. List props fan each row out
    into one record per list element; when any listed name is not a column of
    the first row, the elements are used as literal labels instead of column
    names.
    """
    try:
        single: list[tuple[str, str]] = []
        multi: list[tuple[str, list[Any], bool]] = []
        for key, value in props.items():
            if not value:
                continue
            if isinstance(value, (list, tuple)):
                is_label = not all(name in rows[0] for name in value)
                multi.append((key, list(value), is_label))
            else:
                single.append((key, value))

        data: list[dict[str, Any]] = []
        for row in rows:
            record = {key: row.get(column) for key, column in single}
            if not multi:
                data.append(record)
                continue
            for i in range(len(multi[0][1])):
                expanded = dict(record)
                for key, names, is_label in multi:
                    expanded[key] = names[i] if is_label else row.get(names[i])
                data.append(expanded)
        return _encode_rows(data, mode)
    except (IndexError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Could not generate data for props %r: %s", props, e)
        return _encode_rows([], mode)


def to_list(
    items: Iterable[Any],
    key: str | Callable[[Any], Any],
    separator: str | Sequence[str] = (", ", " and "),
) -> str:
    getter = key if callable(key) else (lambda item: item[key])
    words = [str(getter(item)) for item in items]
    if len(words) < 2:
        return ",".join(words)
    if isinstance(separator, str):
        return separator.join(words)
    last = separator[1 % len(separator)]
    return last.join([separator[0].join(words[:-1]), words[-1]])


def more_less(diff: float, texts: Sequence[str] = ("more", "less", "same")) -> str:
    if diff > 0:
        return texts[0]
    if diff < 0:
        return texts[1]
    return texts[2]


def breaks_to_words(
    value: float,
    breaks: Sequence[float] = (0,),
    texts: Sequence[str] = ("less", "more"),
    quantifier: str | None = None,
) -> str:
    if quantifier and value == breaks[-1]:
        return f"{quantifier} {texts[-2]}"
    for i, brk in enumerate(breaks):
        if quantifier and value == brk:
            return f"{quantifier} {texts[i + 1]}"
        if value <= brk:
            return texts[i]
    return texts[-1]


def capitalise(text: str) -> str:
    return text[:1].upper() + text[1:]


def _to_number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if number != number else number


def get_extreme(row: Mapping[str, Any], keys: Sequence[str], mode: str = "highest") -> str:
    """Return the key in `keys` whose numeric value in `row` is the most extreme."""
    if not isinstance(keys, (list, tuple)) or not keys:
        raise ValueError("Input must be a non-empty array of keys.")
    if mode not in _EXTREME_MODES:
        raise ValueError(f"Mode must be one of: {', '.join(_EXTREME_MODES)}.")

    is_absolute = mode.startswith("absolute_")
    is_highest = mode in ("highest", "max", "absolute_highest", "absolute_max")

    extreme_key = keys[0]
    extreme_value = _to_number(row.get(extreme_key))
    for key in keys[1:]:
        value = _to_number(row.get(key))
        if value is None:
            continue
        if extreme_value is None:
            extreme_key, extreme_value = key, value
            continue
        a, b = (abs(value), abs(extreme_value)) if is_absolute else (value, extreme_value)
        if (a > b) if is_highest else (a < b):
            extreme_key, extreme_value = key, value
    return extreme_key


def highest_from_array(row: Mapping[str, Any], keys: Sequence[str]) -> str:
    return get_extreme(row, keys, "highest")


def lowest_from_array(row: Mapping[str, Any], keys: Sequence[str]) -> str:
    return get_extreme(row, keys, "lowest")


def add_to_array(items: list, new: Mapping[str, Any] | list) -> list:
    new_items = new if isinstance(new, list) else [new]
    if not new_items:
        return items
    code_key = get_code_key(new_items[0])
    codes = {item.get(code_key) for item in items}
    for item in new_items:
        if item.get(code_key) not in codes:
            items.append(item)
            codes.add(item.get(code_key))
    return items


def remove_from_array(items: list, old: Mapping[str, Any] | list) -> list:
    old_items = old if isinstance(old, list) else [old]
    if not old_items:
        return list(items)
    code_key = get_code_key(old_items[0])
    codes = {item.get(code_key) for item in old_items}
    return [item for item in items if item.get(code_key) not in codes]


HELPERS: dict[str, Callable[..., Any]] = {
    "get_code": get_code,
    "get_name": get_name,
    "get_parent": get_parent,
    "format_name": format_name,
    "to_data": to_data,
    "to_list": to_list,
    "more_less": more_less,
    "breaks_to_words": breaks_to_words,
    "capitalise": capitalise,
    "get_extreme": get_extreme,
    "highest_from_array": highest_from_array,
    "lowest_from_array": lowest_from_array,
    "add_to_array": add_to_array,
    "remove_from_array": remove_from_array,
}
