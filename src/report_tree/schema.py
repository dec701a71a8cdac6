"""Derive JSON Schema artifacts for render output from the dataclass models."""

from __future__ import annotations

import json
import types
from dataclasses import MISSING, fields, is_dataclass
from pathlib import Path
from typing import Any, Union, get_args, get_origin, get_type_hints

from report_tree.models import RenderResult, Section

OUTPUT_SCHEMA_NAME = "report-tree-output.schema.json"
SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def _with_nullable(schema: dict[str, Any]) -> dict[str, Any]:
    if "$ref" in schema:
        return {"anyOf": [schema, {"type": "null"}]}

    schema_type = schema.get("type")
    if isinstance(schema_type, str):
        schema["type"] = sorted({schema_type, "null"})
        return schema

    return {"anyOf": [schema, {"type": "null"}]}


def _schema_for_type(annotation: Any, defs: dict[str, dict[str, Any]]) -> dict[str, Any]:
    if annotation in (Any, object):
        return {}

    origin = get_origin(annotation)

    if origin in (Union, types.UnionType):
        args = list(get_args(annotation))
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return _with_nullable(_schema_for_type(non_none[0], defs))
        return {"anyOf": [_schema_for_type(arg, defs) for arg in args]}

    if origin is list:
        args = get_args(annotation)
        return {"type": "array", "items": _schema_for_type(args[0], defs) if args else {}}

    if origin is dict:
        args = get_args(annotation)
        value_schema = _schema_for_type(args[1], defs) if len(args) == 2 else {}
        return {"type": "object", "additionalProperties": value_schema}

    primitive_map = {
        str: {"type": "string"},
        int: {"type": "integer"},
        float: {"type": "number"},
        bool: {"type": "boolean"},
    }
    if annotation in primitive_map:
        return dict(primitive_map[annotation])

    if is_dataclass(annotation):
        _ensure_dataclass_schema(annotation, defs)
        return {"$ref": f"#/$defs/{annotation.__name__}"}

    return {}


def _ensure_dataclass_schema(dataclass_type: type[Any], defs: dict[str, dict[str, Any]]) -> dict[str, Any]:
    class_name = dataclass_type.__name__
    if class_name in defs:
        return defs[class_name]

    schema: dict[str, Any] = {
        "title": class_name,
        "description": (dataclass_type.__doc__ or "").strip(),
        "type": "object",
        "additionalProperties": False,
        "properties": {},
        "required": [],
    }
    defs[class_name] = schema

    hints = get_type_hints(dataclass_type)
    for model_field in fields(dataclass_type):
        field_schema = _schema_for_type(hints[model_field.name], defs)

        field_description = model_field.metadata.get("description")
        if field_description:
            field_schema["description"] = field_description

        field_json_schema = model_field.metadata.get("json_schema")
        if field_json_schema:
            field_schema = {**field_schema, **field_json_schema}

        schema["properties"][model_field.name] = field_schema
        if model_field.default is MISSING and model_field.default_factory is MISSING:
            schema["required"].append(model_field.name)

    return schema


def build_output_schema() -> dict[str, Any]:
    """Schema for the JSON emitted by `RenderResult.to_dict()`."""
    defs: dict[str, dict[str, Any]] = {}
    _ensure_dataclass_schema(Section, defs)
    result_schema = dict(_ensure_dataclass_schema(RenderResult, defs))
    defs.pop(RenderResult.__name__)
    # `sections` is emitted on every result, including failed renders.
    result_schema["required"] = ["sections"]

    schema: dict[str, Any] = {"$schema": SCHEMA_DRAFT}
    schema.update(result_schema)
    schema["title"] = "Report Tree Render Output"
    schema["description"] = "JSON contract emitted by `report-tree-render` for one place."
    schema["$defs"] = defs
    return schema


def render_schemas() -> dict[str, str]:
    return {
        OUTPUT_SCHEMA_NAME: json.dumps(build_output_schema(), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
    }


def write_schemas(out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for file_name, content in render_schemas().items():
        (out_dir / file_name).write_text(content, encoding="utf-8")


def check_schemas(out_dir: Path) -> list[str]:
    """Return the names of schema artifacts in `out_dir` that are missing or stale."""
    mismatched: list[str] = []
    for file_name, expected in render_schemas().items():
        output_path = out_dir / file_name
        if not output_path.exists() or output_path.read_text(encoding="utf-8") != expected:
            mismatched.append(file_name)
    return sorted(mismatched)
