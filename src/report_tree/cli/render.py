"""CLI entrypoint for rendering a report template to JSON for each place."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from report_tree.api import render_json
from report_tree.engine import DEFAULT_LANGUAGE
from report_tree.places import build_lookup, load_places

OVERVIEW_NAME = "overview"


def _safe_name(code: object) -> str:
    return "".join(ch if ch.isalnum() or ch in ("-", "_") else "_" for ch in str(code))


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a report template into JSON document trees")
    parser.add_argument("--template", "-t", required=True, help="Path to the report template")
    parser.add_argument("--data", "-d", required=True, help="Path to the places CSV file")
    parser.add_argument(
        "--place",
        "-p",
        action="append",
        default=[],
        help="Place code to render (repeatable; default: every place in the data file)",
    )
    parser.add_argument("--out-dir", default="out", help="Output directory for JSON files (default: out)")
    parser.add_argument("--no-overview", action="store_true", help="Skip the overview render with no place")
    parser.add_argument("--language", default=DEFAULT_LANGUAGE, help=f"Language tag for templates (default: {DEFAULT_LANGUAGE})")
    parser.add_argument("--strict", action="store_true", help="Exit with status 1 if any render failed")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    template_path = Path(args.template)
    data_path = Path(args.data)
    out_dir = Path(args.out_dir)

    for path in (template_path, data_path):
        if not path.exists():
            print(f"Error: Input file not found: {path}", file=sys.stderr)
            raise SystemExit(1)

    template = template_path.read_text(encoding="utf-8")
    places = load_places(data_path)
    lookup = build_lookup(places)

    targets = [None] if not args.no_overview else []
    if args.place:
        for code in args.place:
            place = places.find(code)
            if place is None:
                print(f"Error: Place not found in data: {code}", file=sys.stderr)
                raise SystemExit(1)
            targets.append(place)
    else:
        targets.extend(places)

    out_dir.mkdir(parents=True, exist_ok=True)
    failures = 0
    for place in targets:
        result = render_json(template, place, places, lookup, language=args.language)
        name = OVERVIEW_NAME if place is None else _safe_name(place.get_code())
        output_path = out_dir / f"{name}.json"
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2, default=str)

        if result.error is not None:
            failures += 1
            print(f"FAILED {name}: {result.error} -> {output_path}")
        else:
            print(f"Rendered {len(result.sections)} sections -> {output_path}")

    print("\nSummary:")
    print(f"  rendered: {len(targets) - failures}")
    print(f"  failed: {failures}")

    if args.strict and failures:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
