"""Behavioral tests for the render CLI."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from report_tree.cli import render as render_cli

ROOT = Path(__file__).resolve().parent.parent

TEMPLATE = (
    '<section id="intro">\n'
    "{% if place %}\n"
    "<h2>{{ place.get_name() }}</h2>\n"
    "{% else %}\n"
    "<h2>All areas</h2>\n"
    "{% endif %}\n"
    "</section>\n"
)

CSV = (
    "areacd,areanm,parentcd\n"
    "E06000001,Hartlepool,E12000001\n"
    "E92000001,England,\n"
)


def _write_inputs(tmp_path: Path, template: str = TEMPLATE) -> tuple[Path, Path]:
    template_path = tmp_path / "report.html.j2"
    template_path.write_text(template, encoding="utf-8")
    data_path = tmp_path / "places.csv"
    data_path.write_text(CSV, encoding="utf-8")
    return template_path, data_path


def test_main_returns_exit_1_for_missing_input(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        sys,
        "argv",
        ["report-tree-render", "--template", str(tmp_path / "missing.j2"), "--data", str(tmp_path / "x.csv")],
    )

    with pytest.raises(SystemExit) as exc:
        render_cli.main()

    assert exc.value.code == 1


def test_main_writes_json_for_overview_and_places(monkeypatch, tmp_path: Path, capsys) -> None:
    template_path, data_path = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    monkeypatch.setattr(
        sys,
        "argv",
        ["report-tree-render", "-t", str(template_path), "-d", str(data_path), "--out-dir", str(out_dir)],
    )

    render_cli.main()

    assert sorted(p.name for p in out_dir.iterdir()) == ["E06000001.json", "E92000001.json", "overview.json"]
    overview = json.loads((out_dir / "overview.json").read_text(encoding="utf-8"))
    assert "place" not in overview
    assert "<h2>All areas</h2>" in overview["sections"][0]["content"]

    hartlepool = json.loads((out_dir / "E06000001.json").read_text(encoding="utf-8"))
    assert hartlepool["place"]["areanm"] == "Hartlepool"
    assert hartlepool["country"]["areanm"] == "England"
    assert "region" not in hartlepool
    assert "rendered: 3" in capsys.readouterr().out


def test_main_renders_selected_place_only(monkeypatch, tmp_path: Path) -> None:
    template_path, data_path = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "report-tree-render",
            "-t",
            str(template_path),
            "-d",
            str(data_path),
            "--out-dir",
            str(out_dir),
            "--place",
            "E06000001",
            "--no-overview",
        ],
    )

    render_cli.main()

    assert [p.name for p in out_dir.iterdir()] == ["E06000001.json"]


def test_main_rejects_unknown_place(monkeypatch, tmp_path: Path) -> None:
    template_path, data_path = _write_inputs(tmp_path)
    monkeypatch.setattr(
        sys,
        "argv",
        ["report-tree-render", "-t", str(template_path), "-d", str(data_path), "--place", "Z99999999"],
    )

    with pytest.raises(SystemExit) as exc:
        render_cli.main()

    assert exc.value.code == 1


def test_main_strict_exits_1_when_a_render_fails(monkeypatch, tmp_path: Path) -> None:
    template_path, data_path = _write_inputs(tmp_path, template="<p>{{ missing.call() }}</p>")
    out_dir = tmp_path / "out"
    monkeypatch.setattr(
        sys,
        "argv",
        ["report-tree-render", "-t", str(template_path), "-d", str(data_path), "--out-dir", str(out_dir), "--strict"],
    )

    with pytest.raises(SystemExit) as exc:
        render_cli.main()

    assert exc.value.code == 1
    overview = json.loads((out_dir / "overview.json").read_text(encoding="utf-8"))
    assert overview["sections"] == []
    assert overview["error"]


def test_module_cli_help_command() -> None:
    result = subprocess.run(
        [sys.executable, "-m", "report_tree.cli.render", "--help"],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        timeout=30,
        env={"PYTHONPATH": str(ROOT / "src")},
    )

    assert result.returncode == 0, result.stderr
    assert "usage:" in result.stdout.lower()
