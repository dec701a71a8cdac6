"""Tests for highlight text colour decisions and style rewriting."""

from __future__ import annotations

import logging

import pytest

from report_tree.contrast import (
    decide_text_colors,
    find_highlight_colors,
    luminance,
    parse_rgb,
    resolve_contrast,
    text_color_for,
)


@pytest.mark.parametrize(
    ("rgb", "expected"),
    [
        ((255, 255, 255), "black"),
        ((0, 0, 0), "white"),
        ((125, 125, 125), "white"),
        ((126, 126, 126), "black"),
        ((32, 96, 149), "white"),
        ((255, 255, 0), "black"),
    ],
)
def test_text_color_for(rgb: tuple[int, int, int], expected: str) -> None:
    assert text_color_for(rgb) == expected


def test_luminance_weights() -> None:
    assert luminance((125, 125, 125)) == 125
    assert luminance((255, 0, 0)) == pytest.approx(76.245)


@pytest.mark.parametrize(
    ("color", "expected"),
    [
        ("#ffff00", (255, 255, 0)),
        ("#fff", (255, 255, 255)),
        ("navy", (0, 0, 128)),
        ("rgb(32, 96, 149)", (32, 96, 149)),
    ],
)
def test_parse_rgb(color: str, expected: tuple[int, int, int]) -> None:
    assert parse_rgb(color) == expected


def test_parse_rgb_rejects_unknown_colour() -> None:
    with pytest.raises(ValueError):
        parse_rgb("notacolour")


def test_find_highlight_colors_returns_distinct_mark_colours() -> None:
    html = (
        '<mark style="background-color: #206095">a</mark>'
        '<mark style="background-color: #206095">b</mark>'
        '<mark style="background-color: yellow">c</mark>'
        "<mark>d</mark>"
        '<span style="background-color: red">e</span>'
    )

    assert find_highlight_colors(html) == ["#206095", "yellow"]


def test_resolve_contrast_adds_text_colour() -> None:
    html = '<p><mark style="background-color: #ffff00">high</mark> and <mark style="background-color: navy">low</mark></p>'

    assert resolve_contrast(html) == (
        '<p><mark style="background-color: #ffff00; color: black;">high</mark> and '
        '<mark style="background-color: navy; color: white;">low</mark></p>'
    )


def test_resolve_contrast_keeps_other_declarations() -> None:
    html = '<mark style="font-weight: bold; background-color: rgb(255, 255, 255); padding: 2px">x</mark>'

    assert resolve_contrast(html) == (
        '<mark style="font-weight: bold; background-color: rgb(255, 255, 255); color: black;; padding: 2px">x</mark>'
    )


def test_resolve_contrast_does_not_alias_prefix_colours() -> None:
    html = (
        '<mark style="background-color: #000">a</mark>'
        '<mark style="background-color: #000fff">b</mark>'
    )

    result = resolve_contrast(html)

    assert 'background-color: #000; color: white;"' in result
    assert 'background-color: #000fff; color: white;"' in result
    assert result.count("; color: ") == 2


def test_resolve_contrast_skips_unparsable_colour(caplog) -> None:
    html = (
        '<mark style="background-color: notacolour">a</mark>'
        '<mark style="background-color: #000000">b</mark>'
    )

    with caplog.at_level(logging.WARNING, logger="report_tree.contrast"):
        result = resolve_contrast(html)

    assert '<mark style="background-color: notacolour">a</mark>' in result
    assert '<mark style="background-color: #000000; color: white;">b</mark>' in result
    assert "notacolour" in caplog.text


def test_decide_text_colors_is_independent_per_colour() -> None:
    assert decide_text_colors(["bogus", "white", "black"]) == {"white": "black", "black": "white"}


def test_resolve_contrast_without_marks_is_identity() -> None:
    html = "<p>No highlights here</p>"

    assert resolve_contrast(html) == html
