"""Pick legible text colours for highlighted `<mark>` spans."""

from __future__ import annotations

import logging
import re
from re import Match

from PIL import ImageColor

logger = logging.getLogger(__name__)

CONTRAST_THRESHOLD = 125
DARK_TEXT = "black"
LIGHT_TEXT = "white"

_MARK_OPEN_RE = re.compile(r"<mark[^<]*?>")
_BACKGROUND_RE = re.compile(r"background-color:\s*(?P<color>[^;\"']+)")


def parse_rgb(color: str) -> tuple[int, int, int]:
    """Convert a CSS colour string to an RGB triple; raises ValueError when unparsable."""
    rgb = ImageColor.getrgb(color.strip())
    return rgb[0], rgb[1], rgb[2]


def luminance(rgb: tuple[int, int, int]) -> float:
    r, g, b = rgb
    return (r * 299 + g * 587 + b * 114) / 1000


def text_color_for(rgb: tuple[int, int, int]) -> str:
    r, g, b = rgb
    # Compared in thousandths so the boundary is exact.
    if r * 299 + g * 587 + b * 114 > CONTRAST_THRESHOLD * 1000:
        return DARK_TEXT
    return LIGHT_TEXT


def find_highlight_colors(html: str) -> list[str]:
    """Distinct background colours declared on `<mark>` openings, in first-seen order."""
    colors: list[str] = []
    for opening in dict.fromkeys(_MARK_OPEN_RE.findall(html)):
        if "background-color" not in opening:
            continue
        match = _BACKGROUND_RE.search(opening)
        if not match:
            continue
        color = match.group("color").strip()
        if color and color not in colors:
            colors.append(color)
    return colors


def decide_text_colors(colors: list[str]) -> dict[str, str]:
    """Map each parsable colour to its text colour; unparsable ones are logged and skipped."""
    decisions: dict[str, str] = {}
    for color in colors:
        try:
            rgb = parse_rgb(color)
        except ValueError:
            logger.warning("Skipping unparsable highlight colour %r", color)
            continue
        decisions[color] = text_color_for(rgb)
    return decisions


def resolve_contrast(html: str) -> str:
    """Add a `color` declaration next to every resolvable `background-color` on highlights."""
    decisions = decide_text_colors(find_highlight_colors(html))
    if not decisions:
        return html

    alternatives = "|".join(re.escape(color) for color in sorted(decisions, key=len, reverse=True))
    pattern = re.compile(rf"background-color:(?P<space>\s*)(?P<color>{alternatives})(?=[;\"'\s]|$)")

    def _replace(match: Match[str]) -> str:
        color = match.group("color")
        return f"background-color:{match.group('space')}{color}; color: {decisions[color]};"

    return pattern.sub(_replace, html)
