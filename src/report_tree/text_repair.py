"""Regex repairs applied to template source before rendering and to HTML after it."""

from __future__ import annotations

import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable


@dataclass(frozen=True)
class RewriteRule:
    """A named substitution; `precondition` documents what input it expects."""

    name: str
    pattern: Pattern[str]
    replacement: str | Callable[[Match[str]], str]
    precondition: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


NUMBER_SUFFIX_SPACING = RewriteRule(
    name="number_suffix_spacing",
    pattern=re.compile(r"(?<=\d)\s+(?=%|pp)"),
    replacement="",
    precondition="Raw rendered HTML; a numeral may be separated from `%` or `pp` by formatter whitespace.",
)

CURRENCY_SPACING = RewriteRule(
    name="currency_spacing",
    pattern=re.compile(r"(?<=[£€$])\s+(?=\d)"),
    replacement="",
    precondition="Raw rendered HTML; a currency symbol may be separated from its amount.",
)

INLINE_TAG_SPACING = RewriteRule(
    name="inline_tag_spacing",
    pattern=re.compile(
        r"(?:(?<=</span>)|(?<=</mark>)|(?<=</strong>)|(?<=</em>)|(?<=</[abi]>))"
        r"(?![.,<:;\s]|$)"
    ),
    replacement=" ",
    precondition=(
        "Number and currency spacing already collapsed, so the character after a closing "
        "inline tag is the one the reader sees."
    ),
)

# Order matters: inline tag spacing looks at characters the first two rules may remove.
POST_RENDER_RULES: tuple[RewriteRule, ...] = (
    NUMBER_SUFFIX_SPACING,
    CURRENCY_SPACING,
    INLINE_TAG_SPACING,
)

_RULES_BY_NAME = {rule.name: rule for rule in POST_RENDER_RULES}

_TO_DATA_OPEN_RE = re.compile(r"\bto_data\(")
_CALL_END_RE = re.compile(r"\s*(?:\}\}|%\}|$)", flags=re.MULTILINE)
_MODE_KWARG_RE = re.compile(r"\bmode\s*=")
_DATA_NUMBER_SPACING_RE = re.compile(r"(?<=\d.)\s(?=\d)")


def apply_rule(name: str, text: str) -> str:
    """Apply a single post-render rule by name."""
    try:
        rule = _RULES_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Unknown rewrite rule: {name}") from None
    return rule.apply(text)


def repair(html: str) -> str:
    """Run every post-render rule over `html` in order."""
    for rule in POST_RENDER_RULES:
        html = rule.apply(html)
    return html


def _closing_paren(text: str, start: int) -> int | None:
    """Index of the `)` closing a call whose arguments begin at `start`, skipping string literals."""
    depth = 1
    quote = None
    i = start
    while i < len(text):
        char = text[i]
        if quote:
            if char == "\\":
                i += 1
            elif char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
            if depth == 0:
                return i if char == ")" else None
        i += 1
    return None


def prepare_template(template: str) -> str:
    """
    Make every `to_data(...)` call-site return JSON text.

    Structured values cannot travel through the rendered HTML, so a call whose
    result is printed or assigned (it closes just before `}}`, `%}` or the end
    of the line) is rewritten to serialize its rows; the `data` property parser
    reads them back. Calls nested inside another call keep returning rows.
    """
    parts: list[str] = []
    pos = 0
    for match in _TO_DATA_OPEN_RE.finditer(template):
        if match.start() < pos:
            continue
        close = _closing_paren(template, match.end())
        if close is None or not _CALL_END_RE.match(template, close + 1):
            continue
        args = template[match.end():close]
        if _MODE_KWARG_RE.search(args):
            continue
        separator = ", " if args.strip() else ""
        parts.append(template[pos:close])
        parts.append(f'{separator}mode="stringify"')
        pos = close
    parts.append(template[pos:])
    return "".join(parts)


def clean_data_text(text: str) -> str:
    """Drop formatter whitespace inside numbers in `data` property text."""
    return _DATA_NUMBER_SPACING_RE.sub("", text)
