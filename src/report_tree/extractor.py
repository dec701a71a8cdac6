"""Walk rendered report HTML into a tree of sections, properties and notes."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.element import PageElement
from bs4.formatter import HTMLFormatter

from report_tree.exceptions import PropertyDataError
from report_tree.models import Section
from report_tree.text_repair import clean_data_text

SECTION_TAG = "section"
PROPERTY_TAG = "prop"
DATA_CATEGORY = "data"
LIST_SEPARATOR = "|"

# Minimal escaping like bs4's default, but void elements stay `<br>` rather than `<br/>`.
CONTENT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


class NodeKind(enum.Enum):
    SECTION = "section"
    PROPERTY = "property"
    CONTENT = "content"


@dataclass(frozen=True)
class NodeClass:
    """Classification of one child node; `category` is set for properties only."""

    kind: NodeKind
    category: str | None = None


def parse_html(html: str) -> BeautifulSoup:
    """Parse a rendered fragment without wrapping it in `<html>`/`<body>`."""
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


def _attr(node: Tag, name: str) -> str | None:
    # Soups built elsewhere may split `class` into a list.
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def classify(node: PageElement) -> NodeClass:
    """Decide how `parse_section` treats a child node."""
    if isinstance(node, Tag):
        if node.name == SECTION_TAG:
            return NodeClass(NodeKind.SECTION)
        if node.name == PROPERTY_TAG:
            category = _attr(node, "class")
            if category:
                return NodeClass(NodeKind.PROPERTY, category)
    return NodeClass(NodeKind.CONTENT)


def outer_html(node: PageElement) -> str:
    if isinstance(node, Tag):
        return node.decode(formatter=CONTENT_FORMATTER)
    if isinstance(node, NavigableString):
        return node.output_ready()
    return str(node)


def parse_property(node: Tag, category: str) -> Any:
    """Extract a property value: JSON for `data`, a list for pipe text, inner markup otherwise."""
    text = node.get_text()
    if category == DATA_CATEGORY:
        try:
            return json.loads(clean_data_text(text))
        except json.JSONDecodeError as e:
            raise PropertyDataError(f"Invalid JSON in data property: {e}") from e
    if LIST_SEPARATOR in text:
        return text.split(LIST_SEPARATOR)
    return node.decode_contents(formatter=CONTENT_FORMATTER)


def parse_section(node: Tag | BeautifulSoup, *, skip_comments: bool = False) -> Section:
    """
    Build a Section from `node` and its children.

    Children are visited in document order. Nested sections are parsed after the
    node's own content and properties have been collected.
    """
    section = Section(id=_attr(node, "id"), type=_attr(node, "class"))
    content_parts: list[str] = []
    subsections: list[Tag] = []

    for child in node.children:
        if skip_comments and isinstance(child, Comment):
            continue
        node_class = classify(child)
        if node_class.kind is NodeKind.SECTION:
            subsections.append(child)
        elif node_class.kind is NodeKind.PROPERTY:
            section.properties[node_class.category] = parse_property(child, node_class.category)
        else:
            content_parts.append(outer_html(child))

    content = "".join(content_parts)
    if content:
        section.content = content
    if subsections:
        section.sections = [parse_section(sub) for sub in subsections]
    return section


def is_flat_document(root: BeautifulSoup) -> bool:
    """True when any top-level element is not a `<section>`; the root is then one implicit section."""
    return any(
        isinstance(child, Tag) and child.name != SECTION_TAG for child in root.children
    )


def _note_text(comment: Comment) -> str:
    # `<! -- note -->` parses as a bogus comment whose text keeps both dashes.
    return str(comment).strip().removeprefix("--").removesuffix("--").strip()


def extract(document: str | BeautifulSoup) -> tuple[list[Section], list[str]]:
    """Return top-level sections and notes from rendered report HTML."""
    root = parse_html(document) if isinstance(document, str) else document

    if is_flat_document(root):
        sections = [parse_section(root, skip_comments=True)]
    else:
        sections = [parse_section(child) for child in root.children if isinstance(child, Tag)]

    notes = [_note_text(child) for child in root.children if isinstance(child, Comment)]
    return sections, notes
