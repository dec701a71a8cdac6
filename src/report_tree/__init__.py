"""Public package API for report-tree."""

from report_tree.api import render_html, render_json, render_places
from report_tree.assembler import assemble
from report_tree.contrast import resolve_contrast, text_color_for
from report_tree.engine import build_context, create_environment, jinja_render
from report_tree.exceptions import PropertyDataError, ReportTreeError, TemplateError
from report_tree.extractor import NodeKind, classify, extract, parse_section
from report_tree.models import RenderResult, Section
from report_tree.places import Place, PlaceList, build_lookup, load_places
from report_tree.text_repair import POST_RENDER_RULES, prepare_template, repair

__all__ = [
    "render_json",
    "render_html",
    "render_places",
    "assemble",
    "extract",
    "parse_section",
    "classify",
    "NodeKind",
    "repair",
    "prepare_template",
    "POST_RENDER_RULES",
    "resolve_contrast",
    "text_color_for",
    "jinja_render",
    "build_context",
    "create_environment",
    "Place",
    "PlaceList",
    "build_lookup",
    "load_places",
    "RenderResult",
    "Section",
    "ReportTreeError",
    "TemplateError",
    "PropertyDataError",
]
