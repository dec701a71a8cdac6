"""CLI module exports."""

from report_tree.cli.render import main as render_main

__all__ = ["render_main"]
