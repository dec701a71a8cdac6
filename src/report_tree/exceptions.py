"""Custom exceptions for report-tree."""


class ReportTreeError(Exception):
    """Base exception for report-tree operations."""


class TemplateError(ReportTreeError):
    """Error raised while preparing or rendering a report template."""


class PropertyDataError(ReportTreeError):
    """A `data` property did not contain valid JSON text."""
