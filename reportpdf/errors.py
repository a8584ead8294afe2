from __future__ import annotations


class ReportPdfError(Exception):
    """Base class for failures raised by the report layout engine."""


class InvalidInput(ReportPdfError, ValueError):
    """Report text is missing, not a string, empty or too long."""


class LayoutOverflow(ReportPdfError):
    """A single content unit cannot fit inside one page's content area."""


class EmissionFailure(ReportPdfError):
    """The output sink failed while the PDF was being written."""
