from __future__ import annotations

import logging
from typing import Any

from reportpdf.config import Settings, get_settings
from reportpdf.errors import InvalidInput
from reportpdf.report.classifier import classify_lines
from reportpdf.report.emitter import document_to_bytes
from reportpdf.report.finalize import finalize
from reportpdf.report.flow import FlowEngine
from reportpdf.report.typography import LayoutSpec, build_layout
from reportpdf.types import Document


logger = logging.getLogger(__name__)


def validate_report_text(value: Any, *, max_chars: int | None = None) -> str:
    """Reject report text a caller must not hand to the layout engine."""
    if not isinstance(value, str):
        raise InvalidInput('Report text is required')
    if not value.strip():
        raise InvalidInput('Report text is required')
    if max_chars is not None and len(value) > int(max_chars):
        raise InvalidInput(f'Report text too long: {len(value)} characters, max allowed {int(max_chars)}')
    return value


def render_document(
    report_text: str,
    *,
    settings: Settings | None = None,
    layout: LayoutSpec | None = None,
    title: str | None = None,
    generated_at: str | None = None,
) -> Document:
    """Classify, flow and paginate ``report_text`` into a finished document.

    Empty or whitespace-only text is accepted and yields a single page that
    carries only its footer. ``title`` adds the centered report banner on the
    first page; ``generated_at`` adds a caption under it.
    """
    if not isinstance(report_text, str):
        raise InvalidInput(f'report text must be a string, got {type(report_text).__name__}')

    settings = settings or get_settings()
    layout = layout or build_layout(settings)

    engine = FlowEngine(layout)
    if title:
        engine.add_banner(title, generated_at)
    records = classify_lines(report_text)
    engine.add_lines(records)
    pages = engine.finish()

    document = finalize(pages, layout=layout, title=title or settings.pdf_document_title)
    logger.info('Laid out %d line(s) onto %d page(s)', len(records), document.page_count)
    return document


def render(
    report_text: str,
    *,
    settings: Settings | None = None,
    title: str | None = None,
    generated_at: str | None = None,
) -> bytes:
    document = render_document(
        report_text,
        settings=settings,
        title=title,
        generated_at=generated_at,
    )
    return document_to_bytes(document)
