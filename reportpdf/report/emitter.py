from __future__ import annotations

import io
import logging
import re
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import BinaryIO, Iterator

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas as pdf_canvas

from reportpdf.errors import EmissionFailure
from reportpdf.types import Document, PageBuffer, RuleOp, TextRun


logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = 'application/pdf'
PRODUCER = 'reportpdf'

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


def _draw_text_run(canvas, run: TextRun, page_height: float) -> None:
    ascent, _ = pdfmetrics.getAscentDescent(run.font_name, run.font_size)
    baseline = page_height - (run.y + ascent)
    canvas.setFont(run.font_name, run.font_size)
    if run.align == 'center':
        canvas.drawCentredString(run.x + run.width / 2, baseline, run.text)
    else:
        canvas.drawString(run.x, baseline, run.text)


def _draw_page(canvas, page: PageBuffer) -> None:
    height = page.geometry.height
    canvas.setPageSize((page.geometry.width, height))
    for op in page.ops:
        if isinstance(op, TextRun):
            _draw_text_run(canvas, op, height)
        elif isinstance(op, RuleOp):
            canvas.saveState()
            canvas.setLineWidth(op.line_width)
            canvas.line(op.x1, height - op.y, op.x2, height - op.y)
            canvas.restoreState()
        else:
            raise TypeError(f'unsupported draw operation: {op!r}')
    canvas.showPage()


def write_pdf(document: Document, sink: BinaryIO) -> None:
    """Serialize all pages, in order, into ``sink``.

    The canvas runs in invariant mode so the same document always yields
    the same bytes.
    """
    try:
        first = document.pages[0].geometry
        canvas = pdf_canvas.Canvas(sink, pagesize=(first.width, first.height), invariant=1)
        if document.title:
            canvas.setTitle(document.title)
        canvas.setCreator(PRODUCER)
        canvas.setProducer(PRODUCER)
        if document.author:
            canvas.setAuthor(document.author)
        for page in document.pages:
            _draw_page(canvas, page)
        canvas.save()
    except Exception as exc:
        raise EmissionFailure(f'failed to write PDF: {exc}') from exc


def document_to_bytes(document: Document) -> bytes:
    buffer = io.BytesIO()
    write_pdf(document, buffer)
    payload = buffer.getvalue()
    logger.debug('Serialized %d page(s) into %d bytes', document.page_count, len(payload))
    return payload


def iter_pdf_chunks(document: Document, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
    """Serialize eagerly, then hand the bytes out in page order as chunks.

    Serialization errors surface here, before the first chunk is sent.
    """
    payload = document_to_bytes(document)
    return _iter_chunks(payload, max(1, int(chunk_size)))


def _iter_chunks(payload: bytes, step: int) -> Iterator[bytes]:
    sent = 0
    try:
        for start in range(0, len(payload), step):
            chunk = payload[start:start + step]
            yield chunk
            sent += len(chunk)
    finally:
        if sent < len(payload):
            logger.info('PDF stream closed by consumer after %d of %d bytes', sent, len(payload))


def suggested_filename(
    explicit: str | None = None,
    *,
    now: datetime | None = None,
    prefix: str = 'medical-report',
) -> str:
    # Control characters would break the Content-Disposition header.
    cleaned = _CONTROL_CHARS.sub('', str(explicit or ''))
    name = PurePosixPath(cleaned.strip().replace('\\', '/')).name
    name = name.replace('"', '').strip().lstrip('.')
    if name:
        if not name.lower().endswith('.pdf'):
            name = f'{name}.pdf'
        return name

    moment = now or datetime.now(timezone.utc)
    return f'{prefix}-{int(moment.timestamp() * 1000)}.pdf'
