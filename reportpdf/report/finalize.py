from __future__ import annotations

import logging

from reportpdf.report.typography import LayoutSpec
from reportpdf.types import Document, PageBuffer, Role, TextRun


logger = logging.getLogger(__name__)


def page_label(number: int, total: int) -> str:
    return f'Page {number} of {total}'


def finalize(pages: list[PageBuffer], *, layout: LayoutSpec, title: str | None = None) -> Document:
    """Stamp every flowed page with its ordinal and the final page count.

    Runs only after flow is complete, since the total is unknown before then.
    Footers are appended; content already on the page is left untouched.
    """
    if not pages:
        raise ValueError('cannot finalize a document without pages')

    total = len(pages)
    style = layout.style(Role.FOOTER)
    geometry = layout.geometry
    for number, page in enumerate(pages, start=1):
        page.stamp_footer(
            TextRun(
                text=page_label(number, total),
                role=Role.FOOTER,
                font_name=style.font_name,
                font_size=style.font_size,
                x=geometry.margin_left,
                y=layout.footer_top,
                width=geometry.content_width,
                align=style.align,
            )
        )

    logger.debug('Stamped page footers on %d page(s)', total)
    return Document(pages=list(pages), title=title, author=layout.author)
