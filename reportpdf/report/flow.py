from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from reportpdf.errors import LayoutOverflow
from reportpdf.report.typography import LayoutSpec, RoleStyle, wrap_text
from reportpdf.types import LineRecord, PageBuffer, Role, RuleOp, TextRun


logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    AWAITING_FIRST_LINE = 'awaiting_first_line'
    FLOWING = 'flowing'
    CLOSED = 'closed'


class FlowEngine:
    """Lays classified report lines onto fixed-size pages.

    A page is opened as soon as the engine is built, so every flow yields at
    least one page. Visual lines that would cross the bottom margin move to a
    fresh page; pure vertical gaps are pinned at the bottom margin instead so
    trailing blank lines never produce an empty page.
    """

    def __init__(self, layout: LayoutSpec):
        self.layout = layout
        self.geometry = layout.geometry
        self.pages: list[PageBuffer] = []
        self.state = FlowState.AWAITING_FIRST_LINE
        self._open_page()

    @property
    def page(self) -> PageBuffer:
        return self.pages[-1]

    @property
    def cursor(self) -> float:
        return self.page.cursor

    def _open_page(self) -> None:
        if self.pages:
            self.page.close()
        self.pages.append(
            PageBuffer(
                number=len(self.pages) + 1,
                geometry=self.geometry,
                cursor=self.geometry.content_top,
            )
        )
        if len(self.pages) > 1:
            logger.debug('Opened page %d', self.page.number)

    def _ensure_open(self) -> None:
        if self.state == FlowState.CLOSED:
            raise RuntimeError('flow already finished')
        self.state = FlowState.FLOWING

    def advance(self, gap: float) -> None:
        if gap <= 0:
            return
        self.page.cursor = min(self.page.cursor + gap, self.geometry.content_bottom)

    def _reserve(self, height: float) -> float:
        if height > self.geometry.content_height:
            raise LayoutOverflow(
                f'a {height:.1f}pt line cannot fit in a {self.geometry.content_height:.1f}pt content area'
            )
        if self.page.cursor + height > self.geometry.content_bottom:
            self._open_page()
        return self.page.cursor

    def _place_lines(self, text: str, role: Role, style: RoleStyle) -> None:
        width = self.geometry.content_width
        for visual_line in wrap_text(
            text,
            max_width_points=width,
            font_name=style.font_name,
            font_size=style.font_size,
        ):
            top = self._reserve(style.line_height)
            self.page.add(
                TextRun(
                    text=visual_line,
                    role=role,
                    font_name=style.font_name,
                    font_size=style.font_size,
                    x=self.geometry.margin_left,
                    y=top,
                    width=width,
                    align=style.align,
                )
            )
            self.page.cursor = top + style.line_height

    def add_text(self, text: str, role: Role) -> None:
        self._ensure_open()
        style = self.layout.style(role)
        self.advance(style.space_before * style.line_height)
        if role != Role.BLANK:
            self._place_lines(text, role, style)
        self.advance(style.space_after * style.line_height)

    def add_line(self, record: LineRecord) -> None:
        self.add_text(record.text, record.role)

    def add_lines(self, records: Iterable[LineRecord]) -> None:
        for record in records:
            self.add_line(record)

    def add_rule(self, *, after: float = 1.0) -> None:
        self._ensure_open()
        top = self._reserve(0)
        self.page.add(
            RuleOp(
                x1=self.geometry.margin_left,
                x2=self.geometry.width - self.geometry.margin_right,
                y=top,
            )
        )
        self.advance(after * self.layout.style(Role.BODY).line_height)

    def add_banner(self, title: str, generated_at: str | None = None) -> None:
        """Report title, optional generation caption and a horizontal rule."""
        self.add_text(title, Role.TITLE)
        if generated_at:
            self.add_text(f'Generated: {generated_at}', Role.CAPTION)
        self.add_rule()

    def finish(self) -> list[PageBuffer]:
        if self.state != FlowState.CLOSED:
            self.page.close()
            self.state = FlowState.CLOSED
        return list(self.pages)
