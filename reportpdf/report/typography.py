from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from reportlab.lib.pagesizes import A4, LETTER
from reportlab.pdfbase import pdfmetrics

from reportpdf.config import Settings
from reportpdf.errors import LayoutOverflow
from reportpdf.types import PageGeometry, Role


PAGE_SIZES: dict[str, tuple[float, float]] = {
    'LETTER': LETTER,
    'A4': A4,
}


@dataclass(frozen=True)
class RoleStyle:
    font_name: str
    font_size: float
    line_gap: float = 0.0
    # Gaps around the element, in multiples of the style's line height.
    space_before: float = 0.0
    space_after: float = 0.0
    align: str = 'left'

    @property
    def text_height(self) -> float:
        ascent, descent = pdfmetrics.getAscentDescent(self.font_name, self.font_size)
        return float(ascent - descent)

    @property
    def line_height(self) -> float:
        return self.text_height + self.line_gap


@dataclass(frozen=True)
class LayoutSpec:
    geometry: PageGeometry
    styles: Mapping[Role, RoleStyle]
    footer_offset: float
    author: str | None = None

    def style(self, role: Role) -> RoleStyle:
        try:
            return self.styles[role]
        except KeyError as exc:
            raise KeyError(f'no typography configured for role {role.value!r}') from exc

    @property
    def footer_top(self) -> float:
        return self.geometry.height - self.footer_offset


def build_layout(settings: Settings) -> LayoutSpec:
    size_key = str(settings.pdf_page_size or '').strip().upper()
    if size_key not in PAGE_SIZES:
        raise ValueError(f'unsupported page size: {settings.pdf_page_size!r}')
    width, height = PAGE_SIZES[size_key]

    geometry = PageGeometry(
        width=float(width),
        height=float(height),
        margin_top=float(settings.pdf_margin_top),
        margin_bottom=float(settings.pdf_margin_bottom),
        margin_left=float(settings.pdf_margin_left),
        margin_right=float(settings.pdf_margin_right),
    )
    if geometry.content_width <= 0 or geometry.content_height <= 0:
        raise ValueError('page margins leave no content area')

    regular = settings.pdf_font_name
    bold = settings.pdf_bold_font_name
    body = RoleStyle(regular, settings.pdf_body_font_size, line_gap=settings.pdf_body_line_gap)
    styles = {
        Role.TITLE: RoleStyle(bold, settings.pdf_title_font_size, space_after=0.5, align='center'),
        Role.CAPTION: RoleStyle(regular, settings.pdf_caption_font_size, space_after=1.5, align='center'),
        Role.HEADER: RoleStyle(
            bold,
            settings.pdf_header_font_size,
            line_gap=settings.pdf_header_line_gap,
            space_before=0.5,
            space_after=0.3,
        ),
        Role.BODY: body,
        Role.BLANK: RoleStyle(body.font_name, body.font_size, line_gap=body.line_gap, space_before=0.5),
        Role.FOOTER: RoleStyle(regular, settings.pdf_footer_font_size, align='center'),
    }

    footer_offset = float(settings.pdf_footer_offset)
    footer_height = styles[Role.FOOTER].text_height
    if not (footer_height < footer_offset < geometry.margin_bottom):
        raise ValueError(
            f'footer offset {footer_offset} must sit inside the bottom margin band '
            f'(between {footer_height:.1f} and {geometry.margin_bottom})'
        )

    return LayoutSpec(
        geometry=geometry,
        styles=styles,
        footer_offset=footer_offset,
        author=settings.pdf_author,
    )


def measure_text_width(text: str, *, font_name: str, font_size: float) -> float:
    if not text:
        return 0.0
    return float(pdfmetrics.stringWidth(text, font_name, font_size))


def _split_token_by_width(
    token: str,
    *,
    max_width_points: float,
    font_name: str,
    font_size: float,
) -> list[str]:
    chunks: list[str] = []
    current = ''
    for char in token:
        candidate = f'{current}{char}'
        if measure_text_width(candidate, font_name=font_name, font_size=font_size) <= max_width_points:
            current = candidate
            continue
        if not current:
            raise LayoutOverflow(
                f'glyph {char!r} at {font_size}pt is wider than the {max_width_points:.1f}pt content width'
            )
        chunks.append(current)
        current = char
    if current:
        chunks.append(current)
    return chunks


def wrap_text(
    text: str,
    *,
    max_width_points: float,
    font_name: str,
    font_size: float,
) -> list[str]:
    """Soft-wrap one line of prose into visual lines no wider than the content area.

    Breaks on whitespace; a word that alone is too wide is split by glyph.
    """
    line = str(text or '')
    if not line:
        return ['']

    tokens = re.findall(r'\s+|\S+', line)
    wrapped: list[str] = []
    current = ''

    def _flush_current() -> None:
        nonlocal current
        if current:
            wrapped.append(current.rstrip())
            current = ''

    for token in tokens:
        candidate = f'{current}{token}'
        if measure_text_width(candidate, font_name=font_name, font_size=font_size) <= max_width_points:
            current = candidate
            continue

        if token.isspace():
            _flush_current()
            continue

        if current.strip():
            _flush_current()
        else:
            current = ''

        if measure_text_width(token, font_name=font_name, font_size=font_size) <= max_width_points:
            current = token
            continue

        chunks = _split_token_by_width(
            token,
            max_width_points=max_width_points,
            font_name=font_name,
            font_size=font_size,
        )
        wrapped.extend(chunks[:-1])
        current = chunks[-1]

    _flush_current()
    return wrapped or ['']
