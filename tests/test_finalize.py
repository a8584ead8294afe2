"""Tests for the page-numbering pass."""

import pytest

from reportpdf.report.classifier import classify_lines
from reportpdf.report.finalize import finalize, page_label
from reportpdf.report.flow import FlowEngine
from reportpdf.types import Role


def flowed_pages(layout, line_count):
    engine = FlowEngine(layout)
    engine.add_lines(classify_lines("\n".join(f"Observation {index}." for index in range(line_count))))
    return engine.finish()


@pytest.mark.parametrize("line_count", [0, 1, 80, 200])
def test_every_page_reports_true_total(layout, line_count):
    pages = flowed_pages(layout, line_count)
    document = finalize(pages, layout=layout)

    total = document.page_count
    assert total == len(pages) >= 1
    labels = [page.footer.text for page in document.pages]
    assert labels == [page_label(number, total) for number in range(1, total + 1)]


def test_footer_sits_in_bottom_margin_band(layout):
    document = finalize(flowed_pages(layout, 120), layout=layout)

    geometry = layout.geometry
    footer_style = layout.style(Role.FOOTER)
    for page in document.pages:
        footer = page.footer
        assert footer.align == "center"
        assert footer.font_size < layout.style(Role.BODY).font_size
        assert footer.y >= geometry.content_bottom
        assert footer.y + footer_style.text_height <= geometry.height
        assert footer.y == pytest.approx(geometry.height - 50)


def test_finalize_only_appends(layout):
    pages = flowed_pages(layout, 100)
    before = [list(page.ops) for page in pages]

    document = finalize(pages, layout=layout)

    for original, page in zip(before, document.pages):
        assert page.ops[:-1] == original
        assert page.ops[-1] is page.footer


def test_pages_cannot_be_stamped_twice(layout):
    pages = flowed_pages(layout, 3)
    finalize(pages, layout=layout)

    with pytest.raises(RuntimeError):
        finalize(pages, layout=layout)


def test_open_page_cannot_be_stamped(layout):
    engine = FlowEngine(layout)

    with pytest.raises(RuntimeError):
        finalize(engine.pages, layout=layout)


def test_finalize_requires_pages(layout):
    with pytest.raises(ValueError):
        finalize([], layout=layout)
