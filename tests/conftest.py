import io
import math

import pytest
from pypdf import PdfReader

from reportpdf.config import Settings, get_settings
from reportpdf.report.typography import build_layout
from reportpdf.types import Role


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def layout(settings):
    return build_layout(settings)


@pytest.fixture
def body_capacity(layout):
    """Number of single-line body paragraphs that fit on one page."""
    line_height = layout.style(Role.BODY).line_height
    return math.floor(layout.geometry.content_height / line_height)


def read_pdf(payload: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(payload))
