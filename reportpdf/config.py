from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    app_name: str = 'Dictated Report PDF Service'
    log_level: str = 'INFO'

    # Page geometry, in points
    pdf_page_size: str = 'LETTER'
    pdf_margin_top: float = 72
    pdf_margin_bottom: float = 72
    pdf_margin_left: float = 72
    pdf_margin_right: float = 72

    # Typography
    pdf_font_name: str = 'Helvetica'
    pdf_bold_font_name: str = 'Helvetica-Bold'
    pdf_title_font_size: float = 16
    pdf_caption_font_size: float = 10
    pdf_header_font_size: float = 12
    pdf_body_font_size: float = 11
    pdf_footer_font_size: float = 9
    pdf_header_line_gap: float = 4
    pdf_body_line_gap: float = 3
    # Distance from the bottom page edge up to the top of the footer line.
    pdf_footer_offset: float = 50

    # Document
    pdf_document_title: str = 'PATHOLOGY REPORT'
    pdf_author: str = 'Dictated Report PDF Service'
    pdf_include_banner: bool = False
    pdf_filename_prefix: str = 'medical-report'
    pdf_stream_chunk_size: int = 64 * 1024

    max_report_chars: int = 200_000

    # HTTP collaborator
    server_host: str = '0.0.0.0'
    server_port: int = 3001
    # Comma-separated, '*' allows any origin.
    cors_origins: str = Field(default='*')

    def cors_origin_list(self) -> list[str] | str:
        origins: list[str] = []
        for item in self.cors_origins.split(','):
            normalized = item.strip()
            if not normalized:
                continue
            if normalized == '*':
                return '*'
            origins.append(normalized)
        return origins or '*'


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
