from __future__ import annotations

import re

from reportpdf.types import LineRecord, Role


# Whole line of uppercase letters, whitespace and slashes ending in a colon.
# An all-caps body sentence ending in ':' also matches and is read as a header.
_HEADER_PATTERN = re.compile(r'[A-Z\s/]+:')


def classify_line(text: str) -> Role:
    stripped = str(text or '').strip()
    if not stripped:
        return Role.BLANK
    if _HEADER_PATTERN.fullmatch(stripped):
        return Role.HEADER
    return Role.BODY


def split_report_lines(report_text: str) -> list[str]:
    return [line.strip() for line in report_text.split('\n')]


def classify_lines(report_text: str) -> list[LineRecord]:
    return [LineRecord(text=line, role=classify_line(line)) for line in split_report_lines(report_text)]
