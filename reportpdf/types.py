from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from pydantic import BaseModel


class Role(str, Enum):
    """Typography role of a run of text.

    The line classifier only produces HEADER, BODY and BLANK. The remaining
    members key the styles of runs the engine adds on its own.
    """

    HEADER = 'header'
    BODY = 'body'
    BLANK = 'blank'
    TITLE = 'title'
    CAPTION = 'caption'
    FOOTER = 'footer'


@dataclass(frozen=True)
class LineRecord:
    text: str
    role: Role


@dataclass(frozen=True)
class TextRun:
    text: str
    role: Role
    font_name: str
    font_size: float
    x: float
    # Top of the line box, measured down from the top page edge.
    y: float
    width: float
    align: str = 'left'


@dataclass(frozen=True)
class RuleOp:
    x1: float
    x2: float
    y: float
    line_width: float = 0.8


DrawOp = Union[TextRun, RuleOp]


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_top(self) -> float:
        return self.margin_top

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom

    @property
    def content_height(self) -> float:
        return self.content_bottom - self.content_top


@dataclass
class PageBuffer:
    number: int
    geometry: PageGeometry
    cursor: float
    ops: list[DrawOp] = field(default_factory=list)
    closed: bool = False
    footer: TextRun | None = None

    def add(self, op: DrawOp) -> None:
        if self.closed:
            raise RuntimeError(f'page {self.number} is closed')
        self.ops.append(op)

    def close(self) -> None:
        self.closed = True

    def stamp_footer(self, run: TextRun) -> None:
        if not self.closed:
            raise RuntimeError(f'page {self.number} is still being flowed')
        if self.footer is not None:
            raise RuntimeError(f'page {self.number} already has a footer')
        self.footer = run
        self.ops.append(run)

    def text_runs(self, *roles: Role) -> list[TextRun]:
        runs = [op for op in self.ops if isinstance(op, TextRun)]
        if roles:
            runs = [run for run in runs if run.role in roles]
        return runs


@dataclass
class Document:
    pages: list[PageBuffer]
    title: str | None = None
    author: str | None = None

    @property
    def page_count(self) -> int:
        return len(self.pages)


class RenderSummary(BaseModel):
    status: str
    path: str | None = None
    filename: str
    pages: int
    bytes: int
