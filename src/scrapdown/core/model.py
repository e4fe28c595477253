from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class ListKind(Enum):
    DISC = "disc"
    DECIMAL = "decimal"
    ALPHABET = "alphabet"  # reserved; the parser never produces it


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class List:
    kind: ListKind
    level: int  # number of leading tabs, >= 1

    def __post_init__(self) -> None:
        if self.level < 1:
            raise ValueError(f"list level must be >= 1, got {self.level}")


LineKind = Union[Normal, List]


@dataclass
class HashTag:
    value: str


@dataclass
class InternalLink:
    title: str


@dataclass
class ExternalLink:
    url: str
    title: str | None = None


@dataclass
class Emphasis:
    text: str
    bold: int = 0
    italic: int = 0
    strikethrough: int = 0


@dataclass
class Heading:
    text: str
    level: int

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 255:
            raise ValueError(f"heading level must be in 1..255, got {self.level}")


BracketKind = Union[InternalLink, ExternalLink, Emphasis, Heading]


@dataclass
class Bracket:
    kind: BracketKind


@dataclass
class BlockQuote:
    value: str


@dataclass
class Text:
    value: str


Syntax = Union[HashTag, Bracket, BlockQuote, Text]


@dataclass
class Line:
    kind: LineKind = field(default_factory=Normal)
    values: list[Syntax] = field(default_factory=list)


@dataclass
class Page:
    lines: list[Line] = field(default_factory=list)
