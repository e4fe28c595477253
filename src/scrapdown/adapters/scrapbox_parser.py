"""Parser for Scrapbox-style wiki markup.

Every rule below takes a ``Source`` and a start offset and returns
``(node, end)`` on success or ``None`` when it does not apply at that
offset. Rules never raise; the line loop decides what a failure means.
"""

import logging
import re
from collections.abc import Callable

from ..core.model import (
    BlockQuote,
    Bracket,
    BracketKind,
    Emphasis,
    ExternalLink,
    HashTag,
    InternalLink,
    Line,
    LineKind,
    List,
    ListKind,
    Normal,
    Page,
    Syntax,
    Text,
)
from ..core.ports import ParserStrategy
from ..errors import ParseError

logger = logging.getLogger(__name__)

PROTOCOLS = ("https://", "http://")

HASHTAG_RE = re.compile(r"#([^ \n]*)")
EMPHASIS_RE = re.compile(r"([*/\-]*) (.*)", re.DOTALL)
DECIMAL_RE = re.compile(r"[0-9]+\. ")

Match = tuple[Syntax, int] | None


class Source:
    """A document being parsed, with memoized forward searches.

    Boundaries such as the next ``[`` are searched across the whole rest of
    the document. Each search result is kept until the parse moves past it,
    so a document is scanned about once per needle.
    """

    def __init__(self, text: str):
        self.text = text
        self._hits: dict[str, tuple[int, int]] = {}

    def find(self, needle: str, pos: int) -> int:
        """Offset of the first ``needle`` at or after ``pos``, or -1."""
        cached = self._hits.get(needle)
        if cached is not None:
            start, hit = cached
            if start <= pos and (hit == -1 or hit >= pos):
                return hit
        hit = self.text.find(needle, pos)
        self._hits[needle] = (pos, hit)
        return hit


def _protocol_at(text: str, pos: int) -> str | None:
    for protocol in PROTOCOLS:
        if text.startswith(protocol, pos):
            return protocol
    return None


# #tag
def _hashtag(src: Source, pos: int) -> Match:
    m = HASHTAG_RE.match(src.text, pos)
    if not m:
        return None
    return HashTag(m.group(1)), m.end()


def _enclosed(src: Source, pos: int, opening: str, closing: str) -> tuple[str, int] | None:
    """Content between ``opening`` at ``pos`` and the next ``closing``."""
    if not src.text.startswith(opening, pos):
        return None
    close = src.find(closing, pos + 1)
    if close == -1:
        return None
    return src.text[pos + 1:close], close + 1


# `code`
def _block_quote(src: Source, pos: int) -> Match:
    found = _enclosed(src, pos, "`", "`")
    if found is None:
        return None
    content, end = found
    return BlockQuote(content), end


# [* bold] [/ italic] [- strike] [*/-* mixed]
def _emphasis(content: str) -> Emphasis | None:
    m = EMPHASIS_RE.fullmatch(content)
    if not m:
        return None
    markers, body = m.group(1), m.group(2)
    return Emphasis(
        text=body,
        bold=markers.count("*"),
        italic=markers.count("/"),
        strikethrough=markers.count("-"),
    )


# [https://example.com Title] [Title https://example.com] [https://example.com]
def _external_link(content: str) -> ExternalLink | None:
    if _protocol_at(content, 0):
        url, sep, title = content.partition(" ")
        if sep:
            return ExternalLink(url=url, title=title)
        return ExternalLink(url=content)

    title, sep, rest = content.partition(" ")
    if sep and _protocol_at(rest, 0):
        return ExternalLink(url=rest, title=title)
    return None


def _bracket(src: Source, pos: int) -> Match:
    found = _enclosed(src, pos, "[", "]")
    if found is None:
        return None
    content, end = found

    kind: BracketKind | None = _emphasis(content)
    if kind is None:
        kind = _external_link(content)
    if kind is None:
        kind = InternalLink(content)
    return Bracket(kind), end


# https://example.com followed by a space on the same line
def _bare_link(src: Source, pos: int) -> Match:
    text = src.text
    protocol = _protocol_at(text, pos)
    if protocol is None:
        return None
    start = pos + len(protocol)
    newline = src.find("\n", start)
    space = text.find(" ", start, len(text) if newline == -1 else newline)
    if space == -1 or space == start:
        return None
    return Bracket(ExternalLink(url=text[pos:space])), space


def _text(src: Source, pos: int) -> Match:
    text = src.text
    if pos >= len(text) or text.startswith("#", pos):
        return None

    def until_hashtag() -> int | None:
        if src.find(" #", pos) == -1:
            return None
        return src.find("#", pos)

    def until_newline() -> int | None:
        end = src.find("\n", pos)
        return None if end == -1 else end

    def until_bracket() -> int:
        end = src.find("[", pos)
        return len(text) if end == -1 else end

    # Nearest boundary wins; min() keeps the first of equal candidates
    candidates = [until_hashtag(), until_newline(), until_bracket()]
    end = min(c for c in candidates if c is not None)
    if end == pos:
        return None
    return Text(text[pos:end]), end


RULES: tuple[Callable[[Source, int], Match], ...] = (
    _hashtag,
    _block_quote,
    _bracket,
    _bare_link,
    _text,
)


def _syntax(src: Source, pos: int) -> Match:
    for rule in RULES:
        result = rule(src, pos)
        if result is not None:
            return result
    return None


# <tab>item  <tab><tab>1. item
def _list_marker(text: str, pos: int) -> tuple[LineKind, int]:
    level = 0
    while text.startswith("\t", pos + level):
        level += 1
    if level == 0:
        return Normal(), pos

    pos += level
    m = DECIMAL_RE.match(text, pos)
    if m:
        return List(ListKind.DECIMAL, level), m.end()
    return List(ListKind.DISC, level), pos


def _line(src: Source, pos: int) -> tuple[Line, int]:
    text = src.text
    if text.startswith("\n", pos):
        pos += 1
    kind, pos = _list_marker(text, pos)

    values: list[Syntax] = []
    while pos < len(text):
        result = _syntax(src, pos)
        if result is not None:
            node, pos = result
            values.append(node)
            continue
        if text.startswith("\n", pos):
            break
        # Progress check: only an unclosed "[" gets here. Keep it as text.
        logger.debug("No rule matched at offset %d (%r); keeping it as text", pos, text[pos])
        values.append(Text(text[pos]))
        pos += 1

    return Line(kind, values), pos


class ScrapboxParser(ParserStrategy):
    def parse(self, text: str) -> Page:
        src = Source(text)
        page = Page()
        pos = 0
        while pos < len(text):
            line, pos = _line(src, pos)
            page.lines.append(line)
        return page


def parse(text: str) -> Page:
    """Parse a whole document. Never raises."""
    return ScrapboxParser().parse(text)


def parse_inline(text: str) -> tuple[Syntax, int]:
    """
    Parse exactly one node at the start of ``text``.

    Returns the node and the offset where it ends. Raises ParseError when
    no rule applies, e.g. for an empty string, a newline or an unclosed
    bracket.
    """
    result = _syntax(Source(text), 0)
    if result is None:
        raise ParseError(f"No syntax rule matches at offset 0: {text[:20]!r}", position=0)
    return result
