"""Plain-data view of a Page, for JSON/YAML dumps."""

from dataclasses import asdict
from typing import Any

from .model import Bracket, Line, List, Page, Syntax


def node_to_dict(node: Syntax) -> dict[str, Any]:
    """
    Flatten one node into ``{"type": ..., **fields}``.

    Bracket nodes are tagged with their inner kind, e.g.
    ``{"type": "bracket", "kind": "emphasis", "text": "x", "bold": 1, ...}``.
    """
    if isinstance(node, Bracket):
        inner = node.kind
        return {
            "type": "bracket",
            "kind": _snake(type(inner).__name__),
            **asdict(inner),
        }
    return {"type": _snake(type(node).__name__), **asdict(node)}


def line_to_dict(line: Line) -> dict[str, Any]:
    if isinstance(line.kind, List):
        kind: dict[str, Any] = {
            "type": "list",
            "list_kind": line.kind.kind.value,
            "level": line.kind.level,
        }
    else:
        kind = {"type": "normal"}
    return {"kind": kind, "values": [node_to_dict(v) for v in line.values]}


def page_to_dict(page: Page) -> dict[str, Any]:
    return {"lines": [line_to_dict(line) for line in page.lines]}


def _snake(name: str) -> str:
    out = []
    for i, c in enumerate(name):
        if c.isupper() and i:
            out.append("_")
        out.append(c.lower())
    return "".join(out)
