"""Generic mutable walk over a Page.

Subclasses override the ``visit_*`` hook for the node shapes they care
about. Leaf hooks may return a :class:`Replace` or :class:`Delete` command;
the commands for one Line are collected during the walk and applied only
after every node of that Line has been visited, so replacements and
deletions never observe each other's index shifts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .model import (
    BlockQuote,
    Bracket,
    Emphasis,
    ExternalLink,
    HashTag,
    Heading,
    InternalLink,
    Line,
    Page,
    Syntax,
    Text,
)


@dataclass
class Replace:
    node: Syntax


@dataclass
class Delete:
    pass


TransformCommand = Union[Replace, Delete]


class Visitor:
    def visit(self, page: Page) -> None:
        self.visit_page(page)

    def visit_page(self, page: Page) -> None:
        for line in page.lines:
            self.visit_line(line)

    def visit_line(self, line: Line) -> None:
        commands: dict[int, TransformCommand] = {}
        for i, node in enumerate(line.values):
            command = self.visit_syntax(node)
            if command is not None:
                commands[i] = command

        if not commands:
            return

        # Index substitution keeps positions stable for the delete pass
        for i, command in commands.items():
            if isinstance(command, Replace):
                line.values[i] = command.node

        line.values[:] = [
            node
            for i, node in enumerate(line.values)
            if not isinstance(commands.get(i), Delete)
        ]

    def visit_syntax(self, node: Syntax) -> TransformCommand | None:
        match node:
            case HashTag():
                return self.visit_hashtag(node)
            case Bracket():
                return self.visit_bracket(node)
            case BlockQuote():
                return self.visit_block_quote(node)
            case Text():
                return self.visit_text(node)
        raise TypeError(f"Unknown syntax node: {node!r}")

    def visit_bracket(self, node: Bracket) -> TransformCommand | None:
        match node.kind:
            case InternalLink():
                return self.visit_internal_link(node.kind)
            case ExternalLink():
                return self.visit_external_link(node.kind)
            case Emphasis():
                return self.visit_emphasis(node.kind)
            case Heading():
                return self.visit_heading(node.kind)
        raise TypeError(f"Unknown bracket kind: {node.kind!r}")

    def visit_hashtag(self, node: HashTag) -> TransformCommand | None:
        return None

    def visit_internal_link(self, node: InternalLink) -> TransformCommand | None:
        return None

    def visit_external_link(self, node: ExternalLink) -> TransformCommand | None:
        return None

    def visit_emphasis(self, node: Emphasis) -> TransformCommand | None:
        return None

    def visit_heading(self, node: Heading) -> TransformCommand | None:
        return None

    def visit_block_quote(self, node: BlockQuote) -> TransformCommand | None:
        return None

    def visit_text(self, node: Text) -> TransformCommand | None:
        return None
