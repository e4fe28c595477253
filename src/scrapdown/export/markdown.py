from ..core.model import (
    BlockQuote,
    Emphasis,
    ExternalLink,
    HashTag,
    Heading,
    InternalLink,
    Line,
    List,
    ListKind,
    Page,
    Text,
)
from ..core.ports import Renderer
from ..core.visitor import TransformCommand, Visitor

LIST_BULLETS = {
    ListKind.DISC: "* ",
    ListKind.DECIMAL: "1. ",
}


class MarkdownRenderer(Visitor, Renderer):
    def __init__(self, indent_unit: str = "   "):
        self.indent_unit = indent_unit
        self._out: list[str] = []

    def render(self, page: Page) -> str:
        self._out = []
        self.visit(page)
        return "".join(self._out)

    def visit_line(self, line: Line) -> None:
        if isinstance(line.kind, List):
            bullet = LIST_BULLETS.get(line.kind.kind)
            # Alphabet lists are reserved and get no prefix
            if bullet is not None:
                self._out.append(self.indent_unit * (line.kind.level - 1) + bullet)
        super().visit_line(line)
        self._out.append("\n")

    def visit_hashtag(self, node: HashTag) -> TransformCommand | None:
        self._out.append(f"[#{node.value}](#{node.value}.md)")
        return None

    def visit_internal_link(self, node: InternalLink) -> TransformCommand | None:
        # ".md" outside the parentheses is the established output format
        self._out.append(f"[{node.title}]({node.title}).md")
        return None

    def visit_external_link(self, node: ExternalLink) -> TransformCommand | None:
        if node.title is None:
            self._out.append(node.url)
        else:
            self._out.append(f"[{node.title}]({node.url})")
        return None

    def visit_emphasis(self, node: Emphasis) -> TransformCommand | None:
        text = node.text
        if node.bold > 0:
            text = f"**{text}**"
        if node.italic > 0:
            text = f"*{text}*"
        if node.strikethrough > 0:
            text = f"~~{text}~~"
        self._out.append(text)
        return None

    def visit_heading(self, node: Heading) -> TransformCommand | None:
        self._out.append(f"{'#' * node.level} {node.text}")
        return None

    def visit_block_quote(self, node: BlockQuote) -> TransformCommand | None:
        self._out.append(node.value)
        return None

    def visit_text(self, node: Text) -> TransformCommand | None:
        self._out.append(node.value)
        return None


def render_markdown(page: Page, indent_unit: str = "   ") -> str:
    return MarkdownRenderer(indent_unit=indent_unit).render(page)
