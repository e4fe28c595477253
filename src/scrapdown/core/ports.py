from typing import Protocol
from .model import Page


class ParserStrategy(Protocol):
    """
    Turn a whole document into a Page. MUST be total: malformed spans
    degrade to Text instead of raising.
    """

    def parse(self, text: str) -> Page:
        pass


class TransformPass(Protocol):
    """
    Rewrite nodes of a Page in place. Lines are never added, removed or
    reordered.
    """

    def visit(self, page: Page) -> None:
        pass


class Renderer(Protocol):
    def render(self, page: Page) -> str:
        pass
