"""Promote bold decorations to Markdown headings."""

from dataclasses import dataclass

from ..core.model import Bracket, Emphasis, Heading
from ..core.ports import TransformPass
from ..core.visitor import Replace, TransformCommand, Visitor


@dataclass
class PromoteOptions:
    """Options for heading promotion."""

    # Deepest heading level a decoration may become
    ceiling: int = 3
    # Promote a single "*" to a level-`ceiling` heading
    promote_single: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.ceiling <= 255:
            raise ValueError(f"ceiling must be in 0..255, got {self.ceiling}")


def heading_level(bold: int, options: PromoteOptions) -> int | None:
    """Heading level for a decoration with ``bold`` markers, or None to keep it inline.

    More markers mean a bigger heading: with the default ceiling of 3,
    ``[** x]`` becomes ``##`` and ``[*** x]`` becomes ``#``. Counts that
    would go past level 1 are left alone.
    """
    level = max(options.ceiling + 1 - bold, 0)
    if level == 0 or level > options.ceiling:
        return None
    if not options.promote_single and bold <= 1:
        return None
    return level


class HeadingPromoter(Visitor, TransformPass):
    def __init__(self, options: PromoteOptions | None = None):
        self.options = options or PromoteOptions()
        self.promoted = 0

    def visit_emphasis(self, node: Emphasis) -> TransformCommand | None:
        level = heading_level(node.bold, self.options)
        if level is None:
            return None
        self.promoted += 1
        # italic and strikethrough do not survive promotion
        return Replace(Bracket(Heading(text=node.text, level=level)))
