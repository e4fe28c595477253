"""Runtime wiring helper for CLI and API entry points."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .adapters.scrapbox_parser import ScrapboxParser
from .config import ScrapdownConfig, load_config, validate_config
from .core.model import Page
from .export.markdown import MarkdownRenderer
from .transform.headings import HeadingPromoter, PromoteOptions

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Container for all wired components."""
    parser: ScrapboxParser
    config: ScrapdownConfig

    def parse(self, text: str) -> Page:
        return self.parser.parse(text)

    def transform(self, page: Page) -> int:
        """Run the configured passes over ``page`` in place; return the number of promotions."""
        promoter = HeadingPromoter(
            PromoteOptions(
                ceiling=self.config.transform.ceiling,
                promote_single=self.config.transform.promote_single,
            )
        )
        promoter.visit(page)
        return promoter.promoted

    def render(self, page: Page) -> str:
        return MarkdownRenderer(indent_unit=self.config.render.indent_unit).render(page)

    def convert(self, text: str) -> str:
        """Parse, transform and render one document."""
        page = self.parse(text)
        promoted = self.transform(page)
        logger.debug("Parsed %d lines, promoted %d headings", len(page.lines), promoted)
        return self.render(page)

    def convert_file(self, src: Path, dest: Path) -> None:
        """Convert the UTF-8 document at ``src`` and write the Markdown to ``dest``."""
        markdown = self.convert(src.read_text(encoding="utf-8"))
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(markdown, encoding="utf-8")
        logger.info("Converted %s -> %s", src, dest)


def build_runtime(
    config_path: Path | None = None,
    input_path: Path | None = None,
    ceiling: int | None = None,
    promote_single: bool | None = None,
    indent_unit: str | None = None,
) -> Runtime:
    """Build a runtime from config file values, overridden by explicit arguments."""
    config = load_config(config_path=config_path, input_path=input_path)

    # Use CLI values where given
    if ceiling is not None:
        config.transform.ceiling = ceiling
    if promote_single is not None:
        config.transform.promote_single = promote_single
    if indent_unit is not None:
        config.render.indent_unit = indent_unit
    validate_config(config)

    return Runtime(parser=ScrapboxParser(), config=config)
