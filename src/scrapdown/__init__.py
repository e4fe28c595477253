"""scrapdown - convert Scrapbox-style wiki notes to Markdown."""

__version__ = "0.1.0"
