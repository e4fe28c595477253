"""Rewrite passes applied to a parsed Page before rendering."""

from .headings import HeadingPromoter, PromoteOptions, heading_level

__all__ = [
    "HeadingPromoter",
    "PromoteOptions",
    "heading_level",
]
