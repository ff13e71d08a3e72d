"""Compile Flint document bodies into HTML fragments."""

from .preprocessor import (
    RawBlockTable,
    protect,
    render_hypermedia_link,
    restore,
    sub_outside_code,
)
from .renderer import HtmlContentRenderer, RawBlockExtension

__all__ = [
    "HtmlContentRenderer",
    "RawBlockExtension",
    "RawBlockTable",
    "protect",
    "render_hypermedia_link",
    "restore",
    "sub_outside_code",
]
