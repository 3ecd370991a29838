"""Convert Aozora Bunko style annotated text to plain text or HTML."""

from aozorize.parser import Document, RubyBasePolicy, parse
from aozorize.renderer import HTMLOptions, HTMLRenderer, render_html, render_plain

__all__ = [
    "Document",
    "HTMLOptions",
    "HTMLRenderer",
    "RubyBasePolicy",
    "parse",
    "render_html",
    "render_plain",
]
