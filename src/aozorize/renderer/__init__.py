"""Renderer package."""

from .html_renderer import HTMLOptions, HTMLRenderer, render_html
from .plain_renderer import render_plain

__all__ = ["HTMLOptions", "HTMLRenderer", "render_html", "render_plain"]
