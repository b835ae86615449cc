"""Utility helpers for mustachio."""

from mustachio.utils.html import html_escape, javascript_escape, url_escape

__all__ = ["html_escape", "javascript_escape", "url_escape"]
