"""Markdown reports for customer calls and emails, with HTML-to-text conversion."""

__version__ = "1.0.0"
__all__ = ["html", "markdown", "naming", "summary", "terminal"]