"""Conversion of HTML fragments (email bodies, call notes) to Markdown and plain text."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from html.parser import HTMLParser

__all__ = [
    "HTMLProcessingError",
    "HTMLProcessor",
    "html_to_text",
    "html_to_markdown",
]

DEFAULT_SKIP_TAGS = ("script", "style", "meta", "link")

_VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)
_BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "body", "dd", "div", "dl", "dt",
        "figure", "footer", "form", "header", "html", "li", "main", "nav",
        "p", "section", "table", "tbody", "thead", "tfoot", "tr",
    }
)
_HEADINGS = {f"h{level}": level for level in range(1, 7)}

_PRE_MARK = "\x00"
_INDENT_MARK = "\x01"
_WHITESPACE = re.compile(r"\s+")
_PRE_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")

_MARKDOWN_PATTERNS = [
    (re.compile(r"^#{1,6}\s+"), ""),
    (re.compile(r"\*{1,3}([^*]+)\*{1,3}"), r"\1"),
    (re.compile(r"_{1,3}([^_]+)_{1,3}"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"```[^`]*```"), ""),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"^>\s+"), ""),
    (re.compile(r"^[\*\-\+]\s+"), ""),
    (re.compile(r"^\d+\.\s+"), ""),
    (re.compile(r"^---+$|^___+$|^\*\*\*+$"), ""),
]

_SCRIPT_STYLE = re.compile(
    r"<script[^>]*>.*?</script>|<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL
)
_TAG = re.compile(r"<[^>]+>")


class HTMLProcessingError(Exception):
    """Raised when HTML content cannot be converted."""


@dataclass
class _Element:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[_Element | str] = field(default_factory=list)

    def text_content(self) -> str:
        return "".join(
            child if isinstance(child, str) else child.text_content()
            for child in self.children
        )


class _TreeBuilder(HTMLParser):
    """Builds a lenient element tree from an HTML document."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = _Element("#root")
        self._stack = [self.root]

    def handle_starttag(self, tag, attrs):
        element = _Element(tag, {name: value or "" for name, value in attrs})
        self._stack[-1].children.append(element)
        if tag not in _VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        element = _Element(tag, {name: value or "" for name, value in attrs})
        self._stack[-1].children.append(element)

    def handle_endtag(self, tag):
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data):
        cleaned = data.replace(_PRE_MARK, "").replace(_INDENT_MARK, "")
        if cleaned:
            self._stack[-1].children.append(cleaned)


def _tidy(text: str) -> str:
    text = re.sub(r"[ \t]*\n[ \t]*", "\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _wrap(inner: str, marker: str) -> str:
    content = inner.strip()
    if not content:
        return inner
    lead = " " if inner[:1].isspace() else ""
    trail = " " if inner[-1:].isspace() else ""
    return f"{lead}{marker}{content}{marker}{trail}"


class _MarkdownRenderer:
    """Renders an element tree as Markdown, dropping skipped tags entirely."""

    def __init__(self, skip_tags: Iterable[str]) -> None:
        self._skip = frozenset(tag.lower() for tag in skip_tags)
        self._pre_blocks: list[str] = []

    def convert(self, html: str) -> str:
        builder = _TreeBuilder()
        builder.feed(html)
        builder.close()
        self._pre_blocks = []
        markdown = _tidy(self._render(builder.root))
        markdown = markdown.replace(_INDENT_MARK, " ")
        return _PRE_PLACEHOLDER.sub(
            lambda match: self._pre_blocks[int(match.group(1))], markdown
        )

    def _children(self, element: _Element) -> str:
        return "".join(self._render(child) for child in element.children)

    def _render(self, node: _Element | str) -> str:
        if isinstance(node, str):
            return _WHITESPACE.sub(" ", node)
        tag = node.tag
        if tag in self._skip:
            return ""
        if tag == "pre":
            index = len(self._pre_blocks)
            self._pre_blocks.append(f"```\n{node.text_content().strip(chr(10))}\n```")
            return f"\n\n{_PRE_MARK}{index}{_PRE_MARK}\n\n"
        if tag in _HEADINGS:
            content = _tidy(self._children(node)).replace("\n", " ")
            return f"\n\n{'#' * _HEADINGS[tag]} {content}\n\n" if content else ""
        if tag in ("strong", "b"):
            return _wrap(self._children(node), "**")
        if tag in ("em", "i"):
            return _wrap(self._children(node), "*")
        if tag == "code":
            return _wrap(self._children(node), "`")
        if tag == "a":
            inner = self._children(node)
            href = node.attrs.get("href", "")
            label = inner.strip()
            return f"[{label}]({href})" if href and label else inner
        if tag == "img":
            src = node.attrs.get("src", "")
            alt = node.attrs.get("alt", "")
            return f"![{alt}]({src})" if src else alt
        if tag == "br":
            return "\n"
        if tag == "hr":
            return "\n\n---\n\n"
        if tag in ("ul", "ol"):
            return self._render_list(node, ordered=tag == "ol")
        if tag == "blockquote":
            content = _tidy(self._children(node))
            quoted = "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))
            return f"\n\n{quoted}\n\n" if content else ""
        if tag in ("td", "th"):
            return f" {self._children(node)} "
        if tag in _BLOCK_TAGS:
            return f"\n\n{self._children(node)}\n\n"
        return self._children(node)

    def _render_list(self, element: _Element, ordered: bool) -> str:
        items = []
        number = 0
        for child in element.children:
            if isinstance(child, str):
                continue
            if child.tag != "li":
                rendered = _tidy(self._render(child))
                if rendered:
                    items.append(rendered)
                continue
            number += 1
            prefix = f"{number}. " if ordered else "* "
            content = _tidy(self._children(child))
            indent = _INDENT_MARK * len(prefix)
            lines = content.split("\n")
            body = "\n".join([lines[0], *(indent + line if line else line for line in lines[1:])])
            items.append(prefix + body)
        return "\n\n" + "\n".join(items) + "\n\n" if items else ""


def _markdown_to_text(markdown: str) -> str:
    text = markdown
    for pattern, replacement in _MARKDOWN_PATTERNS:
        text = pattern.sub(replacement, text)
    return _WHITESPACE.sub(" ", text).strip()


def _regex_html_to_text(html: str) -> str:
    text = _SCRIPT_STYLE.sub("", html)
    text = _TAG.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


class HTMLProcessor:
    """Converts HTML to Markdown or to plain text."""

    def __init__(self) -> None:
        self.skip_tags = DEFAULT_SKIP_TAGS

    def process_content(self, html):
        """Convert HTML content to clean plain text."""
        return self.to_text(html)

    def to_markdown(self, html):
        """Convert HTML to trimmed Markdown, dropping non-content tags."""
        try:
            return _MarkdownRenderer(self.skip_tags).convert(html).strip()
        except Exception as exc:
            try:
                return _MarkdownRenderer(()).convert(html).strip()
            except Exception:
                raise HTMLProcessingError(f"HTML processing failed: {exc}") from exc

    def to_text(self, html):
        """Convert HTML to plain text with collapsed whitespace."""
        if not html or not html.strip():
            return ""
        try:
            markdown = self.to_markdown(html)
        except HTMLProcessingError:
            return _regex_html_to_text(html)
        return _markdown_to_text(markdown)

    def process_with_config(self, html, skip_tags):
        """Convert HTML to Markdown, skipping exactly the given tags."""
        try:
            return _MarkdownRenderer(skip_tags).convert(html).strip()
        except Exception as exc:
            raise HTMLProcessingError(f"Custom HTML processing failed: {exc}") from exc


def html_to_text(html):
    """Convert HTML to plain text."""
    return HTMLProcessor().to_text(html)


def html_to_markdown(html):
    """Convert HTML to Markdown."""
    return HTMLProcessor().to_markdown(html)