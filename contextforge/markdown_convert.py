"""Convert an HTML document into Markdown text."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import Comment, Doctype, NavigableString, ProcessingInstruction, Tag

_SKIP_TAGS = frozenset({"head", "title", "script", "style", "noscript", "template", "meta", "link"})
_BLOCK_TAGS = frozenset(
    {
        "p", "div", "section", "article", "main", "body", "html", "figure",
        "figcaption", "table", "thead", "tbody", "tr", "dl", "dt", "dd", "details", "summary",
    }
)
_HEADINGS = {f"h{level}": level for level in range(1, 7)}
_WHITESPACE = re.compile(r"\s+")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")


def _block(text: str) -> str:
    text = text.strip()
    return f"\n\n{text}\n\n" if text else ""


def _wrap(marker: str, text: str) -> str:
    stripped = text.strip()
    return f"{marker}{stripped}{marker}" if stripped else text


def _children(tag: Tag) -> str:
    return "".join(_convert(child) for child in tag.children)


def _list(tag: Tag, ordered: bool) -> str:
    items = []
    number = 1
    for child in tag.children:
        if not isinstance(child, Tag) or child.name != "li":
            continue
        prefix = f"{number}. " if ordered else "- "
        number += 1
        body = _EXTRA_NEWLINES.sub("\n\n", _children(child)).strip()
        lines = body.splitlines() or [""]
        indent = " " * len(prefix)
        rest = [indent + line if line.strip() else "" for line in lines[1:]]
        items.append("\n".join([prefix + lines[0], *rest]))
    return _block("\n".join(items))


def _convert(node) -> str:
    if isinstance(node, (Comment, Doctype, ProcessingInstruction)):
        return ""
    if isinstance(node, NavigableString):
        return _WHITESPACE.sub(" ", str(node))
    if not isinstance(node, Tag):
        return ""
    name = node.name
    if name in _SKIP_TAGS:
        return ""
    if name in _HEADINGS:
        text = _WHITESPACE.sub(" ", _children(node)).strip()
        return _block("#" * _HEADINGS[name] + " " + text) if text else ""
    if name == "br":
        return "\n"
    if name == "hr":
        return "\n\n* * *\n\n"
    if name in ("strong", "b"):
        return _wrap("**", _children(node))
    if name in ("em", "i"):
        return _wrap("*", _children(node))
    if name == "code":
        return f"`{node.get_text()}`"
    if name == "pre":
        return f"\n\n```\n{node.get_text().strip(chr(10))}\n```\n\n"
    if name == "a":
        text = _children(node).strip()
        href = node.get("href")
        return f"[{text}]({href})" if href else text
    if name == "img":
        src = node.get("src")
        return f"![{node.get('alt', '')}]({src})" if src else ""
    if name in ("ul", "ol"):
        return _list(node, ordered=name == "ol")
    if name == "blockquote":
        inner = _EXTRA_NEWLINES.sub("\n\n", _children(node)).strip()
        quoted = "\n".join(f"> {line}" if line else ">" for line in inner.splitlines())
        return _block(quoted)
    if name in _BLOCK_TAGS or name == "li":
        return _block(_children(node))
    return _children(node)


def html_to_markdown(html: str) -> str:
    """Return the Markdown rendering of ``html``."""
    soup = BeautifulSoup(html, "html.parser")
    text = _convert(soup.body) if soup.body is not None else _children(soup)
    lines = [line.rstrip() for line in text.splitlines()]
    return _EXTRA_NEWLINES.sub("\n\n", "\n".join(lines)).strip()