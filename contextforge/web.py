"""Fetch a web page, strip clutter, save images and write it as Markdown."""

from __future__ import annotations

import os
import re
import uuid
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag

from contextforge.markdown_convert import html_to_markdown

IGNORE_HTML_TAGS = frozenset(
    {"script", "style", "noscript", "header", "footer", "aside", "nav", "form", "iframe"}
)

IGNORE_ATTRIBUTES = re.compile(
    r"comment|meta|footnote|masthead|related|shoutbox|sponsor|ad-break|agegate|pagination"
    r"|pager|popup|tweet|twitter|social|nav|menu|authors|newsletter",
    re.IGNORECASE,
)

_DEFAULT_IMAGE_EXT = ".jpg"


class WebError(Exception):
    """Raised when a page cannot be fetched, converted or saved."""


def _attr_text(value) -> str:
    return " ".join(value) if isinstance(value, (list, tuple)) else str(value)


def _is_clutter(tag: Tag) -> bool:
    if tag.name in IGNORE_HTML_TAGS:
        return True
    return any(
        key in tag.attrs and IGNORE_ATTRIBUTES.search(_attr_text(tag.attrs[key]))
        for key in ("id", "class")
    )


def clean_html(node: Tag) -> None:
    """Remove navigation, scripts and other clutter below ``node`` in place."""
    for child in list(node.children):
        if not isinstance(child, Tag):
            continue
        if _is_clutter(child):
            child.decompose()
        else:
            clean_html(child)


def find_title(node: Tag) -> str:
    """Return the first non-empty ``<title>`` text, or ``""``."""
    for title in node.find_all("title"):
        first = next(iter(title.children), None)
        if first is not None:
            text = str(first).strip()
            if text:
                return text
    return ""


def _extension(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def download_image(img_url: str, local_path: str | os.PathLike[str]) -> None:
    """Save the image at ``img_url`` to ``local_path``."""
    with requests.get(img_url, stream=True) as response:
        if response.status_code != 200:
            raise WebError(f"bad status: {response.status_code} {response.reason}")
        with open(local_path, "wb") as out:
            for chunk in response.iter_content(chunk_size=65536):
                out.write(chunk)


def process_images(soup: Tag, base_url: str, images_dir: str | os.PathLike[str]) -> None:
    """Download every ``<img>`` and point its ``src`` at the local copy.

    Images that cannot be fetched keep their original source.
    """
    for img in soup.find_all("img"):
        src = img.get("src")
        if src is None:
            continue
        try:
            img_url = urljoin(base_url, src)
            ext = _extension(urlsplit(img_url).path) or _DEFAULT_IMAGE_EXT
        except ValueError:
            continue
        filename = f"{uuid.uuid4()}{ext}"
        try:
            download_image(img_url, os.path.join(images_dir, filename))
        except (requests.RequestException, WebError, OSError):
            continue
        img["src"] = f"images/{filename}"


def process_web_content(url_str: str, output_path: str | os.PathLike[str]) -> None:
    """Write the Markdown version of the page at ``url_str`` to ``output_path``.

    Images are stored in an ``images`` directory beside the output file.
    """
    try:
        host = urlsplit(url_str).netloc
    except ValueError as exc:
        raise WebError(f"failed to parse URL: {exc}") from exc
    try:
        response = requests.get(url_str)
        content = response.content
    except requests.RequestException as exc:
        raise WebError(f"failed to fetch URL: {exc}") from exc
    soup = BeautifulSoup(content, "html.parser")
    clean_html(soup)
    images_dir = os.path.join(os.path.dirname(os.fspath(output_path)), "images")
    if os.path.isdir(images_dir):
        process_images(soup, url_str, images_dir)
    markdown = html_to_markdown(str(soup))
    title = find_title(soup) or host
    final = f"# Webpage Context: {title}\n\nSource: {url_str}\n\n{markdown}"
    try:
        with open(output_path, "w", encoding="utf-8") as out:
            out.write(final)
    except OSError as exc:
        raise WebError(f"failed to write output file: {exc}") from exc