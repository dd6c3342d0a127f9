"""Title, author and Open Graph lookups."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from .errors import InvalidURLError
from .models import OpenGraph
from .utils import absolute_url

logger = logging.getLogger("article_mdx")

AUTHOR_META_NAMES = ("dc.creator", "author")
OPEN_GRAPH_KEYS = ("og:title", "og:description", "og:image")


def read_title(document: BeautifulSoup) -> str:
    title = document.find("title")
    if title is None:
        return ""
    return title.get_text().strip()


def read_author(document: BeautifulSoup) -> str:
    """Return the first author found, most explicit declaration first."""
    for name in AUTHOR_META_NAMES:
        for meta in document.find_all("meta", attrs={"name": name}):
            content = (meta.get("content") or "").strip()
            if content:
                return content

    # <span class="author"><span class="faded">By</span> Rhett Bollinger</span>
    for span in document.select("span.author"):
        text = span.get_text().strip()
        if text:
            return text

    for anchor in document.find_all("a"):
        if anchor.get("rel") and "author" in anchor.get("rel"):
            return anchor.get_text().strip()
    return ""


def read_open_graph(document: BeautifulSoup, request_url: str) -> OpenGraph:
    """Collect og:title, og:description and og:image from meta tags."""
    og = OpenGraph()
    for meta in document.find_all("meta"):
        key = meta.get("property") or meta.get("name") or meta.get("itemprop")
        value = meta.get("content")
        if key not in OPEN_GRAPH_KEYS or value is None:
            continue
        if key == "og:title":
            og.title = value
        elif key == "og:description":
            og.description = value
        else:
            try:
                og.image_url = absolute_url(value, request_url)
            except InvalidURLError as exc:
                logger.debug("Ignoring og:image %r: %s", value, exc)
    logger.debug("OpenGraph: %s", og)
    return og
