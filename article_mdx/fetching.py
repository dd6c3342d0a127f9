"""Fetch pages over HTTP and parse them into documents."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import requests
from bs4 import BeautifulSoup

from .config import FetchConfig
from .errors import FetchError

logger = logging.getLogger("article_mdx")

# Takes a URL and returns the parsed document, raising FetchError on failure.
DocumentFetcher = Callable[[str], BeautifulSoup]

PARSER = "html.parser"


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, PARSER)


def fetch_document(
    url: str,
    config: Optional[FetchConfig] = None,
    session: Optional[requests.Session] = None,
) -> BeautifulSoup:
    """Download ``url`` and parse the response body."""
    config = config or FetchConfig()
    session = session or requests.Session()
    logger.info("Loading %s", url)
    try:
        resp = session.get(
            url,
            headers={"User-Agent": config.user_agent},
            timeout=config.timeout,
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc

    content_type = resp.headers.get("Content-Type", "")
    if content_type and "html" not in content_type.lower():
        raise FetchError(url, f"unsupported content type {content_type}")
    return parse_document(resp.text)


def make_fetcher(config: Optional[FetchConfig] = None) -> DocumentFetcher:
    """Build the fetcher matching ``config``, rendering with a browser if asked."""
    config = config or FetchConfig()
    if config.render:
        from .render import render_document

        return lambda url: render_document(url, config)

    session = requests.Session()
    return lambda url: fetch_document(url, config, session)
