"""Render JavaScript-heavy pages with Playwright before extraction."""

from __future__ import annotations

import asyncio
import logging
from typing import Tuple

from bs4 import BeautifulSoup
from playwright.async_api import (
    Error as PlaywrightError,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import FetchConfig
from .errors import FetchError
from .fetching import parse_document

logger = logging.getLogger("article_mdx")


async def render_page(
    playwright: Playwright,
    url: str,
    config: FetchConfig,
) -> Tuple[str, str]:
    """Navigate to a URL using Playwright and return the HTML and final URL."""
    browser = await playwright.chromium.launch(headless=True)
    page = await browser.new_page(user_agent=config.user_agent)
    page.set_default_navigation_timeout(config.navigation_timeout * 1000)
    try:
        logger.info("Rendering %s", url)
        await page.goto(url, wait_until="networkidle")
        if config.wait_after_load:
            await page.wait_for_timeout(int(config.wait_after_load * 1000))
        html = await page.content()
        final_url = page.url
    finally:
        await browser.close()
    return html, final_url


async def _render(url: str, config: FetchConfig) -> str:
    async with async_playwright() as playwright:
        html, final_url = await render_page(playwright, url, config)
    if final_url != url:
        logger.debug("Rendered %s as %s", url, final_url)
    return html


def render_document(url: str, config: FetchConfig) -> BeautifulSoup:
    """Blocking wrapper around :func:`render_page`."""
    try:
        html = asyncio.run(_render(url, config))
    except PlaywrightTimeoutError as exc:
        raise FetchError(url, f"timeout while rendering: {exc}") from exc
    except PlaywrightError as exc:
        raise FetchError(url, str(exc)) from exc
    return parse_document(html)
