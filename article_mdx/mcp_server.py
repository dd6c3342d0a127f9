"""MCP server exposing article extraction as a tool."""

from __future__ import annotations

import asyncio
import logging

from mcp.server.fastmcp import FastMCP

from .errors import ExtractionError
from .extractor import ContentExtractor
from .markdown import compose_markdown

logger = logging.getLogger("article_mdx.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="article-mdx")


def _extract_once(url: str) -> str:
    extractor = ContentExtractor(logger=logger)
    try:
        content = extractor.extract(url)
    except ExtractionError as exc:
        raise RuntimeError(f"Failed to extract {url}: {exc}") from exc
    return compose_markdown(content, url)


@mcp.tool()
async def extract(url: str) -> str:
    """Fetch a web page and return its article text, author and images as Markdown."""
    return await asyncio.to_thread(_extract_once, url)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
