import pytest
from bs4 import BeautifulSoup

from article_mdx.config import ExtractionOptions

LOREM = (
    "The committee met on Tuesday to review the proposal, which had been "
    "circulating among members for several weeks before the formal vote. "
)


@pytest.fixture
def make_soup():
    def _make(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _make


@pytest.fixture
def options():
    return ExtractionOptions()


@pytest.fixture
def prose():
    """Return ``count`` sentences of article-like prose."""

    def _prose(count: int = 2) -> str:
        return (LOREM * count).strip()

    return _prose
