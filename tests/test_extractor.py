from dataclasses import replace

import pytest
import requests

from article_mdx.errors import FetchError
from article_mdx.extractor import ContentExtractor, PassState, extract_from_document
from article_mdx.fetching import fetch_document

ARTICLE_PARAGRAPHS = [
    "The city council approved the new transit plan on Monday, ending months of "
    "debate over bus routes, bike lanes and the future of the downtown corridor.",
    "Supporters said the plan would cut commute times for thousands of residents "
    "while critics warned that the budget estimates were far too optimistic.",
    "Construction on the first phase is expected to begin next spring and will "
    "take roughly two years to complete according to the transportation office.",
]


def _article_page(extra: str = "") -> str:
    paragraphs = "".join(f"<p>{text}</p>" for text in ARTICLE_PARAGRAPHS)
    return (
        "<html><head><title> Transit Plan Approved </title>"
        '<meta name="author" content="Jane Roe">'
        "<script>var tracking = true;</script></head><body>"
        '<div class="sidebar ad"><a href="/promo">Sidebar link text</a></div>'
        f'<div class="article-body">{paragraphs}</div>'
        f"{extra}</body></html>"
    )


class NoNetworkProbe:
    def __call__(self, url, timeout):
        raise AssertionError(f"unexpected probe for {url}")


def test_selects_article_body_and_drops_sidebar(make_soup, options):
    soup = make_soup(_article_page())
    content = ContentExtractor(options, probe=NoNetworkProbe()).extract_from_document(
        soup, "http://news.example.com/transit"
    )

    assert content.title == "Transit Plan Approved"
    assert content.author == "Jane Roe"
    assert ARTICLE_PARAGRAPHS[0] in content.description
    assert ARTICLE_PARAGRAPHS[2] in content.description
    assert "Sidebar link text" not in content.description
    assert "tracking" not in content.description
    assert "\n" not in content.description
    assert content.images == []


def test_caller_document_is_not_modified(make_soup, options):
    soup = make_soup(_article_page())
    before = str(soup)
    extract_from_document(soup, "http://news.example.com/transit", options)
    assert str(soup) == before


def test_first_pass_is_accepted_when_long_enough(make_soup, options):
    result = ContentExtractor(options).extract_description(make_soup(_article_page()))

    assert result.final_pass is PassState.FIRST_PASS
    assert result.attempts == [options]
    assert len(result.text) >= options.retry_length


def test_short_text_relaxes_every_option_then_stops(make_soup, options):
    soup = make_soup("<html><body><div><p>A short paragraph that still counts.</p></div></body></html>")
    result = ContentExtractor(options).extract_description(soup)

    assert 2 <= len(result.attempts) <= 4
    assert len(set(result.attempts)) == len(result.attempts)
    assert result.final_pass is PassState.RELAX_CONDITIONAL
    assert not result.attempts[-1].clean_conditionally
    assert result.text == "A short paragraph that still counts."


def test_relaxation_recovers_overpruned_content(make_soup, options):
    paragraphs = "".join(f"<p>{text}</p>" for text in ARTICLE_PARAGRAPHS)
    soup = make_soup(
        "<html><head><title>Comments</title></head><body>"
        f'<div class="comment-area">{paragraphs}</div>'
        "</body></html>"
    )
    result = ContentExtractor(options).extract_description(soup)

    assert result.attempts[0].remove_unlikely_candidates
    assert not result.attempts[1].remove_unlikely_candidates
    assert result.final_pass is PassState.RELAX_WEIGHT
    assert len(result.attempts) == 3
    assert ARTICLE_PARAGRAPHS[1] in result.text


def test_document_without_candidates_has_empty_description(make_soup, options):
    soup = make_soup("<html><body><div>tiny</div></body></html>")
    content = ContentExtractor(options, probe=NoNetworkProbe()).extract_from_document(
        soup, "http://example.com/"
    )
    assert content.description == ""


def test_timeout_degrades_to_empty_description(make_soup, options):
    soup = make_soup(_article_page())
    extractor = ContentExtractor(replace(options, description_extraction_timeout=0))

    result = extractor.extract_description(soup)
    assert result.timed_out
    assert result.text == ""
    assert len(result.attempts) == 1

    content = extractor.extract_from_document(soup, "http://news.example.com/transit")
    assert content.description == ""
    assert content.title == "Transit Plan Approved"


def test_html_description(make_soup, options):
    soup = make_soup(_article_page())
    result = ContentExtractor(replace(options, description_as_plain_text=False)).extract_description(soup)
    assert result.text.startswith("<div>")
    assert "<p>" in result.text


def test_images_read_original_document(make_soup, options):
    # the sidebar is pruned for the description but its image is still seen
    soup = make_soup(
        _article_page('<div class="sidebar"><img src="/promo.jpg" width="600" height="400"></div>')
    )
    content = ContentExtractor(options, probe=NoNetworkProbe()).extract_from_document(
        soup, "http://news.example.com/transit"
    )
    assert [image.url for image in content.images] == ["http://news.example.com/promo.jpg"]


def test_extract_uses_fetcher(make_soup, options):
    extractor = ContentExtractor(
        options,
        probe=NoNetworkProbe(),
        fetcher=lambda url: make_soup(_article_page()),
    )
    content = extractor.extract("http://news.example.com/transit")
    assert content.title == "Transit Plan Approved"


def test_extract_propagates_fetch_errors(options):
    def failing(url):
        raise FetchError(url, "connection refused")

    with pytest.raises(FetchError):
        ContentExtractor(options, fetcher=failing).extract("http://down.example.com/")


class FailingSession:
    def get(self, *args, **kwargs):
        raise requests.ConnectionError("connection refused")


def test_fetch_document_wraps_request_errors():
    with pytest.raises(FetchError) as excinfo:
        fetch_document("http://down.example.com/", session=FailingSession())
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_fragment_without_body_is_scored(make_soup, options):
    soup = make_soup("".join(f"<p>{text}</p>" for text in ARTICLE_PARAGRAPHS))
    result = ContentExtractor(options).extract_description(soup)

    assert result.final_pass is PassState.FIRST_PASS
    assert ARTICLE_PARAGRAPHS[0] in result.text
    assert soup.body is None
