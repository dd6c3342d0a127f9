import pytest

from article_mdx.errors import InvalidURLError
from article_mdx.utils import Deadline, absolute_url, is_http_url, slugify


@pytest.mark.parametrize(
    "value, request_url, expected",
    [
        ("http://www.kakao.com/talk/img/a.jpg", "http://www.kakao.com/talk", "http://www.kakao.com/talk/img/a.jpg"),
        ("/img/b.jpg", "http://www.kakao.com/talk", "http://www.kakao.com/img/b.jpg"),
        (
            "../../../images/top_logo.gif",
            "https://www.wto.org/english/tratop_e/envir_e/envir_req_e.htm",
            "https://www.wto.org/english/tratop_e/envir_e/../../../images/top_logo.gif",
        ),
        ("../img.png", "http://a.com/x/y.htm", "http://a.com/x/../img.png"),
        ("img.png", "http://a.com", "http://a.com/img.png"),
        ("//cdn.com/i.png", "https://a.com/p", "https://cdn.com/i.png"),
        ("/i.png", "http://a.com:8080/x/y", "http://a.com:8080/i.png"),
    ],
)
def test_absolute_url(value, request_url, expected):
    assert absolute_url(value, request_url) == expected


def test_absolute_url_is_idempotent_on_absolute_input():
    url = "https://cdn.example.com/a/b.jpg?w=200"
    once = absolute_url(url, "http://example.com/page")
    assert once == url
    assert absolute_url(once, "http://example.com/page") == url


@pytest.mark.parametrize(
    "value, request_url",
    [
        ("", "http://www.kakao.com"),
        ("   ", "http://www.kakao.com"),
        ("fhsjkdfhjsdf#$%^#&^", "http://www.kakao.com"),
        ("/a.jpg", "yirqywi8r4o"),
        ("a.jpg", "ftp://files.example.com/dir/"),
        ("/a\x00.jpg", "http://example.com"),
    ],
)
def test_absolute_url_failures(value, request_url):
    with pytest.raises(InvalidURLError):
        absolute_url(value, request_url)


def test_is_http_url():
    assert is_http_url("https://example.com")
    assert not is_http_url("mailto:someone@example.com")
    assert not is_http_url("http://example.com/%zz")


def test_deadline_expires():
    assert Deadline("step", 0).expired
    assert not Deadline("step", 60_000).expired


def test_slugify():
    assert slugify("Hello, World!") == "hello-world"
    assert slugify("***", fallback="site") == "site"


def test_absolute_url_rejects_non_http_request_url():
    with pytest.raises(InvalidURLError, match="not a valid http"):
        absolute_url("a.jpg", "mailto:someone@example.com")
