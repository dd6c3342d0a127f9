import json
import logging

import pytest
from bs4 import BeautifulSoup

from article_mdx import cli
from article_mdx.errors import FetchError

PAGE = (
    "<html><head><title>Harbour Festival Returns</title>"
    '<meta property="og:title" content="Harbour Festival">'
    '<meta name="author" content="Sam Lee"></head><body>'
    '<div class="entry"><p>'
    + "Boats from every village along the coast crowded the harbour on Saturday. " * 5
    + "</p></div></body></html>"
)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fake_fetcher(monkeypatch):
    def fetcher(url):
        if "broken" in url:
            raise FetchError(url, "404 Not Found")
        return BeautifulSoup(PAGE, "html.parser")

    monkeypatch.setattr(cli, "make_fetcher", lambda config: fetcher)
    return fetcher


def test_json_output(fake_fetcher, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["http://example.com/festival", "--open-graph"])
    assert excinfo.value.code == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["url"] == "http://example.com/festival"
    assert payload["title"] == "Harbour Festival Returns"
    assert payload["author"] == "Sam Lee"
    assert payload["description"].startswith("Boats from every village")
    assert payload["images"] == []
    assert payload["open_graph"]["title"] == "Harbour Festival"


def test_failed_url_sets_exit_code(fake_fetcher, capsys):
    code = cli.run(cli.parse_args(["http://example.com/broken", "--format", "text"]))
    assert code == 1
    assert capsys.readouterr().out == ""


def test_markdown_files_written_to_output_dir(fake_fetcher, tmp_path):
    code = cli.run(
        cli.parse_args(["http://example.com/festival", "--format", "markdown", "--output", str(tmp_path)])
    )
    assert code == 0

    path = tmp_path / "example-com" / "harbour-festival-returns.md"
    text = path.read_text(encoding="utf-8")
    assert text.startswith("---\ntitle: Harbour Festival Returns\n")
    assert "# Harbour Festival Returns" in text


def test_build_options_maps_flags():
    args = cli.parse_args(["http://example.com", "--max-images", "5", "--html", "--retry-length", "100"])
    options = cli.build_options(args)
    assert options.max_image_count == 5
    assert options.retry_length == 100
    assert not options.description_as_plain_text
