"""Command-line entry point for article extraction."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from .config import ExtractionOptions, FetchConfig
from .errors import ExtractionError
from .extractor import ContentExtractor
from .fetching import make_fetcher
from .markdown import compose_markdown
from .metadata import read_open_graph
from .models import Content
from .utils import slugify

logger = logging.getLogger("article_mdx.cli")

DEFAULTS = ExtractionOptions()


def _add_option_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--retry-length",
        type=int,
        default=DEFAULTS.retry_length,
        help="Relax pruning and retry while the description is shorter than this",
    )
    parser.add_argument(
        "--min-text-length",
        type=int,
        default=DEFAULTS.min_text_length,
        help="Minimum text length for a paragraph to count towards a candidate",
    )
    parser.add_argument(
        "--min-image-width",
        type=int,
        default=DEFAULTS.min_image_width,
        help="Minimum image width in pixels",
    )
    parser.add_argument(
        "--min-image-height",
        type=int,
        default=DEFAULTS.min_image_height,
        help="Minimum image height in pixels",
    )
    parser.add_argument(
        "--max-images",
        type=int,
        default=DEFAULTS.max_image_count,
        help="Maximum number of images to return",
    )
    parser.add_argument(
        "--check-images",
        type=int,
        default=DEFAULTS.check_image_loop_count,
        help="Maximum number of images probed over the network",
    )
    parser.add_argument(
        "--image-timeout",
        type=int,
        default=DEFAULTS.image_request_timeout,
        help="Image probe timeout in milliseconds",
    )
    parser.add_argument(
        "--description-timeout",
        type=int,
        default=DEFAULTS.description_extraction_timeout,
        help="Budget in milliseconds for each pruning and scoring step",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Keep the description as minimal HTML instead of plain text",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract the title, article text, author and lead images of web pages.",
    )
    parser.add_argument("urls", nargs="+", help="One or more URLs to extract")
    parser.add_argument(
        "--format",
        choices=("json", "markdown", "text"),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write one file per URL into this directory instead of STDOUT",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Page fetch timeout in seconds",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Render pages with Playwright before extraction",
    )
    parser.add_argument(
        "--open-graph",
        action="store_true",
        help="Include Open Graph values in JSON output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    _add_option_arguments(parser)
    return parser.parse_args(list(sys.argv[1:] if argv is None else argv))


def build_options(args: argparse.Namespace) -> ExtractionOptions:
    return ExtractionOptions(
        retry_length=args.retry_length,
        min_text_length=args.min_text_length,
        min_image_width=args.min_image_width,
        min_image_height=args.min_image_height,
        max_image_count=args.max_images,
        check_image_loop_count=args.check_images,
        image_request_timeout=args.image_timeout,
        description_as_plain_text=not args.html,
        description_extraction_timeout=args.description_timeout,
    )


def render_output(
    content: Content,
    url: str,
    output_format: str,
    open_graph: Optional[dict] = None,
) -> str:
    if output_format == "markdown":
        return compose_markdown(content, url)
    if output_format == "text":
        return content.description + "\n"
    payload = {"url": url, **content.to_dict()}
    if open_graph is not None:
        payload["open_graph"] = open_graph
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def build_output_path(output_root: Path, url: str, content: Content, output_format: str) -> Path:
    """Create a file path based on the page's domain and title."""
    parsed = urlparse(url)
    domain = slugify(parsed.netloc or "site", fallback="site")
    title_slug = slugify(content.title or parsed.path or "page")
    suffix = {"json": ".json", "markdown": ".md", "text": ".txt"}[output_format]
    output_dir = output_root / domain
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / (title_slug[:80] + suffix)


def run(args: argparse.Namespace) -> int:
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    fetch_config = FetchConfig(timeout=args.timeout, render=args.render)
    fetcher = make_fetcher(fetch_config)
    extractor = ContentExtractor(build_options(args), logger=logging.getLogger("article_mdx"))

    overall_start = time.perf_counter()
    failures: List[str] = []
    for url in args.urls:
        try:
            document = fetcher(url)
            content = extractor.extract_from_document(document, url)
        except ExtractionError as exc:
            logger.error("%s", exc)
            failures.append(url)
            continue

        open_graph = None
        if args.open_graph:
            open_graph = vars(read_open_graph(document, url))
        rendered = render_output(content, url, args.format, open_graph)

        if args.output:
            path = build_output_path(args.output.resolve(), url, content, args.format)
            path.write_text(rendered, encoding="utf-8")
            logger.info("Saved %s to %s", url, path)
        else:
            sys.stdout.write(rendered)
    sys.stdout.flush()

    total_urls = len(args.urls)
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        time.perf_counter() - overall_start,
        total_urls - len(failures),
        total_urls,
        len(failures),
    )
    return 1 if failures else 0


def main(argv: Sequence[str] | None = None) -> None:
    sys.exit(run(parse_args(argv)))


if __name__ == "__main__":
    main()
