"""High-level orchestration: description passes, retries and images."""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from bs4 import BeautifulSoup

from .config import ExtractionOptions
from .content import assemble_article, sanitize, to_plain_text
from .errors import EmptyCandidates, ExtractionTimeout
from .fetching import DocumentFetcher, make_fetcher
from .images import ImageProbe, select_images
from .metadata import read_author, read_title
from .models import Content, Image
from .pruning import prepare_candidates

MAX_PASSES = 4


class PassState(Enum):
    FIRST_PASS = "first_pass"
    RELAX_UNLIKELY = "relax_unlikely"
    RELAX_WEIGHT = "relax_weight"
    RELAX_CONDITIONAL = "relax_conditional"
    ACCEPTED = "accepted"


def _state_for(options: ExtractionOptions, base: ExtractionOptions) -> PassState:
    """Name the relaxation step that produced ``options`` from ``base``."""
    if options == base:
        return PassState.FIRST_PASS
    if base.clean_conditionally and not options.clean_conditionally:
        return PassState.RELAX_CONDITIONAL
    if base.weight_classes and not options.weight_classes:
        return PassState.RELAX_WEIGHT
    return PassState.RELAX_UNLIKELY


@dataclass
class DescriptionResult:
    """Outcome of the retry loop."""

    text: str
    # Pass that produced the accepted text.
    final_pass: PassState
    attempts: List[ExtractionOptions] = field(default_factory=list)
    timed_out: bool = False


class ContentExtractor:
    """Extract title, description, author and images from HTML documents."""

    def __init__(
        self,
        options: Optional[ExtractionOptions] = None,
        *,
        logger: Optional[logging.Logger] = None,
        probe: Optional[ImageProbe] = None,
        fetcher: Optional[DocumentFetcher] = None,
    ) -> None:
        self.options = options or ExtractionOptions()
        self.logger = logger or logging.getLogger("article_mdx")
        self.probe = probe
        self._fetcher = fetcher

    @property
    def fetcher(self) -> DocumentFetcher:
        if self._fetcher is None:
            self._fetcher = make_fetcher()
        return self._fetcher

    def extract(self, request_url: str) -> Content:
        """Fetch ``request_url`` and extract its content.

        Raises:
            FetchError: if the page cannot be fetched or parsed.
        """
        document = self.fetcher(request_url)
        return self.extract_from_document(document, request_url)

    def extract_from_document(self, document: BeautifulSoup, request_url: str) -> Content:
        """Extract content from an already parsed document.

        ``request_url`` is used to resolve relative image paths. The caller's
        document is never modified.
        """
        start = time.perf_counter()
        description = self.extract_description(document)
        content = Content(
            title=read_title(document),
            description=description.text,
            author=read_author(document),
            images=self.select_images(document, request_url),
        )
        self.logger.debug(
            "Extracted %s in %.2fs (%d description chars, %d image(s))",
            request_url,
            time.perf_counter() - start,
            len(content.description),
            len(content.images),
        )
        return content

    def _run_pass(self, document: BeautifulSoup, options: ExtractionOptions) -> str:
        working = copy.copy(document)
        candidates = prepare_candidates(working, options)
        article = assemble_article(candidates)
        cleaned = sanitize(article, candidates, options)
        if options.description_as_plain_text:
            cleaned = to_plain_text(cleaned)
        return cleaned

    def extract_description(self, document: BeautifulSoup) -> DescriptionResult:
        """Run description passes, relaxing pruning while the text is too short."""
        options: Optional[ExtractionOptions] = self.options
        attempts: List[ExtractionOptions] = []
        text = ""
        state = PassState.FIRST_PASS

        while options is not None and len(attempts) < MAX_PASSES:
            state = _state_for(options, self.options)
            attempts.append(options)
            try:
                text = self._run_pass(document, options)
            except EmptyCandidates as exc:
                self.logger.debug("%s: %s", state.value, exc)
                text = ""
            except ExtractionTimeout as exc:
                self.logger.warning("Description extraction aborted: %s", exc)
                return DescriptionResult(
                    text="",
                    final_pass=state,
                    attempts=attempts,
                    timed_out=True,
                )

            if len(text) >= options.retry_length:
                break
            self.logger.debug(
                "%s produced %d chars (< %d); relaxing options",
                state.value,
                len(text),
                options.retry_length,
            )
            options = options.relax()

        self.logger.debug(
            "%s: %d chars after %s", PassState.ACCEPTED.value, len(text), state.value
        )
        return DescriptionResult(text=text, final_pass=state, attempts=attempts)

    def select_images(self, document: BeautifulSoup, request_url: str) -> List[Image]:
        return select_images(document, request_url, self.options, self.probe)


def extract(request_url: str, options: Optional[ExtractionOptions] = None) -> Content:
    """Fetch a page and return its primary readable content."""
    return ContentExtractor(options).extract(request_url)


def extract_from_document(
    document: BeautifulSoup,
    request_url: str,
    options: Optional[ExtractionOptions] = None,
) -> Content:
    """Return the primary readable content of an already parsed document."""
    return ContentExtractor(options).extract_from_document(document, request_url)
