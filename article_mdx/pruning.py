"""Structural clean-up applied to a document before candidate scoring."""

from __future__ import annotations

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .config import ExtractionOptions
from .patterns import div_has_block_child, is_unlikely_candidate
from .scoring import CandidateSet, collect_candidates
from .utils import Deadline

logger = logging.getLogger("article_mdx")

PROTECTED_TAGS = {"html", "body"}


def _class_and_id(node: Tag) -> str:
    classes = node.get("class") or ""
    if isinstance(classes, list):
        classes = " ".join(classes)
    return classes + (node.get("id") or "")


def wrap_fragment(document: BeautifulSoup) -> bool:
    """Move the top-level nodes of a fragment under a new ``body``.

    ``html.parser`` adds no implied ``html``/``body`` elements, so paragraphs at
    the top of a fragment would otherwise have no container to score.
    """
    if document.body is not None or document.html is not None:
        return False
    body = document.new_tag("body")
    for child in list(document.contents):
        body.append(child.extract())
    document.append(body)
    return True


def remove_scripts(document: BeautifulSoup) -> int:
    removed = 0
    for tag in document.find_all(["style", "script"]):
        if tag.decomposed:
            continue
        tag.decompose()
        removed += 1
    return removed


def remove_unlikely_candidates(
    document: BeautifulSoup,
    options: ExtractionOptions,
    deadline: Optional[Deadline] = None,
) -> int:
    """Drop elements whose class/id mark them as page chrome."""
    if not options.remove_unlikely_candidates:
        return 0

    removed = 0
    for node in document.find_all(True):
        if deadline:
            deadline.check()
        if node.decomposed or node.name in PROTECTED_TAGS:
            continue
        if is_unlikely_candidate(_class_and_id(node)):
            logger.debug("Removing unlikely candidate %s", node.name)
            node.decompose()
            removed += 1
    return removed


def transform_misused_divs(
    document: BeautifulSoup,
    deadline: Optional[Deadline] = None,
) -> int:
    """Retag divs without block-level children as paragraphs."""
    retagged = 0
    for node in document.find_all("div"):
        if deadline:
            deadline.check()
        if not div_has_block_child(node.decode_contents()):
            node.name = "p"
            retagged += 1
    return retagged


def prepare_candidates(
    document: BeautifulSoup,
    options: ExtractionOptions,
) -> CandidateSet:
    """Run the pruning steps in order and score what survives.

    Every budgeted step gets its own deadline. A step that overruns raises
    :class:`~article_mdx.errors.ExtractionTimeout` and the document should be
    discarded by the caller.
    """
    budget = options.description_extraction_timeout
    if wrap_fragment(document):
        logger.debug("Wrapped body-less fragment in <body>")
    remove_scripts(document)

    removed = remove_unlikely_candidates(
        document, options, Deadline("remove_unlikely_candidates", budget)
    )
    retagged = transform_misused_divs(
        document, Deadline("transform_misused_divs", budget)
    )
    logger.debug(
        "Pruned %d unlikely candidate(s), retagged %d div(s)", removed, retagged
    )
    return collect_candidates(document, options, Deadline("collect_candidates", budget))
