"""Class weights, link density and candidate scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from bs4 import BeautifulSoup, Tag

from .config import ExtractionOptions
from .patterns import is_negative, is_positive
from .utils import Deadline

logger = logging.getLogger("article_mdx")

ELEMENT_SCORES = {
    "div": 5.0,
    "blockquote": 3.0,
    "form": -3.0,
    "th": -5.0,
}


def class_weight(node: Tag, options: ExtractionOptions) -> float:
    """Score the class and id attributes independently against keyword lists."""
    weight = 0.0
    if not options.weight_classes:
        return weight

    for attr in ("class", "id"):
        value = node.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        if not value:
            continue
        if is_negative(value):
            weight -= 25.0
        if is_positive(value):
            weight += 25.0
    return weight


def link_density(node: Tag) -> float:
    """Share of the node's text that sits inside anchors; 0 for empty nodes."""
    text_len = len(node.get_text())
    if text_len == 0:
        return 0.0
    link_len = sum(len(anchor.get_text()) for anchor in node.find_all("a"))
    return link_len / text_len


def score_node(node: Tag, options: ExtractionOptions) -> float:
    return class_weight(node, options) + ELEMENT_SCORES.get(node.name, 0.0)


def describe_node(node: Optional[Tag]) -> str:
    if node is None:
        return "(none)"
    classes = node.get("class") or ["(undefined)"]
    if isinstance(classes, list):
        classes = " ".join(classes)
    return f"{node.name}#{node.get('id', '(undefined)')}.{classes}"


@dataclass
class Candidate:
    """A container node together with its accumulated content score."""

    node: Tag
    score: float

    def __str__(self) -> str:
        return f"{describe_node(self.node)}({self.score:.2f})"


class CandidateSet:
    """Candidates of one pass keyed by node identity.

    Only the first contribution for a node is recorded; later paragraphs under
    the same container do not add to its score.
    """

    def __init__(self) -> None:
        self._by_node: Dict[int, Candidate] = {}
        self.ranked: List[Candidate] = []

    def __len__(self) -> int:
        return len(self._by_node)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._by_node.values())

    def __contains__(self, node: Tag) -> bool:
        return id(node) in self._by_node

    def add_first(self, node: Tag, score: float) -> bool:
        """Record ``score`` for ``node`` unless it already has an entry."""
        key = id(node)
        if key in self._by_node:
            return False
        self._by_node[key] = Candidate(node=node, score=score)
        return True

    def get(self, node: Optional[Tag]) -> Optional[Candidate]:
        if node is None:
            return None
        return self._by_node.get(id(node))

    def score(self, node: Optional[Tag]) -> float:
        candidate = self.get(node)
        return candidate.score if candidate else 0.0

    def rank(self, root: Tag) -> List[Candidate]:
        """Sort by descending score, earliest document position first on ties."""
        position = {id(tag): index for index, tag in enumerate(root.find_all(True))}
        self.ranked = sorted(
            self._by_node.values(),
            key=lambda c: (-c.score, position.get(id(c.node), len(position))),
        )
        return self.ranked

    @property
    def best(self) -> Optional[Candidate]:
        return self.ranked[0] if self.ranked else None


def _is_element(node) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def collect_candidates(
    root: Tag,
    options: ExtractionOptions,
    deadline: Optional[Deadline] = None,
) -> CandidateSet:
    """Score the parents and grandparents of every sufficiently long p/td."""
    candidates = CandidateSet()
    for paragraph in root.find_all(["p", "td"]):
        if deadline:
            deadline.check()
        inner_text = paragraph.get_text()
        if len(inner_text) < options.min_text_length:
            continue

        increment = 1.0
        increment += len(inner_text.split(","))
        increment += min(len(inner_text) / 100.0, 3.0)

        parent = paragraph.parent
        if not _is_element(parent):
            continue
        candidates.add_first(parent, score_node(parent, options) + increment)

        grandparent = parent.parent
        if _is_element(grandparent):
            candidates.add_first(
                grandparent, score_node(grandparent, options) + increment / 2.0
            )

    # Good content has a small link density and is mostly unaffected here.
    for candidate in candidates:
        if deadline:
            deadline.check()
        candidate.score *= 1.0 - link_density(candidate.node)

    candidates.rank(root)
    logger.debug(
        "Scored %d candidate(s); best: %s", len(candidates), candidates.best
    )
    return candidates
