"""Article assembly and sanitising of the best-scoring region."""

from __future__ import annotations

import copy
import html
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from bs4 import BeautifulSoup, Comment, Tag

from .config import ExtractionOptions
from .errors import EmptyCandidates
from .patterns import LINE_BREAKS, TAG, WHITESPACE, has_sentence_end
from .scoring import CandidateSet, class_weight, describe_node, link_density

logger = logging.getLogger("article_mdx")

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
ALWAYS_REMOVED_TAGS = ["form", "object", "iframe", "embed"]
CONDITIONAL_TAGS = ["table", "ul", "div"]
COUNTED_TAGS = ("p", "img", "li", "a", "embed", "input")
WHITELIST_TAGS = {"div", "p"}
SPACEY_TAGS = {
    "br", "hr", "h1", "h2", "h3", "h4", "h5", "h6", "dl", "dd",
    "ol", "li", "ul", "address", "blockquote", "center",
}


@dataclass
class Article:
    """Copied sibling nodes gathered under a fresh ``div``.

    ``origins`` maps each copied element to the source element it was cloned
    from, so candidate scores from the pruned document stay reachable.
    """

    document: BeautifulSoup
    root: Tag
    origins: Dict[int, Tuple[Tag, Tag]] = field(default_factory=dict)

    def register(self, source: Tag, clone: Tag) -> None:
        pairs = zip([source, *source.find_all(True)], [clone, *clone.find_all(True)])
        for original, copied in pairs:
            self.origins[id(copied)] = (copied, original)

    def source_of(self, node: Tag) -> Optional[Tag]:
        entry = self.origins.get(id(node))
        return entry[1] if entry else None


def assemble_article(candidates: CandidateSet) -> Article:
    """Collect the best candidate and its qualifying siblings."""
    best = candidates.best
    if best is None:
        raise EmptyCandidates("no candidate reached the minimum text length")

    threshold = max(10.0, best.score * 0.2)
    output = BeautifulSoup("<div></div>", "html.parser")
    article = Article(document=output, root=output.div)

    parent = best.node.parent
    siblings: Iterable[Tag] = (
        parent.find_all(True, recursive=False) if parent is not None else [best.node]
    )
    for sibling in siblings:
        append = sibling is best.node
        if not append and candidates.score(sibling) >= threshold:
            append = True
        if not append and sibling.name == "p":
            text = sibling.get_text()
            length = len(text)
            density = link_density(sibling)
            if length > 80 and density < 0.25:
                append = True
            elif length < 80 and density == 0 and has_sentence_end(text):
                append = True
        if not append:
            continue

        clone = copy.copy(sibling)
        article.register(sibling, clone)
        if clone.name not in WHITELIST_TAGS:
            clone.name = "div"
        article.root.append(clone)

    logger.debug(
        "Assembled article around %s (threshold %.2f)", best, threshold
    )
    return article


def conditional_clean_reason(
    tag_name: str,
    counts: Dict[str, int],
    content_length: int,
    options: ExtractionOptions,
    weight: float,
    score: float,
    density: float,
) -> str:
    """Return why a container should be dropped, or an empty string."""
    if weight + score < 0:
        return "negative weight and score"
    if counts["img"] > counts["p"] and counts["img"] > 1:
        return "too many images"
    if counts["li"] > counts["p"] and tag_name != "ul":
        return "more <li>s than <p>s"
    if counts["input"] * 3 > counts["p"]:
        return "<p>s less than 3 * <input>s"
    if content_length < options.min_text_length and counts["img"] != 1:
        return "too short content length without a single image"
    if (weight < 25 and density > 0.2) or (weight >= 25 and density > 0.5):
        return "too many links for its weight"
    if (counts["embed"] == 1 and content_length < 75) or counts["embed"] > 1:
        return "<embed>s with too short content length, or too many <embed>s"
    return ""


def clean_conditionally(
    article: Article,
    candidates: CandidateSet,
    options: ExtractionOptions,
) -> int:
    """Remove suspicious tables, lists and divs from the assembled article."""
    if not options.clean_conditionally:
        return 0

    removed = 0
    for node in article.root.find_all(CONDITIONAL_TAGS):
        if node.decomposed:
            continue
        text = node.get_text()
        if text.count(",") > 10:
            continue

        counts = {tag: len(node.find_all(tag)) for tag in COUNTED_TAGS}
        counts["li"] -= 100
        # imgs inside noscript duplicate a lazily loaded sibling
        for noscript in node.find_all("noscript"):
            counts["img"] -= len(noscript.find_all("img"))

        weight = class_weight(node, options)
        score = candidates.score(article.source_of(node))
        reason = conditional_clean_reason(
            node.name,
            counts,
            len(text.strip()),
            options,
            weight,
            score,
            link_density(node),
        )
        if reason:
            logger.debug("Cleaning %s: %s", describe_node(node), reason)
            node.decompose()
            removed += 1
    return removed


def _flatten(node: Tag) -> None:
    for child in list(node.children):
        if isinstance(child, Comment):
            child.extract()
            continue
        if not isinstance(child, Tag):
            continue
        if child.name in WHITELIST_TAGS:
            child.attrs = {}
            _flatten(child)
            continue
        text = child.get_text()
        if child.name in SPACEY_TAGS:
            text = f" {text} "
        child.replace_with(text)


def _remove_all(nodes: Iterable[Tag]) -> None:
    for node in nodes:
        if not node.decomposed:
            node.decompose()


def sanitize(
    article: Article,
    candidates: CandidateSet,
    options: ExtractionOptions,
) -> str:
    """Clean the assembled article and serialise it as minimal HTML."""
    root = article.root
    _remove_all(
        [
            heading
            for heading in root.find_all(HEADING_TAGS)
            if class_weight(heading, options) < 0 or link_density(heading) > 0.33
        ]
    )
    _remove_all(root.find_all(ALWAYS_REMOVED_TAGS))

    if options.remove_empty_nodes:
        _remove_all([p for p in root.find_all("p") if not p.get_text().strip()])

    clean_conditionally(article, candidates, options)

    root.attrs = {}
    _flatten(root)
    return LINE_BREAKS.sub("\n", str(root))


def to_plain_text(markup: str) -> str:
    """Strip tags and collapse whitespace runs to single spaces."""
    text = TAG.sub(" ", markup)
    text = WHITESPACE.sub(" ", text)
    return html.unescape(text).strip()
