"""Compiled heuristics over class/id strings and markup fragments."""

from __future__ import annotations

import re

UNLIKELY_CANDIDATES = re.compile(
    r"combx|comment|community|disqus|extra|foot|header|menu|remark|rss|shoutbox"
    r"|sidebar|sponsor|ad-break|agegate|pagination|pager|popup",
    re.IGNORECASE,
)
MAYBE_CANDIDATE = re.compile(r"and|article|body|column|main|shadow", re.IGNORECASE)
POSITIVE = re.compile(
    r"article|body|content|entry|hentry|main|page|pagination|post|text|blog|story",
    re.IGNORECASE,
)
NEGATIVE = re.compile(
    r"combx|comment|com-|contact|foot|footer|footnote|masthead|media|meta|outbrain"
    r"|promo|related|scroll|shoutbox|sidebar|sponsor|shopping|tags|tool|widget",
    re.IGNORECASE,
)
DIV_TO_P_ELEMENTS = re.compile(r"<(a|blockquote|dl|div|img|ol|p|pre|table|ul)", re.IGNORECASE)
VIDEO = re.compile(r"http://(www\.)?(youtube|vimeo)\.com", re.IGNORECASE)
TAG = re.compile(r"<.*?>")
WHITESPACE = re.compile(r"[\r\n\t ]+")
LINE_BREAKS = re.compile(r"[\r\n\f]+")
SENTENCE_END = re.compile(r"\.( |$)")


def is_unlikely_candidate(class_and_id: str) -> bool:
    return bool(
        UNLIKELY_CANDIDATES.search(class_and_id)
        and not MAYBE_CANDIDATE.search(class_and_id)
    )


def is_positive(value: str) -> bool:
    return bool(POSITIVE.search(value))


def is_negative(value: str) -> bool:
    return bool(NEGATIVE.search(value))


def div_has_block_child(inner_html: str) -> bool:
    """True when a div's inner markup holds a block-level element."""
    return bool(DIV_TO_P_ELEMENTS.search(inner_html))


def is_video_embed(url: str) -> bool:
    return bool(VIDEO.search(url))


def has_sentence_end(text: str) -> bool:
    return bool(SENTENCE_END.search(text))
