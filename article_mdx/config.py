"""Configuration objects and constants for content extraction."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

DEFAULT_IGNORE_IMAGE_FORMAT = ("data:image/", ".svg", ".webp")
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass(frozen=True)
class ExtractionOptions:
    """Settings that control description scoring and image selection.

    Instances are immutable snapshots. The retry loop derives loosened copies
    through :meth:`relax` and never touches the caller's instance.
    """

    # Minimum description length before a pass is accepted.
    retry_length: int = 250
    # Minimum text length for a p/td to contribute to candidate scores.
    min_text_length: int = 25
    remove_unlikely_candidates: bool = True
    weight_classes: bool = True
    clean_conditionally: bool = True
    remove_empty_nodes: bool = True
    min_image_width: int = 200
    min_image_height: int = 100
    max_image_count: int = 3
    # Maximum number of img URLs probed over the network.
    check_image_loop_count: int = 10
    # Milliseconds.
    image_request_timeout: int = 1000
    ignore_image_format: Tuple[str, ...] = DEFAULT_IGNORE_IMAGE_FORMAT
    description_as_plain_text: bool = True
    # Milliseconds, applied independently to each budgeted pruning step.
    description_extraction_timeout: int = 500

    def relax(self) -> Optional["ExtractionOptions"]:
        """Return the next, more liberal option set or ``None`` when exhausted."""
        if self.remove_unlikely_candidates:
            return replace(self, remove_unlikely_candidates=False)
        if self.weight_classes:
            return replace(self, weight_classes=False)
        if self.clean_conditionally:
            return replace(self, clean_conditionally=False)
        return None


@dataclass
class FetchConfig:
    """HTTP settings used when the extractor fetches a page itself."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    render: bool = False
    wait_after_load: float = 1.0
    navigation_timeout: float = 30.0
