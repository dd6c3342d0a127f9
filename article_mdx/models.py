"""Data models used throughout the extraction pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass
class ImageCandidate:
    """Raw image reference discovered while walking the document."""

    original_src: str
    absolute_url: str
    width: int = 0
    height: int = 0

    @property
    def resolved(self) -> bool:
        """True when the markup already declares both dimensions."""
        return self.width > 0 and self.height > 0


@dataclass
class Image:
    """An image whose size passed the minimum-dimension filter."""

    url: str
    width: int
    height: int

    def __str__(self) -> str:
        return f"{{URL: {self.url}, Size: {self.width}x{self.height}}}"


@dataclass
class OpenGraph:
    """Open Graph values declared in the page's meta tags."""

    title: str = ""
    description: str = ""
    image_url: str = ""

    def is_empty(self) -> bool:
        return not (self.title or self.description or self.image_url)


@dataclass
class Content:
    """Primary readable content of a web page."""

    title: str = ""
    description: str = ""
    author: str = ""
    images: List[Image] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
