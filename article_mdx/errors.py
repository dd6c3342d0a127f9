"""Exception types raised by the extraction pipeline."""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for all extraction failures."""


class FetchError(ExtractionError):
    """The page could not be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ExtractionTimeout(ExtractionError):
    """A budgeted pruning or scoring step ran past its deadline."""

    def __init__(self, step: str, budget_ms: float) -> None:
        super().__init__(f"{step} timed out after {budget_ms:g}ms")
        self.step = step
        self.budget_ms = budget_ms


class EmptyCandidates(ExtractionError):
    """No container reached the minimum text length."""


class InvalidURLError(ExtractionError, ValueError):
    """A URL could not be resolved against the request URL."""
