"""Utility helpers for URL resolution, slugs and deadlines."""

from __future__ import annotations

import re
import time
from urllib.parse import SplitResult, urlsplit

from .errors import ExtractionTimeout, InvalidURLError

BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
SUPPORTED_SCHEMES = {"http", "https"}


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def _parse_url(value: str) -> SplitResult:
    """Split a URL, rejecting input a strict parser would refuse."""
    if CONTROL_CHAR_PATTERN.search(value):
        raise InvalidURLError(f"invalid control character in URL {value!r}")
    if BAD_ESCAPE_PATTERN.search(value):
        raise InvalidURLError(f"invalid percent escape in URL {value!r}")
    try:
        parts = urlsplit(value)
        parts.port  # noqa: B018 - validates the port component
    except ValueError as exc:
        raise InvalidURLError(f"unparsable URL {value!r}: {exc}") from exc
    return parts


def is_http_url(value: str) -> bool:
    try:
        return _parse_url(value).scheme in SUPPORTED_SCHEMES
    except InvalidURLError:
        return False


def absolute_url(value: str, request_url: str) -> str:
    """Resolve ``value`` against ``request_url``.

    Already-absolute input comes back unchanged. Relative paths are appended
    after the last ``/`` of the request URL without normalising ``..``
    segments, so ``../img.png`` against ``http://a.com/x/y.htm`` becomes
    ``http://a.com/x/../img.png``.

    Raises:
        InvalidURLError: if ``value`` is blank or unparsable, or the request
            URL is not an http(s) URL.
    """
    if not value or not value.strip():
        raise InvalidURLError("empty URL")

    parts = _parse_url(value)
    if parts.scheme:
        return value

    if not is_http_url(request_url):
        raise InvalidURLError(f"url {request_url} is not a valid http(s) URL")
    request = urlsplit(request_url)

    if value.startswith("//"):
        return f"{request.scheme}:{value}"
    if value.startswith("/"):
        return f"{request.scheme}://{request.netloc}{value}"

    # Positions below 8 belong to the "scheme://" prefix, so there is no path.
    slash = request_url.rfind("/")
    if slash < 8:
        resolved = f"{request_url}/{value}"
    else:
        resolved = request_url[: slash + 1] + value
    _parse_url(resolved)
    return resolved


class Deadline:
    """Wall-clock budget for a single pruning or scoring step."""

    def __init__(self, step: str, budget_ms: float) -> None:
        self.step = step
        self.budget_ms = budget_ms
        self._expires_at = time.monotonic() + budget_ms / 1000.0

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self._expires_at

    def check(self) -> None:
        """Raise :class:`ExtractionTimeout` once the budget is spent."""
        if self.expired:
            raise ExtractionTimeout(self.step, self.budget_ms)
