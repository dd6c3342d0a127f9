"""Image candidate discovery and concurrent size probing."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Callable, Iterator, List, Optional, Tuple

import requests
from bs4 import BeautifulSoup, Tag
from filetype import guess
from PIL import ImageFile

from .config import DEFAULT_USER_AGENT, ExtractionOptions
from .errors import InvalidURLError
from .models import Image, ImageCandidate
from .utils import absolute_url

logger = logging.getLogger("article_mdx")

# Returns (width, height) or None when the size could not be determined.
ImageProbe = Callable[[str, float], Optional[Tuple[int, int]]]

PROBE_CHUNK_BYTES = 1024
MAX_PROBE_BYTES = 64 * 1024
# Extra time granted to the collector on top of the per-probe timeout.
COLLECT_GRACE_SECONDS = 0.05
LAZY_SRC_ATTRIBUTE = "data-original"


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def probe_image_size(url: str, timeout: float) -> Optional[Tuple[int, int]]:
    """Read just enough of an image to learn its dimensions.

    The body is streamed in small chunks into a Pillow incremental parser,
    which yields the size as soon as the header has been decoded.
    """
    headers = {"User-Agent": DEFAULT_USER_AGENT}
    with requests.get(url, headers=headers, timeout=timeout, stream=True) as resp:
        resp.raise_for_status()
        parser = ImageFile.Parser()
        head = b""
        read = 0
        for chunk in resp.iter_content(chunk_size=PROBE_CHUNK_BYTES):
            if not chunk:
                continue
            if len(head) < 262:
                head += chunk
                if len(head) >= 262 and detect_image_format(head) is None:
                    logger.debug("Skipping %s: not an image", url)
                    return None
            parser.feed(chunk)
            if parser.image is not None:
                return parser.image.size
            read += len(chunk)
            if read >= MAX_PROBE_BYTES:
                break
    return None


def _parse_dimension(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def is_supported_image(url: str, options: ExtractionOptions) -> bool:
    return not any(fragment in url for fragment in options.ignore_image_format)


def iter_image_candidates(
    document: BeautifulSoup, request_url: str, options: ExtractionOptions
) -> Iterator[ImageCandidate]:
    """Yield resolvable, supported img references in document order."""
    for img in document.find_all("img"):
        src = img.get("src") or img.get(LAZY_SRC_ATTRIBUTE) or ""
        try:
            url = absolute_url(src, request_url)
        except InvalidURLError as exc:
            logger.debug("Skipping img %r: %s", src, exc)
            continue
        if not is_supported_image(url, options):
            continue
        yield ImageCandidate(
            original_src=src,
            absolute_url=url,
            width=_parse_dimension(img.get("width")),
            height=_parse_dimension(img.get("height")),
        )


def _probe(
    probe: ImageProbe, candidate: ImageCandidate, timeout: float
) -> Optional[Image]:
    try:
        size = probe(candidate.absolute_url, timeout)
        if not size:
            return None
        width, height = size
        return Image(url=candidate.absolute_url, width=int(width), height=int(height))
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Image probe failed for %s: %s", candidate.absolute_url, exc)
        return None


def _is_large_enough(image: Optional[Image], options: ExtractionOptions) -> bool:
    return (
        image is not None
        and image.width >= options.min_image_width
        and image.height >= options.min_image_height
    )


def select_images(
    document: BeautifulSoup,
    request_url: str,
    options: ExtractionOptions,
    probe: Optional[ImageProbe] = None,
) -> List[Image]:
    """Return up to ``max_image_count`` images that meet the size minimums.

    Images with declared width and height are taken at face value; the rest
    are probed concurrently, at most ``check_image_loop_count`` of them. The
    result order follows probe completion and is not stable across runs.
    """
    probe = probe or probe_image_size
    timeout = options.image_request_timeout / 1000.0
    accepted: List[Image] = []
    pending: List[Future] = []

    if options.max_image_count <= 0:
        return accepted

    executor = ThreadPoolExecutor(
        max_workers=max(1, options.check_image_loop_count),
        thread_name_prefix="image-probe",
    )
    try:
        for candidate in iter_image_candidates(document, request_url, options):
            if candidate.resolved:
                image = Image(candidate.absolute_url, candidate.width, candidate.height)
                if _is_large_enough(image, options):
                    accepted.append(image)
                    if len(accepted) >= options.max_image_count:
                        return accepted
                continue
            if len(pending) >= options.check_image_loop_count:
                break
            pending.append(executor.submit(_probe, probe, candidate, timeout))

        logger.debug(
            "Probing %d image(s) for %s (%d accepted from markup)",
            len(pending),
            request_url,
            len(accepted),
        )
        started = time.perf_counter()
        try:
            for future in as_completed(pending, timeout=timeout + COLLECT_GRACE_SECONDS):
                image = future.result()
                if _is_large_enough(image, options):
                    accepted.append(image)
                if len(accepted) >= options.max_image_count:
                    break
        except FuturesTimeoutError:
            logger.debug(
                "Image probing timed out for %s after %.2fs",
                request_url,
                time.perf_counter() - started,
            )
    finally:
        # Running probes finish on their own; their results are discarded.
        executor.shutdown(wait=False, cancel_futures=True)
    return accepted
