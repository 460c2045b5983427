"""
StubTap Range Processor

Byte-range support (RFC 7233 subset) for stubbed response bodies.

Supports:
- Range: bytes=<start>-<end> (inclusive, zero-based)
- Range: bytes=<start>- (to the end of the body)

Malformed or unsatisfiable ranges fall back to the full body.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from requests import PreparedRequest

from .models import StubResponse

logger = logging.getLogger("stubtap.ranges")

_RANGE_RE = re.compile(r'^\s*bytes\s*=\s*(\d+)\s*-\s*(\d*)\s*$', re.IGNORECASE)


@dataclass(frozen=True)
class ByteRange:
    """Offset/length window into a response body."""

    offset: int
    length: Optional[int] = None  # None means "to the end of the body"

    def clamp(self, full_length: int) -> Optional['ByteRange']:
        """Clamp to a body of ``full_length`` bytes; None if nothing is left."""
        if self.offset >= full_length:
            return None
        remaining = full_length - self.offset
        length = remaining if self.length is None else min(self.length, remaining)
        return ByteRange(self.offset, length)

    def content_range(self, full_length: int) -> str:
        """Content-Range header value for a clamped range."""
        return f"bytes {self.offset}-{self.offset + self.length - 1}/{full_length}"


def parse_range(header_value: Optional[str]) -> Optional[ByteRange]:
    """
    Parse a ``Range`` header value.

    Args:
        header_value: Raw header value, or None when the header is absent

    Returns:
        ByteRange, or None to serve the full content
    """
    if not header_value:
        return None

    match = _RANGE_RE.match(header_value)
    if not match:
        logger.debug(f"Ignoring malformed Range header: {header_value!r}")
        return None

    start = int(match.group(1))
    if not match.group(2):
        return ByteRange(start)

    end = int(match.group(2))
    if end < start:
        logger.debug(f"Ignoring Range header with end before start: {header_value!r}")
        return None

    return ByteRange(start, end - start + 1)


def apply_range(byte_range: Optional[ByteRange], body: bytes) -> Tuple[bytes, int, Optional[str]]:
    """
    Slice ``body`` to ``byte_range``.

    Returns:
        Tuple of (sliced body, content length, Content-Range value or None)
    """
    full_length = len(body)
    clamped = byte_range.clamp(full_length) if byte_range is not None else None
    if clamped is None:
        return body, full_length, None

    sliced = body[clamped.offset:clamped.offset + clamped.length]
    return sliced, len(sliced), clamped.content_range(full_length)


def apply_range_to_response(
    request: PreparedRequest,
    response: StubResponse,
    body: bytes
) -> Tuple[StubResponse, bytes]:
    """
    Apply the request's Range header to a response and its body.

    When a range applies, the response is rebuilt with updated Content-Length
    and Content-Range headers; url, status code and other headers are kept.

    Args:
        request: Intercepted request
        response: Response produced by the builder
        body: Full response body

    Returns:
        Tuple of (possibly rebuilt response, possibly sliced body)
    """
    byte_range = parse_range(request.headers.get('Range') if request.headers else None)
    sliced, content_length, content_range = apply_range(byte_range, body)
    if content_range is None:
        return response, body

    logger.debug(f"Serving {content_range} for {request.method} {request.url}")
    updated = response.with_headers({
        'Content-Length': str(content_length),
        'Content-Range': content_range
    })
    return updated, sliced
