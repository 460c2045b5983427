"""
StubTap Stub Models

Core data types shared by the registry, range processor and delivery engine.

This module provides:
- Download variants (NoContent, Content, StreamContent)
- Outcome variants (Success, Failure)
- StubResponse metadata
- Stub (matcher + builder with a unique identity)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from http.client import responses as HTTP_REASONS
from typing import Callable, Mapping, Optional, Union

from requests import PreparedRequest
from requests.structures import CaseInsensitiveDict


class CachePolicy(Enum):
    """Cache storage policy reported alongside a response."""

    ALLOWED = "allowed"
    ALLOWED_IN_MEMORY_ONLY = "allowed_in_memory_only"
    NOT_ALLOWED = "not_allowed"


@dataclass(frozen=True)
class NoContent:
    """Response without a body."""


@dataclass(frozen=True)
class Content:
    """Body delivered in one shot."""

    data: bytes = b""


@dataclass(frozen=True)
class StreamContent:
    """Body delivered as paced chunks of at most ``chunk_size`` bytes."""

    data: bytes = b""
    chunk_size: int = 1024

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")


Download = Union[NoContent, Content, StreamContent]


@dataclass
class StubResponse:
    """Response metadata (status line and headers) for a stubbed request."""

    url: str
    status_code: int = 200
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    reason: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})
        if self.reason is None:
            self.reason = HTTP_REASONS.get(self.status_code, "")

    def with_headers(self, headers: Mapping[str, str]) -> StubResponse:
        """Copy of this response with ``headers`` merged over the existing ones."""
        merged = CaseInsensitiveDict(self.headers)
        merged.update(headers)
        return StubResponse(
            url=self.url,
            status_code=self.status_code,
            headers=merged,
            reason=self.reason
        )


@dataclass(frozen=True)
class Success:
    """Builder outcome carrying a response and its payload."""

    response: StubResponse
    download: Download = field(default_factory=NoContent)


@dataclass(frozen=True)
class Failure:
    """Builder outcome carrying an error for the consumer."""

    error: Exception


Outcome = Union[Success, Failure]

Matcher = Callable[[PreparedRequest], bool]
Builder = Callable[[PreparedRequest], Outcome]


class Stub:
    """
    A registered (matcher, builder) pair.

    Two stubs are equal only when their identities match; the matcher and
    builder are never compared.
    """

    __slots__ = ('matcher', 'builder', 'id')

    def __init__(self, matcher: Matcher, builder: Builder):
        self.matcher = matcher
        self.builder = builder
        self.id = uuid.uuid4().hex

    def __eq__(self, other) -> bool:
        if not isinstance(other, Stub):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Stub(id={self.id!r})"
