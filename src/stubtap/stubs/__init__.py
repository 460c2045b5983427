"""
StubTap Stubs Module

Stub registry and response delivery.

This module provides:
- Stub, outcome and download types
- Last-registered-wins stub registry
- Byte-range processing
- Delivery engine with chunked streaming
- Interception protocol for host networking stacks
"""

from .errors import StubError, UnmatchedRequestError, StubConnectionError
from .models import (
    CachePolicy,
    Content,
    Failure,
    NoContent,
    StreamContent,
    Stub,
    StubResponse,
    Success,
)
from .ranges import ByteRange, parse_range, apply_range, apply_range_to_response
from .registry import ActivationGuard, StubRegistry
from .delivery import DeliveryEngine, DeliveryState, StubClient
from .protocol import StubProtocol

__all__ = [
    # Errors
    'StubError',
    'UnmatchedRequestError',
    'StubConnectionError',

    # Models
    'CachePolicy',
    'Content',
    'Failure',
    'NoContent',
    'StreamContent',
    'Stub',
    'StubResponse',
    'Success',

    # Ranges
    'ByteRange',
    'parse_range',
    'apply_range',
    'apply_range_to_response',

    # Registry
    'ActivationGuard',
    'StubRegistry',

    # Delivery
    'DeliveryEngine',
    'DeliveryState',
    'StubClient',
    'StubProtocol',
]
