"""
StubTap

Request stubbing for tests: register rules that recognize outgoing HTTP(S)
requests and answer them with deterministic responses instead of real
network I/O.
"""

from .api import (
    add_stub,
    remove_stub,
    remove_all_stubs,
    configure,
    default_protocol,
    default_registry
)
from .common import StubConfig
from .stubs import builders, matchers
from .stubs import (
    CachePolicy,
    Content,
    Failure,
    NoContent,
    StreamContent,
    Stub,
    StubResponse,
    Success,
    StubError,
    UnmatchedRequestError,
    StubConnectionError,
)

__all__ = [
    # Registration
    'add_stub',
    'remove_stub',
    'remove_all_stubs',
    'configure',
    'default_protocol',
    'default_registry',

    # Config
    'StubConfig',

    # Stock matchers and builders
    'builders',
    'matchers',

    # Models
    'CachePolicy',
    'Content',
    'Failure',
    'NoContent',
    'StreamContent',
    'Stub',
    'StubResponse',
    'Success',

    # Errors
    'StubError',
    'UnmatchedRequestError',
    'StubConnectionError',
]

__version__ = '1.0.0'
