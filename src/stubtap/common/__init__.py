"""
StubTap Common Utilities

Shared configuration and URL helpers used across StubTap modules.
"""

from .config import StubConfig
from .url_utils import URLMatcher

__all__ = [
    'StubConfig',
    'URLMatcher'
]
