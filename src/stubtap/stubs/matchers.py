"""
StubTap Matchers

Ready-made request predicates for ``add_stub``.

Example:
    add_stub(http('POST', 'https://api.example.com/users'), builders.json({'id': 1}))
    add_stub(uri('/files/**'), builders.http(404))
"""

from typing import Optional

from requests import PreparedRequest

from ..common.url_utils import URLMatcher
from .models import Matcher


def everything(request: PreparedRequest) -> bool:
    """Match every request."""
    return True


def uri(pattern: str) -> Matcher:
    """
    Match requests whose URL fits ``pattern``.

    Args:
        pattern: Full URL or path, optionally with {name}, * or ** segments
    """
    def matcher(request: PreparedRequest) -> bool:
        return URLMatcher.url_matches(request.url or '', pattern)

    return matcher


def http(method: str, pattern: str) -> Matcher:
    """Match requests by HTTP method and URL pattern."""
    method_upper = method.upper()
    url_matcher = uri(pattern)

    def matcher(request: PreparedRequest) -> bool:
        return (request.method or 'GET').upper() == method_upper and url_matcher(request)

    return matcher


def header(name: str, value: Optional[str] = None) -> Matcher:
    """Match requests carrying header ``name`` (with ``value`` if given)."""
    def matcher(request: PreparedRequest) -> bool:
        actual = request.headers.get(name) if request.headers else None
        if actual is None:
            return False
        return value is None or actual == value

    return matcher


def all_of(*matchers: Matcher) -> Matcher:
    """Match requests accepted by every given matcher."""
    def matcher(request: PreparedRequest) -> bool:
        return all(m(request) for m in matchers)

    return matcher
