"""
StubTap Builders

Ready-made response builders for ``add_stub``.
"""

import json as _json
from typing import Any, Dict, Optional

from requests import PreparedRequest

from .models import Builder, Content, Download, Failure, NoContent, StubResponse, Success


def failure(error: Exception) -> Builder:
    """Fail every matched request with ``error``."""
    def builder(request: PreparedRequest) -> Failure:
        return Failure(error)

    return builder


def http(
    status: int = 200,
    headers: Optional[Dict[str, str]] = None,
    download: Optional[Download] = None
) -> Builder:
    """
    Respond with a fixed status, headers and payload.

    Args:
        status: HTTP status code
        headers: Response headers
        download: Payload; defaults to NoContent
    """
    payload = download if download is not None else NoContent()

    def builder(request: PreparedRequest) -> Success:
        response = StubResponse(url=request.url or '', status_code=status, headers=dict(headers or {}))
        return Success(response, payload)

    return builder


def text(body: str, status: int = 200, headers: Optional[Dict[str, str]] = None,
         encoding: str = 'utf-8') -> Builder:
    """Respond with a text body."""
    all_headers = {'Content-Type': f'text/plain; charset={encoding}'}
    all_headers.update(headers or {})
    return http(status, all_headers, Content(body.encode(encoding)))


def json(body: Any, status: int = 200, headers: Optional[Dict[str, str]] = None) -> Builder:
    """
    Respond with ``body`` serialized as JSON.

    Raises:
        TypeError: If ``body`` is not JSON serializable
    """
    data = _json.dumps(body).encode('utf-8')
    all_headers = {'Content-Type': 'application/json; charset=utf-8'}
    all_headers.update(headers or {})
    return http(status, all_headers, Content(data))
