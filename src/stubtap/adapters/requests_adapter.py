"""
StubTap requests Adapter

Binds the stub protocol to the ``requests`` library.

This module provides:
- StubAdapter, a transport adapter that serves stubbed requests and hands
  everything else to a fallback adapter
- install_requests_hook / uninstall_requests_hook, which route every
  ``requests.Session`` through StubAdapter

Example:
    session = requests.Session()
    session.mount('https://', StubAdapter(protocol))

    # or globally
    install_requests_hook(protocol)
    requests.get('https://api.example.com/users/1')
"""

import io
import logging
import threading
from typing import List, Optional

import requests
from requests import PreparedRequest
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers
from urllib3.response import HTTPResponse

from ..stubs.delivery import DeliveryState, StubClient
from ..stubs.errors import StubConnectionError, StubError
from ..stubs.models import CachePolicy, StubResponse
from ..stubs.protocol import StubProtocol

logger = logging.getLogger("stubtap.requests")


class CollectingClient(StubClient):
    """StubClient that buffers a delivery for synchronous callers."""

    def __init__(self):
        self.response: Optional[StubResponse] = None
        self.cache_policy: Optional[CachePolicy] = None
        self.chunks: List[bytes] = []
        self.error: Optional[Exception] = None
        self.finished = False

    def on_response_received(self, response: StubResponse, cache_policy: CachePolicy) -> None:
        self.response = response
        self.cache_policy = cache_policy

    def on_data_loaded(self, data: bytes) -> None:
        self.chunks.append(data)

    def on_finished(self) -> None:
        self.finished = True

    def on_failed(self, error: Exception) -> None:
        self.error = error

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)


def _read_timeout(timeout) -> Optional[float]:
    if isinstance(timeout, tuple):
        return timeout[1]
    return timeout


class StubAdapter(BaseAdapter):
    """
    Transport adapter serving responses from a StubProtocol.

    Args:
        protocol: Protocol resolving requests against a stub registry
        fallback: Adapter for requests no stub accepts; without one those
            requests fail with UnmatchedRequestError
    """

    def __init__(self, protocol: StubProtocol, fallback: Optional[BaseAdapter] = None):
        super().__init__()
        self.protocol = protocol
        self.fallback = fallback

    def send(self, request: PreparedRequest, stream=False, timeout=None, verify=True,
             cert=None, proxies=None) -> requests.Response:
        if self.fallback is not None and not self.protocol.can_handle(request):
            return self.fallback.send(request, stream=stream, timeout=timeout, verify=verify,
                                      cert=cert, proxies=proxies)

        client = CollectingClient()
        engine = self.protocol.start_handling(request, client)
        try:
            if not engine.wait(_read_timeout(timeout)):
                self.protocol.stop_handling(request)
                raise requests.ReadTimeout(f"Stubbed response timed out: {request.url}", request=request)
        finally:
            self.protocol.finish_handling(request)

        if client.error is not None:
            if isinstance(client.error, requests.RequestException):
                raise client.error
            raise StubConnectionError(client.error, request=request)
        if engine.error is not None:
            raise StubConnectionError(engine.error, request=request)
        if engine.state is DeliveryState.CANCELLED:
            raise StubConnectionError(StubError("Stubbed delivery was stopped"), request=request)

        return self.build_response(request, client)

    def build_response(self, request: PreparedRequest, client: CollectingClient) -> requests.Response:
        """Build a requests.Response from a completed delivery."""
        stub_response = client.response
        raw = HTTPResponse(
            body=io.BytesIO(client.body),
            headers=dict(stub_response.headers),
            status=stub_response.status_code,
            reason=stub_response.reason,
            request_method=request.method,
            preload_content=False,
            decode_content=False,
            enforce_content_length=False
        )

        response = requests.Response()
        response.status_code = stub_response.status_code
        response.headers = CaseInsensitiveDict(stub_response.headers)
        response.encoding = get_encoding_from_headers(response.headers)
        response.raw = raw
        response.reason = stub_response.reason
        response.url = stub_response.url or request.url
        response.request = request
        response.connection = self

        return response

    def close(self) -> None:
        if self.fallback is not None:
            self.fallback.close()


_hook_lock = threading.Lock()
_original_get_adapter = None


def install_requests_hook(protocol: StubProtocol) -> None:
    """
    Route every requests.Session through a StubAdapter for ``protocol``.

    Installing again replaces the protocol of the previous installation.
    """
    global _original_get_adapter

    with _hook_lock:
        if _original_get_adapter is None:
            _original_get_adapter = requests.Session.get_adapter
        original = _original_get_adapter

        def get_adapter(session, url):
            try:
                fallback = original(session, url)
            except requests.exceptions.InvalidSchema:
                fallback = None
            return StubAdapter(protocol, fallback=fallback)

        requests.Session.get_adapter = get_adapter  # type: ignore[assignment]

    logger.info("Installed requests interception hook")


def uninstall_requests_hook() -> None:
    """Restore the original requests.Session adapter lookup."""
    global _original_get_adapter

    with _hook_lock:
        if _original_get_adapter is None:
            return
        requests.Session.get_adapter = _original_get_adapter  # type: ignore[assignment]
        _original_get_adapter = None

    logger.info("Uninstalled requests interception hook")


def is_requests_hook_installed() -> bool:
    return _original_get_adapter is not None
