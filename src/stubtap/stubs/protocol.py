"""
StubTap Interception Protocol

The hook a host networking stack calls into: ``can_handle`` decides whether
a request is stubbed, ``start_handling`` delivers it to a client and
``stop_handling`` stops an in-flight delivery.
"""

import logging
import threading
from typing import Dict, Optional

from requests import PreparedRequest

from ..common.config import StubConfig
from .delivery import DeliveryEngine, StubClient
from .errors import UnmatchedRequestError
from .models import Failure
from .registry import StubRegistry

logger = logging.getLogger("stubtap.protocol")


class StubProtocol:
    """
    Routes intercepted requests through a stub registry.

    Example:
        protocol = StubProtocol(registry)
        if protocol.can_handle(request):
            engine = protocol.start_handling(request, client)
            engine.wait()
    """

    def __init__(self, registry: StubRegistry, config: Optional[StubConfig] = None):
        self.registry = registry
        self.config = config or StubConfig()
        self._engines: Dict[int, DeliveryEngine] = {}
        self._lock = threading.Lock()

    def can_handle(self, request: PreparedRequest) -> bool:
        """Whether a registered stub accepts the request."""
        return self.registry.resolve(request) is not None

    def start_handling(self, request: PreparedRequest, client: StubClient) -> DeliveryEngine:
        """
        Resolve the request's stub and start delivering its outcome.

        Args:
            request: Intercepted request
            client: Callback target for the response

        Returns:
            The DeliveryEngine handling this request
        """
        stub = self.registry.resolve(request)
        if stub is None:
            logger.warning(f"No stub found for {request.method} {request.url}")
            outcome = Failure(UnmatchedRequestError(self.config.unmatched_message, request=request))
        else:
            logger.debug(f"Handling {request.method} {request.url} with {stub!r}")
            outcome = stub.builder(request)

        engine = DeliveryEngine(request, client, chunk_delay=self.config.chunk_delay_seconds)
        with self._lock:
            self._prune()
            self._engines[id(request)] = engine

        try:
            engine.start(outcome)
        except Exception:
            self.finish_handling(request)
            raise

        return engine

    def stop_handling(self, request: PreparedRequest) -> None:
        """Stop delivery for the request, if it is still in flight."""
        with self._lock:
            engine = self._engines.get(id(request))
        if engine is not None:
            engine.stop()

    def finish_handling(self, request: PreparedRequest) -> None:
        """Close and forget the request's engine once the caller is done with it."""
        with self._lock:
            engine = self._engines.pop(id(request), None)
        if engine is not None:
            engine.close()

    def engine_for(self, request: PreparedRequest) -> Optional[DeliveryEngine]:
        """The engine handling ``request``, if any."""
        with self._lock:
            return self._engines.get(id(request))

    def _prune(self) -> None:
        # Caller holds self._lock
        for key in [k for k, e in self._engines.items() if e.done or e.closed]:
            del self._engines[key]
