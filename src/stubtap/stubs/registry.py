"""
StubTap Stub Registry

Ordered, thread-safe collection of stubs with last-registered-wins
resolution.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple

from requests import PreparedRequest

from .models import Builder, Matcher, Stub

logger = logging.getLogger("stubtap.registry")


class ActivationGuard:
    """Runs an activation callback exactly once, even under concurrent callers."""

    def __init__(self, action: Optional[Callable[[], None]] = None):
        self._action = action
        self._lock = threading.Lock()
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def run(self) -> bool:
        """
        Run the action if it has not run yet.

        Returns:
            True if this call performed the activation
        """
        if self._done:
            return False

        with self._lock:
            if self._done:
                return False
            if self._action is not None:
                self._action()
            self._done = True

        return True


class StubRegistry:
    """
    Registry of stubs resolved from most- to least-recently added.

    Later registrations take precedence, so a test-local stub added after a
    suite-wide default overrides it for the requests both accept.

    Example:
        registry = StubRegistry(activation=install_hook)
        stub = registry.add_stub(matchers.uri('/users/*'), builders.json({'id': 1}))

        registry.resolve(request)  # -> stub
        registry.remove_stub(stub)
    """

    def __init__(self, activation: Optional[Callable[[], None]] = None, auto_activate: bool = True):
        """
        Initialize registry.

        Args:
            activation: Callback that routes requests through this registry,
                run once on the first registration
            auto_activate: If False, the activation callback is never run
        """
        self._stubs: List[Stub] = []
        self._lock = threading.RLock()
        self._activation = ActivationGuard(activation if auto_activate else None)

    @property
    def activated(self) -> bool:
        """Whether the activation callback has run."""
        return self._activation.done

    @property
    def stubs(self) -> Tuple[Stub, ...]:
        """Snapshot of registered stubs, oldest first."""
        with self._lock:
            return tuple(self._stubs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stubs)

    def __contains__(self, stub: Stub) -> bool:
        with self._lock:
            return stub in self._stubs

    def add(self, stub: Stub) -> Stub:
        """Append an already constructed stub."""
        with self._lock:
            self._stubs.append(stub)

        if self._activation.run():
            logger.info("Stub interception activated")
        logger.debug(f"Registered {stub!r}")

        return stub

    def add_stub(self, matcher: Matcher, builder: Builder) -> Stub:
        """Register a matcher and a builder as a new stub."""
        return self.add(Stub(matcher, builder))

    def remove_stub(self, stub: Stub) -> None:
        """Unregister the given stub; no-op if it is not registered."""
        with self._lock:
            try:
                self._stubs.remove(stub)
            except ValueError:
                return
        logger.debug(f"Removed {stub!r}")

    def remove_all_stubs(self) -> None:
        """Remove all registered stubs."""
        with self._lock:
            count = len(self._stubs)
            self._stubs.clear()
        logger.debug(f"Removed all {count} stubs")

    def resolve(self, request: PreparedRequest) -> Optional[Stub]:
        """
        Find the stub for a request.

        Searches backwards through the registered stubs and returns the last
        registered stub whose matcher accepts the request.

        Args:
            request: Intercepted request

        Returns:
            Matching Stub, or None
        """
        for stub in reversed(self.stubs):
            if stub.matcher(request):
                return stub
        return None
