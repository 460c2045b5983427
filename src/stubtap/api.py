"""
StubTap Registration API

Process-wide default registry and protocol. The first ``add_stub`` installs
the requests interception hook, after which every ``requests`` call consults
the registered stubs first.

Example:
    import stubtap
    from stubtap import builders, matchers

    stub = stubtap.add_stub(matchers.uri('https://api.example.com/users/*'),
                            builders.json({'id': 1}))
    requests.get('https://api.example.com/users/1').json()  # {'id': 1}
    stubtap.remove_stub(stub)
"""

import threading
from typing import Optional

from .adapters.requests_adapter import (
    install_requests_hook,
    is_requests_hook_installed,
    uninstall_requests_hook
)
from .common.config import StubConfig
from .stubs.models import Builder, Matcher, Stub
from .stubs.protocol import StubProtocol
from .stubs.registry import StubRegistry

_default_lock = threading.Lock()
_default_protocol: Optional[StubProtocol] = None


def _build_protocol(config: StubConfig) -> StubProtocol:
    config.apply_logging()
    protocol = None

    def activate():
        install_requests_hook(protocol)

    registry = StubRegistry(activation=activate, auto_activate=config.auto_activate)
    protocol = StubProtocol(registry, config=config)
    return protocol


def configure(config: Optional[StubConfig] = None) -> StubProtocol:
    """
    Replace the default registry and protocol with ones built from ``config``.

    Stubs registered on the previous default registry are dropped and the
    requests hook is removed until the new registry activates it again.
    """
    global _default_protocol

    config = config or StubConfig()
    with _default_lock:
        if is_requests_hook_installed():
            uninstall_requests_hook()
        _default_protocol = _build_protocol(config)
        return _default_protocol


def default_protocol() -> StubProtocol:
    """The process-wide protocol, created on first use."""
    global _default_protocol

    with _default_lock:
        if _default_protocol is None:
            _default_protocol = _build_protocol(StubConfig())
        return _default_protocol


def default_registry() -> StubRegistry:
    """The process-wide stub registry."""
    return default_protocol().registry


def add_stub(matcher: Matcher, builder: Builder) -> Stub:
    """Register a matcher and a builder as a new stub."""
    return default_registry().add_stub(matcher, builder)


def remove_stub(stub: Stub) -> None:
    """Unregister the given stub."""
    default_registry().remove_stub(stub)


def remove_all_stubs() -> None:
    """Remove all registered stubs."""
    default_registry().remove_all_stubs()
