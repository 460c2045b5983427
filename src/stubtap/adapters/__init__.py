"""
StubTap Adapters

Host networking stack bindings.
"""

from .requests_adapter import (
    CollectingClient,
    StubAdapter,
    install_requests_hook,
    uninstall_requests_hook,
    is_requests_hook_installed
)

__all__ = [
    'CollectingClient',
    'StubAdapter',
    'install_requests_hook',
    'uninstall_requests_hook',
    'is_requests_hook_installed',
]
