"""Shared fixtures for StubTap tests."""

import pytest
import requests

from stubtap.adapters.requests_adapter import uninstall_requests_hook
from stubtap.common.config import StubConfig
from stubtap.stubs.delivery import StubClient
from stubtap.stubs.protocol import StubProtocol
from stubtap.stubs.registry import StubRegistry


class RecordingClient(StubClient):
    """StubClient that records every callback in order."""

    def __init__(self):
        self.events = []

    def on_response_received(self, response, cache_policy):
        self.events.append(('response', response, cache_policy))

    def on_data_loaded(self, data):
        self.events.append(('data', data))

    def on_finished(self):
        self.events.append(('finished',))

    def on_failed(self, error):
        self.events.append(('failed', error))

    @property
    def kinds(self):
        return [event[0] for event in self.events]

    @property
    def chunks(self):
        return [event[1] for event in self.events if event[0] == 'data']

    @property
    def response(self):
        for event in self.events:
            if event[0] == 'response':
                return event[1]
        return None


def make_request(url='https://api.example.com/users/123', method='GET', headers=None):
    """Build a prepared request without sending it."""
    return requests.Request(method, url, headers=headers or {}).prepare()


@pytest.fixture
def recording_client():
    return RecordingClient()


@pytest.fixture
def registry():
    """Registry with no activation hook."""
    return StubRegistry()


@pytest.fixture
def config():
    return StubConfig(chunk_delay_ms=0)


@pytest.fixture
def protocol(registry, config):
    return StubProtocol(registry, config=config)


@pytest.fixture(autouse=True)
def restore_requests():
    """Never leave the global requests hook installed between tests."""
    yield
    uninstall_requests_hook()
