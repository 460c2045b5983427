"""Exceptions raised or delivered by the stub layer."""

from typing import Optional

import requests
from requests import PreparedRequest

DEFAULT_UNMATCHED_MESSAGE = "Handling request without a matching stub."


class StubError(Exception):
    """Base class for stub layer errors."""


class UnmatchedRequestError(StubError):
    """No registered stub accepted the request."""

    def __init__(self, message: str = DEFAULT_UNMATCHED_MESSAGE,
                 request: Optional[PreparedRequest] = None):
        super().__init__(message)
        self.message = message
        self.request = request


class StubConnectionError(requests.ConnectionError):
    """A stubbed request failed before a response could be produced."""

    def __init__(self, error: Exception, request: Optional[PreparedRequest] = None):
        super().__init__(str(error), request=request)
        self.error = error
