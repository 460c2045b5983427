"""
StubTap Delivery Engine

Per-request state machine that turns a builder outcome into the callback
sequence a consumer expects:

- Failure            -> on_failed
- NoContent          -> on_response_received, on_finished
- Content            -> on_response_received, on_data_loaded, on_finished
- StreamContent      -> on_response_received, on_data_loaded per chunk, on_finished

Streamed chunks are emitted by a single-worker executor, one step at a time,
with a fixed pacing delay between chunks.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Optional

from requests import PreparedRequest

from .models import (
    CachePolicy,
    Content,
    Failure,
    NoContent,
    Outcome,
    StreamContent,
    StubResponse,
    Success,
)
from .ranges import apply_range_to_response

logger = logging.getLogger("stubtap.delivery")


class StubClient(ABC):
    """Consumer of a stubbed response (the networking client side)."""

    @abstractmethod
    def on_response_received(self, response: StubResponse, cache_policy: CachePolicy) -> None:
        """Response metadata is available."""

    @abstractmethod
    def on_data_loaded(self, data: bytes) -> None:
        """A piece of the body is available."""

    @abstractmethod
    def on_finished(self) -> None:
        """The body is complete."""

    @abstractmethod
    def on_failed(self, error: Exception) -> None:
        """The request failed."""


class DeliveryState(Enum):
    """Delivery engine states."""

    IDLE = "idle"
    SCHEDULED = "scheduled"
    EMITTING = "emitting"
    FINISHED = "finished"
    CANCELLED = "cancelled"
    FAILED = "failed"


TERMINAL_STATES = (DeliveryState.FINISHED, DeliveryState.FAILED)


class DeliveryEngine:
    """
    Delivers one outcome to one client.

    Example:
        engine = DeliveryEngine(request, client, chunk_delay=0.01)
        engine.start(Success(response, StreamContent(data, chunk_size=10)))
        engine.wait()
    """

    def __init__(self, request: PreparedRequest, client: StubClient, chunk_delay: float = 0.01):
        """
        Initialize engine.

        Args:
            request: Intercepted request (its Range header is honored)
            client: Callback target
            chunk_delay: Pause in seconds after each streamed chunk
        """
        self.request = request
        self.client = client
        self.chunk_delay = chunk_delay
        self.error: Optional[BaseException] = None

        self._state = DeliveryState.IDLE
        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._cancel_requested = False
        self._closed = False

        self._data = b""
        self._chunk_size = 0
        self._offset = 0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: Optional[Future] = None

    @property
    def state(self) -> DeliveryState:
        return self._state

    @property
    def offset(self) -> int:
        """Number of streamed bytes emitted so far."""
        return self._offset

    @property
    def done(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def closed(self) -> bool:
        """Whether ``close`` was called; a closed engine never emits again."""
        return self._closed

    def start(self, outcome: Outcome) -> None:
        """Begin delivering ``outcome``."""
        if self._state is not DeliveryState.IDLE:
            raise RuntimeError(f"Delivery already started (state: {self._state.value})")

        if isinstance(outcome, Failure):
            self._state = DeliveryState.FAILED
            self.client.on_failed(outcome.error)
            self._settled.set()
            return

        if not isinstance(outcome, Success):
            raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

        download = outcome.download
        if isinstance(download, NoContent):
            response, _ = apply_range_to_response(self.request, outcome.response, b"")
            self.client.on_response_received(response, CachePolicy.NOT_ALLOWED)
            self._finish()
        elif isinstance(download, Content):
            response, data = apply_range_to_response(self.request, outcome.response, download.data)
            self.client.on_response_received(response, CachePolicy.NOT_ALLOWED)
            self.client.on_data_loaded(data)
            self._finish()
        elif isinstance(download, StreamContent):
            response, data = apply_range_to_response(self.request, outcome.response, download.data)
            self.client.on_response_received(response, CachePolicy.NOT_ALLOWED)
            self._stream(data, download.chunk_size)
        else:
            raise TypeError(f"Unknown download type: {type(download).__name__}")

    def stop(self) -> None:
        """
        Request the streaming loop to stop.

        The flag is consumed by the next scheduled step, which emits nothing
        and leaves the engine CANCELLED until ``resume`` is called.
        """
        with self._lock:
            if self._state in (DeliveryState.SCHEDULED, DeliveryState.EMITTING):
                self._cancel_requested = True
                logger.debug(f"Stop requested for {self.request.method} {self.request.url}")

    def resume(self) -> bool:
        """
        Continue a cancelled delivery from where it stopped.

        Returns:
            True if delivery was rescheduled
        """
        with self._lock:
            if self._state is not DeliveryState.CANCELLED or self._closed:
                return False
            self._settled.clear()
            self._schedule()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until delivery finishes, fails or is cancelled.

        Returns:
            False if the timeout expired first
        """
        return self._settled.wait(timeout)

    def close(self) -> None:
        """Release the chunk scheduler; a delivery still streaming stays CANCELLED."""
        with self._lock:
            self._closed = True
            if self._executor is not None:
                self._executor.shutdown(wait=False)

    def _finish(self) -> None:
        self._state = DeliveryState.FINISHED
        self.client.on_finished()
        self._settled.set()

    def _stream(self, data: bytes, chunk_size: int) -> None:
        if not data:
            self._finish()
            return

        self._data = data
        self._chunk_size = chunk_size
        self._offset = 0
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="stubtap-delivery")
        with self._lock:
            self._schedule()

    def _schedule(self) -> None:
        # Caller holds self._lock
        if self._closed:
            self._state = DeliveryState.CANCELLED
            self._settled.set()
            return
        self._state = DeliveryState.SCHEDULED
        self._pending = self._executor.submit(self._step)

    def _step(self) -> None:
        with self._lock:
            if self._cancel_requested or self._closed:
                self._cancel_requested = False
                self._state = DeliveryState.CANCELLED
                logger.debug(f"Delivery paused at offset {self._offset} for {self.request.url}")
                self._settled.set()
                return
            self._state = DeliveryState.EMITTING

        try:
            length = min(len(self._data) - self._offset, self._chunk_size)
            self.client.on_data_loaded(self._data[self._offset:self._offset + length])
            time.sleep(self.chunk_delay)
            self._offset += length

            if self._offset >= len(self._data):
                self._finish()
                self.close()
                return
        except Exception as e:
            self.error = e
            self._state = DeliveryState.FAILED
            logger.exception(f"Chunk delivery failed for {self.request.method} {self.request.url}")
            self._settled.set()
            self.close()
            raise

        with self._lock:
            self._schedule()
