"""Connection manager: the one transport connection of a session, its
state machine, and the reconnection policy.

::

    Idle --connect()--> Connecting --open--> Open --close/error--> Closed
                            ^                                        |
                            |                                     timer
                            +------------- Reconnecting <------------+

Reconnection is unbounded, one attempt per fixed delay, and is only ever
scheduled after observing Closed. Each attempt uses a fresh transport; at
most one transport is live at a time, and signals from a superseded
transport are ignored.
"""

from __future__ import annotations

import enum
import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional, Type, Union

from . import events
from .protocol.message import Frame
from .transport import codec
from .transport.base import Transport, TransportError
from .transport.ws import WebSocketTransport


log = logging.getLogger(__name__)


class ConnectionState(enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


Scheduler = Callable[[float, Callable[[], None]], Any]


def schedule(delay: float, method: Callable[[], None]) -> threading.Timer:
    """Invoke *method* once after *delay* seconds on a timer thread.

    The returned handle has a ``cancel()`` method.
    """

    timer = threading.Timer(delay, method)
    timer.daemon = True
    timer.start()
    return timer


class ConnectionManager:
    """Owns the transport connection and its lifecycle.

    Two event streams are available via :meth:`register`: ``state``,
    invoked with ``(old, new)`` :class:`ConnectionState` values on every
    transition, and ``frame``, invoked with the text of every inbound frame.
    Callbacks run on the transport's or the timer's thread.
    """

    delay = 3.0

    def __init__(
        self,
        url: str,
        delay: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Type[Transport] = WebSocketTransport,
        scheduler: Scheduler = schedule,
    ):
        self.url = url
        if delay is not None:
            self.delay = float(delay)
        self.headers = dict(headers or {})
        self.transport_class = transport
        self.scheduler = scheduler

        self.state = ConnectionState.IDLE
        self.transport: Optional[Transport] = None
        self.attempts = 0

        self.listeners = events.Registry(("state", "frame"))
        self._generation = 0
        self._timer = None
        self._stopping = False
        self._lock = threading.RLock()

    def register(self, name: str, method: Callable) -> None:
        self.listeners.register(name, method)

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    @property
    def stopping(self) -> bool:
        """True while a deliberate disconnect() is in effect."""
        return self._stopping

    def connect(self) -> bool:
        """Start a connection attempt.

        Returns False, doing nothing, if an attempt is already in progress
        or the connection is already open.
        """

        with self._lock:
            if self.state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
                return False

            self._cancel_timer()
            self._stopping = False
            self._generation += 1
            generation = self._generation
            self.attempts += 1

            transport = self.transport_class(
                self.url,
                on_open=functools.partial(self._opened, generation),
                on_message=functools.partial(self._received, generation),
                on_close=functools.partial(self._closed, generation),
                headers=self.headers,
            )
            self.transport = transport
            self._transition(ConnectionState.CONNECTING)

        log.info("connecting to %s (attempt %d)", self.url, self.attempts)

        try:
            transport.open()
        except TransportError as e:
            self._closed(generation, str(e))

        return True

    def disconnect(self) -> None:
        """Close the connection deliberately; no reconnection follows."""

        with self._lock:
            self._stopping = True
            self._cancel_timer()
            transport = self.transport

            if self.state == ConnectionState.IDLE:
                return
            if self.state == ConnectionState.RECONNECTING:
                self._transition(ConnectionState.CLOSED)
                return

        if transport is not None:
            transport.close()

        # A transport that never reported back is abandoned here; any late
        # signal it produces belongs to a stale generation.
        with self._lock:
            if self.state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
                self._generation += 1
                self._transition(ConnectionState.CLOSED)

    def send(self, frame: Union[Frame, dict]) -> bool:
        """Send one frame. Returns False instead of raising if the
        connection is not open or the transport fails; nothing is queued.
        """

        with self._lock:
            transport = self.transport
            if self.state != ConnectionState.OPEN or transport is None:
                log.debug("not connected, cannot send %r", frame)
                return False

        try:
            transport.send(codec.encode_frame(frame))
        except TransportError as e:
            log.warning("send failed: %s", e)
            return False

        return True

    # --- internal ---
    def _transition(self, new: ConnectionState) -> None:
        old = self.state
        if old == new:
            return

        self.state = new
        log.debug("connection %s -> %s", old.value, new.value)
        self.listeners.emit("state", old, new)

    def _cancel_timer(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()

    def _opened(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self.state != ConnectionState.CONNECTING:
                return
            self._transition(ConnectionState.OPEN)

        log.info("connected to %s", self.url)

    def _received(self, generation: int, text: str) -> None:
        if generation != self._generation:
            return
        self.listeners.emit("frame", text)

    def _closed(self, generation: int, reason: Optional[str] = None) -> None:
        with self._lock:
            if generation != self._generation:
                return
            if self.state in (ConnectionState.CLOSED, ConnectionState.RECONNECTING, ConnectionState.IDLE):
                return

            self._transition(ConnectionState.CLOSED)

            if self._stopping:
                return

            log.warning("connection to %s lost (%s), retrying in %.1f s", self.url, reason or "closed", self.delay)
            self._transition(ConnectionState.RECONNECTING)
            self._timer = self.scheduler(self.delay, self._reconnect)

    def _reconnect(self) -> None:
        with self._lock:
            if self.state != ConnectionState.RECONNECTING:
                return
            self._timer = None
            self.connect()
