"""WebSocket transport built on the websocket-client library.

Each :class:`WebSocketTransport` owns one ``WebSocketApp`` and the
background thread running its event loop. The library's own reconnection
support is not used; recovering from a lost connection is the job of the
connection manager, which creates a fresh transport for every attempt.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import websocket

from .base import Transport, TransportConnectionError


log = logging.getLogger(__name__)


class WebSocketTransport(Transport):
    """Text-frame WebSocket connection running on a daemon thread."""

    ping_interval = 30
    ping_timeout = 10

    def __init__(self, *args, **kwargs):
        Transport.__init__(self, *args, **kwargs)

        self._app: Optional[websocket.WebSocketApp] = None
        self._thread: Optional[threading.Thread] = None
        self._connected = False
        self._closed = False
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._connected

    def open(self) -> None:
        if self._app is not None:
            raise TransportConnectionError("transport already opened: " + self.url)

        header = [f"{key}: {value}" for key, value in self.headers.items()]

        self._app = websocket.WebSocketApp(
            self.url,
            header=header,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )

        self._thread = threading.Thread(target=self._run, name="ticketclient-ws", daemon=True)
        self._thread.start()

    def close(self) -> None:
        self._connected = False
        app = self._app
        if app is None:
            return

        try:
            app.close()
        except (websocket.WebSocketException, OSError) as e:
            log.debug("error closing %s: %s", self.url, e)

    def send(self, text: str) -> None:
        app = self._app
        if app is None or not self._connected:
            raise TransportConnectionError("not connected: " + self.url)

        try:
            app.send(text)
        except (websocket.WebSocketException, OSError) as e:
            raise TransportConnectionError(f"send to {self.url} failed: {e}") from e

    # --- internal ---
    def _run(self) -> None:
        reason = None
        try:
            self._app.run_forever(ping_interval=self.ping_interval, ping_timeout=self.ping_timeout)
        except Exception as e:
            reason = str(e)
            log.warning("WebSocket loop for %s exited: %s", self.url, e)
        finally:
            self._report_close(reason)

    def _report_close(self, reason: Optional[str]) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._connected = False
        self.on_close(reason)

    def _on_open(self, ws) -> None:
        self._connected = True
        self.on_open()

    def _on_message(self, ws, message) -> None:
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        self.on_message(message)

    def _on_error(self, ws, error) -> None:
        log.warning("WebSocket error from %s: %s", self.url, error)

    def _on_close(self, ws, close_status_code, close_msg) -> None:
        reason = None
        if close_status_code is not None:
            reason = f"{close_status_code} {close_msg or ''}".strip()
        self._report_close(reason)
