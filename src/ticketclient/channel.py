"""Ordered in-process event channel.

Inbound frames and connection state changes are produced on whichever
thread the transport or the reconnection timer happens to be running on.
They are funneled through a :class:`Channel` and consumed, strictly in the
order they were put, by a single background thread. Everything that
mutates the job ledger runs on that one thread.

Items go into a thread-safe queue, and a ZeroMQ PAIR socket pair carries one
wakeup signal per item to a poller in the consumer thread.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Any, Callable, Optional

import zmq


log = logging.getLogger(__name__)

zmq_context = zmq.Context()
_channel_ids = itertools.count()

_STOP = object()


class Channel:
    """Single-consumer ordered channel of ``(kind, value)`` items."""

    def __init__(self, handler: Callable[[str, Any], None], name: str = "events"):
        self.handler = handler
        self.name = name
        self.shutdown = False
        self.processed = 0

        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._idle = threading.Condition()
        self._pending = 0

        internal = f"inproc://ticketclient.Channel:{name}:{next(_channel_ids)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        # ZeroMQ sockets are not thread safe; producers on different threads
        # take turns on the sending half.
        self._signal_lock = threading.Lock()

        self.thread = threading.Thread(target=self.run, name=f"ticketclient-{name}", daemon=True)
        self.thread.start()

    def put(self, kind: str, value: Any = None) -> None:
        with self._signal_lock:
            if self.shutdown:
                log.debug("channel %s closed, dropping %s item", self.name, kind)
                return

            with self._idle:
                self._pending += 1

            self._queue.put((kind, value))
            self._signal_tx.send(b"")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Block until every item put so far has been handled."""

        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def close(self, timeout: float = 5) -> None:
        with self._signal_lock:
            if self.shutdown:
                return
            self.shutdown = True
            self._queue.put(_STOP)
            self._signal_tx.send(b"")

        if threading.current_thread() is not self.thread:
            self.thread.join(timeout)

        with self._signal_lock:
            self._signal_tx.close(linger=0)

    # --- internal ---
    def _handle_one(self) -> bool:
        # Clear one signal and handle one item.
        self._signal_rx.recv(flags=zmq.NOBLOCK)
        item = self._queue.get(block=False)

        if item is _STOP:
            return False

        kind, value = item
        try:
            self.handler(kind, value)
        except Exception:
            log.exception("channel %s failed handling %s item", self.name, kind)
        finally:
            self.processed += 1
            with self._idle:
                self._pending -= 1
                self._idle.notify_all()

        return True

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self._signal_rx, zmq.POLLIN)

        running = True
        while running:
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    running = self._handle_one()
                    if not running:
                        break

        self._signal_rx.close(linger=0)
