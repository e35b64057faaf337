"""Session context: one connection, one job ledger, one dispatcher.

A :class:`Session` is the explicit owner of everything that would
otherwise be ambient state in an operator console: the connection and its
state, the ledger of submitted jobs, the jobs-sent counter, and the last
health report. Construction does no I/O; :meth:`Session.start` connects and
begins health polling, :meth:`Session.stop` tears both down.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional, Type, Union

from . import events
from . import health
from . import templates
from .channel import Channel
from .config import SessionConfig
from .connection import ConnectionManager, ConnectionState, Scheduler, schedule
from .dispatch import Dispatcher, FAILURE, INFO, SENT, WARNING
from . import dispatch
from .ledger import Ledger
from .protocol import message
from .protocol import validate
from .protocol.document import TicketDocument
from .transport.base import SubmissionError, Transport
from .transport.ws import WebSocketTransport


log = logging.getLogger(__name__)

streams = ("state", "frame", "health") + dispatch.streams

Document = Union[TicketDocument, dict]


class Session:
    """Client-side session with a ticket daemon.

    Observable streams, subscribed to with :meth:`register`:

    * ``state``: (old, new) :class:`ConnectionState`
    * ``frame``: (text,) for every inbound frame, before classification
    * ``health``: (report,) after every health refresh
    * plus every stream of :class:`ticketclient.dispatch.Dispatcher`

    Once started, all callbacks for inbound traffic run on the session's
    channel thread, in arrival order. Callbacks are held by weak reference.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        transport: Type[Transport] = WebSocketTransport,
        scheduler: Scheduler = schedule,
        http: Any = None,
    ):
        if config is None:
            config = SessionConfig.from_environment()

        self.config = config
        self.http = http
        self.health: Optional[health.HealthReport] = None
        self.jobs_sent = 0

        self.listeners = events.Registry(streams)
        self.ledger = Ledger()
        self.dispatcher = Dispatcher(self.ledger, self.listeners)
        self.connection = ConnectionManager(
            config.ws_url,
            delay=config.reconnect_delay,
            headers=config.headers,
            transport=transport,
            scheduler=scheduler,
        )
        self.poller = health.Poller(self._poll, config.poll_interval)
        self.channel: Optional[Channel] = None

        self.listeners.register("refresh", self.refresh)
        self.connection.register("state", self._state_changed)
        self.connection.register("frame", self._frame_received)

        self._lock = threading.Lock()

    def __enter__(self) -> "Session":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"Session({self.config.ws_url!r}, {self.state.value})"

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    def register(self, name: str, method: Callable) -> None:
        self.listeners.register(name, method)

    # --- lifecycle ---
    def start(self) -> None:
        log.debug("starting session with %s", self.config.ws_url)
        if self.channel is None:
            self.channel = Channel(self._handle, "session")

        self.connection.connect()
        self.poller.start()

    def stop(self, timeout: float = 5) -> None:
        log.debug("stopping session with %s", self.config.ws_url)
        self.poller.stop()
        self.connection.disconnect()

        channel = self.channel
        if channel is not None:
            channel.join(timeout)
            channel.close(timeout)
            self.channel = None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until all inbound traffic received so far is processed."""

        channel = self.channel
        if channel is None:
            return True
        return channel.join(timeout)

    # --- submission ---
    def submit(self, document: Document) -> str:
        """Validate and submit *document* as a new job; return its id.

        Raises ValidationError, with nothing sent or recorded, if the
        document is missing a required field. Raises SubmissionError if
        the frame could not be sent; the job is recorded as Failed.
        """

        validate.validate(document)

        job_id = self.ledger.submit(document)
        if not self._send_ticket(job_id, document):
            raise SubmissionError(f"job {job_id} not sent: not connected")

        self.listeners.emit("log", SENT, f"Job: {job_id}")
        return job_id

    def burst(self, document: Optional[Document] = None, count: Optional[int] = None) -> List[str]:
        """Submit *count* jobs for the same *document* back to back.

        The ``burstable`` template is used if no document is given. Returns
        the ids of the jobs actually sent; any that could not be sent are
        recorded as Failed.
        """

        if document is None:
            document = templates.get("burstable")
        if count is None:
            count = self.config.burst_size

        validate.validate(document)

        self.listeners.emit("log", INFO, f"BURST: sending {count} jobs...")

        sent = []
        for job_id in self.ledger.bulk_submit(document, count):
            if self._send_ticket(job_id, document):
                sent.append(job_id)

        self.listeners.emit("notify", WARNING, f"Burst: {len(sent)} jobs sent")
        self.refresh()
        return sent

    def _send_ticket(self, job_id: str, document: Document) -> bool:
        if isinstance(document, TicketDocument):
            document = document.to_dict()

        if self.send(message.ticket(job_id, document)):
            with self._lock:
                self.jobs_sent += 1
            return True

        self.ledger.fail(job_id, "not connected")
        return False

    # --- other requests ---
    def send(self, frame: message.Frame) -> bool:
        """Send one frame; notify and return False if not connected."""

        if self.connection.send(frame):
            return True

        self.listeners.emit("notify", FAILURE, "Not connected")
        return False

    def ping(self) -> Optional[str]:
        frame = message.ping()
        if self.send(frame):
            self.listeners.emit("log", SENT, f"Ping ({frame.id})")
            return frame.id
        return None

    def request_status(self) -> bool:
        if self.send(message.status()):
            self.listeners.emit("log", SENT, "Status request")
            return True
        return False

    def request_printers(self) -> bool:
        if self.send(message.get_printers()):
            self.listeners.emit("log", SENT, "Requesting printer list")
            return True
        return False

    # --- health ---
    def refresh(self) -> None:
        """Request an out-of-band health refresh.

        With the poller running this only wakes it, so the request itself
        happens on the poller's thread.
        """

        if self.poller.running:
            self.poller.wake()
        else:
            self._poll()

    def _poll(self) -> None:
        report = health.fetch(self.config.health_url, self.config.health_timeout, self.http)
        self.health = report

        self.listeners.emit("health", report)
        if report.reachable:
            self.listeners.emit("queue", report.current, report.capacity)

    # --- inbound traffic ---
    def _state_changed(self, old: ConnectionState, new: ConnectionState) -> None:
        self._deliver("state", (old, new, self.connection.stopping))

    def _frame_received(self, text: str) -> None:
        self._deliver("frame", text)

    def _deliver(self, kind: str, value: Any) -> None:
        channel = self.channel
        if channel is None:
            self._handle(kind, value)
        else:
            channel.put(kind, value)

    def _handle(self, kind: str, value: Any) -> None:
        if kind == "state":
            old, new = value[:2]
            self.listeners.emit("state", old, new)
        elif kind == "frame":
            self.listeners.emit("frame", value)

        self.dispatcher.handle(kind, value)
