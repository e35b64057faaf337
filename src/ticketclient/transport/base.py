"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`ticketclient.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class SubmissionError(TransportError):
    """A frame could not be sent because the connection is not open."""


OpenCallback = Callable[[], None]
MessageCallback = Callable[[str], None]
CloseCallback = Callable[[Optional[str]], None]


class Transport(ABC):
    """Minimal contract for a message-oriented duplex transport.

    A transport is single use: :meth:`open` starts one connection attempt,
    and the three callbacks report what happens to it. *on_close* is invoked
    exactly once per transport, whether the attempt failed outright or an
    open connection was later lost; it receives a short reason, or None.
    """

    def __init__(
        self,
        url: str,
        on_open: OpenCallback,
        on_message: MessageCallback,
        on_close: CloseCallback,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.url = url
        self.on_open = on_open
        self.on_message = on_message
        self.on_close = on_close
        self.headers = dict(headers or {})

    @abstractmethod
    def open(self) -> None:
        """Begin establishing the connection; must not block on the network."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the connection."""

    @abstractmethod
    def send(self, text: str) -> None:
        """Send one text frame. Raises TransportConnectionError on failure."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
