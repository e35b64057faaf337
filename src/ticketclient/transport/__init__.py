"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportConnectionError,
    SubmissionError,
)
from . import codec
from .ws import WebSocketTransport
