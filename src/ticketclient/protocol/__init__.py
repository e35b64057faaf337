from . import fields
from . import document
from . import message
from . import validate

from .document import TicketDocument, PrinterProfile, Command
from .message import Frame, ProtocolError
from .validate import ValidationError


"""
ticketclient Protocol Layer
===========================

This package defines the transport-agnostic vocabulary spoken with the
ticket daemon: the ticket document that describes a print job, and the
frames that carry it and report on its progress.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Session (session.py)
    Validates, records, submits; fans events out to the console

    │
    ▼
Document Model (document.py)
    TicketDocument, PrinterProfile, one Command class per kind
    Lenient decoding; unknown command kinds are preserved

    │
    ▼
Validator (validate.py)
    Structural checks only, first failure wins

    │
    ▼
Frames (message.py)
    Outbound Frame builders, inbound Event decoding
    One Event class per 'tipo', Unknown as the fallback

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for discriminators and frame keys

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Connection Manager (connection.py)
    Connection state machine, reconnection timer

Codec (transport/codec.py)
    Maps Frame <-> JSON text

Transport (transport/ws.py)
    Moves text frames over a WebSocket

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
