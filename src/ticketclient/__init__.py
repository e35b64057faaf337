""" Python client for the ticket daemon. This includes the ticket document
    model and its validation, the connection to the daemon with automatic
    reconnection, and the tracking of submitted jobs as the daemon reports
    on them.
"""

# Utility components.

from . import json
from . import events

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import config

# Primary public-facing interfaces.

from . import templates
from .protocol import TicketDocument, PrinterProfile, ValidationError
from .transport import TransportError, SubmissionError
from .ledger import Job, JobStatus, Ledger
from .connection import ConnectionManager, ConnectionState
from .dispatch import Dispatcher
from .session import Session

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
