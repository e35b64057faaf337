""" Classification of inbound frames. The :class:`Dispatcher` turns each
    frame (and each connection state change) into job ledger transitions
    and into the externally observable events a console presents: log
    entries, notifications, queue and printer displays.
"""

import logging

from . import events
from .connection import ConnectionState
from .protocol import message
from .protocol.message import ProtocolError
from .transport import codec


log = logging.getLogger(__name__)


# Log entry categories, as shown in a console's log panel.

INFO = 'INFO'
ACK = 'ACK'
RESULT = 'RESULT'
ERROR = 'ERROR'
PONG = 'PONG'
STATUS = 'STATUS'
PRINTERS = 'PRINTERS'
SENT = 'SENT'

# Notification levels.

SUCCESS = 'success'
FAILURE = 'error'
WARNING = 'warning'
NOTICE = 'info'

streams = ('log', 'notify', 'queue', 'printers', 'job', 'refresh', 'event')


class Dispatcher:
    """ Consumes inbound frames in arrival order. Each frame is decoded,
        applied to the *ledger*, and reported through the *listeners*
        registry on these streams:

        * ``log``: (category, text)
        * ``notify``: (level, text)
        * ``queue``: (current, capacity)
        * ``printers``: (thermal, other) lists of PrinterInfo
        * ``job``: (job,) whenever a ledger transition happens
        * ``refresh``: () when an out-of-band status refresh is due
        * ``event``: (event,) for every decoded frame

        The dispatcher itself holds no state beyond those references; all
        session state lives in the ledger and the session.
    """

    def __init__(self, ledger, listeners=None):

        if listeners is None:
            listeners = events.Registry(streams)

        self.ledger = ledger
        self.listeners = listeners

        self.handlers = {
            message.Info: self._info,
            message.Ack: self._ack,
            message.Result: self._result,
            message.Error: self._error,
            message.Pong: self._pong,
            message.Status: self._status,
            message.Printers: self._printers,
            message.Unknown: self._info,
        }


    def emit(self, name, *args):
        self.listeners.emit(name, *args)


    def handle(self, kind, value):
        """ Entry point for :class:`ticketclient.channel.Channel` items.
        """

        if kind == 'frame':
            self.dispatch(value)
        elif kind == 'state':
            self.state_changed(*value)
        else:
            log.warning('unexpected channel item: %r', kind)


    def dispatch(self, raw):
        """ Decode and process one inbound frame. Returns the decoded
            :class:`~ticketclient.protocol.message.Event`, or None if the
            payload was not well-formed; those are logged as raw text.
        """

        try:
            frame = codec.decode_frame(raw)
        except ProtocolError as e:
            log.debug('unparseable frame: %s', e)
            if isinstance(raw, bytes):
                raw = raw.decode('utf-8', errors='replace')
            self.emit('log', INFO, str(raw))
            return None

        event = message.decode(frame)
        log.debug('received %s', type(event).__name__)

        handler = self.handlers[type(event)]
        handler(event)

        self.emit('event', event)
        return event


    def state_changed(self, old, new, deliberate=False):
        """ Report a connection state transition. *deliberate* is True when
            the transition follows an explicit disconnect, in which case no
            retry is coming and the closure is not reported as a failure.
        """

        if new == ConnectionState.CONNECTING:
            self.emit('log', INFO, 'Connecting...')

        elif new == ConnectionState.OPEN:
            self.emit('log', INFO, 'Connected to the ticket daemon')
            self.emit('notify', SUCCESS, 'Connected to service')
            self.emit('refresh')

        elif new == ConnectionState.CLOSED and deliberate:
            self.emit('log', INFO, 'Disconnected')

        elif new == ConnectionState.CLOSED and old == ConnectionState.OPEN:
            self.emit('log', ERROR, 'Connection lost. Retrying...')
            self.emit('notify', FAILURE, 'Connection lost')

        elif new == ConnectionState.CLOSED:
            self.emit('log', ERROR, 'Connection failed. Retrying...')


    # --- per-kind handlers ---

    def _transition(self, event):
        job = self.ledger.apply(event)
        if job is not None:
            self.emit('job', job)
        return job


    def _info(self, event):
        self.emit('log', INFO, event.text)


    def _ack(self, event):
        self._transition(event)

        self.emit('log', ACK, 'Queued: %s (position: %d/%d)' % (event.id, event.current, event.capacity))
        self.emit('queue', event.current, event.capacity)
        self.emit('refresh')


    def _result(self, event):
        self._transition(event)

        if event.succeeded:
            self.emit('log', RESULT, 'Completed: %s - %s' % (event.id, event.message))
            self.emit('notify', SUCCESS, 'Print completed')
        else:
            self.emit('log', ERROR, 'Failed [%s]: %s' % (event.id, event.message))
            self.emit('notify', FAILURE, 'Print failed')

        self.emit('refresh')


    def _error(self, event):
        # Error frames never touch the ledger, even when they carry an id.

        text = event.message or event.text

        if event.category == 'auth':
            self.emit('log', ERROR, 'Authentication: ' + text)
        elif event.category == 'rate_limit':
            self.emit('log', ERROR, 'Rate limit: ' + text)
        else:
            self.emit('log', ERROR, text)

        self.emit('notify', FAILURE, text)


    def _pong(self, event):
        self.emit('log', PONG, 'Pong (id: %s)' % (event.id,))


    def _status(self, event):
        self.emit('log', STATUS, 'Queue: %d/%d' % (event.current, event.capacity))
        self.emit('queue', event.current, event.capacity)


    def _printers(self, event):
        self.emit('log', PRINTERS, 'Found %d printers' % (len(event.printers),))
        self.emit('log', PRINTERS, '   -> Thermal: %d, Other: %d' % (len(event.thermal), len(event.other)))

        for printer in event.thermal:
            default = ''
            if printer.is_default:
                default = ' (default)'
            self.emit('log', PRINTERS, '      * %s [%s] (%s)%s' % (printer.name, printer.port, printer.status, default))

        self.emit('printers', event.thermal, event.other)


# end of class Dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
