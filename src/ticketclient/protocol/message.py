""" Class representations of the frames exchanged with the ticket daemon.
    Outbound frames are :class:`Frame` instances; inbound frames decode to
    one :class:`Event` subclass per ``tipo`` discriminator, with
    :class:`Unknown` as the fallback for anything unrecognized.
"""

import itertools
import threading
import time

from .. import json
from . import fields
from .document import TicketDocument


class ProtocolError(ValueError):
    """ An inbound payload is not well-formed structured data.

        :ivar raw: The payload as received.
    """

    def __init__(self, message, raw=None):
        ValueError.__init__(self, message)
        self.raw = raw



class Frame:
    """ The :class:`Frame` provides a very thin encapsulation of an outbound
        frame: the *tipo* discriminator, an optional identification string,
        and the optional *datos* payload (a ticket document). The frame is
        sent as a JSON object containing only the fields that are set.

        :ivar valid_types: A set of valid strings for the frame type.
        :ivar timestamp: A UNIX epoch timestamp for the frame creation time.
    """

    valid_types = set((fields.TICKET, fields.GET_PRINTERS, fields.PING, fields.STATUS))

    def __init__(self, tipo, id=None, datos=None):

        if tipo in self.valid_types:
            pass
        else:
            raise ValueError('invalid frame type: ' + repr(tipo))

        if tipo == fields.TICKET:
            if id is None:
                raise ValueError('ticket frames must have an id')
            if datos is None:
                raise ValueError('ticket frames must carry a document')

        if isinstance(datos, TicketDocument):
            datos = datos.to_dict()

        self.tipo = tipo
        self.id = id
        self.datos = datos
        self.timestamp = time.time()


    def __eq__(self, other):
        if isinstance(other, Frame):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __repr__(self):
        return 'Frame(' + repr(self.to_dict()) + ')'


    def to_dict(self):
        frame = dict()
        frame[fields.TIPO] = self.tipo

        if self.id is not None:
            frame[fields.ID] = self.id
        if self.datos is not None:
            frame[fields.DATOS] = self.datos

        return frame


# end of class Frame



def ticket(id, document):
    """ Return a frame submitting *document* as the job identified by *id*.
    """

    return Frame(fields.TICKET, id, document)


def get_printers():
    return Frame(fields.GET_PRINTERS)


def ping(id=None):
    if id is None:
        id = _ping_next()
    return Frame(fields.PING, id)


def status():
    return Frame(fields.STATUS)


_ping_lock = threading.Lock()
_ping_ticker = itertools.count(1)


def _ping_next():
    """ Return the next liveness probe identifier.
    """

    with _ping_lock:
        number = next(_ping_ticker)

    return 'ping-%d' % (number)



def _integer(value, default):
    if value is None:
        return default

    try:
        return int(value)
    except (TypeError, ValueError):
        return default



class Event:
    """ An :class:`Event` is one decoded inbound frame. The original frame
        is always retained as *raw*; subclasses pull out the fields relevant
        to their kind.

        :ivar tipo: The (lower case) frame discriminator.
        :ivar message: The human-readable *mensaje*, if any.
        :ivar raw: The decoded frame dictionary.
    """

    tipo = None

    def __init__(self, raw):
        self.raw = raw
        self.message = raw.get(fields.MENSAJE)
        self.id = raw.get(fields.ID)


    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self.raw)


    @property
    def text(self):
        """ The best available human-readable rendition of this event.
        """

        if self.message:
            return str(self.message)

        return json.text(self.raw)


# end of class Event



class Info(Event):
    """ Informational passthrough text. Also used for inbound payloads that
        are valid JSON but not an object, in which case *raw* is empty and
        *message* holds the original text.
    """

    tipo = fields.INFO

    def __init__(self, raw, text=None):
        Event.__init__(self, raw)
        if text is not None:
            self.message = text



class Ack(Event):
    """ The job identified by *id* entered the daemon's queue; *current* and
        *capacity* describe the queue at that moment.
    """

    tipo = fields.ACK

    def __init__(self, raw):
        Event.__init__(self, raw)
        self.current = _integer(raw.get(fields.CURRENT), fields.DEFAULT_CURRENT)
        self.capacity = _integer(raw.get(fields.CAPACITY), fields.DEFAULT_CAPACITY)



class Result(Event):
    """ Terminal outcome for the job identified by *id*. Any *status* other
        than "success" is a failure.
    """

    tipo = fields.RESULT

    def __init__(self, raw):
        Event.__init__(self, raw)
        self.status = raw.get('status')

    @property
    def succeeded(self):
        return self.status == fields.SUCCESS



class Error(Event):
    """ An error not tied to a job's lifecycle, such as a rejected frame or
        an authentication failure. The *category* is one of ``auth``,
        ``rate_limit``, or ``general``, selected by inspecting the text.
    """

    tipo = fields.ERROR

    def __init__(self, raw):
        Event.__init__(self, raw)
        self.category = categorize(self.message)



class Pong(Event):

    tipo = fields.PONG



class Status(Event):
    """ Unsolicited or requested queue snapshot.
    """

    tipo = fields.STATUS

    def __init__(self, raw):
        Event.__init__(self, raw)
        self.current = _integer(raw.get(fields.CURRENT), fields.DEFAULT_CURRENT)
        self.capacity = _integer(raw.get(fields.CAPACITY), fields.DEFAULT_CAPACITY)



class PrinterInfo:
    """ One printer discovered by the daemon.
    """

    def __init__(self, name=None, port=None, status=None, printer_type=None,
                 is_default=False, driver=None, is_virtual=False, extra=None):

        self.name = name
        self.port = port
        self.status = status
        self.printer_type = printer_type
        self.is_default = bool(is_default)
        self.driver = driver
        self.is_virtual = bool(is_virtual)
        self.extra = dict(extra or {})


    def __repr__(self):
        return 'PrinterInfo(name=%r, port=%r, status=%r, printer_type=%r)' % (
            self.name, self.port, self.status, self.printer_type)


    @property
    def thermal(self):
        return self.printer_type == fields.THERMAL


    @classmethod
    def from_dict(cls, printer):
        if isinstance(printer, dict):
            known = dict()
            extra = dict()
            for key, value in printer.items():
                if key in _printer_keys:
                    known[key] = value
                else:
                    extra[key] = value
            return cls(extra=extra, **known)
        return cls(name=str(printer))


# end of class PrinterInfo


_printer_keys = ('name', 'port', 'status', 'printer_type', 'is_default', 'driver', 'is_virtual')



class Printers(Event):
    """ The list of printers known to the daemon, partitioned into
        *thermal* printers and everything *other*.
    """

    tipo = fields.PRINTERS

    def __init__(self, raw):
        Event.__init__(self, raw)

        printers = raw.get(fields.PRINTERS) or []
        self.printers = [PrinterInfo.from_dict(printer) for printer in printers]
        self.thermal = [printer for printer in self.printers if printer.thermal]
        self.other = [printer for printer in self.printers if not printer.thermal]



class Unknown(Event):
    """ Any frame with an unrecognized discriminator. Handled as
        informational text.
    """

    def __init__(self, raw, tipo=None):
        Event.__init__(self, raw)
        self.tipo = tipo



kinds = dict()
for _subclass in (Info, Ack, Result, Error, Pong, Status, Printers):
    kinds[_subclass.tipo] = _subclass
del _subclass



def categorize(message):
    """ Select the presentation category of an error message.
    """

    if message:
        message = str(message)
        if fields.AUTH_FAILED in message:
            return 'auth'
        if fields.RATE_LIMITED in message:
            return 'rate_limit'

    return 'general'



def decode(frame):
    """ Return the :class:`Event` for a decoded inbound *frame*. A frame
        without a ``tipo`` is informational; a frame that is valid JSON but
        not an object becomes an :class:`Info` carrying its text.
    """

    if isinstance(frame, dict):
        pass
    else:
        return Info(dict(), text=json.text(frame))

    tipo = frame.get(fields.TIPO) or fields.INFO
    tipo = str(tipo).lower()

    try:
        subclass = kinds[tipo]
    except KeyError:
        return Unknown(frame, tipo)

    return subclass(frame)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
