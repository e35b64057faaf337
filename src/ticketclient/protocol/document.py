""" A class representation of a ticket document: the printer profile it is
    intended for, and the ordered sequence of commands to execute. These
    classes are thin wrappers around the dictionary form that goes on the
    wire; they do not interpret command payloads beyond exposing the named
    fields as properties.
"""

import copy

from . import fields


class PrinterProfile:
    """ The :class:`PrinterProfile` describes the printer a document is
        written for. Only the *model* is required for a document to be
        accepted; everything else is advisory to the daemon. Additional
        capability flags, such as ``has_qr``, are accepted as keyword
        arguments and preserved.

        A profile is immutable once constructed.

        :ivar model: Printer model name, for example "58mm PT-210".
        :ivar paper_width: Paper width in millimeters.
        :ivar code_table: Character code table, for example "WPC1252".
        :ivar dpi: Printer resolution in dots per inch.
        :ivar capabilities: Dictionary of any additional capability flags.
    """

    def __init__(self, model=None, paper_width=None, code_table=None, dpi=None, **capabilities):

        object.__setattr__(self, 'model', model)
        object.__setattr__(self, 'paper_width', paper_width)
        object.__setattr__(self, 'code_table', code_table)
        object.__setattr__(self, 'dpi', dpi)
        object.__setattr__(self, 'capabilities', dict(capabilities))


    def __setattr__(self, name, value):
        raise AttributeError('PrinterProfile is immutable')


    def __delattr__(self, name):
        raise AttributeError('PrinterProfile is immutable')


    def __eq__(self, other):
        if isinstance(other, PrinterProfile):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __hash__(self):
        return hash((self.model, self.paper_width, self.code_table, self.dpi))


    def __repr__(self):
        return 'PrinterProfile(' + repr(self.to_dict()) + ')'


    def supports(self, capability):
        """ Return True if the capability flag (for example ``'qr'`` or
            ``'has_qr'``) is set for this profile.
        """

        if capability.startswith('has_'):
            pass
        else:
            capability = 'has_' + capability

        return bool(self.capabilities.get(capability, False))


    @classmethod
    def from_dict(cls, profile):
        if profile is None:
            return None

        if isinstance(profile, PrinterProfile):
            return profile

        if isinstance(profile, dict):
            pass
        else:
            raise TypeError('profile must be a dictionary, not ' + type(profile).__name__)

        profile = dict(profile)
        decoded = cls(profile.pop('model', None), profile.pop('paper_width', None),
                      profile.pop('code_table', None), profile.pop('dpi', None))

        # Remaining keys are capability flags; they may use any name.
        decoded.capabilities.update(profile)
        return decoded


    def to_dict(self):
        profile = dict()

        if self.model is not None:
            profile['model'] = self.model
        if self.paper_width is not None:
            profile['paper_width'] = self.paper_width
        if self.code_table is not None:
            profile['code_table'] = self.code_table
        if self.dpi is not None:
            profile['dpi'] = self.dpi

        profile.update(self.capabilities)
        return profile


# end of class PrinterProfile



class Command:
    """ A :class:`Command` is one instruction in a ticket document. Each
        subclass represents a single command *kind*; the kind-specific
        payload is kept as the *data* dictionary, exactly as it appears on
        the wire, so that fields unknown to this module survive a round
        trip. Flat payload fields can be supplied as keyword arguments::

            Feed(lines=3)
            Cut(mode='full')

        :ivar data: The kind-specific payload for this command.
    """

    kind = None

    def __init__(self, data=None, **kwargs):

        if data is None:
            data = dict()
        elif isinstance(data, dict):
            data = copy.deepcopy(data)
        else:
            raise TypeError('command data must be a dictionary')

        data.update(kwargs)
        self.data = data


    def __eq__(self, other):
        if isinstance(other, Command):
            return self.kind == other.kind and self.data == other.data
        return NotImplemented


    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self.data)


    @classmethod
    def from_dict(cls, command):
        """ Decode the dictionary form of a command, ``{'type': kind, 'data':
            {...}}``, into the matching :class:`Command` subclass. Unknown
            kinds decode to an :class:`Opaque` command.
        """

        if isinstance(command, Command):
            return command

        if isinstance(command, dict):
            pass
        else:
            raise TypeError('command must be a dictionary, not ' + type(command).__name__)

        kind = command.get('type')
        data = command.get('data')

        try:
            subclass = kinds[kind]
        except (KeyError, TypeError):
            return Opaque(kind, data)

        return subclass(data)


    def to_dict(self):
        return {'type': self.kind, 'data': copy.deepcopy(self.data)}


    def _get(self, *path, default=None):
        value = self.data
        for key in path:
            try:
                value = value[key]
            except (KeyError, TypeError, IndexError):
                return default
        return value


# end of class Command



class Text(Command):
    """ Print a line of text, optionally preceded by a label. The *size*
        of the content style is a width-by-height multiplier such as
        ``'2x1'``.
    """

    kind = fields.TEXT

    def __init__(self, data=None, text=None, align=None, bold=None, size=None, label=None):

        Command.__init__(self, data)

        if text is not None:
            self.data.setdefault('content', dict())['text'] = text
        if align is not None:
            self.data.setdefault('content', dict())['align'] = align

        if bold is not None or size is not None:
            content = self.data.setdefault('content', dict())
            style = content.setdefault('content_style', dict())
            if bold is not None:
                style['bold'] = bold
            if size is not None:
                style['size'] = size

        if label is not None:
            self.data['label'] = {'text': label}

    @property
    def text(self):
        return self._get('content', 'text')

    @property
    def align(self):
        return self._get('content', 'align')

    @property
    def bold(self):
        return self._get('content', 'content_style', 'bold', default=False)

    @property
    def size(self):
        return self._get('content', 'content_style', 'size')

    @property
    def label(self):
        return self._get('label', 'text')

    @property
    def multiplier(self):
        """ The (width, height) multiplier tuple parsed from *size*, or
            (1, 1) if no size is set or it cannot be parsed.
        """

        size = self.size
        if size is None:
            return (1, 1)

        try:
            width, height = str(size).lower().split('x', 1)
            return (int(width), int(height))
        except ValueError:
            return (1, 1)



class Separator(Command):
    """ Repeat *char* *length* times across the paper.
    """

    kind = fields.SEPARATOR

    @property
    def char(self):
        return self._get('char')

    @property
    def length(self):
        return self._get('length')

    def render(self):
        char = self.char
        length = self.length
        if not char or not isinstance(length, int):
            return ''
        return str(char) * length



class Table(Command):
    """ A table with column definitions and rows of string cells. The
        number of cells in each row is expected to match the number of
        columns; that expectation is not enforced here.
    """

    kind = fields.TABLE

    def __init__(self, data=None, columns=None, rows=None, show_headers=None, **options):

        Command.__init__(self, data)

        if columns is not None:
            self.data.setdefault('definition', dict())['columns'] = list(columns)
        if rows is not None:
            self.data['rows'] = [list(row) for row in rows]
        if show_headers is not None:
            self.data['show_headers'] = show_headers
        if options:
            self.data.setdefault('options', dict()).update(options)

    @property
    def columns(self):
        return self._get('definition', 'columns', default=[])

    @property
    def rows(self):
        return self._get('rows', default=[])

    @property
    def show_headers(self):
        return self._get('show_headers', default=True)

    @property
    def options(self):
        return self._get('options', default={})



class Barcode(Command):

    kind = fields.BARCODE

    @property
    def symbology(self):
        return self._get('symbology')

    @property
    def value(self):
        return self._get('data')

    @property
    def height(self):
        return self._get('height')

    @property
    def width(self):
        return self._get('width')

    @property
    def hri_position(self):
        return self._get('hri_position')

    @property
    def align(self):
        return self._get('align')



class QR(Command):
    """ A QR code. *correction* is the error-correction level (L, M, Q or
        H); *logo* is an embedded image, typically base64 encoded.
    """

    kind = fields.QR

    @property
    def value(self):
        return self._get('data')

    @property
    def human_text(self):
        return self._get('human_text')

    @property
    def pixel_width(self):
        return self._get('pixel_width')

    @property
    def correction(self):
        return self._get('correction')

    @property
    def align(self):
        return self._get('align')

    @property
    def logo(self):
        return self._get('logo')

    @property
    def circle_shape(self):
        return self._get('circle_shape', default=False)



class Raw(Command):
    """ A raw byte sequence, expressed as hexadecimal digits with optional
        whitespace between bytes. This is a deliberate escape hatch; the
        contents are opaque to validation.
    """

    kind = fields.RAW

    @property
    def hex(self):
        return self._get('hex')

    @property
    def comment(self):
        return self._get('comment')

    @property
    def safe_mode(self):
        return self._get('safe_mode', default=False)

    def to_bytes(self):
        """ Decode the hexadecimal string into bytes. Raises ValueError if
            the string is not valid hexadecimal.
        """

        digits = self.hex
        if digits is None:
            return b''

        return bytes.fromhex(str(digits))



class Feed(Command):

    kind = fields.FEED

    @property
    def lines(self):
        return self._get('lines')



class Cut(Command):

    kind = fields.CUT

    @property
    def mode(self):
        return self._get('mode', default=fields.CUT_PARTIAL)



class Beep(Command):
    """ Sound the buzzer *times* times with *lapse* between each.
    """

    kind = fields.BEEP

    @property
    def times(self):
        return self._get('times')

    @property
    def lapse(self):
        return self._get('lapse')



class Opaque(Command):
    """ Fallback for command kinds unknown to this module. The kind and
        payload are preserved verbatim; the daemon decides what to do with it.
    """

    def __init__(self, kind, data=None):
        self.kind = kind
        Command.__init__(self, data)


    def to_dict(self):
        command = Command.to_dict(self)
        if self.kind is None:
            del command['type']
        return command



kinds = dict()
for _subclass in (Text, Separator, Table, Barcode, QR, Raw, Feed, Cut, Beep):
    kinds[_subclass.kind] = _subclass
del _subclass



class TicketDocument:
    """ The unit of work submitted to the daemon: a *version* string, the
        :class:`PrinterProfile` the document targets, and the ordered list
        of :class:`Command` instances. Order within *commands* is print order.

        Documents are decoded leniently; a document missing required fields
        can still be represented, it just won't pass
        :func:`ticketclient.protocol.validate.validate`.

        :ivar extra: Any top-level fields not otherwise recognized, preserved
                     for the encoded form.
    """

    def __init__(self, version=None, profile=None, commands=None, **extra):

        profile = PrinterProfile.from_dict(profile)

        decoded = list()
        for command in commands or ():
            decoded.append(Command.from_dict(command))

        self.version = version
        self.profile = profile
        self.commands = decoded
        self.extra = extra


    def __eq__(self, other):
        if isinstance(other, TicketDocument):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __iter__(self):
        return iter(self.commands)


    def __len__(self):
        return len(self.commands)


    def __repr__(self):
        model = None
        if self.profile is not None:
            model = self.profile.model
        return 'TicketDocument(version=%r, model=%r, commands=%d)' % (self.version, model, len(self.commands))


    def append(self, command):
        """ Append a command, either a :class:`Command` instance or its
            dictionary form, and return this document to allow chaining.
        """

        self.commands.append(Command.from_dict(command))
        return self


    @classmethod
    def from_dict(cls, document):
        if isinstance(document, TicketDocument):
            return document

        if isinstance(document, dict):
            pass
        else:
            raise TypeError('document must be a dictionary, not ' + type(document).__name__)

        document = dict(document)
        version = document.pop('version', None)
        profile = document.pop('profile', None)
        commands = document.pop('commands', None)

        decoded = cls(version, profile, commands)
        decoded.extra = document
        return decoded


    def to_dict(self):
        document = dict()
        document['version'] = self.version

        if self.profile is None:
            document['profile'] = None
        else:
            document['profile'] = self.profile.to_dict()

        commands = list()
        for command in self.commands:
            commands.append(command.to_dict())

        document['commands'] = commands
        document.update(copy.deepcopy(self.extra))
        return document


# end of class TicketDocument


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
