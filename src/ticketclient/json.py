''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps` for frames
    exchanged with the ticket daemon.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available. orjson
# is a declared dependency; msgspec is picked up when present.

msgspec = None
orjson = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    import orjson


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. The
# decode errors raised by the two libraries do not share a base class, so
# the appropriate one is exported as DecodeError for callers to catch.

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = msgspec.DecodeError
else:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError


def text(value):
    """ Return the JSON encoding of *value* as a str, which is what the
        WebSocket transport puts on the wire as a text frame.
    """

    return dumps(value).decode('utf-8')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
