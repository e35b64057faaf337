import pytest

import ticketclient
from ticketclient.protocol import message
from ticketclient.transport import codec


def test_ticket_frame(document):

    frame = message.ticket('job-1', document)
    assert frame.to_dict() == {'tipo': 'ticket', 'id': 'job-1', 'datos': document}

    ticket = ticketclient.TicketDocument.from_dict(document)
    assert message.ticket('job-1', ticket) == frame

    with pytest.raises(ValueError):
        message.Frame('ticket', datos=document)

    with pytest.raises(ValueError):
        message.Frame('ticket', id='job-1')


def test_other_frames():

    assert message.status().to_dict() == {'tipo': 'status'}
    assert message.get_printers().to_dict() == {'tipo': 'get_printers'}
    assert message.ping('ping-x').to_dict() == {'tipo': 'ping', 'id': 'ping-x'}

    first = message.ping()
    second = message.ping()
    assert first.id != second.id

    with pytest.raises(ValueError):
        message.Frame('ack')


def test_encode_decode(document):

    text = codec.encode_frame(message.ticket('job-1', document))
    assert isinstance(text, str)
    assert codec.decode_frame(text) == {'tipo': 'ticket', 'id': 'job-1', 'datos': document}
    assert codec.decode_frame(text.encode('utf-8'))['id'] == 'job-1'


def test_decode_errors():

    for bad in ('', b'', None, '{', 'not json'):
        with pytest.raises(message.ProtocolError) as caught:
            codec.decode_frame(bad)
        assert caught.value.raw == bad


def test_decode_kinds():

    expected = (
        ({'tipo': 'info', 'mensaje': 'hi'}, message.Info),
        ({'mensaje': 'hi'}, message.Info),
        ({'tipo': 'ack', 'id': 'a'}, message.Ack),
        ({'tipo': 'ACK', 'id': 'a'}, message.Ack),
        ({'tipo': 'result', 'id': 'a', 'status': 'success'}, message.Result),
        ({'tipo': 'error', 'mensaje': 'nope'}, message.Error),
        ({'tipo': 'pong', 'id': 'ping-1'}, message.Pong),
        ({'tipo': 'status'}, message.Status),
        ({'tipo': 'printers', 'printers': []}, message.Printers),
        ({'tipo': 'surprise'}, message.Unknown),
    )

    for raw, subclass in expected:
        event = message.decode(raw)
        assert type(event) is subclass
        assert event.raw is raw


def test_queue_defaults():

    event = message.decode({'tipo': 'status', 'current': 'many'})
    assert event.current == 0
    assert event.capacity == 100

    event = message.decode({'tipo': 'ack', 'id': 'a', 'current': 4, 'capacity': 8})
    assert event.current == 4
    assert event.capacity == 8


def test_result_status():

    assert message.decode({'tipo': 'result', 'status': 'success'}).succeeded == True
    assert message.decode({'tipo': 'result', 'status': 'error'}).succeeded == False
    assert message.decode({'tipo': 'result'}).succeeded == False


def test_categorize():

    assert message.categorize('Authentication failed: invalid token') == 'auth'
    assert message.categorize('Rate limited: too many requests') == 'rate_limit'
    assert message.categorize('Queue full') == 'general'
    assert message.categorize(None) == 'general'


def test_event_text():

    assert message.decode({'tipo': 'info', 'mensaje': 'hello'}).text == 'hello'

    event = message.decode({'tipo': 'surprise'})
    assert ticketclient.json.loads(event.text) == {'tipo': 'surprise'}

    event = message.decode([1, 2, 3])
    assert isinstance(event, message.Info)
    assert ticketclient.json.loads(event.text) == [1, 2, 3]


def test_printer_info():

    printer = message.PrinterInfo.from_dict({'name': 'PT-210', 'printer_type': 'thermal', 'vendor': 'x'})
    assert printer.thermal == True
    assert printer.is_default == False

    printer = message.PrinterInfo.from_dict('Generic')
    assert printer.name == 'Generic'
    assert printer.thermal == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
