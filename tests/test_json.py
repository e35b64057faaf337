import json
import ticketclient


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_ticketclient_encode_and_decode():
    encode_and_decode(ticketclient.json.dumps, ticketclient.json.loads)


def test_text():
    text = ticketclient.json.text({'tipo': 'ping', 'id': 'ping-1'})
    assert isinstance(text, str)
    assert json.loads(text) == {'tipo': 'ping', 'id': 'ping-1'}


def test_decode_error():
    try:
        ticketclient.json.loads(b'{"tipo":')
    except ticketclient.json.DecodeError:
        pass
    else:
        raise AssertionError('malformed JSON was accepted')


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {'uno': 'one', 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False
    input_dictionary['text'] = 'Señal ✓'

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    # Whitespace handling varies between libraries, so the encoded form is
    # not compared directly.

    decoded = loads(encoded)
    assert isinstance(decoded, dict)
    assert decoded == input_dictionary


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
