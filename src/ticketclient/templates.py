""" Built-in sample ticket documents, useful for exercising a printer and
    the daemon without writing a document by hand. :func:`get` returns a
    fresh copy every time, with any timestamps rendered at that moment.
"""

import copy
import datetime


_profile = {'model': '58mm PT-210', 'paper_width': 58}
_profile_extended = {'model': '58mm PT-210', 'paper_width': 58, 'code_table': 'WPC1252', 'dpi': 203}


def _text(text, align=None, bold=None, size=None, label=None):
    content = {'text': text}
    if align is not None:
        content['align'] = align

    style = dict()
    if bold is not None:
        style['bold'] = bold
    if size is not None:
        style['size'] = size
    if style:
        content['content_style'] = style

    data = {'content': content}
    if label is not None:
        data['label'] = {'text': label}

    return {'type': 'text', 'data': data}


def _separator(char, length=32):
    return {'type': 'separator', 'data': {'char': char, 'length': length}}


def _feed(lines):
    return {'type': 'feed', 'data': {'lines': lines}}


def _cut(mode='partial'):
    return {'type': 'cut', 'data': {'mode': mode}}


def _document(commands, profile=_profile):
    return {'version': '1.0', 'profile': copy.deepcopy(profile), 'commands': commands}



def simple(now):
    return _document([
        _text('CONNECTION TEST', align='center', bold=True, size='2x1'),
        _text(now.strftime('%Y-%m-%d %H:%M:%S'), align='center'),
        _feed(3),
        _cut(),
    ])


def receipt(now):
    return _document([
        _text('MY STORE', align='center', bold=True, size='2x2'),
        _text('123 Main Street', align='center'),
        _separator('-'),
        _text(now.strftime('%Y-%m-%d'), label='Date'),
        _text(now.strftime('%H:%M:%S'), label='Time'),
        _separator('.'),
        {'type': 'table', 'data': {
            'definition': {'columns': [
                {'name': 'Item', 'width': 16},
                {'name': 'Price', 'width': 10, 'align': 'right'}]},
            'rows': [['Coffee', '$35.00'], ['Muffin', '$25.00']],
            'options': {'header_bold': True}}},
        _separator('-'),
        _text('TOTAL: $60.00', align='right', bold=True),
        _feed(1),
        _text('Thank you for your purchase!', align='center'),
        _feed(3),
        _cut(),
    ])


def barcode(now):
    return _document([
        _text('BARCODE TEST', align='center', bold=True),
        _feed(1),
        {'type': 'barcode', 'data': {
            'symbology': 'code128', 'data': 'ABC123456', 'height': 60,
            'hri_position': 'below', 'align': 'center'}},
        _feed(3),
        _cut(),
    ])


def qr(now):
    profile = dict(_profile_extended)
    profile['has_qr'] = True

    return _document([
        _text('P', align='center', bold=True, size='4x4'),
        _text('CENTRAL PARKING', align='center', bold=True, size='1x1'),
        _feed(1),
        _separator('-'),
        {'type': 'table', 'data': {
            'definition': {'columns': [
                {'name': 'Field', 'width': 14, 'align': 'left'},
                {'name': 'Value', 'width': 16, 'align': 'right'}]},
            'show_headers': False,
            'rows': [
                ['Entry:', now.strftime('%d/%m %H:%M')],
                ['Plate:', 'XK-99-22'],
                ['Ticket:', '#902102']],
            'options': {'column_spacing': 1}}},
        _separator('-'),
        _feed(1),
        {'type': 'qr', 'data': {
            'data': 'https://pay.example.com/t/902102',
            'human_text': 'SCAN TO PAY',
            'pixel_width': 240,
            'correction': 'H',
            'align': 'center',
            'circle_shape': False}},
        _feed(1),
        _text('Open 24 hours', align='center', bold=True),
        _feed(3),
        _cut(),
    ], profile)


def table(now):
    return _document([
        _text('== KITCHEN ORDER ==', align='center', bold=True, size='1x1'),
        _separator('='),
        {'type': 'table', 'data': {
            'definition': {'columns': [
                {'name': 'No.', 'width': 4, 'align': 'left'},
                {'name': 'ITEM', 'width': 18, 'align': 'left'},
                {'name': 'PRICE', 'width': 8, 'align': 'right'}]},
            'show_headers': True,
            'rows': [
                ['001', 'Family Pizza 16"', '$250.00'],
                ['', ' |_ Extra cheese', '$30.00'],
                ['002', 'Deluxe Burger', '$120.00'],
                ['', ' |_ Large fries', '$35.00']],
            'options': {'header_bold': True, 'word_wrap': True, 'column_spacing': 1}}},
        _separator('-'),
        {'type': 'table', 'data': {
            'definition': {'columns': [
                {'name': '', 'width': 22, 'align': 'left'},
                {'name': '', 'width': 8, 'align': 'right'}]},
            'show_headers': False,
            'rows': [['Subtotal:', '$435.00'], ['Tax (16%):', '$69.60'], ['TOTAL:', '$504.60']],
            'options': {'header_bold': False, 'column_spacing': 1}}},
        _feed(1),
        {'type': 'barcode', 'data': {
            'symbology': 'code128', 'data': now.strftime('%Y%m%d01'), 'width': 2,
            'height': 60, 'hri_position': 'below', 'align': 'center'}},
        _feed(2),
        _cut(),
    ], _profile_extended)


def raw(now):
    return _document([
        {'type': 'raw', 'data': {'hex': '1B 40', 'comment': 'Initialize printer', 'safe_mode': True}},
        _text('RAW command executed!', align='center'),
        {'type': 'beep', 'data': {'times': 2, 'lapse': 1}},
        _feed(3),
        _cut(),
    ])


def burstable(now):
    return _document([
        {'type': 'beep', 'data': {'times': 1, 'lapse': 1}},
    ])


_templates = {
    'simple': simple,
    'receipt': receipt,
    'barcode': barcode,
    'qr': qr,
    'table': table,
    'raw': raw,
    'burstable': burstable,
}


def names():
    return tuple(_templates)


def get(name, now=None):
    """ Return the template document *name* in dictionary form. Raises
        KeyError for an unknown name.
    """

    try:
        builder = _templates[name]
    except KeyError:
        raise KeyError('unknown template: ' + repr(name))

    if now is None:
        now = datetime.datetime.now()

    return builder(now)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
