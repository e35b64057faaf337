import threading

from ticketclient.channel import Channel


class Collector:

    def __init__(self):
        self.items = list()
        self.threads = set()

    def handle(self, kind, value):
        self.items.append((kind, value))
        self.threads.add(threading.current_thread().name)


def test_ordering():

    collector = Collector()
    channel = Channel(collector.handle, 'test-ordering')

    for number in range(200):
        channel.put('frame', number)

    assert channel.join(5) == True
    assert collector.items == [('frame', number) for number in range(200)]
    assert collector.threads == set(('ticketclient-test-ordering',))
    assert channel.processed == 200

    channel.close()


def test_many_producers():

    collector = Collector()
    channel = Channel(collector.handle, 'test-producers')

    def produce(name):
        for number in range(50):
            channel.put(name, number)

    producers = [threading.Thread(target=produce, args=('p%d' % (index,),)) for index in range(4)]
    for producer in producers:
        producer.start()
    for producer in producers:
        producer.join()

    assert channel.join(5) == True
    assert len(collector.items) == 200

    # Each producer's items arrive in the order that producer put them.

    for index in range(4):
        name = 'p%d' % (index,)
        values = [value for kind, value in collector.items if kind == name]
        assert values == list(range(50))

    channel.close()


def test_handler_exception():

    seen = list()

    def handle(kind, value):
        if value == 1:
            raise RuntimeError('broken handler')
        seen.append(value)

    channel = Channel(handle, 'test-exception')
    for number in range(3):
        channel.put('frame', number)

    assert channel.join(5) == True
    assert seen == [0, 2]
    channel.close()


def test_close():

    collector = Collector()
    channel = Channel(collector.handle, 'test-close')
    channel.put('frame', 1)
    channel.join(5)
    channel.close()

    assert channel.thread.is_alive() == False

    channel.put('frame', 2)
    assert collector.items == [('frame', 1)]

    # Closing twice is harmless.

    channel.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
