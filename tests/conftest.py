import pytest

import ticketclient


class FakeTransport(ticketclient.transport.Transport):
    """ Transport that never touches the network. Tests drive it by calling
        the *fire_* methods, which invoke the callbacks the connection
        manager supplied.
    """

    instances = list()

    def __init__(self, *args, **kwargs):
        ticketclient.transport.Transport.__init__(self, *args, **kwargs)
        self.sent = list()
        self.opened = False
        self.closed = False
        self.connected = False
        FakeTransport.instances.append(self)

    @property
    def is_open(self):
        return self.connected

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True

    def send(self, text):
        if not self.connected:
            raise ticketclient.transport.TransportConnectionError('not connected')
        self.sent.append(ticketclient.json.loads(text))

    def fire_open(self):
        self.connected = True
        self.on_open()

    def fire_message(self, text):
        self.on_message(text)

    def fire_close(self, reason=None):
        self.connected = False
        self.on_close(reason)



class FakeScheduler:
    """ Stand-in for the reconnection timer. Scheduled calls are recorded
        and only run when the test calls :func:`run`.
    """

    def __init__(self):
        self.calls = list()

    def __call__(self, delay, method):
        timer = FakeTimer(delay, method)
        self.calls.append(timer)
        return timer

    def run(self):
        timer = self.calls[-1]
        if not timer.cancelled:
            timer.method()



class FakeTimer:

    def __init__(self, delay, method):
        self.delay = delay
        self.method = method
        self.cancelled = False

    def cancel(self):
        self.cancelled = True



class FakeResponse:

    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload



class FakeHttp:

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.requests = list()

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payload)



class Recorder:
    """ Collects every emission on the streams it is attached to. Bound
        methods are held weakly by the registry, so the recorder itself must
        stay referenced for the duration of the test.
    """

    def __init__(self):
        self.log = list()
        self.notify = list()
        self.queue = list()
        self.printers = list()
        self.jobs = list()
        self.states = list()
        self.refreshes = 0

    def on_log(self, category, text):
        self.log.append((category, text))

    def on_notify(self, level, text):
        self.notify.append((level, text))

    def on_queue(self, current, capacity):
        self.queue.append((current, capacity))

    def on_printers(self, thermal, other):
        self.printers.append((thermal, other))

    def on_job(self, job):
        self.jobs.append(job)

    def on_state(self, old, new):
        self.states.append((old, new))

    def on_refresh(self):
        self.refreshes += 1

    def attach(self, target):
        target.register('log', self.on_log)
        target.register('notify', self.on_notify)
        target.register('queue', self.on_queue)
        target.register('printers', self.on_printers)
        target.register('job', self.on_job)
        target.register('refresh', self.on_refresh)



@pytest.fixture
def transport():
    FakeTransport.instances = list()
    yield FakeTransport
    FakeTransport.instances = list()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def http():
    payload = {
        'queue': {'current': 2, 'capacity': 50},
        'worker': {'running': True, 'jobs_processed': 7, 'jobs_failed': 1},
        'build': {'env': 'test', 'date': '2024-01-01', 'time': '10:00'},
        'uptime_seconds': 3900,
    }
    return FakeHttp(payload)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def document():
    return {
        'version': '1.0',
        'profile': {'model': '58mm PT-210'},
        'commands': [{'type': 'text', 'data': {'content': {'text': 'hi'}}}],
    }


@pytest.fixture
def session(transport, scheduler, http):
    config = ticketclient.config.SessionConfig(poll_interval=0)
    session = ticketclient.Session(config, transport=transport, scheduler=scheduler, http=http)
    yield session
    session.stop()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
