import threading
import time

import requests

from ticketclient import health
from conftest import FakeHttp


def test_report(http):

    report = health.fetch('http://localhost:8766/health', session=http)

    assert report.reachable == True
    assert report.current == 2
    assert report.capacity == 50
    assert report.load == 4
    assert report.running == True
    assert report.jobs_processed == 7
    assert report.jobs_failed == 1
    assert report.env == 'test'
    assert report.uptime == '1h 5m'
    assert http.requests == [('http://localhost:8766/health', 2.0)]


def test_defaults():

    report = health.fetch('http://localhost:8766/health', session=FakeHttp({}))

    assert report.reachable == True
    assert report.current == 0
    assert report.capacity == 100
    assert report.running == False
    assert report.env == 'unknown'
    assert report.uptime == '0s'


def test_sections_not_objects():

    for payload in ({'queue': [3, 100]}, {'worker': 'down'}, {'build': 7, 'queue': None}):
        report = health.fetch('http://localhost:8766/health', session=FakeHttp(payload))
        assert report.reachable == True
        assert report.current == 0
        assert report.capacity == 100
        assert report.running == False
        assert report.env == 'unknown'


def test_uptime():

    assert health.HealthReport(uptime_seconds=200).uptime == '3m 20s'
    assert health.HealthReport(uptime_seconds=42).uptime == '42s'


def test_unreachable():

    http = FakeHttp(error=requests.ConnectionError('refused'))
    report = health.fetch('http://localhost:8766/health', session=http)
    assert report.reachable == False
    assert 'refused' in report.error

    report = health.fetch('http://localhost:8766/health', session=FakeHttp(['not', 'an', 'object']))
    assert report.reachable == False


class Counter:

    def __init__(self):
        self.calls = 0
        self.called = threading.Event()

    def poll(self):
        self.calls += 1
        self.called.set()


def test_poller():

    counter = Counter()
    poller = health.Poller(counter.poll, 0.05)
    poller.start()

    assert counter.called.wait(1) == True
    time.sleep(0.2)
    poller.stop()

    assert poller.running == False
    assert counter.calls >= 2

    calls = counter.calls
    time.sleep(0.1)
    assert counter.calls == calls


def test_poller_wake():

    counter = Counter()
    poller = health.Poller(counter.poll, 60)
    poller.start()

    assert counter.called.wait(1) == True
    counter.called.clear()

    poller.wake()
    assert counter.called.wait(1) == True
    assert counter.calls == 2

    poller.stop()


def test_poller_disabled():

    counter = Counter()
    poller = health.Poller(counter.poll, 0)
    poller.start()
    assert poller.running == False
    assert counter.calls == 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
