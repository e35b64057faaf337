""" Out-of-band health refresh against the daemon's HTTP ``/health``
    endpoint, and the background :class:`Poller` that drives it. Health
    refreshes are fire-and-forget: any failure yields an unreachable
    :class:`HealthReport` and the next attempt is simply the next tick.
"""

import logging
import threading
import time

import requests

from . import events
from .protocol import fields


log = logging.getLogger(__name__)


class HealthReport:
    """ A snapshot of the daemon's health. Any field missing from the
        response is replaced by a safe default.

        :ivar reachable: False if the daemon could not be contacted.
        :ivar current: Jobs currently queued.
        :ivar capacity: Queue capacity.
        :ivar running: Whether the print worker is running.
    """

    def __init__(self, current=fields.DEFAULT_CURRENT, capacity=fields.DEFAULT_CAPACITY,
                 running=False, jobs_processed=0, jobs_failed=0, env='unknown',
                 build_date=None, build_time=None, uptime_seconds=0, reachable=True,
                 error=None):

        self.current = current
        self.capacity = capacity
        self.running = running
        self.jobs_processed = jobs_processed
        self.jobs_failed = jobs_failed
        self.env = env
        self.build_date = build_date
        self.build_time = build_time
        self.uptime_seconds = uptime_seconds
        self.reachable = reachable
        self.error = error
        self.time = time.time()


    def __repr__(self):
        if self.reachable:
            return 'HealthReport(queue=%d/%d, running=%r, processed=%d, failed=%d)' % (
                self.current, self.capacity, self.running, self.jobs_processed, self.jobs_failed)
        return 'HealthReport(unreachable: %s)' % (self.error,)


    @property
    def load(self):
        """ Queue occupancy as a whole percentage.
        """

        if self.capacity:
            return round(self.current * 100 / self.capacity)
        return 0


    @property
    def uptime(self):
        """ Human readable uptime: '1h 5m', '3m 20s', or '42s'.
        """

        seconds = int(self.uptime_seconds or 0)
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        seconds = seconds % 60

        if hours > 0:
            return '%dh %dm' % (hours, minutes)
        if minutes > 0:
            return '%dm %ds' % (minutes, seconds)
        return '%ds' % (seconds)


    @classmethod
    def from_dict(cls, response):
        if isinstance(response, dict):
            pass
        else:
            raise ValueError('health response is not an object')

        queue = _section(response, 'queue')
        worker = _section(response, 'worker')
        build = _section(response, 'build')

        return cls(
            current=int(queue.get('current') or fields.DEFAULT_CURRENT),
            capacity=int(queue.get('capacity') or fields.DEFAULT_CAPACITY),
            running=bool(worker.get('running')),
            jobs_processed=int(worker.get('jobs_processed') or 0),
            jobs_failed=int(worker.get('jobs_failed') or 0),
            env=build.get('env') or 'unknown',
            build_date=build.get('date'),
            build_time=build.get('time'),
            uptime_seconds=response.get('uptime_seconds') or 0,
        )


    @classmethod
    def unreachable(cls, error=None):
        return cls(reachable=False, error=error)


# end of class HealthReport



def _section(response, key):
    """ Return the nested object *key* of a health response, or an empty
        dictionary if it is missing or not an object.
    """

    section = response.get(key)
    if isinstance(section, dict):
        return section
    return dict()



def fetch(url, timeout=2.0, session=None):
    """ Request the health endpoint at *url* and return a
        :class:`HealthReport`. This never raises for network, HTTP, or
        decoding failures; an unreachable report is returned instead.
    """

    if session is None:
        session = requests

    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        report = HealthReport.from_dict(response.json())
    except (requests.RequestException, ValueError, TypeError) as e:
        log.debug('health check against %s failed: %s', url, e)
        return HealthReport.unreachable(str(e))

    return report



class Poller:
    """ Background thread to invoke *method* every *interval* seconds. The
        method is held by weak reference; the poller exits on its own once
        the method's owner is gone.

        :func:`wake` triggers an immediate invocation and restarts the
        cadence from that moment.
    """

    def __init__(self, method, interval):

        self.interval = float(interval)
        self.reference = events.ref(method)
        self.shutdown = False
        self.thread = None

        self.alarm = threading.Event()


    @property
    def running(self):
        return self.thread is not None and self.thread.is_alive()


    def start(self):
        if self.running:
            return

        if self.interval <= 0:
            return

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, name='ticketclient-health')
        self.thread.daemon = True
        self.thread.start()


    def run(self):

        interval = self.interval
        next = time.time()

        while True:
            begin = time.time()

            if self.shutdown == True:
                break

            if self.alarm.is_set() == True:
                self.alarm.clear()

                # Woken up early: invoke now and start an entirely new
                # cadence from here.

                next = begin + interval

            else:
                # Ideally the period is constant-- regardless of when we woke
                # up we want to honor the requested cadence, and set the next
                # wakeup according to the previous value, incremented solely
                # by the interval.

                next += interval

            method = self.reference()

            if method is None:
                # The original object is gone. No further calls are possible.
                break

            try:
                method()
            except Exception:
                log.exception('health poll failed')

            del method

            end = time.time()

            delay = next - end
            if delay > 0:
                self.alarm.wait(delay)
            else:
                # Fell behind; skip the missed ticks rather than bunching up.
                next = end


    def stop(self):
        self.shutdown = True
        self.wake()

        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(5)


    def wake(self):
        self.alarm.set()


# end of class Poller


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
