""" Command-line operator console. Each invocation opens a session, performs
    one action, and prints the session's log entries and notifications as
    they arrive until the requested wait time elapses.
"""

import argparse
import logging
import sys
import time

from . import config
from . import health
from . import json
from . import templates
from .protocol import validate
from .protocol.validate import ValidationError
from .session import Session
from .transport.base import SubmissionError


log = logging.getLogger('ticketclient')


def parse_arguments(argv=None):

    description = 'Submit ticket documents to a ticket daemon and watch the results.'
    parser = argparse.ArgumentParser(prog='ticketclient', description=description)

    parser.add_argument('--host', default=None,
        help='daemon hostname (default: $TICKET_HOST or localhost)')
    parser.add_argument('--port', type=int, default=None,
        help='daemon port (default: $TICKET_PORT or 8766)')
    parser.add_argument('--token', default=None,
        help='authentication token (default: $TICKET_AUTH_TOKEN)')
    parser.add_argument('--wait', type=float, default=5.0,
        help='seconds to wait for replies after the action (default: 5)')
    parser.add_argument('--connect-timeout', type=float, default=5.0,
        help='seconds to wait for the connection to open (default: 5)')
    parser.add_argument('-v', '--verbose', action='store_true',
        help='enable debug logging')

    actions = parser.add_subparsers(dest='action', required=True)

    send = actions.add_parser('send', help='submit one document')
    source = send.add_mutually_exclusive_group(required=True)
    source.add_argument('file', nargs='?', help='JSON ticket document')
    source.add_argument('--template', choices=templates.names(),
        help='submit a built-in template instead of a file')

    burst = actions.add_parser('burst', help='submit the same document several times')
    burst.add_argument('file', nargs='?', help='JSON ticket document (default: burstable template)')
    burst.add_argument('-n', '--count', type=int, default=None,
        help='number of jobs (default: 10)')

    actions.add_parser('ping', help='send a liveness probe')
    actions.add_parser('status', help='request a queue snapshot')
    actions.add_parser('printers', help='list printers known to the daemon')
    actions.add_parser('health', help='query the health endpoint once')
    actions.add_parser('watch', help='stay connected and print everything received')
    actions.add_parser('templates', help='list the built-in templates')

    return parser.parse_args(argv)



def read_document(filename):
    """ Read a JSON ticket document from *filename*, or from stdin if the
        filename is '-'.
    """

    if filename == '-':
        raw = sys.stdin.buffer.read()
    else:
        with open(filename, 'rb') as contents:
            raw = contents.read()

    return json.loads(raw)



class Printer:
    """ Session listener that writes log entries and notifications through
        the 'ticketclient' logger.
    """

    def entry(self, category, text):
        log.info('%-8s %s', category, text)

    def notify(self, level, text):
        if level == 'error':
            log.error('%s', text)
        elif level == 'warning':
            log.warning('%s', text)
        else:
            log.info('** %s', text)

    def health(self, report):
        if report.reachable:
            log.debug('health: %r', report)
        else:
            log.debug('health: daemon unreachable')

    def attach(self, session):
        session.register('log', self.entry)
        session.register('notify', self.notify)
        session.register('health', self.health)



def describe(report):
    if not report.reachable:
        return 'Offline: cannot contact the daemon (%s)' % (report.error,)

    if report.running:
        worker = 'running'
    else:
        worker = 'stopped'

    lines = list()
    lines.append('Queue:    %d / %d (%d%%)' % (report.current, report.capacity, report.load))
    lines.append('Worker:   %s, %d processed, %d failed' % (worker, report.jobs_processed, report.jobs_failed))
    lines.append('Env:      %s' % (str(report.env).upper(),))
    lines.append('Build:    %s %s' % (report.build_date or '--', report.build_time or ''))
    lines.append('Uptime:   %s' % (report.uptime,))
    return '\n'.join(lines)



def wait_open(session, timeout):
    end = time.time() + timeout
    while time.time() < end:
        if session.connection.is_open:
            return True
        time.sleep(0.05)
    return session.connection.is_open



def main(argv=None):

    arguments = parse_arguments(argv)

    if arguments.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format='%(asctime)s %(message)s', datefmt='%H:%M:%S')

    if arguments.action == 'templates':
        for name in templates.names():
            print(name)
        return 0

    settings = config.load().to_dict()
    if arguments.host is not None:
        settings['host'] = arguments.host
    if arguments.port is not None:
        settings['port'] = arguments.port
    if arguments.token is not None:
        settings['token'] = arguments.token

    settings = config.SessionConfig.from_dict(settings)

    if arguments.action == 'health':
        report = health.fetch(settings.health_url, settings.health_timeout)
        print(describe(report))
        if report.reachable:
            return 0
        return 1

    document = None

    if arguments.action == 'send':
        if arguments.template:
            document = templates.get(arguments.template)
        else:
            try:
                document = read_document(arguments.file)
            except (OSError, json.DecodeError) as e:
                log.error('cannot read %s: %s', arguments.file, e)
                return 1

    elif arguments.action == 'burst' and arguments.file:
        try:
            document = read_document(arguments.file)
        except (OSError, json.DecodeError) as e:
            log.warning('cannot read %s (%s), using the burstable template', arguments.file, e)

    if document is not None:
        try:
            validate.validate(document)
        except (ValidationError, TypeError) as e:
            log.error('invalid document: %s', e)
            return 1

    printer = Printer()
    session = Session(settings)
    printer.attach(session)

    status = 0

    with session:
        if not wait_open(session, arguments.connect_timeout):
            log.error('could not connect to %s', settings.ws_url)
            return 1

        try:
            if arguments.action == 'send':
                session.submit(document)
            elif arguments.action == 'burst':
                session.burst(document, arguments.count)
            elif arguments.action == 'ping':
                session.ping()
            elif arguments.action == 'status':
                session.request_status()
            elif arguments.action == 'printers':
                session.request_printers()
        except (ValidationError, TypeError) as e:
            log.error('invalid document: %s', e)
            return 1
        except SubmissionError as e:
            log.error('%s', e)
            status = 1

        try:
            if arguments.action == 'watch':
                while True:
                    time.sleep(1)
            else:
                time.sleep(arguments.wait)
        except KeyboardInterrupt:
            pass

        session.wait(1)

        for job in session.ledger.jobs():
            log.info('%-8s %s %s', 'JOB', job.id, job.status.name)
            if job.status.name == 'FAILED':
                status = 1

    return status



if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
