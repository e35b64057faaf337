""" Session configuration: where the ticket daemon lives, how long to wait
    between reconnection attempts, how often to poll its health endpoint,
    and the opaque authentication token presented on connection.

    Values are resolved in increasing order of precedence: the defaults
    declared here, an optional ``config.json`` in the configuration
    :func:`directory`, then environment variables.
"""

import os

from . import json


default_host = 'localhost'
default_port = 8766
default_reconnect_delay = 3.0
default_poll_interval = 2.0
default_health_timeout = 2.0
default_burst_size = 10

_environment = (
    ('TICKET_HOST', 'host', str),
    ('TICKET_PORT', 'port', int),
    ('TICKET_RECONNECT_DELAY', 'reconnect_delay', float),
    ('TICKET_POLL_INTERVAL', 'poll_interval', float),
    ('TICKET_AUTH_TOKEN', 'token', str),
)


class SessionConfig:
    """ Connection and polling parameters for a single
        :class:`ticketclient.session.Session`. All durations are in seconds.

        :ivar host: Hostname or address of the ticket daemon.
        :ivar port: TCP port shared by the WebSocket and health endpoints.
        :ivar reconnect_delay: Fixed delay before each reconnection attempt.
        :ivar poll_interval: Period of the background health refresh.
        :ivar health_timeout: Timeout applied to each health request.
        :ivar token: Opaque authentication token, if any.
        :ivar burst_size: Default number of jobs in a burst submission.
    """

    fields = ('host', 'port', 'reconnect_delay', 'poll_interval',
              'health_timeout', 'token', 'burst_size')

    def __init__(self, host=default_host, port=default_port,
                 reconnect_delay=default_reconnect_delay,
                 poll_interval=default_poll_interval,
                 health_timeout=default_health_timeout,
                 token=None, burst_size=default_burst_size):

        port = int(port)
        if port <= 0 or port > 65535:
            raise ValueError('invalid port: ' + str(port))

        reconnect_delay = float(reconnect_delay)
        if reconnect_delay < 0:
            raise ValueError('reconnect delay cannot be negative')

        poll_interval = float(poll_interval)
        if poll_interval < 0:
            raise ValueError('poll interval cannot be negative')

        burst_size = int(burst_size)
        if burst_size < 1:
            raise ValueError('burst size must be at least 1')

        if token == '':
            token = None

        self.host = str(host)
        self.port = port
        self.reconnect_delay = reconnect_delay
        self.poll_interval = poll_interval
        self.health_timeout = float(health_timeout)
        self.token = token
        self.burst_size = burst_size


    def __repr__(self):
        token = self.token
        if token is not None:
            token = '***'

        return '%s(host=%r, port=%r, reconnect_delay=%r, poll_interval=%r, token=%r)' % (
            type(self).__name__, self.host, self.port, self.reconnect_delay,
            self.poll_interval, token)


    @property
    def ws_url(self):
        return 'ws://%s:%d/ws' % (self.host, self.port)


    @property
    def health_url(self):
        return 'http://%s:%d/health' % (self.host, self.port)


    @property
    def headers(self):
        """ Handshake headers presenting the authentication token, if any.
        """

        if self.token is None:
            return dict()

        return {'X-Auth-Token': self.token}


    @classmethod
    def from_dict(cls, values):
        arguments = dict()

        for key in cls.fields:
            try:
                arguments[key] = values[key]
            except KeyError:
                continue

        return cls(**arguments)


    @classmethod
    def from_environment(cls, environ=None, base=None):
        """ Build a configuration from *base* (a dictionary of values, such
            as the contents of a configuration file) overlaid with any
            ``TICKET_*`` environment variables.
        """

        if environ is None:
            environ = os.environ

        values = dict(base or {})

        for variable, key, cast in _environment:
            try:
                value = environ[variable]
            except KeyError:
                continue

            try:
                values[key] = cast(value)
            except ValueError:
                raise ValueError('invalid value for %s: %r' % (variable, value))

        return cls.from_dict(values)


    def to_dict(self):
        values = dict()
        for key in self.fields:
            values[key] = getattr(self, key)
        return values


# end of class SessionConfig



def load(filename=None, environ=None):
    """ Return a :class:`SessionConfig` built from the configuration file,
        if present, and the environment. The file defaults to ``config.json``
        in the configuration :func:`directory`.
    """

    if filename is None:
        filename = os.path.join(directory(), 'config.json')

    base = dict()

    if os.path.exists(filename):
        with open(filename, 'rb') as contents:
            raw = contents.read()

        try:
            base = json.loads(raw)
        except json.DecodeError:
            raise ValueError('malformed configuration file: ' + filename)

        if isinstance(base, dict):
            pass
        else:
            raise ValueError('configuration file must contain an object: ' + filename)

    return SessionConfig.from_environment(environ, base)



def directory(default=None):
    """ Return the directory location where the client configuration file
        is expected. This defaults to ``$HOME/.ticketclient``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``TICKET_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['TICKET_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['TICKET_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('TICKET_HOME and HOME environment variables not set, cannot determine configuration directory')

    found = os.path.join(home, '.ticketclient')
    directory.found = found
    return found

directory.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
