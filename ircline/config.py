"""
Settings for a Connection.
"""

from more_itertools import always_iterable

from . import connection
from . import traffic


class ServerSpec:
    """
    An IRC server specification: a host and the ports to try, in order.

    >>> spec = ServerSpec('localhost')
    >>> spec.host
    'localhost'
    >>> spec.ports
    (6667,)
    >>> spec.password

    >>> spec = ServerSpec('127.0.0.1', [6697, 7000], 'fooP455')
    >>> spec.ports
    (6697, 7000)
    >>> spec.password
    'fooP455'
    """

    def __init__(self, host, ports=6667, password=None):
        self.host = host
        self.ports = tuple(always_iterable(ports))
        self.password = password
        if not self.host or not self.ports:
            raise ValueError("Host and ports may not be empty.")

    def __repr__(self):
        return "<ircline.config.ServerSpec for server %s:%s %s>" % (
            self.host,
            ','.join(map(str, self.ports)),
            "with password" if self.password else "without password",
        )

    @classmethod
    def port_range(cls, host, low, high, password=None):
        """
        A ServerSpec trying each port from low to high, inclusive.

        >>> ServerSpec.port_range('localhost', 6665, 6669).ports
        (6665, 6666, 6667, 6668, 6669)
        """
        return cls(host, range(low, high + 1), password)

    @classmethod
    def ensure(cls, input):
        spec = cls(*input) if isinstance(input, (list, tuple)) else input
        assert isinstance(spec, cls)
        return spec


class Config:
    """
    Everything a Connection needs to know.

    >>> config = Config(('irc.example.net', 6667), 'pinky')
    >>> config.server.host
    'irc.example.net'
    >>> config.username, config.realname
    ('pinky', 'pinky')
    >>> config.auto_pong, config.strip_colors, config.encoding
    (True, True, 'utf-8')

    Other settings are passed as keyword arguments.

    >>> Config(('irc.example.net', 6667), 'pinky', auto_pong=False).auto_pong
    False
    >>> Config(('irc.example.net', 6667), 'pinky', colour=True)
    Traceback (most recent call last):
    ...
    TypeError: Unknown settings: colour
    """

    encoding = 'utf-8'
    "encoding used on the wire, in both directions"

    auto_pong = True
    "answer PING with PONG instead of notifying listeners"

    strip_colors = True
    "remove color and formatting codes from incoming lines"

    timeout = 15 * 60
    "socket timeout in seconds"

    factory = None
    "callable taking a (host, port) pair and returning a connected socket"

    traffic_logger = None
    "a TrafficLogger, or None"

    exception_handler = staticmethod(traffic.log_exception)
    "callable taking the exceptions a Connection recovers from"

    settings = (
        "encoding",
        "auto_pong",
        "strip_colors",
        "timeout",
        "factory",
        "traffic_logger",
        "exception_handler",
    )

    def __init__(self, server, nick, username=None, realname=None, **attrs):
        if not nick:
            raise ValueError("Nick may not be empty.")
        unknown = sorted(set(attrs) - set(self.settings))
        if unknown:
            raise TypeError("Unknown settings: " + ', '.join(unknown))
        self.server = ServerSpec.ensure(server)
        self.nick = nick
        self.username = username or nick
        self.realname = realname or nick
        vars(self).update(attrs)
        if self.factory is None:
            self.factory = connection.Factory(timeout=self.timeout)

    @property
    def host(self):
        return self.server.host

    @property
    def ports(self):
        return self.server.ports

    @property
    def password(self):
        return self.server.password

    def __repr__(self):
        return "<ircline.config.Config %s on %r>" % (self.nick, self.server)
