import queue

import pytest

from ircline.client import Connection
from ircline.config import Config


class FakeSocket:
    """
    Stands in for a server socket: replays the lines fed to it and
    records what the client sends.
    """

    def __init__(self):
        self.incoming = queue.Queue()
        self.sent = []
        self.closed = False

    def feed(self, *lines):
        for line in lines:
            self.incoming.put(line.encode('utf-8') + b'\r\n')

    def hang_up(self):
        self.incoming.put(b'')

    def recv(self, size):
        data = self.incoming.get()
        if isinstance(data, Exception):
            raise data
        return data

    def sendall(self, data):
        self.sent.append(data)

    def getsockname(self):
        return '127.0.0.1', 40000

    def shutdown(self, how):
        self.hang_up()

    def close(self):
        self.closed = True

    @property
    def lines(self):
        return [data.decode('utf-8')[:-2] for data in self.sent]


class Recorder:
    """
    A listener recording every event as a tuple of its name and arguments.
    """

    def __init__(self):
        self.events = []

    def __getattr__(self, name):
        if not name.startswith('on_'):
            raise AttributeError(name)
        return lambda *args: self.events.append((name[3:],) + args)

    @property
    def names(self):
        return [event[0] for event in self.events]


@pytest.fixture
def server_socket():
    return FakeSocket()


@pytest.fixture
def errors():
    return []


@pytest.fixture
def config(server_socket, errors):
    return Config(
        ('irc.example.net', 6667),
        'pinky',
        realname='Pinky',
        factory=lambda server_address: server_socket,
        exception_handler=errors.append,
    )


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def connection(config, recorder):
    conn = Connection(config)
    conn.add_listener(recorder)
    yield conn
    conn.close()


@pytest.fixture
def connected(connection, server_socket):
    """
    A connection that has sent its registration, with the sent lines
    cleared.
    """
    connection.connect()
    del server_socket.sent[:]
    return connection
