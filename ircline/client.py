"""
Internet Relay Chat (IRC) protocol client library.

This library turns a socket to an IRC server into a stream of events.
Each Connection owns one server socket and one reader thread; every line
the server sends is parsed and dispatched, on that thread, to the
listeners registered with the connection.

The main features of the client are:

  * Parsing of the IRC line format into prefix, command, middle and
    trailing parts (see ircline.message).
  * Tracking of the registration handshake and of the client's own
    nickname, including nicks the server shortened.
  * Answers server PINGs transparently.
  * Messages to the IRC server are done by calling methods on the
    connection object.
  * A listener that raises doesn't stop the other listeners, nor the
    connection.

Here is an example:

    config = ircline.config.Config(('irc.some.where', 6667), 'my_nickname')
    conn = ircline.client.Connection(config)
    conn.add_listener(MyListener())
    conn.connect()
    conn.privmsg("a_nickname", "Hi there!")
    conn.wait()

Notes:
  * connection.quit() only sends QUIT to the server; the server hanging
    up ends the connection.
  * A connection fires the disconnected event exactly once, whether it
    was closed explicitly, by an I/O error or by the server.
"""

import contextlib
import enum
import logging
import re
import socket
import threading
from importlib import metadata

from jaraco.collections import FoldedCaseKeyedDict
from jaraco.functools import Throttler
from jaraco.stream import buffer
from more_itertools import always_iterable

from . import modes
from . import strings
from .listeners import ListenerChain
from .message import Message, ParseError

log = logging.getLogger(__name__)

# set the version tuple
try:
    VERSION_STRING = metadata.version('ircline')
    VERSION = tuple(int(res) for res in re.findall(r'\d+', VERSION_STRING))
except Exception:
    VERSION_STRING = 'unknown'
    VERSION = ()


class IRCError(Exception):
    "An IRC exception"


class InvalidCharacters(ValueError):
    "Invalid characters were encountered in the message"


class MessageTooLong(ValueError):
    "Message is too long"


class ServerConnectionError(IRCError):
    pass


class ServerNotConnectedError(ServerConnectionError):
    pass


class AlreadyConnectedError(ServerConnectionError):
    "connect() was called on a connection that was already used"


class Level(enum.IntEnum):
    """
    Where a connection is in its life.

    Levels only increase, except that any level may drop to DISCONNECTED,
    which is final.
    """

    DISCONNECTED = -1
    UNCONNECTED = 0
    CONNECTED_UNREGISTERED = 1
    REGISTERED_PENDING_NICK = 2
    REGISTERED = 3


class Connection:
    """
    A connection to an IRC server.

    Create it with an ircline.config.Config, add listeners and call
    connect(). A Connection is used for one session only; create a new
    one to reconnect.

    The methods of this class are thread-safe. Dispatching a line, sending,
    and closing are guarded by the same reentrant mutex, so listeners may
    send or close from within their handlers.
    """

    buffer_class = buffer.DecodingLineBuffer
    socket = None
    reader = None

    # Dispatch table of named commands. Numeric replies and errors are
    # routed by range.
    _handlers = FoldedCaseKeyedDict(
        {
            'PRIVMSG': '_handle_privmsg',
            'NOTICE': '_handle_notice',
            'MODE': '_handle_mode',
            'PING': '_handle_ping',
            'JOIN': '_handle_join',
            'NICK': '_handle_nick',
            'QUIT': '_handle_quit',
            'PART': '_handle_part',
            'KICK': '_handle_kick',
            'INVITE': '_handle_invite',
            'TOPIC': '_handle_topic',
            'ERROR': '_handle_error',
        }
    )

    def __init__(self, config):
        self.config = config
        self.nickname = config.nick
        self.level = Level.UNCONNECTED
        self.listeners = ListenerChain(self._listener_failed)
        self.mutex = threading.RLock()
        self._connecting = False
        self._send_error = None

    def __repr__(self):
        return "<ircline.client.Connection {nickname} {level.name} {config!r}>".format(
            **vars(self)
        )

    def add_listener(self, listener, index=None):
        """
        Add a listener, at the end or at index.

        The listener added last is notified first.
        """
        self.listeners.add(listener, index)

    def remove_listener(self, listener):
        """Remove a listener. Returns False if it wasn't present."""
        return self.listeners.remove(listener)

    def is_connected(self):
        """Is the socket open?"""
        return self.level >= Level.CONNECTED_UNREGISTERED

    def connect(self):
        """Connect to the server and register.

        The ports of the configured server are tried in order; the
        first that accepts the connection is used. If none does,
        ServerConnectionError is raised from the last socket error.

        Raises AlreadyConnectedError if connect was called before.

        Returns the Connection object.
        """
        with self.mutex:
            if self.level != Level.UNCONNECTED or self._connecting:
                raise AlreadyConnectedError(
                    "Socket closed or already open (%s)" % self.level.name
                )
            self._connecting = True

        try:
            sock = self._open_socket()
        except Exception:
            with self.mutex:
                self._connecting = False
            raise

        with self.mutex:
            self._connecting = False
            if self.level != Level.UNCONNECTED:
                # closed while the socket was being opened
                sock.close()
                raise ServerNotConnectedError("Connection closed while connecting")
            self.socket = sock
            self.buffer = self.buffer_class()
            self.buffer.encoding = self.config.encoding
            self.buffer.errors = 'replace'
            self.level = Level.CONNECTED_UNREGISTERED
            self.reader = threading.Thread(
                target=self._read_forever,
                args=(sock,),
                name="ircline reader %s" % self.config.host,
                daemon=True,
            )
            self.reader.start()
            # the reader can't dispatch until the mutex is released
            try:
                self._register()
            except Exception:
                self.close()
                raise
        return self

    def _open_socket(self):
        error = None
        for port in self.config.ports:
            server_address = self.config.host, port
            log.debug("connect(server=%r, port=%r)", *server_address)
            try:
                return self.config.factory(server_address)
            except OSError as exc:
                log.debug("Couldn't connect to port %s: %s", port, exc)
                error = exc
        self.config.exception_handler(error)
        raise ServerConnectionError("Couldn't connect to socket: %s" % error) from error

    def _register(self):
        if self.config.password:
            self.pass_(self.config.password)
        self.nick(self.config.nick)
        local_host = self.socket.getsockname()[0]
        self.user(
            self.config.username, self.config.realname, local_host, self.config.host
        )

    def close(self):
        """Close the connection.

        This method may be called any number of times, from any thread.
        Only the first call fires the disconnected event; after it, the
        object is unusable.
        """
        with self.mutex:
            first = self.level != Level.DISCONNECTED
            self.level = Level.DISCONNECTED
            sock, self.socket = self.socket, None
            if sock is not None:
                # shutdown wakes up the reader; the peer may be gone already
                with contextlib.suppress(OSError):
                    sock.shutdown(socket.SHUT_RDWR)
                try:
                    sock.close()
                except OSError as exc:
                    self.config.exception_handler(exc)
            if first:
                log.debug("Disconnected from %s", self.config.host)
                self.listeners.fire('disconnected')

    def wait(self, timeout=None):
        """Block until the reader thread ends, or the timeout passes."""
        reader = self.reader
        if reader is None or reader is threading.current_thread():
            return
        reader.join(timeout)

    def _read_forever(self, sock):
        try:
            for line in self._read_lines(sock):
                self.dispatch(line)
        except OSError:
            # already reported by send
            log.debug("Write failed while dispatching", exc_info=True)
        except IRCError as exc:
            self.config.exception_handler(exc)
        finally:
            self.close()

    def _read_lines(self, sock):
        reader = getattr(sock, 'read', sock.recv)
        while True:
            try:
                new_data = reader(2**14)
            except OSError as exc:
                if self.level != Level.DISCONNECTED:
                    self.config.exception_handler(exc)
                return
            if not new_data:
                # Read nothing: connection must be down.
                log.debug("Connection closed by %s", self.config.host)
                return
            self.buffer.feed(new_data)
            for line in self.buffer:
                if self.level == Level.DISCONNECTED:
                    return
                log.debug("FROM SERVER: %s", line)
                if self.config.traffic_logger is not None:
                    self.config.traffic_logger.line_in(line)
                yield line

    def dispatch(self, line):
        """
        Parse one line from the server, update the connection state and
        notify the listeners.

        Lines that can't be parsed, and lines arriving after close(), are
        dropped.
        """
        with self.mutex:
            if self.level == Level.DISCONNECTED:
                log.debug("Dropping line after close: %r", line)
                return
            try:
                msg = Message.parse(line, keep_formatting=not self.config.strip_colors)
            except ParseError:
                log.debug("Dropping unparseable line: %r", line)
                return
            log.debug(
                "command: %s, source: %s, middle: %s, trailing: %s",
                msg.command,
                msg.prefix,
                msg.middle,
                msg.trailing,
            )
            handler = self._handlers.get(msg.command)
            if handler is not None:
                getattr(self, handler)(msg)
                return
            code = msg.numeric
            if code is not None and 1 <= code < 400:
                self._handle_reply(msg, code)
            elif code is not None and 400 <= code < 600:
                self._handle_numeric_error(msg, code)
            else:
                self._handle_unknown(msg)

    def _listener_failed(self, exc):
        # a listener let a send error through; send reported it already
        if exc is self._send_error:
            self._send_error = None
            return
        self.config.exception_handler(exc)

    def _fire(self, event, *args):
        self.listeners.fire(event, *args)

    def _registered(self):
        self.level = Level.REGISTERED_PENDING_NICK
        log.debug("Registered with %s as %s", self.config.host, self.nickname)
        self._fire('registered')

    def _handle_privmsg(self, msg):
        self._fire('privmsg', msg.middle, msg.source, msg.trailing)

    def _handle_notice(self, msg):
        self._fire('notice', msg.middle, msg.source, msg.trailing)

    def _handle_mode(self, msg):
        target = msg.param(1)
        if is_channel(target):
            changes = modes.parse_channel_modes(msg.param(2), msg.params_from(3))
            self._fire('mode', target, msg.source, changes)
        else:
            self._fire('umode', msg.source, target, msg.params_from(2))

    def _handle_ping(self, msg):
        ping = msg.trailing
        if self.config.auto_pong:
            self.pong(ping)
        else:
            self._fire('ping', ping)
        if self.level == Level.CONNECTED_UNREGISTERED:
            # some servers challenge with PING before welcoming
            self._registered()

    def _handle_join(self, msg):
        self._fire('join', msg.trailing, msg.source)

    def _handle_nick(self, msg):
        new_nick = msg.trailing
        if msg.nick is not None and strings.same_nick(msg.nick, self.nickname):
            self.nickname = new_nick
        self._fire('nick', msg.source, new_nick)

    def _handle_quit(self, msg):
        self._fire('quit', msg.source, msg.trailing)

    def _handle_part(self, msg):
        # "PART :#chan" has no message, though it has a trailing part
        message = msg.trailing if msg.parameter_count > 1 else ''
        self._fire('part', msg.param(1), msg.source, message)

    def _handle_kick(self, msg):
        message = msg.trailing if msg.parameter_count > 2 else ''
        self._fire('kick', msg.param(1), msg.source, msg.param(2), message)

    def _handle_invite(self, msg):
        self._fire('invite', msg.trailing, msg.source, msg.middle)

    def _handle_topic(self, msg):
        self._fire('topic', msg.middle, msg.source, msg.trailing)

    def _handle_error(self, msg):
        self._fire('error', msg.trailing)

    def _handle_reply(self, msg, code):
        log.debug("reply %s (%s)", code, msg.reply_name)
        candidate = msg.param(1)
        pending = Level.CONNECTED_UNREGISTERED, Level.REGISTERED_PENDING_NICK
        if self.level in pending and strings.is_truncation(candidate, self.nickname):
            # the server may have shortened the nick
            self.nickname = candidate
            if self.level == Level.REGISTERED_PENDING_NICK:
                self.level = Level.REGISTERED
        if self.level == Level.CONNECTED_UNREGISTERED and self.nickname == candidate:
            self._registered()
        self._fire('reply', code, msg.middle, msg.trailing)

    def _handle_numeric_error(self, msg, code):
        log.debug("error %s (%s)", code, msg.reply_name)
        self._fire('numeric_error', code, msg.trailing)

    def _handle_unknown(self, msg):
        self._fire('unknown', msg.prefix, msg.command, msg.middle, msg.trailing)

    def _prep_message(self, string):
        # The string should not contain any carriage return other than the
        # one added here.
        if '\n' in string or '\r' in string:
            msg = "Carriage returns not allowed in messages"
            raise InvalidCharacters(msg)
        bytes = string.encode(self.config.encoding) + b'\r\n'
        # According to the RFC http://tools.ietf.org/html/rfc2812#page-6,
        # clients should not transmit more than 512 bytes.
        if len(bytes) > 512:
            msg = "Messages limited to 512 bytes including CR/LF"
            raise MessageTooLong(msg)
        return bytes

    def send(self, line):
        """Send a line to the server.

        The line will be padded with CR LF. Socket errors are passed to
        the exception handler and raised.
        """
        data = self._prep_message(line)
        with self.mutex:
            if self.socket is None:
                raise ServerNotConnectedError("Not connected.")
            try:
                self.socket.sendall(data)
            except OSError as exc:
                self._send_error = exc
                self.config.exception_handler(exc)
                raise
            log.debug("TO SERVER: %s", line)
            if self.config.traffic_logger is not None:
                self.config.traffic_logger.line_out(line)
            if self.level == Level.CONNECTED_UNREGISTERED:
                self._track_own_nick(line)

    def _track_own_nick(self, line):
        # Until registration completes, assume the server accepts our NICK.
        with contextlib.suppress(ParseError):
            msg = Message.parse(line, keep_formatting=True)
            if msg.command.upper() == 'NICK':
                self.nickname = msg.param(1).strip()

    def send_items(self, *items):
        """
        Send all non-empty items, separated by spaces.
        """
        self.send(' '.join(filter(None, items)))

    def set_rate_limit(self, frequency):
        """
        Set a `frequency` limit (messages per second) for this connection.
        Any attempts to send faster than this rate will block.
        """
        self.send = Throttler(self.send, frequency)

    def away(self, message=""):
        """Send an AWAY command; without a message, clear the away status."""
        self.send_items('AWAY', message and ':' + message)

    def invite(self, nick, channel):
        """Send an INVITE command."""
        self.send_items('INVITE', nick, channel)

    def ison(self, nicks):
        """Send an ISON command.

        Arguments:

            nicks -- List of nicks.
        """
        self.send_items('ISON', *tuple(always_iterable(nicks)))

    def join(self, channel, key=""):
        """Send a JOIN command."""
        self.send_items('JOIN', channel, key)

    def kick(self, channel, nick, comment=""):
        """Send a KICK command."""
        self.send_items('KICK', channel, nick, comment and ':' + comment)

    def list(self, channels=None, server=""):
        """Send a LIST command."""
        self.send_items('LIST', ','.join(always_iterable(channels)), server)

    def mode(self, target, command=""):
        """Send a MODE command."""
        self.send_items('MODE', target, command)

    def names(self, channels=None):
        """Send a NAMES command."""
        self.send_items('NAMES', ','.join(always_iterable(channels)))

    def nick(self, newnick):
        """Send a NICK command."""
        self.send_items('NICK', newnick)

    def notice(self, target, text):
        """Send a NOTICE command."""
        self.send_items('NOTICE', target, ':' + text)

    def part(self, channels, message=""):
        """Send a PART command."""
        self.send_items(
            'PART', ','.join(always_iterable(channels)), message and ':' + message
        )

    def pass_(self, password):
        """Send a PASS command."""
        self.send_items('PASS', password)

    def ping(self, target):
        """Send a PING command."""
        self.send_items('PING', ':' + target)

    def pong(self, target):
        """Send a PONG command."""
        self.send_items('PONG', ':' + target)

    def privmsg(self, target, text):
        """Send a PRIVMSG command."""
        self.send_items('PRIVMSG', target, ':' + text)

    def quit(self, message=""):
        """Send a QUIT command."""
        # Note that many IRC servers don't use your QUIT message
        # unless you've been connected for at least 5 minutes!
        self.send_items('QUIT', message and ':' + message)

    def topic(self, channel, new_topic=None):
        """Send a TOPIC command; without a topic, ask for the current one."""
        self.send_items('TOPIC', channel, new_topic and ':' + new_topic)

    def user(self, username, realname, hostname='0', servername='*'):
        """Send a USER command."""
        cmd = 'USER {username} {hostname} {servername} :{realname}'.format(
            **locals()
        )
        self.send(cmd)

    def userhost(self, nicks):
        """Send a USERHOST command."""
        self.send_items('USERHOST', ",".join(always_iterable(nicks)))

    def who(self, target="", op=""):
        """Send a WHO command."""
        self.send_items('WHO', target, op and 'o')

    def whois(self, targets):
        """Send a WHOIS command."""
        self.send_items('WHOIS', ",".join(always_iterable(targets)))

    def whowas(self, nick, max="", server=""):
        """Send a WHOWAS command."""
        self.send_items('WHOWAS', nick, max, server)


def is_channel(string):
    """Check if a string is a channel name.

    >>> is_channel('#python')
    True
    >>> is_channel('&local')
    True
    >>> is_channel('#')
    False
    >>> is_channel('nick')
    False
    """
    return len(string) >= 2 and string[0] in "#&+!"
