"""
Event listeners and the chain that notifies them.

A listener is any object; for an event named ``join`` the chain calls the
listener's ``on_join`` method, if it has one. Subclass EventListener to
get do-nothing defaults for every event a Connection fires.
"""

import logging
import threading

from . import traffic

log = logging.getLogger(__name__)


class EventListener:
    """
    Do-nothing handlers for every event fired by a Connection.

    Arguments named ``user`` are NickMask instances built from the
    message prefix.
    """

    def on_registered(self):
        "The server accepted the registration."

    def on_disconnected(self):
        "The connection was closed; fired exactly once."

    def on_error(self, message):
        "The server sent ERROR."

    def on_numeric_error(self, code, message):
        "The server sent an error reply (400-599)."

    def on_invite(self, channel, user, nick):
        pass

    def on_join(self, channel, user):
        pass

    def on_kick(self, channel, user, target, message):
        pass

    def on_mode(self, channel, user, modes):
        "Channel modes changed; modes is a Modes list."

    def on_umode(self, user, target, mode_string):
        "User modes changed."

    def on_nick(self, user, new_nick):
        pass

    def on_notice(self, target, user, text):
        pass

    def on_part(self, channel, user, message):
        pass

    def on_ping(self, ping):
        "Only fired when the connection doesn't answer PINGs itself."

    def on_privmsg(self, target, user, text):
        pass

    def on_quit(self, user, message):
        pass

    def on_reply(self, code, value, message):
        "The server sent a numeric reply (1-399)."

    def on_topic(self, channel, user, topic):
        pass

    def on_unknown(self, prefix, command, middle, trailing):
        "Any command not covered by another handler."


class ListenerChain:
    """
    An ordered collection of listeners.

    Events are delivered to the most recently added listener first.

    >>> class Recorder:
    ...     def __init__(self, name, seen):
    ...         self.name, self.seen = name, seen
    ...     def on_join(self, channel, user):
    ...         self.seen.append(self.name)
    >>> seen = []
    >>> chain = ListenerChain()
    >>> for name in 'ABC':
    ...     chain.add(Recorder(name, seen))
    >>> chain.fire('join', '#chan', 'nick')
    >>> seen
    ['C', 'B', 'A']

    Mutations copy the list, so firing works on a stable snapshot even if
    a listener adds or removes listeners.
    """

    def __init__(self, exception_handler=traffic.log_exception):
        self.exception_handler = exception_handler
        self._listeners = ()
        self.mutex = threading.RLock()

    def __len__(self):
        return len(self._listeners)

    def __iter__(self):
        return iter(self._listeners)

    def __contains__(self, listener):
        return listener in self._listeners

    def add(self, listener, index=None):
        """
        Add a listener at the end, or at index.

        Raises TypeError for None and IndexError for an index outside
        0..len(self).
        """
        if listener is None:
            raise TypeError("Listener is None.")
        with self.mutex:
            listeners = list(self._listeners)
            if index is None:
                index = len(listeners)
            if not 0 <= index <= len(listeners):
                raise IndexError("Listener index out of range: %s" % index)
            listeners.insert(index, listener)
            self._listeners = tuple(listeners)

    def remove(self, listener):
        """
        Remove a listener.

        Returns True if the listener was present.
        """
        with self.mutex:
            if listener is None or listener not in self._listeners:
                return False
            listeners = list(self._listeners)
            listeners.remove(listener)
            self._listeners = tuple(listeners)
        return True

    def fire(self, event, *args):
        """
        Invoke ``on_<event>`` on each listener, last added first.

        An exception from one listener is passed to the exception handler
        and doesn't keep the others from being called.
        """
        name = 'on_' + event
        for listener in reversed(self._listeners):
            handler = getattr(listener, name, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception as exc:
                log.debug("Listener %r failed on %s", listener, event)
                self.exception_handler(exc)
