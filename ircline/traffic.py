"""
Collaborators that observe a connection: traffic loggers, which see every
line read or written, and exception handlers, which receive errors the
connection recovers from.
"""

import abc
import logging
import sys
import traceback

log = logging.getLogger(__name__)


class TrafficLogger(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def line_in(self, line):
        "called with each line read from the server"

    @abc.abstractmethod
    def line_out(self, line):
        "called with each line written to the server, without CR LF"


class LoggingTrafficLogger(TrafficLogger):
    """
    Log traffic through the ``logging`` module.

    >>> import logging
    >>> logger = LoggingTrafficLogger(logging.getLogger('traffic'))
    >>> logger.line_in('PING :irc.example.net')
    """

    def __init__(self, logger=log, level=logging.DEBUG):
        self.logger = logger
        self.level = level

    def line_in(self, line):
        self.logger.log(self.level, "FROM SERVER: %s", line)

    def line_out(self, line):
        self.logger.log(self.level, "TO SERVER: %s", line)


def log_exception(exc):
    "Default exception handler: log the exception with its traceback"
    log.error("Unhandled error", exc_info=exc)


def print_exception(exc):
    "Print the exception with its traceback to standard error"
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
