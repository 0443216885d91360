#! /usr/bin/env python
#
# Example program using ircline.client.
#
# Reads lines from standard input and sends them to a nick or channel.
#
# This program is free without restrictions; do anything you like with
# it.

import argparse
import itertools
import sys
import threading

import jaraco.logging

import ircline.client
import ircline.config
from ircline.listeners import EventListener


def get_lines():
    while True:
        yield sys.stdin.readline().strip()


class Cat(EventListener):
    def __init__(self, connection, target):
        self.connection = connection
        self.target = target

    def on_registered(self):
        if ircline.client.is_channel(self.target):
            self.connection.join(self.target)
            return
        self.start()

    def on_join(self, channel, user):
        if user.nick == self.connection.nickname:
            self.start()

    def on_disconnected(self):
        print("Disconnected.", file=sys.stderr)

    def start(self):
        # events are delivered on the reader thread, which mustn't block
        threading.Thread(target=self.main_loop, daemon=True).start()

    def main_loop(self):
        for line in itertools.takewhile(bool, get_lines()):
            print(line)
            self.connection.privmsg(self.target, line)
        self.connection.quit("Using ircline.client")


def get_args():
    parser = argparse.ArgumentParser()
    parser.add_argument('server')
    parser.add_argument('nickname')
    parser.add_argument('target', help="a nickname or channel")
    parser.add_argument('-p', '--port', default=6667, type=int)
    jaraco.logging.add_arguments(parser)
    return parser.parse_args()


def main():
    args = get_args()
    jaraco.logging.setup(args)

    config = ircline.config.Config((args.server, args.port), args.nickname)
    connection = ircline.client.Connection(config)
    connection.add_listener(Cat(connection, args.target))
    try:
        connection.connect()
    except ircline.client.ServerConnectionError:
        print(sys.exc_info()[1])
        raise SystemExit(1)

    connection.wait()


if __name__ == '__main__':
    main()
