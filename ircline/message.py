import collections
import functools

from . import events
from . import formatting


class ParseError(ValueError):
    "The line could not be parsed as an IRC message"


def split(text, trailing=''):
    """
    Split the middle part of a message on single spaces and append the
    trailing parameter, if any.

    >>> split('foo bar')
    ['foo', 'bar']

    >>> split('foo bar', 'baz bing')
    ['foo', 'bar', 'baz bing']

    >>> split('')
    []

    >>> split('', 'only')
    ['only']

    Consecutive spaces produce empty items; a single final space does not.

    >>> split('a  b ')
    ['a', '', 'b']
    """
    items = text.split(' ')
    if not items[-1]:
        items.pop()
    if trailing:
        items.append(trailing)
    return items


class NickMask(str):
    """
    A nickmask (the prefix of a message).

    >>> nm = NickMask('pinky!username@example.com')
    >>> nm.nick
    'pinky'

    >>> nm.host
    'example.com'

    >>> nm.user
    'username'

    >>> isinstance(nm, str)
    True

    Servers appear as a bare name, in which case only nick is set.

    >>> nm = NickMask('irc.server.net')
    >>> nm.nick
    'irc.server.net'
    >>> nm.user
    >>> nm.host

    The nick ends at whichever of '!' and '@' comes first.

    >>> NickMask('pinky@example.com').nick
    'pinky'
    >>> NickMask('pinky@example.com').user
    >>> NickMask('pinky!username').user
    'username'

    An empty prefix has no nick at all.

    >>> NickMask('').nick
    """

    @classmethod
    def from_params(cls, nick, user, host):
        return cls('{nick}!{user}@{host}'.format(**vars()))

    @property
    def nick(self):
        if not self:
            return None
        end = min(
            (index for index in map(self.find, '!@') if index != -1),
            default=len(self),
        )
        return self[:end]

    @property
    def user(self):
        nick, sep, rest = self.partition('!')
        if not sep:
            return None
        user, sep, host = rest.partition('@')
        return user

    @property
    def host(self):
        nick, sep, host = self.partition('@')
        return host if sep else None

    @property
    def userhost(self):
        nick, sep, userhost = self.partition('!')
        return userhost or None


class Message(collections.namedtuple('Base', 'prefix command middle trailing')):
    r"""
    One line of the IRC protocol, split into prefix, command, middle and
    trailing parts.

    >>> msg = Message.parse(':nick!user@host COMMAND middle1 middle2 :trailing text')
    >>> msg.prefix
    'nick!user@host'
    >>> msg.command
    'COMMAND'
    >>> msg.middle
    'middle1 middle2'
    >>> msg.trailing
    'trailing text'
    >>> msg.parameters
    ('middle1', 'middle2', 'trailing text')

    A lone parameter is always the trailing one, with or without a colon.

    >>> Message.parse('PART #chan')
    Message(prefix='', command='PART', middle='', trailing='#chan')
    >>> Message.parse('PART :#chan')
    Message(prefix='', command='PART', middle='', trailing='#chan')

    Without a colon marker the last word is the trailing parameter.

    >>> Message.parse('MODE #chan +o alice').middle
    '#chan +o'

    Color codes are removed unless formatting is kept.

    >>> Message.parse('PRIVMSG #chan :\x0304red').trailing
    'red'
    >>> Message.parse('PRIVMSG #chan :\x0304red', keep_formatting=True).trailing
    '\x0304red'
    """

    @classmethod
    def parse(cls, line, keep_formatting=False):
        """
        Parse a single line, already stripped of its line terminator.

        Raises ParseError if the line holds no command.
        """
        if not keep_formatting:
            line = formatting.strip(line)

        prefix = ''
        rest = line
        if line.startswith(':'):
            prefix, sep, rest = line[1:].partition(' ')
            if not sep:
                raise ParseError("No command after prefix: {line!r}".format(**vars()))

        command, sep, rest = rest.lstrip(' ').partition(' ')
        if not command:
            raise ParseError("No command: {line!r}".format(**vars()))

        middle, trailing = cls._split_params(rest.lstrip(' '))
        return cls(prefix, command, middle, trailing)

    @staticmethod
    def _split_params(params):
        """
        Separate the middle parameters from the trailing one.

        >>> Message._split_params('#chan :hello world')
        ('#chan', 'hello world')
        >>> Message._split_params(':hello world')
        ('', 'hello world')
        >>> Message._split_params('a b c')
        ('a b', 'c')

        Whitespace after the last word stays with it.

        >>> Message._split_params('a b  ')
        ('a', 'b  ')
        >>> Message._split_params('')
        ('', '')
        """
        if not params:
            return '', ''
        # search from the space that separated params from the command
        params = ' ' + params
        marker = params.find(' :')
        if marker != -1:
            return params[1:marker], params[marker + 2 :]
        last = params.rstrip(' ').rfind(' ')
        return params[1:last], params[last + 1 :]

    @functools.cached_property
    def parameters(self):
        return tuple(split(self.middle, self.trailing))

    @property
    def parameter_count(self):
        return len(self.parameters)

    def param(self, index):
        """
        Return the parameter at the 1-based index, or an empty string.

        >>> msg = Message.parse('KICK #chan bob :flooding')
        >>> msg.param(2)
        'bob'
        >>> msg.param(4)
        ''
        """
        if 1 <= index <= self.parameter_count:
            return self.parameters[index - 1]
        return ''

    def params_from(self, index):
        """
        Join the parameters from the 1-based index on, each followed by a
        single space.

        >>> Message.parse('MODE #chan +ov alice bob').params_from(3)
        'alice bob '
        >>> Message.parse('MODE #chan +m').params_from(3)
        ''
        """
        return ''.join(param + ' ' for param in self.parameters[max(index - 1, 0) :])

    def params_to(self, index):
        """
        Join the parameters up to and including the 1-based index, each
        followed by a single space.

        >>> Message.parse('MODE #chan +ov alice bob').params_to(2)
        '#chan +ov '
        """
        return ''.join(param + ' ' for param in self.parameters[: max(index, 0)])

    @property
    def params(self):
        """
        The middle and trailing parts as one string.

        >>> Message.parse('TOPIC #chan :new topic').params
        '#chan new topic'
        """
        sep = ' ' if self.middle and self.trailing else ''
        return self.middle + sep + self.trailing

    @property
    def source(self):
        return NickMask(self.prefix)

    @property
    def nick(self):
        return self.source.nick

    @property
    def user(self):
        return self.source.user

    @property
    def host(self):
        return self.source.host

    @property
    def numeric(self):
        """
        The numeric code of a reply or error, or None for named commands.

        >>> Message.parse(':irc.example.net 001 nick :Welcome').numeric
        1
        >>> Message.parse('PING :irc.example.net').numeric
        """
        if self.command.isascii() and self.command.isdigit():
            return int(self.command)
        return None

    @property
    def reply_name(self):
        """
        The name of a numeric reply or error, or None for named commands.

        >>> Message.parse(':irc.example.net 433 * pinky :Nickname is already in use').reply_name
        'nicknameinuse'
        >>> Message.parse('PING :irc.example.net').reply_name
        """
        code = self.numeric
        return None if code is None else events.name_of(code)

    def __str__(self):
        """
        >>> str(Message.parse(':nick!u@h PRIVMSG #chan :hi there'))
        ':nick!u@h PRIVMSG #chan :hi there'
        """
        items = [self.command]
        if self.prefix:
            items.insert(0, ':' + self.prefix)
        if self.middle:
            items.append(self.middle)
        if self.trailing:
            items.append(':' + self.trailing)
        return ' '.join(items)
