import collections

from .message import split


ModeChange = collections.namedtuple('ModeChange', 'operator mode argument')


class Modes(list):
    """
    The mode changes of a single MODE command, in the order given.

    The accessors take a 1-based index.

    >>> modes = parse_channel_modes('+o-v', 'alice bob')
    >>> modes.count
    2
    >>> modes.operator_at(2), modes.mode_at(2), modes.arg_at(2)
    ('-', 'v', 'bob')
    """

    @property
    def count(self):
        return len(self)

    def _at(self, index):
        if not 1 <= index <= len(self):
            raise IndexError("mode index out of range: {index}".format(**vars()))
        return self[index - 1]

    def operator_at(self, index):
        return self._at(index).operator

    def mode_at(self, index):
        return self._at(index).mode

    def arg_at(self, index):
        return self._at(index).argument


def _takes_argument(operator, mode):
    return mode in 'ovbk' or (mode == 'l' and operator == '+')


def parse_channel_modes(modes, args=''):
    """Parse a channel mode string and its arguments.

    Returns a Modes list of ModeChange triples: operator, mode and
    argument.  The argument is an empty string unless the mode is one
    of "o", "v", "b" or "k", or is "l" being set.

    >>> parse_channel_modes('+o-v', 'alice bob')
    [ModeChange(operator='+', mode='o', argument='alice'), ModeChange(operator='-', mode='v', argument='bob')]

    >>> parse_channel_modes('+m')
    [ModeChange(operator='+', mode='m', argument='')]

    The limit takes an argument only when set.

    >>> [change.argument for change in parse_channel_modes('+l-l', '10')]
    ['10', '']

    Missing arguments are empty; extra ones are ignored.

    >>> [change.argument for change in parse_channel_modes('+bk', 'mask!*@*')]
    ['mask!*@*', '']
    >>> parse_channel_modes('+k', 'key extra')
    [ModeChange(operator='+', mode='k', argument='key')]

    Modes before any sign are being set.

    >>> parse_channel_modes('nt')
    [ModeChange(operator='+', mode='n', argument=''), ModeChange(operator='+', mode='t', argument='')]
    """
    arguments = iter(split(args))
    operator = '+'
    result = Modes()
    for char in modes:
        if char in '+-':
            operator = char
            continue
        arg = next(arguments, '') if _takes_argument(operator, char) else ''
        result.append(ModeChange(operator, char, arg))
    return result


def parse_mode_line(line):
    """
    Parse modes and arguments given as one string.

    >>> parse_mode_line(' +ov alice bob ')
    [ModeChange(operator='+', mode='o', argument='alice'), ModeChange(operator='+', mode='v', argument='bob')]

    >>> parse_mode_line('+')
    []

    The modes end at the first space, so a sign with no mode characters
    yields no changes and its arguments are ignored.

    >>> parse_mode_line('+ alice')
    []
    """
    line = line.strip()
    if len(line) < 2:
        return Modes()
    modes, sep, args = line.partition(' ')
    return parse_channel_modes(modes, args)
