"""
In-band text formatting used by mIRC and compatible clients.

Formatting is carried as control characters inside message text. A color
sequence is the color indicator followed by an optional one or two digit
foreground color and an optional comma and one or two digit background
color.
"""

import re

COLOR = '\x03'
BOLD = '\x02'
UNDERLINE = '\x1f'
RESET = '\x0f'
REVERSE = '\x16'

CTCP_DELIMITER = '\x01'

_color_seq = COLOR + '(?:[0-9]{1,2})?,?(?:[0-9]{1,2})?'
_toggles = BOLD + UNDERLINE + RESET + REVERSE

_formatting_pattern = re.compile('{}|[{}]'.format(_color_seq, _toggles))
_formatting_ctcp_pattern = re.compile(
    '{}|[{}{}]'.format(_color_seq, _toggles, CTCP_DELIMITER)
)


def strip(line, remove_ctcp_delimiter=False):
    r"""
    Remove color sequences and formatting toggles from line.

    >>> strip('\x02bold\x02 and \x1funderlined\x1f')
    'bold and underlined'

    >>> strip('\x0304red\x03 \x0312,01blue on black\x0f')
    'red blue on black'

    Each color takes at most two digits, so at most four are consumed.

    >>> strip('\x0312345')
    '5'

    A sequence cut short by the end of the line is removed without error.

    >>> strip('trailing \x0312,')
    'trailing '

    A comma right after the indicator belongs to the sequence.

    >>> strip('\x03,hi')
    'hi'

    CTCP delimiters survive unless asked otherwise.

    >>> strip('\x01ACTION \x02waves\x02\x01')
    '\x01ACTION waves\x01'
    >>> strip('\x01ACTION waves\x01', remove_ctcp_delimiter=True)
    'ACTION waves'
    """
    pattern = (
        _formatting_ctcp_pattern if remove_ctcp_delimiter else _formatting_pattern
    )
    return pattern.sub('', line)
