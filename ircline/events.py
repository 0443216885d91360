"""
Names of the numeric replies (001-399) and errors (400-599) servers send.
"""

import sys

from jaraco.text import drop_comment, yield_lines

if sys.version_info >= (3, 12):
    from importlib.resources import files
else:
    from importlib_resources import files


def _load():
    text = files(__package__).joinpath('codes.txt').read_text()
    for line in map(drop_comment, yield_lines(text)):
        code, name = line.split()
        yield int(code), name


names = dict(_load())
"reply name by numeric code"

codes = {name: code for code, name in names.items()}
"numeric code by reply name"


def name_of(code):
    """
    The name of a numeric reply or error.

    >>> name_of(433)
    'nicknameinuse'
    >>> name_of('001')
    'welcome'

    Codes without a name keep their three digit form.

    >>> name_of(999)
    '999'
    """
    code = int(code)
    return names.get(code, '%03d' % code)


def code_of(name):
    """
    The numeric code of a named reply or error, ignoring case.

    >>> code_of('NicknameInUse')
    433
    >>> code_of('nosuchreply')
    Traceback (most recent call last):
    ...
    KeyError: 'nosuchreply'
    """
    return codes[name.lower()]
