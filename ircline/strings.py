from jaraco.text import FoldedCase


class IRCFoldedCase(FoldedCase):
    """
    A version of FoldedCase that honors the RFC 1459 case mapping, in
    which "[]\\^" are the upper case forms of "{}|~".

    >>> IRCFoldedCase('Nick^').lower()
    'nick~'

    >>> IRCFoldedCase('[away]') == IRCFoldedCase('{AWAY}')
    True

    >>> IRCFoldedCase('[Away]').casefold()
    '{away}'

    >>> IRCFoldedCase().lower()
    ''
    """

    translation = dict(
        zip(
            map(ord, r"[]\^"),
            map(ord, r"{}|~"),
        )
    )

    def lower(self):
        return super().lower().translate(self.translation)

    def casefold(self):
        """
        Ensure cached superclass value doesn't supersede.

        >>> ob = IRCFoldedCase('[Away]')
        >>> ob.casefold()
        '{away}'
        >>> ob.casefold()
        '{away}'
        """
        return super().casefold().translate(self.translation)

    def __setattr__(self, key, val):
        if key in ('lower', 'casefold'):
            return
        return super().__setattr__(key, val)


def same_nick(first, second):
    """
    Compare two nicks under the IRC case mapping.

    >>> same_nick('Dan[]', 'dan{}')
    True
    >>> same_nick('dan', 'dana')
    False
    """
    return IRCFoldedCase(first) == IRCFoldedCase(second)


def is_truncation(candidate, nick):
    """
    Is candidate the start of nick, as when a server cuts a nick down to
    its length limit?

    >>> is_truncation('VeryLongNic', 'VeryLongNick')
    True
    >>> is_truncation('verylongnick', 'VeryLongNick')
    True
    >>> is_truncation('VeryLongNickname', 'VeryLongNick')
    False
    >>> is_truncation('', 'VeryLongNick')
    False
    """
    return 0 < len(candidate) <= len(nick) and same_nick(nick[: len(candidate)], candidate)
