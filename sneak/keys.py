# sneak: jump to on-screen text for hackers
# Copyright (C) 2024-present  sneak contributors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

'''
Key press values and a (vim-like) key notation parser.

Keys are written the way you'd write them in a vim mapping:

- ``n``, ``N``, ``;``: a plain typed character,
- ``<A-n>`` / ``<M-n>``: alt (meta) modified ``n``,
- ``<C-a>``: ctrl modified ``a``,
- ``<esc>``, ``<enter>``, ``<space>``, ``<lt>``: named keys.

'''
from __future__ import annotations
from enum import IntFlag

from .types import Struct


class KeyMod(IntFlag):
    NONE = 0
    SHIFT = 1
    CTRL = 2
    ALT = 4


_mod_prefixes: dict[str, KeyMod] = {
    'S': KeyMod.SHIFT,
    'C': KeyMod.CTRL,
    'A': KeyMod.ALT,
    'M': KeyMod.ALT,
}

# named keys which map onto a typed char
_char_names: dict[str, str] = {
    'space': ' ',
    'lt': '<',
    'gt': '>',
    'bslash': '\\',
    'bar': '|',
}

_named_keys: set[str] = {
    'esc',
    'enter',
    'cr',
    'tab',
    'bs',
    'del',
    'up',
    'down',
    'left',
    'right',
    'home',
    'end',
    'pageup',
    'pagedown',
}


class KeyEvent(
    Struct,
    frozen=True,
):
    '''
    A single key press as delivered by the host editor.

    ``code`` is either a single char or one of the named keys (eg.
    ``'esc'``), ``mods`` is a ``KeyMod`` bit set.

    '''
    code: str
    mods: int = 0

    @property
    def char(self) -> str | None:
        '''
        The typed character for this key or ``None`` if it is
        a named key or has a ctrl/alt modifier held.

        '''
        if (
            len(self.code) == 1
            and not self.mods & (KeyMod.CTRL | KeyMod.ALT)
        ):
            return self.code

        return None

    def __str__(self) -> str:
        match self.char:
            case None:
                pass
            case '<':
                return '<lt>'
            case ' ':
                return '<space>'
            case _:
                return self.char

        prefix: str = ''.join(
            f'{abbr}-'
            for abbr, mod in (
                ('S', KeyMod.SHIFT),
                ('C', KeyMod.CTRL),
                ('A', KeyMod.ALT),
            )
            if self.mods & mod
        )
        return f'<{prefix}{self.code}>'


def key(
    code: str,
    mods: int = KeyMod.NONE,

) -> KeyEvent:
    return KeyEvent(code=code, mods=int(mods))


def _parse_bracketed(body: str) -> KeyEvent:
    parts: list[str] = body.split('-')

    # a trailing '-' means the key itself is a dash, eg. <A-->
    if body.endswith('-') and len(parts) > 2:
        parts = parts[:-2] + ['-']

    *prefixes, name = parts
    if not name:
        raise ValueError(f'Empty key in <{body}>')

    mods = KeyMod.NONE
    for prefix in prefixes:
        mod: KeyMod | None = _mod_prefixes.get(prefix.upper())
        if mod is None:
            raise ValueError(f'Unknown modifier `{prefix}` in <{body}>')
        mods |= mod

    lname: str = name.lower()
    if len(name) == 1:
        code: str = name

    elif lname in _char_names:
        code = _char_names[lname]

    elif lname in _named_keys:
        code = 'enter' if lname == 'cr' else lname

    else:
        raise ValueError(f'Unknown key name <{body}>')

    # shifted chars are reported as their upper case char, eg. <S-n> == N
    if (
        len(code) == 1
        and mods & KeyMod.SHIFT
        and code.upper() != code
    ):
        code = code.upper()
        mods ^= KeyMod.SHIFT

    return key(code, mods)


def parse_keys(seq: str) -> list[KeyEvent]:
    '''
    Parse a key notation string like ``'ab<A-n>x'`` into
    a sequence of ``KeyEvent``s.

    '''
    keys: list[KeyEvent] = []
    i: int = 0
    while i < len(seq):
        c: str = seq[i]
        if c == '<':
            end: int = seq.find('>', i + 2)
            if end < 0:
                raise ValueError(
                    f'Unterminated key notation at {i} in {seq!r}'
                )
            keys.append(_parse_bracketed(seq[i + 1:end]))
            i = end + 1
            continue

        keys.append(key(c))
        i += 1

    return keys


def parse_key(token: str) -> KeyEvent:
    '''
    Parse exactly one key from notation.

    '''
    keys: list[KeyEvent] = parse_keys(token)
    if len(keys) != 1:
        raise ValueError(f'{token!r} is not a single key')

    return keys[0]


def as_key(k: KeyEvent | str) -> KeyEvent:
    if isinstance(k, KeyEvent):
        return k

    return parse_key(k)
