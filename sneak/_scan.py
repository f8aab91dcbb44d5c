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
Match scanning over (only) the visible text.

'''
from __future__ import annotations
from typing import (
    Iterable,
    Iterator,
)

from .types import Struct


class VisibleLine(Struct, frozen=True):
    '''
    One rendered line of the view.

    '''
    line: int  # 0-based line number in the document
    offset: int  # char offset of the line start in the document
    text: str  # line contents, no line terminator


class Match(Struct, frozen=True):
    '''
    A single occurrence of the search key.

    '''
    offset: int
    line: int
    col: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def as_visible(
    lines: Iterable[VisibleLine | tuple[int, int, str]],

) -> list[VisibleLine]:
    '''
    Coerce host provided ``(line, offset, text)`` tuples, sorted
    into document order.

    '''
    return sorted(
        (
            ln if isinstance(ln, VisibleLine)
            else VisibleLine(*ln)
            for ln in lines
        ),
        key=lambda ln: ln.offset,
    )


def iter_line_matches(
    key: str,
    vline: VisibleLine,

) -> Iterator[Match]:
    # overlapping occurrences count, eg. 'aa' in 'aaa' -> cols 0, 1
    text: str = vline.text.rstrip('\r\n')
    col: int = text.find(key)
    while col >= 0:
        yield Match(
            offset=vline.offset + col,
            line=vline.line,
            col=col,
            length=len(key),
        )
        col = text.find(key, col + 1)


def scan(
    key: str,
    visible: Iterable[VisibleLine | tuple[int, int, str]],

) -> list[Match]:
    '''
    Return every (exact, case sensitive) occurrence of ``key`` in the
    ``visible`` lines in document order.

    Matches never span a line break and nothing outside of the
    provided lines is ever looked at.

    '''
    if not key:
        return []

    matches: list[Match] = []
    last: int = -1
    for vline in as_visible(visible):
        for m in iter_line_matches(key, vline):
            # drop dups from overlapping host lines
            if m.offset <= last:
                continue
            matches.append(m)
            last = m.offset

    return matches
