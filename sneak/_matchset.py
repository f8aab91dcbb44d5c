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
Ordered match collection with a (cyclable) "current" entry.

'''
from __future__ import annotations
from enum import Enum
from typing import (
    Iterator,
    Literal,
    Sequence,
)

from ._scan import Match


class Direction(Enum):
    NEXT = 1
    PREVIOUS = -1


class MatchSet:
    '''
    The matches of one search episode in document order.

    The current index always starts at 0 (the first match on screen)
    and wraps modulo the match count when cycled.

    '''
    def __init__(
        self,
        matches: Sequence[Match] = (),
    ) -> None:
        self._matches: tuple[Match, ...] = tuple(matches)
        self._index: int = 0

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self) -> Iterator[Match]:
        return iter(self._matches)

    def __getitem__(self, i: int) -> Match:
        return self._matches[i]

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}('
            f'len={len(self)}, index={self._index})'
        )

    @property
    def kind(self) -> Literal['none', 'single', 'multiple']:
        '''
        The size class driving the mode's next transition.

        '''
        match len(self._matches):
            case 0:
                return 'none'
            case 1:
                return 'single'
            case _:
                return 'multiple'

    @property
    def index(self) -> int:
        return self._index

    def current(self) -> Match:
        if not self._matches:
            raise IndexError('No current match in an empty set')

        return self._matches[self._index]

    def advance(
        self,
        direction: Direction = Direction.NEXT,

    ) -> Match:
        if not self._matches:
            raise IndexError("Can't cycle an empty set")

        self._index = (self._index + direction.value) % len(self._matches)
        return self._matches[self._index]

    def set_current(self, index: int) -> Match:
        if not 0 <= index < len(self._matches):
            raise IndexError(
                f'Match index {index} out of range for {self!r}'
            )

        self._index = index
        return self._matches[index]

    def seek(self, offset: int) -> Match:
        '''
        Make the first match starting after ``offset`` (normally the
        caret) current, or the last match if there is none after it.

        '''
        for i, m in enumerate(self._matches):
            if m.offset > offset:
                return self.set_current(i)

        return self.set_current(len(self._matches) - 1)
