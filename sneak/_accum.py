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
Search key accumulation: collect typed chars until a full key.

'''
from __future__ import annotations

from .types import Struct
from .config import ConfigurationError


class Incomplete(Struct, frozen=True):
    pending: str


class Completed(Struct, frozen=True):
    key: str


KeyState = Incomplete | Completed


class KeyAccumulator:
    '''
    Collect a fixed length run of chars into a search key.

    The last completed key is kept around (across mode invocations)
    so it can be reused without re-typing it.

    '''
    def __init__(
        self,
        length: int = 2,
    ) -> None:
        if length < 1:
            raise ConfigurationError(f"Can't match on {length} characters")

        self.length: int = length
        self._buf: list[str] = []
        self._last: str | None = None

    @property
    def pending(self) -> str:
        return ''.join(self._buf)

    def feed(self, char: str) -> KeyState:
        self._buf.append(char)
        if len(self._buf) < self.length:
            return Incomplete(pending=self.pending)

        key: str = self.pending
        self._buf.clear()
        self._last = key
        return Completed(key=key)

    def flush(self) -> str:
        '''
        Complete the key early with the chars buffered so far.

        '''
        key: str = self.pending
        self._buf.clear()
        self._last = key
        return key

    def last_completed(self) -> str | None:
        return self._last

    def reset(self) -> None:
        '''
        Drop any buffered (partial key) chars, the last completed
        key is kept.

        '''
        self._buf.clear()
