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
An in-memory (plain text buffer) host for driving the mode outside of
an editor, eg. from the cli or tests.

'''
from __future__ import annotations

from .log import get_logger
from ._scan import VisibleLine
from .mode import (
    Action,
    Host,
    Select,
)

log = get_logger(__name__)


def split_lines(text: str) -> list[VisibleLine]:
    '''
    Split a whole buffer into ``VisibleLine``s tracking each line's
    start offset.

    '''
    lines: list[VisibleLine] = []
    offset: int = 0
    for i, raw in enumerate(text.splitlines(keepends=True)):
        lines.append(
            VisibleLine(
                line=i,
                offset=offset,
                text=raw.rstrip('\r\n'),
            )
        )
        offset += len(raw)

    return lines


class TextHost(Host):
    '''
    A text buffer with a viewport of ``rows`` lines starting at line
    ``top`` and a caret offset.

    '''
    def __init__(
        self,
        text: str,
        top: int = 0,
        rows: int | None = None,
        caret: int = 0,
        reverse: bool = False,
    ) -> None:
        self.text: str = text
        self.top: int = top
        self.rows: int | None = rows
        self._caret: int = caret

        # live "alt is reverse" preference, may be flipped at any time
        self.reverse: bool = reverse

        self.lines: list[VisibleLine] = split_lines(text)
        self.actions: list[Action] = []
        self.selection: tuple[int, int] | None = None

    def visible_lines(self) -> list[VisibleLine]:
        end: int | None = (
            self.top + self.rows
            if self.rows is not None
            else None
        )
        return self.lines[self.top:end]

    def alt_is_reverse(self) -> bool:
        return self.reverse

    def caret(self) -> int:
        return self._caret

    def emit(self, action: Action) -> None:
        self.actions.append(action)
        match action:
            case Select(match=m):
                self._caret = m.offset
                self.selection = (m.offset, m.end)
                log.info(
                    f'Selected {self.text[m.offset:m.end]!r} '
                    f'@ {m.line}:{m.col}'
                )
            case _:
                log.debug(f'Returned without selection: {action}')
