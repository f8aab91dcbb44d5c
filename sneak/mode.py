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
The sneak input mode: type a short char sequence, jump to one of its
on-screen occurrences.

In the mode these are the available key sequences:

- ``{char0}{char1}``: find every instance of the string on screen.
  If there is only one it is selected immediately, returning to the
  host's default mode. If there are multiple, the first one becomes
  current and typing does the following:

  - ``n`` for the next entry,
  - ``N`` for the previous entry if the host's ``alt_is_reverse()``
    is ``False``,
  - ``<A-n>`` for the previous entry if it is ``True``,
  - any other key selects the current entry and returns.

- a cycle key (instead of a first char) re-uses the last sequence.
- any non char key (eg. ``<esc>``) searches with the chars typed so
  far, or re-uses the last sequence if nothing was typed.

With ``min_for_labels`` configured, once there are at least that many
matches each one gets a single char label instead; typing a label
selects its match and anything else exits without selecting.

'''
from __future__ import annotations
from abc import abstractmethod
from enum import Enum
from typing import (
    Protocol,
    Sequence,
)

from .log import get_logger
from .types import Struct
from .config import ModeConfig
from .keys import (
    KeyEvent,
    as_key,
)
from ._accum import (
    KeyAccumulator,
    Completed,
    Incomplete,
)
from ._scan import (
    Match,
    VisibleLine,
    scan,
)
from ._matchset import (
    Direction,
    MatchSet,
)
from ._labels import (
    LabelAssigner,
    Narrowed,
    NoMatch,
    Resolved,
)

log = get_logger(__name__)


class Stay(Struct, frozen=True):
    '''
    Remain in the mode, nothing for the host to do.

    '''
    name: str = 'stay'


class Select(Struct, frozen=True):
    '''
    Select ``match`` and return to the host's default mode.

    '''
    match: Match
    name: str = 'select'


class Exit(Struct, frozen=True):
    '''
    Return to the host's default mode without a selection.

    '''
    name: str = 'exit'


Action = Stay | Select | Exit


class Host(
    Protocol,
):
    '''
    Api description that an editor must implement in order to drive
    a ``SneakMode``.

    '''
    @abstractmethod
    def visible_lines(
        self,
    ) -> Sequence[VisibleLine | tuple[int, int, str]]:
        '''
        The currently rendered ``(line, offset, text)`` rows of the
        active view.

        '''
        ...

    @abstractmethod
    def alt_is_reverse(self) -> bool:
        ...

    @abstractmethod
    def emit(self, action: Action) -> None:
        '''
        Handle a terminal (``Select`` or ``Exit``) action.

        '''
        ...

    def caret(self) -> int | None:
        '''
        The caret's char offset, ``None`` if the host doesn't track one.

        '''
        return None


class Step(Enum):
    AWAITING_KEY = 'awaiting_key'
    CYCLING = 'cycling'
    LABELING = 'labeling'
    DONE = 'done'


class SneakMode:
    '''
    A mode used for jumping to sequences of characters.

    Feed it one key at a time with ``.send_key()``.

    '''
    def __init__(
        self,
        host: Host,
        config: ModeConfig | None = None,
    ) -> None:
        self.host: Host = host
        self.config: ModeConfig = config or ModeConfig()

        self._accum = KeyAccumulator(self.config.length)
        self._labeler = LabelAssigner(
            self.config.labels,
            reserved=self.config.reserved_chars(),
        )
        self._next_key: KeyEvent = self.config.next

        self._step: Step = Step.AWAITING_KEY
        self._matches: MatchSet = MatchSet()
        self._selection: Match | None = None
        self.enter()

    # read-only state for painting by the host

    @property
    def step(self) -> Step:
        return self._step

    @property
    def pending(self) -> str:
        return self._accum.pending

    @property
    def last_key(self) -> str | None:
        return self._accum.last_completed()

    @property
    def matches(self) -> MatchSet:
        return self._matches

    @property
    def current(self) -> Match | None:
        if (
            self._step is Step.CYCLING
            and self._matches
        ):
            return self._matches.current()

        return None

    @property
    def labels(self) -> dict[str, Match]:
        return self._labeler.labels

    @property
    def selection(self) -> Match | None:
        return self._selection

    def enter(self) -> None:
        '''
        Start a fresh invocation, the last search key is kept.

        '''
        self._accum.reset()
        self._labeler.clear()
        self._matches = MatchSet()
        self._selection = None
        self._step = Step.AWAITING_KEY

    def prev_key(self) -> KeyEvent:
        # NOTE: never cache this, the host may flip its preference live
        return self.config.prev(self.host.alt_is_reverse())

    def is_cycle_key(self, key: KeyEvent) -> bool:
        return (
            key == self._next_key
            or key == self.prev_key()
        )

    def send_key(
        self,
        key: KeyEvent | str,

    ) -> Action:
        key: KeyEvent = as_key(key)

        if self._step is Step.DONE:
            log.debug('Re-entering finished mode')
            self.enter()

        match self._step:
            case Step.AWAITING_KEY:
                return self._on_awaiting(key)

            case Step.CYCLING:
                return self._on_cycling(key)

            case Step.LABELING:
                return self._on_labeling(key)

    def _on_awaiting(
        self,
        key: KeyEvent,

    ) -> Action:
        last: str | None = self._accum.last_completed()
        if (
            not self._accum.pending
            and last is not None
            and self.is_cycle_key(key)
        ):
            log.debug(f'Re-using last sequence {last!r}')
            return self._search(last)

        char: str | None = key.char
        if char is None:
            # any other key searches with what has been typed so far
            if self._accum.pending:
                partial: str = self._accum.flush()
                log.debug(f'Searching partial sequence {partial!r} on {key}')
                return self._search(partial)

            if last is None:
                log.error("Mode hasn't been sneaked with yet")
                return self._finish(None)

            log.debug(f'Re-using last sequence {last!r} on {key}')
            return self._search(last)

        match self._accum.feed(char):
            case Incomplete(pending=pending):
                log.debug(f'Pending sequence {pending!r}')
                return Stay()

            case Completed(key=search_key):
                return self._search(search_key)

    def _search(
        self,
        search_key: str,

    ) -> Action:
        self._matches = MatchSet(
            scan(search_key, self.host.visible_lines())
        )
        n: int = len(self._matches)

        match self._matches.kind:
            case 'none':
                log.warning(f'No matches found for {search_key!r}')
                return self._finish(None)

            case 'single':
                # stop immediately if there is only one match
                return self._finish(self._matches.current())

        threshold: int | None = self.config.min_for_labels
        if (
            threshold is not None
            and n >= threshold
        ):
            labels: dict[str, Match] = self._labeler.assign(
                list(self._matches)
            )
            if len(labels) < n:
                log.warning(
                    f'Only {len(labels)} of {n} matches for '
                    f'{search_key!r} could be labeled'
                )
            log.debug(f'Labeling {n} matches for {search_key!r}')
            self._step = Step.LABELING
            return Stay()

        if self.config.start_at_caret:
            caret: int | None = self.host.caret()
            if caret is None:
                log.warning(
                    'start_at_caret is set but the host has no caret'
                )
            else:
                self._matches.seek(caret)

        log.debug(f'Cycling {n} matches for {search_key!r}')
        self._step = Step.CYCLING
        return Stay()

    def _on_cycling(
        self,
        key: KeyEvent,

    ) -> Action:
        if key == self._next_key:
            self._matches.advance(Direction.NEXT)
            return Stay()

        elif key == self.prev_key():
            self._matches.advance(Direction.PREVIOUS)
            return Stay()

        # any other key selects the current match
        return self._finish(self._matches.current())

    def _on_labeling(
        self,
        key: KeyEvent,

    ) -> Action:
        match self._labeler.filter(key.char):
            case Narrowed():
                return Stay()

            case Resolved(match=m):
                return self._finish(m)

            case NoMatch():
                log.warning(f'{key} is not a valid label')
                return self._finish(None)

    def _finish(
        self,
        selection: Match | None,

    ) -> Action:
        self._step = Step.DONE
        self._selection = selection
        self._accum.reset()
        self._labeler.clear()

        action: Action = (
            Select(match=selection)
            if selection is not None
            else Exit()
        )
        self.host.emit(action)
        return action
