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
Single char label assignment and filtering for "too many" matches.

Instead of cycling to a far away match each match gets a label char
drawn (in document order) from the label alphabet; typing a label
filters out every other match.

'''
from __future__ import annotations
from typing import (
    Iterable,
    Sequence,
)

from .types import Struct
from .config import (
    ConfigurationError,
    DEFAULT_LABELS,
    label_alphabet,
)
from ._scan import Match


class Narrowed(Struct, frozen=True):
    labels: dict[str, Match]


class Resolved(Struct, frozen=True):
    match: Match


class NoMatch(Struct, frozen=True):
    char: str | None = None


LabelOutcome = Narrowed | Resolved | NoMatch


class LabelAssigner:
    '''
    Assign one unique label char per match.

    If there are more matches then label chars the remainder (the
    last matches in document order) are left unlabeled and are thus
    unreachable by label.

    '''
    def __init__(
        self,
        alphabet: str = DEFAULT_LABELS,
        reserved: Iterable[str] = (),
    ) -> None:
        self.alphabet: str = label_alphabet(alphabet, set(reserved))
        if not self.alphabet:
            raise ConfigurationError(
                f'No usable label chars in {alphabet!r}'
            )

        self._labels: dict[str, Match] = {}
        self._unlabeled: tuple[Match, ...] = ()

    @property
    def labels(self) -> dict[str, Match]:
        return dict(self._labels)

    @property
    def unlabeled(self) -> tuple[Match, ...]:
        return self._unlabeled

    @property
    def active(self) -> bool:
        return bool(self._labels)

    def assign(
        self,
        matches: Sequence[Match],

    ) -> dict[str, Match]:
        n: int = len(self.alphabet)
        self._labels = dict(zip(self.alphabet, matches))
        self._unlabeled = tuple(matches[n:])
        return self.labels

    def clear(self) -> None:
        self._labels = {}
        self._unlabeled = ()

    def filter(
        self,
        char: str | None,

    ) -> LabelOutcome:
        '''
        Filter the live labels by ``char``.

        Labels are unique single chars so a live label always resolves
        on the first key; ``Narrowed`` can't be returned with the
        current label scheme.

        '''
        candidates: list[Match] = [
            m for label, m in self._labels.items()
            if label == char
        ]
        match candidates:
            case []:
                self.clear()
                return NoMatch(char=char)

            case [m]:
                self.clear()
                return Resolved(match=m)

            case _:
                return Narrowed(labels=self.assign(candidates))
