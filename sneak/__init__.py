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
sneak: jump to on-screen text for hackers.

'''
from .config import (
    ConfigurationError,
    ModeConfig,
)
from .keys import (
    KeyEvent,
    KeyMod,
    parse_keys,
)
from ._scan import (
    Match,
    VisibleLine,
)
from .mode import (
    Exit,
    Host,
    Select,
    SneakMode,
    Stay,
    Step,
)

__all__ = [
    'ConfigurationError',
    'Exit',
    'Host',
    'KeyEvent',
    'KeyMod',
    'Match',
    'ModeConfig',
    'Select',
    'SneakMode',
    'Stay',
    'Step',
    'VisibleLine',
    'parse_keys',
]
