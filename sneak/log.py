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

"""
Log like a sneaker!

"""
import logging
import json

import colorlog
from pygments import (
    highlight,
    lexers,
    formatters,
)

# Makes it so we only see the full module name when using ``__name__``
# without the extra "sneak." prefix.
_proj_name: str = 'sneak'

LOG_FORMAT: str = (
    '%(log_color)s%(asctime)s %(levelname)s '
    '%(bold_white)s{%(name)s}%(reset)s '
    '%(log_color)s%(message)s'
)
DATE_FORMAT: str = '%b %d %H:%M:%S'

STD_PALETTE: dict[str, str] = {
    'DEBUG': 'white',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}


def get_logger(
    name: str = None,

) -> logging.Logger:
    '''
    Return the package log or a sub-log for `name` if provided.

    '''
    log: logging.Logger = logging.getLogger(_proj_name)

    if (
        name
        and name != _proj_name
    ):
        # strip the project prefix when passed a ``__name__``
        if name.startswith(f'{_proj_name}.'):
            name = name[len(_proj_name) + 1:]

        log = log.getChild(name)

    return log


def get_console_log(
    level: str | None = None,
    name: str | None = None,

) -> logging.Logger:
    '''
    Get the package logger and enable a handler which writes to stderr.

    Yeah yeah, i know we can use ``DictConfig``. You do it...

    '''
    log: logging.Logger = get_logger(name)  # our root logger
    if not level:
        return log

    log.setLevel(level.upper())

    # only ever install one console handler on the project root log
    root: logging.Logger = get_logger()
    if not any(
        getattr(handler, '_sneak_console', False)
        for handler in root.handlers
    ):
        handler = colorlog.StreamHandler()
        handler.setFormatter(
            colorlog.ColoredFormatter(
                LOG_FORMAT,
                datefmt=DATE_FORMAT,
                log_colors=STD_PALETTE,
            )
        )
        handler._sneak_console = True
        root.addHandler(handler)

    return log


def colorize_json(
    data: dict,
    style='algol_nu',
):
    '''
    Colorize json output using ``pygments``.

    '''
    formatted_json = json.dumps(
        data,
        sort_keys=True,
        indent=4,
    )
    return highlight(
        formatted_json,
        lexers.JsonLexer(),

        # likeable styles: algol_nu, tango, monokai
        formatters.TerminalTrueColorFormatter(style=style)
    )
