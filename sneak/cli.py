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
CLI commons.

'''
import json
import os
from pathlib import Path

import click

from .log import (
    get_console_log,
    get_logger,
    colorize_json,
)
from . import config
from .config import (
    ConfigurationError,
    ModeConfig,
)
from .keys import parse_keys
from .host import TextHost
from .mode import (
    Action,
    Select,
    SneakMode,
    Stay,
    Step,
)


log = get_logger('sneak.cli')


def _dump(
    data: dict,
    plain: bool,
) -> None:
    click.echo(
        json.dumps(data, sort_keys=True, indent=4)
        if plain
        else colorize_json(data)
    )


def report(
    mode: SneakMode,
    host: TextHost,
    action: Action,

) -> dict:
    '''
    Summarize the mode's state after a key sequence.

    '''
    out: dict = {
        'step': mode.step.value,
        'action': action.name,
        'pending': mode.pending,
        'last_key': mode.last_key,
        'matches': len(mode.matches),
    }
    match action:
        case Select(match=m):
            out['match'] = m.to_dict()
            out['text'] = host.text[m.offset:m.end]

    if mode.current is not None:
        out['current'] = mode.current.to_dict()

    if mode.labels:
        out['labels'] = {
            label: m.offset
            for label, m in mode.labels.items()
        }

    return out


@click.group()
@click.option('--loglevel', '-l', default='warning', help='Logging level')
@click.option('--configdir', '-c', help='Configuration directory')
@click.pass_context
def cli(
    ctx: click.Context,
    loglevel: str,
    configdir: str,

) -> None:
    if configdir is not None:
        assert os.path.isdir(configdir), f"`{configdir}` is not a valid path"
        config._override_config_dir(configdir)

    ctx.ensure_object(dict)
    ctx.obj.update({
        'loglevel': loglevel,
        'log': get_console_log(loglevel),
        'confdir': config.get_conf_dir(),
    })


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.argument('keys', nargs=1, required=True)
@click.option('--top', '-t', default=0, type=int, help='First visible line')
@click.option(
    '--rows',
    '-r',
    default=None,
    type=int,
    help='Number of visible lines (default: all)',
)
@click.option('--caret', default=0, type=int, help='Caret char offset')
@click.option('--len', 'length', default=None, type=int, help='Key length')
@click.option(
    '--min-for-labels',
    default=None,
    type=int,
    help='Min match count to switch to labels',
)
@click.option(
    '--select-keys',
    nargs=2,
    default=None,
    help='Previous and next match keys',
)
@click.option('--reverse', is_flag=True, help='Treat alt as reverse')
@click.option(
    '--start-at-caret',
    is_flag=True,
    help='Start cycling after the caret',
)
@click.option('--plain', is_flag=True, help='Uncolored json output')
@click.pass_obj
def jump(
    obj: dict,
    path: str,
    keys: str,
    top: int,
    rows: int | None,
    caret: int,
    length: int | None,
    min_for_labels: int | None,
    select_keys: tuple[str, str] | None,
    reverse: bool,
    start_at_caret: bool,
    plain: bool,
):
    '''
    Sneak through the text in PATH by typing KEYS (vim notation,
    eg. 'ab<A-n>x').

    '''
    update: dict = {}
    if length is not None:
        update['length'] = length
    if min_for_labels is not None:
        update['min_for_labels'] = min_for_labels
    if select_keys:
        update['prev_key'], update['next_key'] = select_keys
    if start_at_caret:
        update['start_at_caret'] = True

    try:
        conf: ModeConfig = config.load_mode_config().copy(update=update)
        key_seq = parse_keys(keys)
    except (ConfigurationError, ValueError) as err:
        raise click.ClickException(str(err)) from err

    host = TextHost(
        Path(path).read_text(),
        top=top,
        rows=rows,
        caret=caret,
        reverse=reverse,
    )
    mode = SneakMode(host, conf)

    action: Action = Stay()
    for i, k in enumerate(key_seq):
        action = mode.send_key(k)
        if mode.step is Step.DONE:
            if i < len(key_seq) - 1:
                log.warning(
                    f'Mode finished, ignoring keys after {k} '
                    f'(#{i})'
                )
            break

    _dump(report(mode, host, action), plain)


@cli.command()
@click.option(
    '--path',
    '-p',
    default=None,
    type=click.Path(dir_okay=False),
    help='Config file path',
)
@click.option('--touch', is_flag=True, help='Write defaults if no file')
@click.option('--plain', is_flag=True, help='Uncolored json output')
def conf(
    path: str | None,
    touch: bool,
    plain: bool,
):
    '''
    Show the effective mode config.

    '''
    try:
        mode_conf: ModeConfig = config.load_mode_config(
            Path(path) if path else None,
            touch_if_dne=touch,
        )
    except ConfigurationError as err:
        raise click.ClickException(str(err)) from err

    log.debug(mode_conf.pformat())
    _dump(mode_conf.to_dict(), plain)
