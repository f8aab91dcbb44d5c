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
Mode configuration and (config) file mgmt.

"""
from __future__ import annotations
import platform
import sys
import os
import shutil
import string
from typing import (
    Callable,
    MutableMapping,
)
from pathlib import Path

import msgspec
import tomlkit
try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

from .log import get_logger
from .types import Struct
from .keys import (
    KeyEvent,
    KeyMod,
    key,
    parse_key,
)

log = get_logger(__name__)


# XXX NOTE: taken from ``click`` since apparently they have some
# super weirdness with sigint and sudo..no clue
# we're probably going to slowly just modify it to our own version over
# time..
def get_app_dir(
    app_name: str,
    roaming: bool = True,
    force_posix: bool = False,

) -> str:
    r"""Returns the config folder for the application.  The default behavior
    is to return whatever is most appropriate for the operating system.

    To give you an idea, for an app called ``"Foo Bar"``, something like
    the following folders could be returned:

    Mac OS X:
      ``~/Library/Application Support/Foo Bar``
    Mac OS X (POSIX):
      ``~/.foo-bar``
    Unix:
      ``~/.config/foo-bar``
    Unix (POSIX):
      ``~/.foo-bar``
    Win 7 (roaming):
      ``C:\Users\<user>\AppData\Roaming\Foo Bar``
    Win 7 (not roaming):
      ``C:\Users\<user>\AppData\Local\Foo Bar``

    :param app_name: the application name.  This should be properly capitalized
                     and can contain whitespace.
    :param roaming: controls if the folder should be roaming or not on Windows.
                    Has no affect otherwise.
    :param force_posix: if this is set to `True` then on any POSIX system the
                        folder will be stored in the home folder with a leading
                        dot instead of the XDG config home or darwin's
                        application support folder.
    """

    def _posixify(name):
        return "-".join(name.split()).lower()

    if platform.system() == 'Windows':
        env_key = "APPDATA" if roaming else "LOCALAPPDATA"
        folder = os.environ.get(env_key)
        if folder is None:
            folder = os.path.expanduser("~")
        return os.path.join(folder, app_name)
    if force_posix:
        return os.path.join(
            os.path.expanduser("~/.{}".format(_posixify(app_name))))
    if sys.platform == "darwin":
        return os.path.join(
            os.path.expanduser("~/Library/Application Support"), app_name
        )
    return os.path.join(
        os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
        _posixify(app_name),
    )


_config_dir: Path = Path(get_app_dir('sneak'))

_conf_names: set[str] = {
    'sneak',  # mode settings
}

# section name in ``sneak.toml`` holding the ``ModeConfig`` fields
_mode_section: str = 'sneak'

DEFAULT_LABELS: str = string.ascii_lowercase


class ConfigurationError(Exception):
    'Misconfigured settings, likely in a TOML file.'


def _override_config_dir(
    path: str | Path,
) -> None:
    global _config_dir
    _config_dir = Path(path)


def _conf_fn_w_ext(
    name: str,
) -> str:
    # change this if we ever change the config file format.
    return f'{name}.toml'


def get_conf_dir() -> Path:
    '''
    Return the user configuration directory ``Path``
    on the local filesystem.

    '''
    return _config_dir


def get_conf_path(
    conf_name: str = 'sneak',

) -> Path:
    '''
    Return the top-level default config path normally under
    ``~/.config/sneak`` on linux for a given ``conf_name``, the config
    name.

    '''
    assert str(conf_name) in _conf_names

    fn = _conf_fn_w_ext(conf_name)
    return _config_dir / Path(fn)


class ModeConfig(
    Struct,
    frozen=True,
    forbid_unknown_fields=True,
):
    '''
    Settings for a ``SneakMode``, immutable once the mode is built.

    ``prev_key = None`` means "directional default", that is the
    previous-match key is resolved on every keystroke from the host's
    alt-is-reverse preference. ``min_for_labels = None`` disables
    labels entirely.

    '''
    length: int = 2
    min_for_labels: int | None = None
    next_key: str = 'n'
    prev_key: str | None = None
    labels: str = DEFAULT_LABELS

    # start cycling from the first match after the host's caret
    # instead of the first match on screen.
    start_at_caret: bool = False

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ConfigurationError(
                f"Can't match on {self.length} characters"
            )

        if (
            self.min_for_labels is not None
            and self.min_for_labels < 1
        ):
            raise ConfigurationError(
                f'min_for_labels must be >= 1, got {self.min_for_labels}'
            )

        try:
            nxt: KeyEvent = parse_key(self.next_key)
            prev: KeyEvent | None = (
                parse_key(self.prev_key)
                if self.prev_key is not None
                else None
            )
        except ValueError as ve:
            raise ConfigurationError(f'Invalid cycle key: {ve}') from ve

        if nxt == prev:
            raise ConfigurationError(
                f'Next and previous keys are both {self.next_key!r}'
            )

        if (
            prev is None
            and nxt.mods & KeyMod.ALT
        ):
            raise ConfigurationError(
                f'Next key {self.next_key!r} is alt modified, '
                'the previous key must be set explicitly'
            )

        if not label_alphabet(self.labels, self.reserved_chars()):
            raise ConfigurationError(
                f'No label chars left in {self.labels!r} after '
                'removing the cycle keys'
            )

    @property
    def next(self) -> KeyEvent:
        return parse_key(self.next_key)

    def prev(
        self,
        alt_is_reverse: bool,

    ) -> KeyEvent:
        '''
        Resolve the previous-match key.

        An explicitly configured key always wins, otherwise:

        - ``<A-{next}>`` if the host treats alt as "reverse",
        - the case swapped next key (``N`` for ``n``) if not,
          or ``<A-{next}>`` again if the next key has no case.

        '''
        if self.prev_key is not None:
            return parse_key(self.prev_key)

        nxt: KeyEvent = self.next
        alt = key(nxt.code, nxt.mods | KeyMod.ALT)
        if alt_is_reverse:
            return alt

        swapped: str = nxt.code.swapcase()
        if (
            nxt.char is None
            or swapped == nxt.code
        ):
            return alt

        return key(swapped, nxt.mods)

    def reserved_chars(self) -> set[str]:
        '''
        Chars taken by the cycle keys and thus never used as labels.

        '''
        reserved: set[str] = set()
        for notation in (self.next_key, self.prev_key):
            if notation is None:
                continue
            c: str | None = parse_key(notation).char
            if c is not None:
                reserved.add(c)

        # the directional default is the case swapped next key
        if self.prev_key is None:
            c = parse_key(self.next_key).char
            if c is not None:
                reserved.add(c.swapcase())

        return reserved

    # builders, mirroring how the mode gets plugged:
    # ``ModeConfig().select_keys(',', ';').with_len(3)``

    def select_keys(
        self,
        prev: str,
        next: str,

    ) -> ModeConfig:
        '''
        Which keys select the previous and next matches, respectively.

        '''
        return self.copy(update={'prev_key': prev, 'next_key': next})

    def with_len(self, length: int) -> ModeConfig:
        return self.copy(update={'length': length})

    def with_min_for_labels(self, min_for_labels: int) -> ModeConfig:
        return self.copy(update={'min_for_labels': min_for_labels})


def label_alphabet(
    labels: str,
    reserved: set[str] | frozenset[str] = frozenset(),

) -> str:
    '''
    Return ``labels`` in order with dups and any ``reserved``
    chars removed.

    '''
    alphabet: str = ''
    for c in labels:
        if (
            c in reserved
            or c in alphabet
            or c.isspace()
        ):
            continue
        alphabet += c

    return alphabet


def repodir() -> Path:
    '''
    Return the abspath as ``Path`` to the git repo's root dir.

    '''
    return Path(__file__).absolute().parent.parent


def default_conf() -> dict:
    '''
    The default ``sneak.toml`` contents as a (toml-writable) dict.

    '''
    defaults: dict = {
        k: v
        for k, v in ModeConfig().to_dict().items()
        # toml has no null
        if v is not None
    }
    return {_mode_section: defaults}


def load(
    # NOTE: always appended with .toml suffix
    conf_name: str = 'sneak',
    path: Path | None = None,

    decode: Callable[
        [str | bytes,],
        MutableMapping,
    ] = tomllib.loads,

    touch_if_dne: bool = False,

    **tomlkws,

) -> tuple[dict, Path]:
    '''
    Load config file by name.

    If desired config is not in the top level sneak-user config path then
    pass the ``path: Path`` explicitly.

    '''
    path: Path = path or get_conf_path(conf_name)

    if (
        not path.is_file()
        and touch_if_dne
    ):
        # try to copy in a template config to the user's dir if one
        # exists, otherwise dump the defaults.
        template: Path = repodir() / 'config' / _conf_fn_w_ext(conf_name)
        if template.is_file():
            path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(template, path)
        else:
            write(
                default_conf(),
                path=path,
            )

        assert path.is_file(), f'Config file {path} not created!?'
        log.info(f'Created config file {path}')

    with path.open(mode='r') as fp:
        try:
            config: dict = decode(
                fp.read(),
                **tomlkws,
            )
        except tomllib.TOMLDecodeError as err:
            raise ConfigurationError(
                f'Invalid TOML in {path}: {err}'
            ) from err

    log.debug(f"Read config file {path}")
    return config, path


def write(
    config: dict,  # toml config as dict

    name: str | None = None,
    path: Path | None = None,
    fail_empty: bool = True,

    **toml_kwargs,

) -> None:
    ''''
    Write config to disk.

    Create the config dir if one does not exist.

    '''
    if name:
        path: Path = path or get_conf_path(name)

    dirname: Path = path.parent
    if not dirname.is_dir():
        log.debug(f"Creating config dir {dirname}")
        dirname.mkdir(
            parents=True,
            exist_ok=True,
        )

    if (
        not config
        and fail_empty
    ):
        raise ValueError(
            "Watch out you're trying to write a blank config!"
        )

    log.debug(
        f"Writing config `{name}` file to:\n"
        f"{path}"
    )
    with path.open(mode='w') as fp:
        return tomlkit.dump(  # preserve style on write B)
            config,
            fp,
            **toml_kwargs,
        )


def load_mode_config(
    path: Path | None = None,
    touch_if_dne: bool = False,

) -> ModeConfig:
    '''
    Load the ``[sneak]`` section of the user's ``sneak.toml`` into
    a ``ModeConfig``.

    If no config file exists (and we weren't asked to create one) the
    defaults are returned.

    '''
    path: Path = path or get_conf_path()
    if (
        not path.is_file()
        and not touch_if_dne
    ):
        log.debug(f'No config file @ {path}, using defaults')
        return ModeConfig()

    conf, path = load(
        path=path,
        touch_if_dne=touch_if_dne,
    )
    section: dict = conf.get(_mode_section, {})
    try:
        return msgspec.convert(section, type=ModeConfig)
    except msgspec.ValidationError as verr:
        raise ConfigurationError(
            f'Invalid `[{_mode_section}]` section in {path}: {verr}'
        ) from verr
