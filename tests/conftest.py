import logging
from pathlib import Path

import pytest
from sneak import config
from sneak.log import get_console_log
from sneak.host import TextHost


def pytest_addoption(parser):
    parser.addoption("--ll", action="store", dest='loglevel',
                     default=None, help="logging level to set when testing")
    parser.addoption("--confdir", default=None,
                     help="Use an existing config dir")


@pytest.fixture(scope='session')
def loglevel(request) -> str:
    return request.config.option.loglevel


@pytest.fixture(autouse=True)
def confdir(
    request,
    tmp_path: Path,
) -> Path:
    '''
    If the `--confdir` flag is not passed use a per-test temp dir so
    we never read (or write) the user's real config.

    '''
    orig: Path = config.get_conf_dir()
    confdir = request.config.option.confdir
    if confdir is None:
        confdir = tmp_path / 'sneak'

    config._override_config_dir(confdir)
    yield Path(confdir)
    config._override_config_dir(orig)


@pytest.fixture()
def log(
    request: pytest.FixtureRequest,
    loglevel: str,
) -> logging.Logger:
    '''
    Deliver a per-test-named ``sneak.log`` instance.

    '''
    return get_console_log(
        level=loglevel,
        name=request.node.name,
    )


@pytest.fixture
def abc_host() -> TextHost:
    return TextHost('abcabcabc')


@pytest.fixture
def ten_host() -> TextHost:
    '''
    A buffer with 10 occurrences of "ab", one per line.

    '''
    return TextHost(
        '\n'.join(f'{i} ab' for i in range(10)) + '\n'
    )


@pytest.fixture
def cli_runner():
    '''
    A ``click`` test runner which also tears down any console log
    handler installed by the cli's ``--loglevel`` handling.

    '''
    from click.testing import CliRunner
    from sneak.log import get_logger

    root: logging.Logger = get_logger()
    level: int = root.level
    yield CliRunner()

    for handler in list(root.handlers):
        if getattr(handler, '_sneak_console', False):
            root.removeHandler(handler)
    root.setLevel(level)
