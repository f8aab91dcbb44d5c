"""
The sneak mode state machine driven through a text host.
"""
import logging
import random

import pytest

from sneak import (
    Exit,
    Host,
    KeyEvent,
    KeyMod,
    ModeConfig,
    Select,
    SneakMode,
    Stay,
    Step,
)
from sneak.host import TextHost
from sneak.keys import (
    key,
    parse_keys,
)


def send(mode: SneakMode, keys: str) -> list:
    return [mode.send_key(k) for k in parse_keys(keys)]


def test_cycle_then_select_current(abc_host):
    mode = SneakMode(abc_host)

    assert send(mode, 'ab') == [Stay(), Stay()]
    assert mode.step is Step.CYCLING
    assert mode.current.offset == 0

    send(mode, 'nn')
    assert mode.current.offset == 6

    action = mode.send_key('x')
    assert isinstance(action, Select)
    assert action.match.offset == 6
    assert mode.step is Step.DONE
    assert mode.selection == action.match

    # terminal actions are emitted to the host as well
    assert abc_host.actions == [action]
    assert abc_host.selection == (6, 8)


def test_no_matches_exits_without_selection(abc_host, caplog):
    mode = SneakMode(abc_host)

    with caplog.at_level(logging.WARNING, logger='sneak'):
        actions = send(mode, 'xy')

    assert actions == [Stay(), Exit()]
    assert mode.step is Step.DONE
    assert mode.selection is None
    assert abc_host.actions == [Exit()]
    assert "No matches found for 'xy'" in caplog.text


def test_single_match_selects_immediately():
    host = TextHost('hello world')
    mode = SneakMode(host)

    assert mode.send_key('w') == Stay()
    assert mode.step is Step.AWAITING_KEY

    action = mode.send_key('o')
    assert action == Select(match=mode.selection)
    assert action.match.offset == 6
    assert mode.step is Step.DONE


def test_previous_key_wraps_to_last(abc_host):
    mode = SneakMode(abc_host)
    send(mode, 'abN')
    assert mode.current.offset == 6
    send(mode, 'N')
    assert mode.current.offset == 3


def test_alt_is_reverse_changes_the_previous_key():
    host = TextHost('abcabcabc', reverse=True)
    mode = SneakMode(host)
    send(mode, 'ab<A-n>')
    assert mode.step is Step.CYCLING
    assert mode.current.offset == 6

    # `N` is just "any other key" now
    action = mode.send_key('N')
    assert action.match.offset == 6


def test_directionality_is_read_on_every_key(abc_host):
    mode = SneakMode(abc_host)
    send(mode, 'ab')

    send(mode, 'N')
    assert mode.current.offset == 6

    # host flips its preference mid-session
    abc_host.reverse = True
    send(mode, '<A-n>')
    assert mode.current.offset == 3
    assert mode.step is Step.CYCLING

    abc_host.reverse = False
    action = mode.send_key('<A-n>')
    assert isinstance(action, Select)
    assert action.match.offset == 3


def test_custom_select_keys(abc_host):
    mode = SneakMode(abc_host, ModeConfig().select_keys(',', ';'))
    send(mode, 'ab;;')
    assert mode.current.offset == 6
    send(mode, ',')
    assert mode.current.offset == 3

    # the default keys are just plain keys now
    action = mode.send_key('n')
    assert action.match.offset == 3


def test_longer_keys(abc_host):
    mode = SneakMode(abc_host, ModeConfig().with_len(3))
    assert send(mode, 'ab') == [Stay(), Stay()]
    assert mode.pending == 'ab'
    send(mode, 'c')
    assert mode.step is Step.CYCLING
    assert mode.last_key == 'abc'
    assert len(mode.matches) == 3


def test_length_one_keys():
    host = TextHost('x.y.z')
    mode = SneakMode(host, ModeConfig().with_len(1))
    send(mode, '.')
    assert [m.offset for m in mode.matches] == [1, 3]


def test_cycle_key_reuses_the_last_key(abc_host):
    mode = SneakMode(abc_host)
    send(mode, 'abx')
    assert mode.step is Step.DONE

    # next invocation, a cycle key re-uses "ab"
    assert mode.send_key('n') == Stay()
    assert mode.step is Step.CYCLING
    assert mode.pending == ''
    assert len(mode.matches) == 3


def test_reused_key_gives_same_outcome_as_retyping():
    for text, keys in [
        ('abcabcabc', 'ab'),  # multiple
        ('hello world', 'wo'),  # single
        ('hello world', 'xy'),  # none
    ]:
        retyped_host = TextHost(text)
        retyped = SneakMode(retyped_host)
        send(retyped, keys)

        reused_host = TextHost(text)
        reused = SneakMode(reused_host)
        send(reused, keys)
        reused.enter()
        reused.send_key('N')

        assert reused.step is retyped.step
        assert len(reused.matches) == len(retyped.matches)
        assert reused.selection == retyped.selection


def test_cycle_key_without_last_key_starts_a_key():
    host = TextHost('nab nab')
    mode = SneakMode(host)
    send(mode, 'na')
    assert mode.step is Step.CYCLING
    assert [m.offset for m in mode.matches] == [0, 4]


def test_named_key_first_without_last_key_exits(abc_host, caplog):
    mode = SneakMode(abc_host)
    with caplog.at_level(logging.ERROR, logger='sneak'):
        action = mode.send_key('<A-n>')

    assert action == Exit()
    assert "hasn't been sneaked with" in caplog.text


def test_named_key_while_pending_searches_what_was_typed(abc_host):
    mode = SneakMode(abc_host)
    assert send(mode, 'a<esc>') == [Stay(), Stay()]
    assert mode.step is Step.CYCLING
    assert [m.offset for m in mode.matches] == [0, 3, 6]
    assert mode.pending == ''

    # the partial sequence is remembered for reuse
    assert mode.last_key == 'a'


def test_partial_sequence_with_a_single_match_selects_it():
    host = TextHost('hello world')
    mode = SneakMode(host, ModeConfig().with_len(3))

    action = send(mode, 'w<enter>')[-1]
    assert isinstance(action, Select)
    assert action.match.offset == 6
    assert action.match.length == 1
    assert host.selection == (6, 7)
    assert mode.step is Step.DONE
    assert mode.pending == ''


def test_partial_sequence_without_matches_exits(abc_host, caplog):
    mode = SneakMode(abc_host)
    with caplog.at_level(logging.WARNING, logger='sneak'):
        action = send(mode, 'x<C-c>')[-1]

    assert action == Exit()
    assert mode.step is Step.DONE
    assert mode.pending == ''
    assert "No matches found for 'x'" in caplog.text


def test_named_key_reuses_the_last_key(abc_host):
    mode = SneakMode(abc_host)
    action = send(mode, 'abx')[-1]
    assert action.match.offset == 0

    # a finished mode is re-entered and <esc> reuses "ab"
    assert mode.send_key('<esc>') == Stay()
    assert mode.step is Step.CYCLING
    assert [m.offset for m in mode.matches] == [0, 3, 6]


def test_finished_mode_is_re_entered_on_next_key(abc_host):
    mode = SneakMode(abc_host)
    send(mode, 'xy')
    assert mode.step is Step.DONE

    assert mode.send_key('a') == Stay()
    assert mode.step is Step.AWAITING_KEY
    assert mode.pending == 'a'


def test_labels_for_many_matches(ten_host, log):
    mode = SneakMode(ten_host, ModeConfig().with_min_for_labels(8))
    send(mode, 'ab')
    log.info(f'labels: {mode.labels}')

    assert mode.step is Step.LABELING
    assert mode.current is None
    labels = mode.labels
    assert len(labels) == 10
    assert len(set(labels)) == 10

    # type the label of the 4th match
    label = list(labels)[3]
    action = mode.send_key(label)
    assert isinstance(action, Select)
    assert action.match == list(labels.values())[3]
    assert action.match.line == 3
    assert ten_host.selection == (17, 19)
    assert mode.labels == {}


def test_labels_never_use_cycle_chars():
    host = TextHost(' '.join(['ab'] * 20))
    mode = SneakMode(host, ModeConfig().with_min_for_labels(2))
    send(mode, 'ab')
    assert 'n' not in mode.labels
    assert 'N' not in mode.labels


def test_invalid_label_exits_without_selection(ten_host, caplog):
    mode = SneakMode(ten_host, ModeConfig().with_min_for_labels(8))
    send(mode, 'ab')

    with caplog.at_level(logging.WARNING, logger='sneak'):
        action = mode.send_key('z')

    assert action == Exit()
    assert mode.selection is None
    assert 'z is not a valid label' in caplog.text


@pytest.mark.parametrize(
    'threshold, step',
    [
        (10, Step.LABELING),
        (11, Step.CYCLING),
        (None, Step.CYCLING),
    ]
)
def test_label_threshold(ten_host, threshold, step):
    mode = SneakMode(ten_host, ModeConfig(min_for_labels=threshold))
    send(mode, 'ab')
    assert mode.step is step


def test_single_match_skips_labels():
    host = TextHost('hello world')
    mode = SneakMode(host, ModeConfig(min_for_labels=1))
    action = send(mode, 'wo')[-1]
    assert isinstance(action, Select)


def test_only_the_viewport_is_searched(ten_host):
    ten_host.top = 2
    ten_host.rows = 3
    mode = SneakMode(ten_host)
    send(mode, 'ab')
    assert [m.line for m in mode.matches] == [2, 3, 4]


@pytest.mark.parametrize(
    'caret, offset',
    [
        (0, 3),
        (4, 6),
        (7, 6),  # nothing after the caret, start from the last
    ]
)
def test_start_at_caret(caret, offset):
    host = TextHost('abcabcabc', caret=caret)
    mode = SneakMode(host, ModeConfig(start_at_caret=True))
    send(mode, 'ab')
    assert mode.current.offset == offset


class NoCaretHost(Host):
    '''
    A host which doesn't track a caret.

    '''
    def __init__(self, text: str) -> None:
        self.text = text
        self.emitted = []

    def visible_lines(self):
        return [(0, 0, self.text)]

    def alt_is_reverse(self) -> bool:
        return False

    def emit(self, action):
        self.emitted.append(action)


def test_start_at_caret_without_a_host_caret(caplog):
    host = NoCaretHost('abcabcabc')
    mode = SneakMode(host, ModeConfig(start_at_caret=True))

    with caplog.at_level(logging.WARNING, logger='sneak'):
        assert send(mode, 'ab') == [Stay(), Stay()]

    assert mode.step is Step.CYCLING
    assert mode.current.offset == 0
    assert 'host has no caret' in caplog.text


_odd_keys: list[str] = [
    '<esc>',
    '<enter>',
    '<tab>',
    '<bs>',
    '<up>',
    '<pagedown>',
    '<C-a>',
    '<A-x>',
    '<C-A-n>',
    '<A-n>',
    '<space>',
    'n',
    'N',
    'z',
]


def _cycling(abc_host):
    mode = SneakMode(abc_host)
    send(mode, 'ab')
    assert mode.step is Step.CYCLING
    return mode


def _labeling(ten_host):
    mode = SneakMode(ten_host, ModeConfig().with_min_for_labels(2))
    send(mode, 'ab')
    assert mode.step is Step.LABELING
    return mode


def _after_a_search(abc_host):
    mode = SneakMode(abc_host)
    send(mode, 'abx')
    assert mode.step is Step.DONE
    return mode


@pytest.mark.parametrize('key', _odd_keys)
@pytest.mark.parametrize(
    'setup',
    [
        lambda abc_host, ten_host: SneakMode(abc_host),
        lambda abc_host, ten_host: _after_a_search(abc_host),
        lambda abc_host, ten_host: _cycling(abc_host),
        lambda abc_host, ten_host: _labeling(ten_host),
    ],
    ids=['awaiting', 'done', 'cycling', 'labeling'],
)
def test_any_key_in_any_step_gives_an_action(
    setup,
    key,
    abc_host,
    ten_host,
):
    mode = setup(abc_host, ten_host)
    action = mode.send_key(key)
    assert isinstance(action, (Stay, Select, Exit))


@pytest.mark.parametrize('seed', range(5))
def test_random_keystrokes_never_raise(seed, ten_host):
    rng = random.Random(seed)
    pool: list[KeyEvent] = (
        [key(c) for c in 'ab0123n N']
        + [key(name) for name in ('esc', 'enter', 'tab', 'left')]
        + [key('n', KeyMod.ALT), key('a', KeyMod.CTRL)]
    )
    mode = SneakMode(
        ten_host,
        ModeConfig(min_for_labels=rng.choice([None, 2, 5])),
    )
    for _ in range(200):
        action = mode.send_key(rng.choice(pool))
        assert isinstance(action, (Stay, Select, Exit))
        if isinstance(action, Stay):
            assert mode.step is not Step.DONE
        else:
            assert mode.step is Step.DONE


def test_custom_host_with_tuples():

    class Host:
        def __init__(self):
            self.emitted = []

        def visible_lines(self):
            return [(10, 200, 'foo bar'), (11, 208, 'bar foo')]

        def alt_is_reverse(self) -> bool:
            return False

        def emit(self, action):
            self.emitted.append(action)

    host = Host()
    mode = SneakMode(host)
    send(mode, 'ba')
    assert [m.offset for m in mode.matches] == [204, 208]
    action = mode.send_key('n')
    assert action == Stay()
    action = mode.send_key('<enter>')
    assert action.match.line == 11
    assert host.emitted == [action]
