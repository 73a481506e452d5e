"""
TimerRegistry tests
"""

import pytest

from simulator.infrastructure.timers import TimerRegistry


def test_callback_runs_after_delay(env):
    timers = TimerRegistry(env)
    fired = []

    timers.schedule('key', 1.5, lambda: fired.append(env.now))
    env.run()

    assert fired == [1.5]
    assert len(timers) == 0


def test_callback_receives_arguments(env):
    timers = TimerRegistry(env)
    fired = []

    timers.schedule('key', 1.0, fired.append, 'payload')
    env.run()

    assert fired == ['payload']


def test_rescheduling_a_key_replaces_the_task(env):
    timers = TimerRegistry(env)
    fired = []

    first = timers.schedule('key', 1.0, lambda: fired.append('first'))
    timers.schedule('key', 2.0, lambda: fired.append('second'))
    env.run()

    assert fired == ['second']
    assert first.cancelled is True


def test_cancel(env):
    timers = TimerRegistry(env)
    fired = []

    timers.schedule('key', 1.0, lambda: fired.append('fired'))
    assert timers.is_scheduled('key')
    assert timers.cancel('key') is True
    assert timers.cancel('key') is False
    env.run()

    assert fired == []
    assert not timers.is_scheduled('key')


def test_cancel_matching_and_cancel_all(env):
    timers = TimerRegistry(env)
    fired = []
    timers.schedule(('A', 'door_close'), 1.0, fired.append, 'A close')
    timers.schedule(('A', 'door_open'), 1.0, fired.append, 'A open')
    timers.schedule(('B', 'door_close'), 1.0, fired.append, 'B close')

    assert timers.cancel_matching(lambda key: key[0] == 'A') == 2
    assert len(timers) == 1
    assert timers.cancel_all() == 1
    env.run()

    assert fired == []


def test_negative_delay_is_rejected(env):
    timers = TimerRegistry(env)
    with pytest.raises(ValueError):
        timers.schedule('key', -1, lambda: None)


def test_zero_delay_runs_at_current_time(env):
    timers = TimerRegistry(env)
    fired = []

    timers.schedule('key', 0, lambda: fired.append(env.now))
    env.run()

    assert fired == [0]
