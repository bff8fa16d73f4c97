from mikankernel.timer import (
    TASK_TIMER_PERIOD,
    TASK_TIMER_VALUE,
    Timer,
    TimerManager,
)


def test_timer_fires_when_timeout_reached():
    fired = []
    mgr = TimerManager(fired.append)
    mgr.add_timer(Timer(3, 7))
    assert mgr.tick() is False
    assert mgr.tick() is False
    assert fired == []
    assert mgr.tick() is False
    assert fired == [Timer(3, 7)]
    assert mgr.current_tick() == 3


def test_timers_fire_in_timeout_order():
    fired = []
    mgr = TimerManager(fired.append)
    mgr.add_timer(Timer(5, 2))
    mgr.add_timer(Timer(2, 1))
    mgr.add_timer(Timer(5, 3))
    for _ in range(5):
        mgr.tick()
    assert [t.value for t in fired] == [1, 2, 3]


def test_timer_in_the_past_fires_on_next_tick():
    fired = []
    mgr = TimerManager(fired.append)
    mgr.tick()
    mgr.tick()
    mgr.add_timer(Timer(1, 5))
    mgr.tick()
    assert fired == [Timer(1, 5)]


def test_task_timer_is_periodic_and_not_reported():
    fired = []
    mgr = TimerManager(fired.append)
    mgr.add_timer(Timer(TASK_TIMER_PERIOD, TASK_TIMER_VALUE))
    results = [mgr.tick() for _ in range(TASK_TIMER_PERIOD * 3)]
    assert results.count(True) == 3
    assert results[TASK_TIMER_PERIOD - 1] is True
    assert fired == []


def test_tick_without_callback_counts():
    mgr = TimerManager()
    mgr.add_timer(Timer(1, 9))
    assert mgr.tick() is False
    assert mgr.current_tick() == 1