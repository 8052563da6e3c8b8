import asyncio

import pytest

from snake_arcade.scheduler import AsyncioScheduler, ManualScheduler


def test_timers_fire_in_time_order():
    clock = ManualScheduler()
    fired = []
    clock.call_every(100, lambda: fired.append(("tick", clock.now())))
    clock.call_later(150, lambda: fired.append(("once", clock.now())))
    clock.advance(300)
    assert fired == [("tick", 100), ("once", 150), ("tick", 200), ("tick", 300)]
    assert clock.now() == 300


def test_cancel_from_inside_callback_stops_repeat():
    clock = ManualScheduler()
    fired = []

    def callback():
        fired.append(clock.now())
        if len(fired) == 2:
            timer.cancel()

    timer = clock.call_every(50, callback)
    clock.advance(500)
    assert fired == [50, 100]
    assert clock.pending == 0


def test_rearm_with_new_interval():
    clock = ManualScheduler()
    fired = []
    timers = {}

    def slow():
        fired.append(clock.now())
        timers["t"].cancel()
        timers["t"] = clock.call_every(30, fast)

    def fast():
        fired.append(clock.now())

    timers["t"] = clock.call_every(100, slow)
    clock.advance(200)
    assert fired == [100, 130, 160, 190]


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        ManualScheduler().call_every(0, lambda: None)


def test_asyncio_scheduler_runs_on_event_loop():
    async def scenario():
        clock = AsyncioScheduler()
        ticks = []
        once = []
        timer = clock.call_every(5, lambda: ticks.append(clock.now()))
        clock.call_later(1, lambda: once.append(True))
        cancelled = clock.call_later(1, lambda: once.append(False))
        cancelled.cancel()
        await asyncio.sleep(0.1)
        timer.cancel()
        count = len(ticks)
        await asyncio.sleep(0.03)
        return ticks, once, count

    ticks, once, count = asyncio.run(scenario())
    assert once == [True]
    assert len(ticks) >= 2
    assert len(ticks) == count
    assert ticks == sorted(ticks)
