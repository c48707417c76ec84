import threading
import time

from falling_block_rl.game import ManualTickTimer, ThreadingTickTimer


def test_manual_timer_fires_once_per_interval():
    calls = []
    timer = ManualTickTimer()
    timer.start(100, lambda: calls.append(1))
    assert timer.advance(99) == 0
    assert timer.advance(1) == 1
    assert timer.advance(250) == 2
    assert len(calls) == 3


def test_manual_timer_stop_and_restart():
    calls = []
    timer = ManualTickTimer()
    timer.start(100, lambda: calls.append(1))
    timer.advance(90)
    timer.start(100, lambda: calls.append(2))
    # Restarting discards the elapsed time of the previous arming
    assert timer.advance(90) == 0
    timer.stop()
    assert not timer.armed
    assert timer.advance(1000) == 0
    assert calls == []


def test_manual_timer_callback_can_rearm():
    timer = ManualTickTimer()
    calls = []

    def tick():
        calls.append(timer.interval_ms)
        timer.start(50, tick)

    timer.start(100, tick)
    assert timer.advance(130) == 1
    assert timer.interval_ms == 50
    # Re-arming discards the leftover time
    assert timer.advance(100) == 1
    assert timer.advance(50) == 1
    assert calls == [100, 50, 50]


def test_threading_timer_repeats_until_stopped():
    fired = threading.Event()
    count = []

    def tick():
        count.append(1)
        if len(count) >= 3:
            fired.set()

    timer = ThreadingTickTimer()
    timer.start(10, tick)
    assert fired.wait(2.0)
    timer.stop()
    assert not timer.armed
    time.sleep(0.05)
    settled = len(count)
    time.sleep(0.1)
    assert len(count) == settled


def test_threading_timer_restart_replaces_previous_handle():
    first = []
    second = threading.Event()
    timer = ThreadingTickTimer()
    timer.start(10_000, lambda: first.append(1))
    timer.start(10, second.set)
    assert second.wait(2.0)
    timer.stop()
    assert first == []


def test_threading_timer_disarms_when_callback_raises():
    fired = threading.Event()

    def tick():
        fired.set()
        raise RuntimeError("tick failed")

    timer = ThreadingTickTimer()
    timer.start(10, tick)
    assert fired.wait(2.0)
    deadline = time.monotonic() + 2.0
    while timer.armed and time.monotonic() < deadline:
        time.sleep(0.01)
    assert not timer.armed
