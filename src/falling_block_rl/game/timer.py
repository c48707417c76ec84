"""Repeating tick timers that drive gravity.

The engine owns exactly one timer handle and always stops it before arming
it again, so two tickers never race to lock the same piece.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional


TickCallback = Callable[[], object]


class TickTimer:
    """Interface for an owned, cancellable repeating timer."""

    def __init__(self) -> None:
        self.interval_ms: Optional[int] = None

    @property
    def armed(self) -> bool:
        raise NotImplementedError

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class ManualTickTimer(TickTimer):
    """Timer advanced by the owner's own clock, e.g. a pygame frame loop."""

    def __init__(self) -> None:
        super().__init__()
        self._callback: Optional[TickCallback] = None
        self._elapsed = 0
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        self.interval_ms = int(interval_ms)
        self._callback = callback
        self._elapsed = 0
        self._armed = True

    def stop(self) -> None:
        self._armed = False
        self._elapsed = 0

    def advance(self, elapsed_ms: int) -> int:
        """Fire the callback once per whole interval elapsed; return the count."""
        if not self._armed:
            return 0
        self._elapsed += int(elapsed_ms)
        fired = 0
        # The callback may stop or restart this timer, which resets _elapsed
        while self._armed and self._callback is not None and self._elapsed >= self.interval_ms:
            self._elapsed -= self.interval_ms
            fired += 1
            self._callback()
        return fired


class ThreadingTickTimer(TickTimer):
    """Repeating timer backed by `threading.Timer`.

    Every start bumps a generation counter; a thread from an older generation
    neither fires nor reschedules.
    """

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._callback: Optional[TickCallback] = None
        self._generation = 0

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._timer is not None

    def start(self, interval_ms: int, callback: TickCallback) -> None:
        with self._lock:
            self._cancel_locked()
            self.interval_ms = int(interval_ms)
            self._callback = callback
            self._schedule_locked(self._generation)

    def stop(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_locked(self, generation: int) -> None:
        timer = threading.Timer(self.interval_ms / 1000.0, self._fire, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._callback is None:
                return
            callback = self._callback
        fired = False
        try:
            callback()
            fired = True
        finally:
            with self._lock:
                if generation == self._generation:
                    if fired:
                        self._schedule_locked(generation)
                    else:
                        # A raising callback leaves the timer disarmed
                        self._timer = None
