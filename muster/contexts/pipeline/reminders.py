"""
Keyed reminder timers.

ReminderScheduler keeps at most one timer per key: scheduling a key that
already has a timer cancels the old one first, so rescheduling never stacks
timers. Timers come from an injectable factory with the threading.Timer
signature, so tests can substitute a fake.

Timer callbacks run on the timer thread. They must not call Store.set_state
directly; hand the reminder to the owning thread instead.
"""

import threading
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from muster.contexts.pipeline.logger import _log_debug

TimerFactory = Callable[..., Any]


class ReminderScheduler:
    """
    Keyed one-shot timers.

    Attributes:
        timer_factory: Callable(interval_seconds, function, args=...) returning an
            object with start() and cancel()
    """

    def __init__(self, timer_factory: TimerFactory = threading.Timer):
        self.timer_factory = timer_factory
        self._timers: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def schedule(
        self,
        key: str,
        fire_at: datetime,
        callback: Callable[[str], None],
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Schedule (or reschedule) the timer for key.

        Any existing timer for key is cancelled, even when the new fire time
        is already past.

        Returns:
            True if a timer was started, False if fire_at is in the past
        """
        self.cancel(key)

        delay = (fire_at - (now or datetime.now())).total_seconds()
        if delay < 0:
            _log_debug(f"Reminder {key} is in the past, not scheduled")
            return False

        timer = self.timer_factory(delay, self._fire, args=(key, callback))
        timer.daemon = True
        with self._lock:
            self._timers[key] = timer
        timer.start()
        return True

    def _fire(self, key: str, callback: Callable[[str], None]) -> None:
        with self._lock:
            self._timers.pop(key, None)
        callback(key)

    def cancel(self, key: str) -> bool:
        """Cancel the timer for key; False if none was pending."""
        with self._lock:
            timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> int:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        return len(timers)

    @property
    def pending(self) -> list:
        """Keys with a live timer, sorted."""
        with self._lock:
            return sorted(self._timers)
