"""
Message Handler - Delayed callbacks on the host's single UI thread
"""
import sched
import time
from typing import Callable, Dict, Hashable, List, Optional


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds"""
    return time.monotonic() * 1000.0


class MessageHandler:
    """
    Queue of delayed callbacks keyed by token.

    Nothing runs on its own: the host loop calls dispatch_pending() and every
    due callback runs on the caller's thread, in due-time order.
    """

    def __init__(self, time_source: Callable[[], float] = monotonic_ms):
        """
        Initialize message handler.

        Args:
            time_source: Clock in milliseconds used for due times
        """
        self._time_source = time_source
        self._scheduler = sched.scheduler(time_source, self._no_wait)
        self._pending: Dict[Hashable, List[sched.Event]] = {}

    @staticmethod
    def _no_wait(delay: float) -> None:
        # The host loop decides how long to sleep, never the queue
        pass

    def post(self, token: Hashable, action: Callable[[], None]) -> None:
        """Queue an action to run on the next dispatch"""
        self.post_delayed(token, action, 0)

    def post_delayed(self, token: Hashable, action: Callable[[], None], delay_ms: float) -> None:
        """
        Queue an action to run after a delay.

        Args:
            token: Identity used to remove the message later
            action: Zero-argument callable
            delay_ms: Delay in milliseconds
        """
        event = None

        def fire() -> None:
            self._forget(token, event)
            action()

        event = self._scheduler.enter(max(0.0, delay_ms), 0, fire)
        self._pending.setdefault(token, []).append(event)

    def remove(self, token: Hashable) -> int:
        """
        Remove every pending message with the given token.

        Returns:
            Number of messages removed
        """
        events = self._pending.pop(token, [])
        for event in events:
            self._scheduler.cancel(event)
        return len(events)

    def has_pending(self, token: Hashable) -> bool:
        """Check whether a message with the token is queued"""
        return bool(self._pending.get(token))

    def dispatch_pending(self) -> None:
        """Run every message that is due now"""
        self._scheduler.run(blocking=False)

    def next_due_ms(self) -> Optional[float]:
        """Due time of the earliest queued message, None when empty"""
        queue = self._scheduler.queue
        return queue[0].time if queue else None

    def clear(self) -> None:
        """Drop all queued messages"""
        for token in list(self._pending):
            self.remove(token)

    def _forget(self, token: Hashable, event: Optional[sched.Event]) -> None:
        events = self._pending.get(token, [])
        if event in events:
            events.remove(event)
        if not events:
            self._pending.pop(token, None)

    @property
    def now_ms(self) -> float:
        return self._time_source()
