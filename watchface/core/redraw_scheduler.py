"""
Redraw Scheduler - Once-a-second redraw timer for interactive mode
"""
from enum import Enum
from typing import Callable, Optional

from .logging_service import LoggingService, get_logger


INTERACTIVE_UPDATE_RATE_MS = 1000

MESSAGE_UPDATE_TIME = 'watchface.update_time'


class TimerState(Enum):
    IDLE = 'idle'
    ARMED = 'armed'


def next_tick_delay_ms(now_ms: int, interval_ms: int = INTERACTIVE_UPDATE_RATE_MS) -> int:
    """
    Delay until the next exact multiple of the interval.

    Args:
        now_ms: Wall-clock time in milliseconds
        interval_ms: Tick interval in milliseconds

    Returns:
        Delay in (0, interval_ms]
    """
    return interval_ms - (int(now_ms) % interval_ms)


class RedrawScheduler:
    """
    Two-state timer (IDLE/ARMED) that invalidates the face once a second.

    The timer lives in the host's message handler under a single token.
    Every state change goes through reconcile(), which cancels first and then
    arms again only if the face is eligible, so a stale fire can never outlive
    an ineligible state.
    """

    def __init__(
        self,
        handler,
        is_eligible: Callable[[], bool],
        request_redraw: Callable[[], None],
        time_source: Callable[[], int],
        interval_ms: int = INTERACTIVE_UPDATE_RATE_MS,
        logger: Optional[LoggingService] = None
    ):
        """
        Initialize redraw scheduler.

        Args:
            handler: Host message handler (post/post_delayed/remove)
            is_eligible: Predicate, True while visible and not ambient
            request_redraw: Host invalidate callback
            time_source: Wall clock in milliseconds
            interval_ms: Redraw interval in milliseconds
            logger: Logging service
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self._handler = handler
        self._is_eligible = is_eligible
        self._request_redraw = request_redraw
        self._time_source = time_source
        self._interval_ms = interval_ms
        self._logger = logger or get_logger()

        self._state = TimerState.IDLE
        self._fire_at_ms: Optional[int] = None

    def start(self) -> None:
        """Arm the timer for an immediate fire"""
        self._cancel()
        self._arm(0)

    def stop(self) -> None:
        """Cancel any pending fire"""
        self._cancel()

    def reconcile(self) -> None:
        """Cancel, then re-arm iff the face is eligible. Safe to call redundantly."""
        self._cancel()
        if self._is_eligible():
            self._arm(0)

    update_timer = reconcile

    def teardown(self) -> None:
        """Unconditionally cancel the timer"""
        self._cancel()
        self._logger.log_timer("torn down")

    def on_fire(self) -> None:
        """Timer callback: invalidate, then re-arm at the next second boundary"""
        self._state = TimerState.IDLE
        self._fire_at_ms = None

        self._request_redraw()

        if self._is_eligible():
            self._arm(next_tick_delay_ms(self._time_source(), self._interval_ms))

    def _arm(self, delay_ms: int) -> None:
        self._handler.post_delayed(MESSAGE_UPDATE_TIME, self.on_fire, delay_ms)
        self._state = TimerState.ARMED
        self._fire_at_ms = int(self._time_source()) + delay_ms
        self._logger.log_timer("armed", delay_ms=delay_ms, fire_at_ms=self._fire_at_ms)

    def _cancel(self) -> None:
        removed = self._handler.remove(MESSAGE_UPDATE_TIME)
        if removed:
            self._logger.log_timer("cancelled", pending=removed)
        self._state = TimerState.IDLE
        self._fire_at_ms = None

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def armed(self) -> bool:
        return self._state is TimerState.ARMED

    @property
    def fire_at_ms(self) -> Optional[int]:
        """Wall-clock time the pending fire is aimed at"""
        return self._fire_at_ms

    @property
    def interval_ms(self) -> int:
        return self._interval_ms
