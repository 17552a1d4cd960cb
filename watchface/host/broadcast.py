"""
Broadcast - System notifications delivered to registered receivers
"""
from typing import Any, Callable, Dict, List, Optional

from ..core.clock_service import ACTION_TIMEZONE_CHANGED, system_timezone_key
from ..core.logging_service import LoggingService, get_logger


Receiver = Callable[[str, Any], None]


class Broadcaster:
    """
    Delivers named broadcasts to receivers on the host thread.
    """

    def __init__(self, logger: Optional[LoggingService] = None):
        self._logger = logger or get_logger()
        self._receivers: Dict[str, List[Receiver]] = {}

    def register(self, action: str, receiver: Receiver) -> None:
        """
        Register a receiver for an action.

        Raises:
            ValueError: If the receiver is already registered for the action
        """
        receivers = self._receivers.setdefault(action, [])
        if receiver in receivers:
            raise ValueError(f"Receiver already registered for '{action}'")
        receivers.append(receiver)

    def unregister(self, action: str, receiver: Receiver) -> None:
        """
        Unregister a receiver.

        Raises:
            ValueError: If the receiver was not registered for the action
        """
        receivers = self._receivers.get(action, [])
        if receiver not in receivers:
            raise ValueError(f"Receiver not registered for '{action}'")
        receivers.remove(receiver)

    def send(self, action: str, payload: Any = None) -> int:
        """
        Deliver a broadcast to every receiver of the action.

        Returns:
            Number of receivers notified
        """
        receivers = list(self._receivers.get(action, []))
        self._logger.debug(f"Broadcast '{action}' to {len(receivers)} receiver(s)")
        for receiver in receivers:
            receiver(action, payload)
        return len(receivers)

    def receiver_count(self, action: str) -> int:
        return len(self._receivers.get(action, []))


class TimezoneWatcher:
    """
    Polls the system default timezone and broadcasts when it changes.
    """

    def __init__(
        self,
        broadcaster: Broadcaster,
        resolve: Callable[[], str] = system_timezone_key
    ):
        self._broadcaster = broadcaster
        self._resolve = resolve
        self._current = resolve()

    def poll(self) -> bool:
        """
        Check the system timezone once.

        Returns:
            True if it changed and a broadcast was sent
        """
        key = self._resolve()
        if key == self._current:
            return False
        self._current = key
        self._broadcaster.send(ACTION_TIMEZONE_CHANGED, key)
        return True

    @property
    def current(self) -> str:
        return self._current
