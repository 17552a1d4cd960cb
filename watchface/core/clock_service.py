"""
Clock Service - Time sampling for the watch face
Handles timezone-aware wall-clock reads and follows the system default timezone
"""
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone, tzinfo
from pathlib import Path
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .logging_service import LoggingService, get_logger


LOCALTIME_PATH = Path('/etc/localtime')

LOCAL_TIMEZONE_KEY = 'localtime'

ACTION_TIMEZONE_CHANGED = 'timezone_changed'


def system_timezone_key() -> str:
    """
    Resolve the name of the system default timezone.

    Checks the TZ environment variable first, then the /etc/localtime link.
    A TZ value may be a POSIX rule such as 'JST-9' rather than an IANA name.

    Returns:
        Timezone key, LOCAL_TIMEZONE_KEY when /etc/localtime is not a link
        into a zoneinfo tree
    """
    env_tz = os.environ.get('TZ', '').lstrip(':')
    if env_tz:
        return env_tz

    try:
        target = str(LOCALTIME_PATH.resolve())
    except OSError:
        return LOCAL_TIMEZONE_KEY

    marker = 'zoneinfo/'
    if marker in target:
        return target.split(marker, 1)[1]
    return LOCAL_TIMEZONE_KEY


def local_timezone(key: str = LOCAL_TIMEZONE_KEY) -> Optional[tzinfo]:
    """
    Zone the runtime uses for local time.

    For LOCAL_TIMEZONE_KEY the /etc/localtime zone file is read directly, so
    a copied file keeps its DST rules. Otherwise, or when that file is not a
    zone file, the fixed offset the runtime reports is used.

    Returns:
        tzinfo, or None when the runtime cannot report a local zone
    """
    if key == LOCAL_TIMEZONE_KEY:
        try:
            with open(LOCALTIME_PATH, 'rb') as f:
                return ZoneInfo.from_file(f, key=LOCAL_TIMEZONE_KEY)
        except (OSError, ValueError):
            pass

    try:
        return datetime.now().astimezone().tzinfo
    except (OSError, OverflowError, ValueError):
        return None


def wall_clock_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch"""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class ClockSample:
    """One read of the wall clock, split into the fields the hands need."""

    hour: int
    minute: int
    second: int
    millisecond: int

    @property
    def fractional_second(self) -> float:
        return self.millisecond / 1000.0


class ClockService:
    """
    Calendar for the watch face, pinned to a timezone or following the system default.
    """

    def __init__(
        self,
        timezone: Optional[str] = None,
        logger: Optional[LoggingService] = None,
        default_timezone: Callable[[], str] = system_timezone_key
    ):
        """
        Initialize clock service with timezone.

        Args:
            timezone: IANA timezone string (e.g., 'Europe/Berlin'), None to follow the system
            logger: Logging service
            default_timezone: Resolver for the system default timezone key
        """
        self._logger = logger or get_logger()
        self._pinned = timezone
        self._default_timezone = default_timezone
        self._timezone = timezone or default_timezone()
        self._tz_obj: tzinfo = dt_timezone.utc
        self._load_timezone()

    def _load_timezone(self) -> None:
        """
        Load timezone object for the current key.

        System keys that are not IANA names (a copied /etc/localtime, a POSIX
        TZ rule) use the runtime's local zone. Pinned names that fail to load
        fall back to UTC.
        """
        if self._timezone == LOCAL_TIMEZONE_KEY:
            error = None
        else:
            try:
                self._tz_obj = ZoneInfo(self._timezone)
                return
            except (ZoneInfoNotFoundError, ValueError) as e:
                error = e

        if not self._pinned or self._timezone == LOCAL_TIMEZONE_KEY:
            local = local_timezone(self._timezone)
            if local is not None:
                self._logger.info(f"Timezone '{self._timezone}' resolved to local zone {local}")
                self._tz_obj = local
                return

        self._logger.warning(f"Invalid timezone '{self._timezone}', using UTC: {error}")
        self._timezone = 'UTC'
        self._tz_obj = ZoneInfo('UTC')

    def set_timezone(self, timezone: str) -> bool:
        """
        Pin the calendar to a timezone.

        Args:
            timezone: IANA timezone string

        Returns:
            True if the timezone was loaded, False if it fell back to UTC
        """
        self._pinned = timezone
        self._timezone = timezone
        self._load_timezone()
        return self._timezone == timezone

    def refresh_timezone(self) -> str:
        """
        Re-resolve the system default timezone.

        A pinned timezone is kept as is.

        Returns:
            The timezone now in effect
        """
        if self._pinned:
            return self._timezone

        key = self._default_timezone()
        if key != self._timezone:
            self._logger.info(f"Timezone changed: {self._timezone} -> {key}")
            self._timezone = key
            self._load_timezone()
        return self._timezone

    def get_current_time(self, now_ms: Optional[int] = None) -> datetime:
        """
        Get a time in the configured timezone.

        Args:
            now_ms: Epoch milliseconds, defaults to the wall clock

        Returns:
            Timezone-aware datetime object
        """
        if now_ms is None:
            now_ms = wall_clock_ms()
        seconds, millis = divmod(int(now_ms), 1000)
        return datetime.fromtimestamp(seconds, self._tz_obj).replace(microsecond=millis * 1000)

    def sample(self, now_ms: Optional[int] = None) -> ClockSample:
        """
        Split a wall-clock read into 12-hour clock fields.

        Args:
            now_ms: Epoch milliseconds, defaults to the wall clock

        Returns:
            ClockSample with hour in 0-11
        """
        if now_ms is None:
            now_ms = wall_clock_ms()
        now = self.get_current_time(now_ms)
        return ClockSample(
            hour=now.hour % 12,
            minute=now.minute,
            second=now.second,
            millisecond=now.microsecond // 1000,
        )

    @property
    def timezone(self) -> str:
        """Get current timezone string"""
        return self._timezone
