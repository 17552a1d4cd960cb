from datetime import datetime, timezone

import pytest
from hypothesis import HealthCheck, settings

from watchface.core.clock_service import ClockService
from watchface.core.logging_service import LoggingService
from watchface.host.service import WatchFaceService

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


def epoch_ms(hour: int, minute: int, second: int, millisecond: int = 0) -> int:
    """Epoch milliseconds for a UTC wall time on a fixed day."""
    moment = datetime(2024, 1, 1, hour, minute, second, tzinfo=timezone.utc)
    return int(moment.timestamp()) * 1000 + millisecond


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now_ms: int = 0) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, delta_ms: int) -> None:
        self.now_ms += delta_ms


class FakeTimezone:
    """Stand-in for the system default timezone."""

    def __init__(self, key: str = 'UTC') -> None:
        self.key = key

    def __call__(self) -> str:
        return self.key


@pytest.fixture(autouse=True)
def dummy_sdl_video_driver(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    yield


@pytest.fixture
def logger() -> LoggingService:
    return LoggingService('watchface-test', 'DEBUG')


@pytest.fixture
def at():
    return epoch_ms


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(epoch_ms(3, 15, 30, 500))


@pytest.fixture
def fake_timezone() -> FakeTimezone:
    return FakeTimezone('UTC')


@pytest.fixture
def clock_service(fake_timezone, logger) -> ClockService:
    return ClockService(logger=logger, default_timezone=fake_timezone)


@pytest.fixture
def service(fake_clock, fake_timezone, clock_service, logger) -> WatchFaceService:
    host = WatchFaceService(
        width=400,
        height=400,
        clock_service=clock_service,
        time_source=fake_clock,
        monotonic_source=fake_clock,
        timezone_source=fake_timezone,
        logger=logger,
    )
    host.create()
    yield host
    host.destroy()
