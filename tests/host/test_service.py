import pytest
from PIL import Image

from watchface.core.clock_service import ClockService
from watchface.core.redraw_scheduler import MESSAGE_UPDATE_TIME
from watchface.host.service import WatchFaceService


class TestWatchFaceService:
    """Cover the headless host so invalidation, frames and snapshots work without a window."""

    def test_render_frame_clears_invalidation(self, service) -> None:
        """Rendering honors the pending invalidate and resets it."""
        service.invalidate()
        image = service.render_frame()

        assert not service.invalidated
        assert image.size == (400, 400)
        assert service.frames_drawn == 1

    def test_frame_shows_second_hand_in_interactive_mode(self, service) -> None:
        """At 03:15:30.500 the red second hand points just past 6 o'clock."""
        service.set_visible(True)
        image = service.render_frame()

        # 183 degrees: 150 px out from the center, slightly left of straight down
        red, green, blue, _ = image.getpixel((192, 350))
        assert red > 200 and green < 60 and blue < 60

    def test_frame_hides_second_hand_in_ambient_mode(self, service) -> None:
        """The same moment in ambient mode leaves that spot dark."""
        service.set_visible(True)
        service.set_ambient(True)
        image = service.render_frame()

        red, green, blue, _ = image.getpixel((192, 350))
        assert red < 60

    def test_create_and_destroy_are_idempotent(self, service) -> None:
        """Extra create/destroy calls are ignored."""
        service.create()
        service.set_visible(True)
        service.destroy()
        service.destroy()

        assert not service.handler.has_pending(MESSAGE_UPDATE_TIME)

    def test_save_snapshot(self, service, tmp_path) -> None:
        """Snapshots are written as regular RGB images."""
        path = service.save_snapshot(tmp_path / "face.png")

        with Image.open(path) as image:
            assert image.size == (400, 400)
            assert image.mode == 'RGB'


class TestWatchFaceServiceBeforeCreate:
    """Cover host calls that arrive before create() so they wait for the engine."""

    @pytest.fixture
    def uncreated(self, fake_clock, fake_timezone, logger):
        host = WatchFaceService(
            width=400,
            height=400,
            clock_service=ClockService(logger=logger, default_timezone=fake_timezone),
            time_source=fake_clock,
            monotonic_source=fake_clock,
            timezone_source=fake_timezone,
            logger=logger,
        )
        yield host
        host.destroy()

    def test_mode_changes_are_held_until_create(self, uncreated) -> None:
        """Visibility, ambient and size set early are applied when the engine is created."""
        uncreated.set_visible(True)
        uncreated.set_ambient(True)
        uncreated.resize(300, 300)

        uncreated.create()

        state = uncreated.engine.state
        assert (state.width, state.visible, state.ambient) == (300, True, True)
        assert not uncreated.engine.scheduler.armed
        assert uncreated.engine.timezone_receiver_registered

    def test_visible_interactive_before_create_arms_timer(self, uncreated) -> None:
        """A face shown before create starts ticking once created."""
        uncreated.set_visible(True)
        uncreated.create()

        assert uncreated.engine.scheduler.armed

    def test_render_before_create_rejected(self, uncreated) -> None:
        """Drawing needs the engine's paints and calendar."""
        with pytest.raises(RuntimeError, match="before create"):
            uncreated.render_frame()
