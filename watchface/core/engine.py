"""
Engine - Host callbacks of the analog watch face
Owns the render state, the redraw timer and the timezone receiver
"""
from typing import Any, Optional, Tuple

from PIL import Image

from ..ui.background import load_background, scale_background
from ..ui.canvas import Canvas
from ..ui.frame_renderer import FrameRenderer, HandAngles
from ..ui.theme import FacePaints
from .clock_service import ACTION_TIMEZONE_CHANGED, ClockService
from .logging_service import LoggingService, get_logger
from .redraw_scheduler import INTERACTIVE_UPDATE_RATE_MS, RedrawScheduler
from .render_state import RenderState


class Engine:
    """
    Analog watch face with a ticking second hand.

    In ambient mode the second hand is not shown and the hands are drawn
    without anti-aliasing. The host calls the on_* methods on its UI thread
    and honors invalidate() by calling on_draw().
    """

    def __init__(
        self,
        host,
        clock_service: Optional[ClockService] = None,
        background_path: Optional[str] = None,
        label_layout: str = 'source',
        interval_ms: int = INTERACTIVE_UPDATE_RATE_MS,
        logger: Optional[LoggingService] = None
    ):
        """
        Initialize engine.

        Args:
            host: Watch face service providing handler, broadcaster,
                invalidate() and wall_clock_ms()
            clock_service: Calendar, created on on_create() when omitted
            background_path: Background image path, None for a solid face
            label_layout: Dial label layout name
            interval_ms: Interactive redraw interval in milliseconds
            logger: Logging service
        """
        self._host = host
        self._logger = logger or get_logger()
        self._clock = clock_service
        self._background_path = background_path
        self._label_layout = label_layout

        self.state = RenderState()
        self.paints = FacePaints()
        self._renderer: Optional[FrameRenderer] = None

        self._original_background: Optional[Image.Image] = None
        self._background: Optional[Image.Image] = None

        self._registered_timezone_receiver = False

        self._scheduler = RedrawScheduler(
            handler=host.handler,
            is_eligible=self.should_timer_be_running,
            request_redraw=host.invalidate,
            time_source=host.wall_clock_ms,
            interval_ms=interval_ms,
            logger=self._logger
        )

    def on_create(self) -> None:
        """Build paints, decode the background and create the calendar"""
        self.paints = FacePaints()
        self._renderer = FrameRenderer(self.paints, self._label_layout)
        self._original_background = load_background(self._background_path, self._logger)
        if self._clock is None:
            self._clock = ClockService(logger=self._logger)
        self._logger.log_lifecycle("Engine", "created", timezone=self._clock.timezone, labels=self._label_layout)

    def on_destroy(self) -> None:
        """Cancel the timer and stop listening for timezone changes"""
        self._scheduler.teardown()
        self._unregister_receiver()
        self._logger.log_lifecycle("Engine", "destroyed")

    def on_time_tick(self) -> None:
        """Once-a-minute tick from the host"""
        self._host.invalidate()

    def on_ambient_mode_changed(self, in_ambient_mode: bool) -> None:
        """
        Switch between ambient and interactive mode.

        Args:
            in_ambient_mode: True when entering ambient mode
        """
        if self.state.set_ambient(in_ambient_mode):
            self._logger.debug(f"Ambient mode: {self.state.ambient}")

        self.paints.set_ambient(self.state.ambient)
        self._host.invalidate()

        # The timer depends on visibility as well as ambient mode
        self._scheduler.reconcile()

    def on_surface_changed(self, width: int, height: int) -> None:
        """
        Recompute geometry and rescale the background for a new surface size.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
        """
        original = self._original_background
        self.state.resize(width, height, original.width if original is not None else 0)

        if original is not None:
            self._background = scale_background(original, self.state.scale)

        self._logger.debug(f"Surface changed: {self.state.width}x{self.state.height}, scale={self.state.scale:.3f}")
        self._scheduler.reconcile()

    def on_visibility_changed(self, visible: bool) -> None:
        """
        Start or stop following timezone changes and the redraw timer.

        Args:
            visible: True when the face became visible
        """
        self.state.set_visible(visible)

        if visible:
            self._register_receiver()

            # The timezone may have changed while the face was hidden
            self._clock.refresh_timezone()
            self._host.invalidate()
        else:
            self._unregister_receiver()

        self._scheduler.reconcile()

    def on_draw(self, canvas: Canvas, bounds: Optional[Tuple[int, int, int, int]] = None) -> HandAngles:
        """
        Draw one frame at the current wall-clock time.

        Args:
            canvas: Drawing surface sized to the watch face
            bounds: Surface bounds (left, top, right, bottom); the face fills the surface

        Returns:
            The hand angles drawn
        """
        sample = self._clock.sample(self._host.wall_clock_ms())
        return self._renderer.render(canvas, sample, self.state, self._background)

    def should_timer_be_running(self) -> bool:
        """The timer only runs while visible and in interactive mode"""
        return self.state.interactive

    def _on_timezone_changed(self, action: str, payload: Any = None) -> None:
        self._clock.refresh_timezone()
        self._host.invalidate()

    def _register_receiver(self) -> None:
        if self._registered_timezone_receiver:
            return
        self._registered_timezone_receiver = True
        self._host.broadcaster.register(ACTION_TIMEZONE_CHANGED, self._on_timezone_changed)
        self._logger.debug("Timezone receiver registered")

    def _unregister_receiver(self) -> None:
        if not self._registered_timezone_receiver:
            return
        self._registered_timezone_receiver = False
        self._host.broadcaster.unregister(ACTION_TIMEZONE_CHANGED, self._on_timezone_changed)
        self._logger.debug("Timezone receiver unregistered")

    @property
    def scheduler(self) -> RedrawScheduler:
        return self._scheduler

    @property
    def clock(self) -> Optional[ClockService]:
        return self._clock

    @property
    def background(self) -> Optional[Image.Image]:
        """Background scaled for the current surface"""
        return self._background

    @property
    def timezone_receiver_registered(self) -> bool:
        return self._registered_timezone_receiver
