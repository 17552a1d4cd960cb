"""
Watch Face Service - Headless host that drives an Engine
"""
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

from ..core.clock_service import ClockService, system_timezone_key, wall_clock_ms
from ..core.engine import Engine
from ..core.logging_service import LoggingService, get_logger
from ..core.redraw_scheduler import INTERACTIVE_UPDATE_RATE_MS
from ..ui.canvas import PillowCanvas
from ..ui.theme import Theme
from .broadcast import Broadcaster, TimezoneWatcher
from .message_handler import MessageHandler, monotonic_ms


class WatchFaceService:
    """
    Host for one watch face engine.

    Owns the message handler, the broadcast source and the invalidate flag,
    and forwards lifecycle and mode changes to the engine. Everything runs on
    the thread that calls pump().
    """

    def __init__(
        self,
        width: int,
        height: int,
        clock_service: Optional[ClockService] = None,
        background_path: Optional[str] = None,
        label_layout: str = 'source',
        interval_ms: int = INTERACTIVE_UPDATE_RATE_MS,
        time_source: Callable[[], int] = wall_clock_ms,
        monotonic_source: Callable[[], float] = monotonic_ms,
        timezone_source: Callable[[], str] = system_timezone_key,
        logger: Optional[LoggingService] = None
    ):
        """
        Initialize watch face service.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
            clock_service: Calendar passed to the engine
            background_path: Background image path
            label_layout: Dial label layout name
            interval_ms: Interactive redraw interval
            time_source: Wall clock in milliseconds
            monotonic_source: Clock for the message queue in milliseconds
            timezone_source: Resolver for the system default timezone key
            logger: Logging service
        """
        self._logger = logger or get_logger()
        self._width = width
        self._height = height
        self._time_source = time_source

        self.handler = MessageHandler(monotonic_source)
        self.broadcaster = Broadcaster(self._logger)
        self.timezone_watcher = TimezoneWatcher(self.broadcaster, timezone_source)

        self._invalidated = False
        self._visible = False
        self._ambient = False
        self._created = False
        self._last_minute: Optional[int] = None
        self.frames_drawn = 0

        self.engine = self.on_create_engine(
            clock_service=clock_service,
            background_path=background_path,
            label_layout=label_layout,
            interval_ms=interval_ms
        )

    def on_create_engine(self, **kwargs) -> Engine:
        """Create the engine; subclasses may return a customized one"""
        return Engine(self, logger=self._logger, **kwargs)

    def wall_clock_ms(self) -> int:
        return int(self._time_source())

    def invalidate(self) -> None:
        """Request a redraw; honored by the next render_frame()"""
        self._invalidated = True

    def create(self) -> None:
        """Create the engine and report the initial surface size"""
        if self._created:
            return
        self._created = True
        self.engine.on_create()
        self.engine.on_surface_changed(self._width, self._height)
        if self._ambient:
            self.engine.on_ambient_mode_changed(True)
        if self._visible:
            self.engine.on_visibility_changed(True)
        self._logger.log_lifecycle("Watch face service", "created", size=f"{self._width}x{self._height}")

    def destroy(self) -> None:
        """Tear the engine down and drop any queued messages"""
        if not self._created:
            return
        self._created = False
        self.engine.on_destroy()
        self.handler.clear()
        self._logger.log_lifecycle("Watch face service", "destroyed", frames=self.frames_drawn)

    def resize(self, width: int, height: int) -> None:
        self._width = width
        self._height = height
        if self._created:
            self.engine.on_surface_changed(width, height)

    def set_visible(self, visible: bool) -> None:
        self._visible = bool(visible)
        if self._created:
            self.engine.on_visibility_changed(self._visible)

    def set_ambient(self, ambient: bool) -> None:
        self._ambient = bool(ambient)
        self._last_minute = self.wall_clock_ms() // 60000
        if self._created:
            self.engine.on_ambient_mode_changed(self._ambient)

    def pump(self) -> bool:
        """
        Run one host loop iteration.

        Dispatches due timer messages, polls the system timezone and sends
        the once-a-minute time tick while in ambient mode.

        Returns:
            True if a redraw has been requested
        """
        self.handler.dispatch_pending()
        self.timezone_watcher.poll()

        minute = self.wall_clock_ms() // 60000
        if minute != self._last_minute:
            self._last_minute = minute
            if self._ambient:
                self.engine.on_time_tick()

        return self._invalidated

    def render_frame(self) -> Image.Image:
        """
        Draw the face into a new image and clear the invalidate flag.

        Returns:
            RGBA image of the current surface size

        Raises:
            RuntimeError: If the service has not been created
        """
        if not self._created:
            raise RuntimeError("render_frame() called before create()")
        image = Image.new('RGBA', (max(1, self._width), max(1, self._height)), Theme.BG_PRIMARY)
        canvas = PillowCanvas(image)
        self.engine.on_draw(canvas, (0, 0, self._width, self._height))
        self._invalidated = False
        self.frames_drawn += 1
        return image

    def save_snapshot(self, path: Union[str, Path]) -> Path:
        """
        Render one frame and write it as an image file.

        Args:
            path: Output path, format from the extension

        Returns:
            The path written
        """
        path = Path(path)
        self.render_frame().convert('RGB').save(path)
        self._logger.info(f"Snapshot written to {path}")
        return path

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    def is_visible(self) -> bool:
        return self._visible

    def is_in_ambient_mode(self) -> bool:
        return self._ambient

    @property
    def size(self):
        return (self._width, self._height)
