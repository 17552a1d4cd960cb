"""
Preview Host - pygame window that plays the role of the watch
Maps window events onto engine callbacks and shows the rendered frames.
"""
from typing import Optional

import pygame
from PIL import Image

from ..core.logging_service import LoggingService, get_logger
from .service import WatchFaceService


class PreviewHost:
    """
    Desktop preview for a watch face service.

    Keys: A toggles ambient mode, V toggles visibility, S writes a snapshot,
    Esc/Q quits. Resizing the window reports a surface change; minimizing
    it hides the face.
    """

    def __init__(
        self,
        service: WatchFaceService,
        fps: int = 30,
        logger: Optional[LoggingService] = None,
        caption: str = "Analog Watch Face",
        snapshot_path: str = "watchface.png"
    ):
        """
        Initialize preview host.

        Args:
            service: Watch face service to drive
            fps: Loop rate of the preview window
            logger: Logging service
            caption: Window title
            snapshot_path: File written by the S key
        """
        self._service = service
        self._fps = max(1, int(fps))
        self._logger = logger or get_logger()
        self._caption = caption
        self._snapshot_path = snapshot_path

        self._screen: Optional[pygame.Surface] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._running = False

    def initialize(self) -> None:
        """Open the window and bring the face up visible and interactive"""
        pygame.init()
        self._screen = pygame.display.set_mode(self._service.size, pygame.RESIZABLE)
        pygame.display.set_caption(self._caption)
        self._clock = pygame.time.Clock()

        self._service.create()
        self._service.set_ambient(False)
        self._service.set_visible(True)
        self._running = True

        width, height = self._service.size
        self._logger.info(f"Preview window opened: {width}x{height}")

    def handle_event(self, event: pygame.event.Event) -> None:
        """Translate one pygame event into service calls"""
        if event.type == pygame.QUIT:
            self._running = False
        elif event.type == pygame.VIDEORESIZE:
            self._screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            self._service.resize(event.w, event.h)
            self._service.invalidate()
        elif event.type in (pygame.WINDOWMINIMIZED, pygame.WINDOWHIDDEN):
            self._service.set_visible(False)
        elif event.type in (pygame.WINDOWRESTORED, pygame.WINDOWSHOWN):
            self._service.set_visible(True)
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event.key)

    def _handle_key(self, key: int) -> None:
        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key == pygame.K_a:
            ambient = not self._service.is_in_ambient_mode()
            self._logger.info(f"Ambient mode {'on' if ambient else 'off'}")
            self._service.set_ambient(ambient)
        elif key == pygame.K_v:
            visible = not self._service.is_visible()
            self._logger.info(f"Face {'visible' if visible else 'hidden'}")
            self._service.set_visible(visible)
        elif key == pygame.K_s:
            self._service.save_snapshot(self._snapshot_path)

    def step(self) -> bool:
        """
        Run one loop iteration: events, timers, and a redraw if requested.

        Returns:
            True if a frame was drawn
        """
        for event in pygame.event.get():
            self.handle_event(event)

        if not self._service.pump():
            return False

        self._blit(self._service.render_frame())
        return True

    def _blit(self, image: Image.Image) -> None:
        frame = pygame.image.frombuffer(image.tobytes(), image.size, 'RGBA')
        self._screen.blit(frame, (0, 0))
        pygame.display.flip()

    def start(self) -> None:
        """Run the preview loop until the window is closed"""
        if not self._running:
            self.initialize()

        self._logger.info("Starting preview loop")
        while self._running:
            self.step()
            self._clock.tick(self._fps)

        self.stop()

    def stop(self) -> None:
        """Destroy the engine and close the window"""
        self._running = False
        self._service.destroy()
        if pygame.get_init():
            pygame.quit()
        self._logger.info("Preview window closed")

    def is_running(self) -> bool:
        return self._running
