"""
Main entry point for the analog watch face preview
"""
import argparse
import signal
import sys
from pathlib import Path
from typing import List, Optional

from watchface.core.config_service import config
from watchface.core.clock_service import ClockService
from watchface.core.logging_service import get_logger
from watchface.host.service import WatchFaceService


class Application:
    """
    Main application orchestrator.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize application.

        Args:
            config_path: YAML file to load instead of the default search paths
        """
        config.reload(config_path)

        log_level = config.get('logging.level', 'INFO')
        self._logger = get_logger('watchface', log_level)
        self._logger.set_level(log_level)

        version = config.get('app.version', '1.0.0')
        self._logger.log_startup(version, self._get_config_summary())

        self._service: Optional[WatchFaceService] = None
        self._preview = None

    def _get_config_summary(self) -> dict:
        """Get configuration summary for logging"""
        return {
            'timezone': config.get('timezone'),
            'display': {
                'width': config.get('display.width', 400),
                'height': config.get('display.height', 400),
            },
            'face': {
                'background': config.get('face.background'),
                'label_layout': config.get('face.label_layout', 'source'),
            }
        }

    def _initialize_service(self) -> None:
        """Create the clock and the watch face service"""
        self._logger.info("Initializing watch face service")

        timezone = config.get('timezone')
        clock_service = ClockService(timezone, logger=self._logger)
        self._logger.info(f"Clock service initialized: timezone={clock_service.timezone}")

        self._service = WatchFaceService(
            width=config.get('display.width', 400),
            height=config.get('display.height', 400),
            clock_service=clock_service,
            background_path=config.get('face.background'),
            label_layout=config.get('face.label_layout', 'source'),
            interval_ms=config.get('face.update_interval_ms', 1000),
            logger=self._logger
        )

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown"""
        def signal_handler(signum, frame):
            self._logger.info(f"Received signal {signum}, shutting down")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def snapshot(self, path: Path) -> Path:
        """
        Render a single interactive frame without opening a window.

        Args:
            path: Output image path

        Returns:
            The path written
        """
        try:
            self._initialize_service()
            self._service.create()
            self._service.set_ambient(False)
            self._service.set_visible(True)
            return self._service.save_snapshot(path)
        finally:
            self.shutdown()

    def run(self) -> None:
        """Run the preview window"""
        from watchface.host.preview import PreviewHost

        try:
            self._setup_signal_handlers()
            self._initialize_service()

            self._preview = PreviewHost(
                self._service,
                fps=config.get('display.fps', 30),
                logger=self._logger
            )
            self._preview.initialize()
            self._logger.info("Watch face started successfully")

            # Blocking event loop
            self._preview.start()

        except KeyboardInterrupt:
            self._logger.info("Keyboard interrupt received")
        except Exception as e:
            self._logger.critical(f"Fatal error: {e}", exc_info=True)
            raise
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Cleanup and shutdown"""
        self._logger.info("Shutting down watch face")

        if self._preview and self._preview.is_running():
            self._preview.stop()
        elif self._service:
            self._service.destroy()

        self._logger.log_shutdown()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analog watch face preview")
    parser.add_argument('--config', type=Path, default=None, help="YAML config file")
    parser.add_argument('--snapshot', type=Path, default=None,
                        help="Render one frame to this image file and exit")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    args = parse_args(argv)
    app = Application(args.config)
    if args.snapshot:
        app.snapshot(args.snapshot)
    else:
        app.run()


if __name__ == '__main__':
    main()
