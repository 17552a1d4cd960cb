"""
Logging Service - Console logging for the watch face engine and its hosts
"""
import logging
import sys
from typing import Optional


LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _format_fields(fields: dict) -> str:
    return ', '.join(f"{key}={value}" for key, value in fields.items())


class LoggingService:
    """
    Console logger shared by the engine, the redraw timer and the hosts.

    Lifecycle callbacks and timer transitions go through log_lifecycle() and
    log_timer() so every component reports them in the same shape.
    """

    def __init__(self, name: str = 'watchface', level: str = 'INFO'):
        """
        Initialize logging service.

        Args:
            name: Logger name
            level: Log level name, unknown names mean INFO
        """
        self._logger = logging.getLogger(name)
        self._handler = logging.StreamHandler(sys.stdout)
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

        self._logger.handlers.clear()
        self._logger.addHandler(self._handler)
        self.set_level(level)

    def set_level(self, level: str) -> None:
        """Change the level of the logger and its console handler"""
        name = str(level).upper()
        log_level = getattr(logging, name) if name in LEVELS else logging.INFO
        self._logger.setLevel(log_level)
        self._handler.setLevel(log_level)

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str, exc_info: bool = False) -> None:
        self._logger.error(message, exc_info=exc_info)

    def critical(self, message: str, exc_info: bool = False) -> None:
        self._logger.critical(message, exc_info=exc_info)

    def log_lifecycle(self, component: str, event: str, **fields) -> None:
        """
        Log a create/destroy style callback at INFO.

        Args:
            component: Who changed, e.g. 'Engine'
            event: What happened, e.g. 'created'
            **fields: Details appended as key=value pairs
        """
        details = _format_fields(fields)
        self.info(f"{component} {event}: {details}" if details else f"{component} {event}")

    def log_timer(self, event: str, **fields) -> None:
        """Log a redraw timer transition at DEBUG"""
        details = _format_fields(fields)
        self.debug(f"Redraw timer {event}: {details}" if details else f"Redraw timer {event}")

    def log_startup(self, version: str, config: dict) -> None:
        """
        Log the startup banner with the effective face settings.

        Args:
            version: Application version
            config: Full configuration dict
        """
        display = config.get('display', {})
        face = config.get('face', {})
        self._banner([
            f"Analog watch face v{version} (Python {sys.version.split()[0]})",
            f"Timezone: {config.get('timezone') or 'system default'}",
            f"Surface: {display.get('width', 0)}x{display.get('height', 0)}",
            f"Background: {face.get('background') or 'solid fill'}",
            f"Label layout: {face.get('label_layout', 'source')}",
        ])

    def log_shutdown(self) -> None:
        self._banner(["Analog watch face shutting down"])

    def _banner(self, lines: list) -> None:
        rule = '=' * 60
        self.info(rule)
        for line in lines:
            self.info(line)
        self.info(rule)


_logging_service: Optional[LoggingService] = None


def get_logger(name: str = 'watchface', level: str = 'INFO') -> LoggingService:
    """
    Get or create the shared logging service.

    Args:
        name: Logger name, used on first call only
        level: Log level, used on first call only

    Returns:
        LoggingService instance
    """
    global _logging_service
    if _logging_service is None:
        _logging_service = LoggingService(name, level)
    return _logging_service
