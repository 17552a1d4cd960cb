import logging

from watchface.core.logging_service import LoggingService
from watchface.core.redraw_scheduler import RedrawScheduler
from watchface.host.message_handler import MessageHandler


def messages(caplog, name: str = 'watchface-test'):
    return [(record.levelno, record.getMessage()) for record in caplog.records if record.name == name]


class TestLoggingService:
    """Check the shared logger so lifecycle and timer events read the same everywhere."""

    def test_lifecycle_lists_fields(self, logger, caplog) -> None:
        """Lifecycle events log at INFO with key=value details."""
        logger.log_lifecycle("Engine", "created", timezone='UTC', labels='source')
        logger.log_lifecycle("Engine", "destroyed")

        assert messages(caplog) == [
            (logging.INFO, "Engine created: timezone=UTC, labels=source"),
            (logging.INFO, "Engine destroyed"),
        ]

    def test_unknown_level_means_info(self, caplog) -> None:
        """A misspelled level keeps INFO, so debug output stays off."""
        service = LoggingService('watchface-levels', 'VERBOSE')
        service.debug("hidden")
        service.info("shown")

        assert messages(caplog, 'watchface-levels') == [(logging.INFO, "shown")]

    def test_set_level_changes_threshold(self, caplog) -> None:
        """set_level('warning') silences INFO."""
        service = LoggingService('watchface-threshold', 'DEBUG')
        service.set_level('warning')
        service.info("quiet")
        service.warning("loud")

        assert messages(caplog, 'watchface-threshold') == [(logging.WARNING, "loud")]

    def test_scheduler_logs_arm_and_cancel(self, logger, fake_clock, caplog) -> None:
        """The redraw timer reports arming and cancelling at DEBUG."""
        scheduler = RedrawScheduler(
            handler=MessageHandler(fake_clock),
            is_eligible=lambda: True,
            request_redraw=lambda: None,
            time_source=fake_clock,
            logger=logger,
        )
        scheduler.reconcile()
        scheduler.teardown()

        timer_messages = [text for level, text in messages(caplog) if level == logging.DEBUG]
        assert timer_messages == [
            f"Redraw timer armed: delay_ms=0, fire_at_ms={fake_clock()}",
            "Redraw timer cancelled: pending=1",
            "Redraw timer torn down",
        ]
