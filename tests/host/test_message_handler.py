import pytest

from watchface.host.message_handler import MessageHandler


@pytest.fixture
def handler(fake_clock) -> MessageHandler:
    return MessageHandler(fake_clock)


class TestMessageHandler:
    """Validate the delayed-message queue so timer tokens can be posted and removed reliably."""

    def test_post_runs_on_next_dispatch(self, handler) -> None:
        """An immediate post waits for dispatch_pending instead of running inline."""
        calls = []
        handler.post('tick', lambda: calls.append('tick'))

        assert calls == []
        handler.dispatch_pending()
        assert calls == ['tick']
        assert not handler.has_pending('tick')

    def test_delayed_message_waits_for_due_time(self, handler, fake_clock) -> None:
        """Delayed messages only run once the clock reaches their due time."""
        calls = []
        handler.post_delayed('tick', lambda: calls.append(fake_clock()), 250)

        handler.dispatch_pending()
        assert calls == []
        assert handler.next_due_ms() == fake_clock() + 250

        fake_clock.advance(250)
        handler.dispatch_pending()
        assert calls == [fake_clock()]

    def test_remove_cancels_every_message_with_token(self, handler) -> None:
        """Removing a token drops all of its messages and leaves other tokens alone."""
        calls = []
        handler.post('tick', lambda: calls.append('a'))
        handler.post_delayed('tick', lambda: calls.append('b'), 10)
        handler.post('other', lambda: calls.append('other'))

        assert handler.remove('tick') == 2
        assert handler.remove('tick') == 0
        handler.dispatch_pending()

        assert calls == ['other']

    def test_messages_run_in_due_order(self, handler, fake_clock) -> None:
        """Earlier due times run first regardless of posting order."""
        calls = []
        handler.post_delayed('late', lambda: calls.append('late'), 20)
        handler.post_delayed('early', lambda: calls.append('early'), 10)

        fake_clock.advance(30)
        handler.dispatch_pending()

        assert calls == ['early', 'late']

    def test_action_can_repost_itself(self, handler, fake_clock) -> None:
        """A callback may queue the next occurrence of its own token."""
        calls = []

        def tick() -> None:
            calls.append(fake_clock())
            handler.post_delayed('tick', tick, 100)

        handler.post('tick', tick)
        handler.dispatch_pending()
        assert handler.has_pending('tick')

        fake_clock.advance(100)
        handler.dispatch_pending()
        assert len(calls) == 2

    def test_clear_empties_queue(self, handler) -> None:
        """clear() removes every pending token."""
        handler.post('a', lambda: None)
        handler.post_delayed('b', lambda: None, 5)
        handler.clear()

        assert handler.next_due_ms() is None
        assert not handler.has_pending('a')

    def test_remove_spares_other_token_due_at_same_instant(self, handler, fake_clock) -> None:
        """Two tokens due at the same millisecond are cancelled independently."""
        calls = []
        handler.post_delayed('other', lambda: calls.append('other'), 500)
        handler.post_delayed('tick', lambda: calls.append('tick'), 500)

        assert handler.remove('tick') == 1
        assert handler.has_pending('other')

        fake_clock.advance(500)
        handler.dispatch_pending()
        assert calls == ['other']
