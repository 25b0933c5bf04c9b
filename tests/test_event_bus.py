"""Tests for the event bus."""

import pytest

from shellsuggest.domain.events import Bell, CompletionsRequested, EventBus, SuggestionAccepted


class TestEventBus:
    def test_publish_to_subscribers_in_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(SuggestionAccepted, lambda e: calls.append(("first", e.sequence)))
        bus.subscribe(SuggestionAccepted, lambda e: calls.append(("second", e.sequence)))

        bus.publish(SuggestionAccepted(sequence="\x1b[24~e"))
        assert calls == [("first", "\x1b[24~e"), ("second", "\x1b[24~e")]

    def test_events_are_routed_by_type(self):
        bus = EventBus()
        bells = []
        bus.subscribe(Bell, bells.append)
        bus.publish(CompletionsRequested())
        assert bells == []

    def test_duplicate_subscription_ignored(self):
        bus = EventBus()
        calls = []
        handler = calls.append
        bus.subscribe(Bell, handler)
        bus.subscribe(Bell, handler)
        bus.publish(Bell())
        assert len(calls) == 1

    def test_async_handler_rejected(self):
        async def handler(event):
            pass

        with pytest.raises(TypeError):
            EventBus().subscribe(Bell, handler)

    def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        calls = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(Bell, broken)
        bus.subscribe(Bell, calls.append)
        bus.publish(Bell())
        assert len(calls) == 1

    def test_unsubscribe_and_clear(self):
        bus = EventBus()
        calls = []
        bus.subscribe(Bell, calls.append)
        assert bus.has_subscribers(Bell)

        bus.unsubscribe(Bell, calls.append)
        bus.unsubscribe(Bell, calls.append)
        assert not bus.has_subscribers(Bell)

        bus.subscribe(Bell, calls.append)
        bus.clear()
        bus.publish(Bell())
        assert calls == []
