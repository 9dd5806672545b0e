"""Tests for the in-memory domain event bus."""

from music_room.domain.shared.events import EventBus, TrackAdded, TrackRemoved


class TestEventBus:
    async def test_publish_reaches_subscribers_of_that_type(self):
        bus = EventBus()
        added, removed = [], []

        async def on_added(event):
            added.append(event)

        async def on_removed(event):
            removed.append(event)

        bus.subscribe(TrackAdded, on_added)
        bus.subscribe(TrackRemoved, on_removed)

        await bus.publish(TrackAdded(resource_id="r", track_id="t", added_by="a"))

        assert [e.track_id for e in added] == ["t"]
        assert removed == []

    async def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        seen = []

        async def broken(event):
            raise RuntimeError("handler failure")

        async def working(event):
            seen.append(event.track_id)

        bus.subscribe(TrackAdded, broken)
        bus.subscribe(TrackAdded, working)

        await bus.publish(TrackAdded(resource_id="r", track_id="t"))

        assert seen == ["t"]

    async def test_unsubscribe(self):
        bus = EventBus()
        seen = []

        async def handler(event):
            seen.append(event)

        bus.subscribe(TrackAdded, handler)
        bus.unsubscribe(TrackAdded, handler)
        await bus.publish(TrackAdded())

        assert seen == []

    async def test_publish_all_keeps_order(self):
        bus = EventBus()
        seen = []

        async def handler(event):
            seen.append(event.track_id)

        bus.subscribe(TrackAdded, handler)
        await bus.publish_all([TrackAdded(track_id="1"), TrackAdded(track_id="2")])

        assert seen == ["1", "2"]

    def test_events_have_unique_ids(self):
        assert TrackAdded().event_id != TrackAdded().event_id
