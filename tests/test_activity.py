"""Tests for the activity broadcaster."""

from feedrelay.activity import ActivityBroadcaster


class TestActivityBroadcaster:
    def test_listeners_receive_announcements(self):
        received = []
        broadcaster = ActivityBroadcaster()
        broadcaster.subscribe(received.append)

        activity = broadcaster.announce("read", "A title", "https://x.test/a", "example")

        assert received == [activity]
        assert activity.source_id == "example"
        assert activity.target_link == "https://x.test/a"

    def test_failing_listener_is_ignored(self):
        received = []
        broadcaster = ActivityBroadcaster()

        def broken(_activity):
            raise RuntimeError("peer gone")

        broadcaster.subscribe(broken)
        broadcaster.subscribe(received.append)

        broadcaster.announce("read", "t", "l", "s")

        assert len(received) == 1

    def test_unsubscribe(self):
        received = []
        broadcaster = ActivityBroadcaster()
        unsubscribe = broadcaster.subscribe(received.append)

        unsubscribe()
        unsubscribe()
        broadcaster.announce("read", "t", "l", "s")

        assert received == []
