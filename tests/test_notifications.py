"""
Tests for the notification channel.
"""

from edunex.models.enums import NotificationLevel


class TestNotificationCenter:
    def test_levels(self, notifications, notified):
        notifications.info("hello")
        notifications.success("done")
        notifications.error("broken")

        assert [(n.level, n.message) for n in notified] == [
            (NotificationLevel.INFO, "hello"),
            (NotificationLevel.SUCCESS, "done"),
            (NotificationLevel.ERROR, "broken"),
        ]

    def test_publish_returns_notification_without_listeners(self, notifications):
        notification = notifications.error("nobody listening")
        assert notification.level == NotificationLevel.ERROR
        assert notification.created_at.tzinfo is not None

    def test_failing_listener_does_not_block_others(self, notifications):
        received = []

        def broken(_notification):
            raise RuntimeError("listener bug")

        notifications.subscribe(broken)
        notifications.subscribe(received.append)
        notifications.info("still delivered")

        assert [n.message for n in received] == ["still delivered"]

    def test_unsubscribe(self, notifications):
        received = []
        unsubscribe = notifications.subscribe(received.append)
        unsubscribe()
        notifications.info("ignored")
        assert received == []
