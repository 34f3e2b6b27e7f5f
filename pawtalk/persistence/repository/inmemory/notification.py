"""In-memory notification sink.

Keeps each recipient's notification feed the way the backend does:

- grouped kinds (``like``, ``comment``) collapse into one entry per
  (recipient, kind, post); a new actor is appended once, the body is
  rewritten to "X and N others ..." and the entry is unread again
- individual kinds get one entry per notification
- only the newest ``retention`` entries are kept per recipient
"""

from collections import defaultdict
from datetime import datetime, timezone
from uuid import uuid4

from pawtalk.domain.model.notification import (
    GroupedNotification,
    IndividualNotification,
    StoredNotification,
)
from pawtalk.domain.repository.notification import NotificationSink
from pawtalk.domain.service.notification_grouping import add_actor, summarize_actors
from pawtalk.domain.value import NotificationId, NotificationKind, PostId, UserId


class InMemoryNotificationSink(NotificationSink):
    """In-memory implementation of NotificationSink for testing."""

    def __init__(self, retention: int = 100) -> None:
        self.retention = retention
        # Oldest first per recipient
        self._feeds: dict[UserId, list[StoredNotification]] = defaultdict(list)

    async def send_grouped(self, notification: GroupedNotification) -> None:
        feed = self._feeds[notification.recipient_id]
        index = self._find_group(
            feed, notification.kind, notification.post_id
        )
        data = {"post_id": str(notification.post_id), "link": notification.deep_link}
        if notification.comment_id is not None:
            data["last_comment_id"] = str(notification.comment_id)
            data["last_comment_preview"] = notification.preview_text

        if index is None:
            actors = [notification.actor_display_name]
            self._append(
                StoredNotification(
                    id=NotificationId(uuid4()),
                    recipient_id=notification.recipient_id,
                    actor_id=notification.actor_id,
                    kind=notification.kind,
                    title=notification.fallback_title,
                    body=summarize_actors(actors, notification.kind),
                    post_id=notification.post_id,
                    deep_link=notification.deep_link,
                    actors=actors,
                    data=data,
                )
            )
            return

        existing = feed[index]
        actors = add_actor(existing.actors, notification.actor_display_name)
        feed[index] = existing.model_copy(
            update={
                "actor_id": notification.actor_id,
                "title": notification.fallback_title,
                "body": summarize_actors(actors, notification.kind),
                "deep_link": notification.deep_link,
                "actors": actors,
                "is_unread": True,
                "data": {**existing.data, **data},
                "updated_at": datetime.now(timezone.utc),
            }
        )

    async def send_individual(self, notification: IndividualNotification) -> None:
        self._append(
            StoredNotification(
                id=NotificationId(uuid4()),
                recipient_id=notification.recipient_id,
                actor_id=notification.actor_id,
                kind=notification.kind,
                title=notification.title,
                body=notification.body,
                post_id=notification.data.post_id,
                deep_link=notification.data.deep_link,
                data=notification.data.model_dump(mode="json"),
            )
        )

    def list_for(self, recipient_id: UserId) -> list[StoredNotification]:
        """A recipient's notifications, newest first."""
        return list(reversed(self._feeds.get(recipient_id, [])))

    def unread_count(self, recipient_id: UserId) -> int:
        return sum(1 for n in self._feeds.get(recipient_id, []) if n.is_unread)

    def mark_all_read(self, recipient_id: UserId) -> None:
        feed = self._feeds.get(recipient_id, [])
        for i, notification in enumerate(feed):
            feed[i] = notification.model_copy(update={"is_unread": False})

    def _append(self, notification: StoredNotification) -> None:
        feed = self._feeds[notification.recipient_id]
        feed.append(notification)
        if len(feed) > self.retention:
            del feed[: len(feed) - self.retention]

    @staticmethod
    def _find_group(
        feed: list[StoredNotification], kind: NotificationKind, post_id: PostId
    ) -> int | None:
        for i in range(len(feed) - 1, -1, -1):
            if feed[i].kind == kind and feed[i].post_id == post_id:
                return i
        return None
