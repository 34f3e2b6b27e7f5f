"""REST notification sink.

Writes to the ``notifications`` table. Grouped kinds keep one row per
(recipient, kind, post): the newest matching row is updated with the new
actor and marked unread again, otherwise a fresh row is inserted. After
every insert the recipient's feed is pruned by the
``prune_old_notifications`` procedure.
"""

from typing import Any

import logfire

from pawtalk.domain.model.notification import GroupedNotification, IndividualNotification
from pawtalk.domain.repository.notification import NotificationSink
from pawtalk.domain.service.notification_grouping import add_actor, summarize_actors
from pawtalk.domain.value import NotificationKind, UserId

from .client import PostgrestClient

TABLE = "notifications"

# Values allowed by the table's type constraint
ROW_TYPES = {
    NotificationKind.LIKE: "reaction",
    NotificationKind.COMMENT_LIKE: "reaction",
    NotificationKind.COMMENT: "comment",
    NotificationKind.REPLY: "comment",
    NotificationKind.MENTION: "comment",
}


class RestNotificationSink(NotificationSink):
    """Notification sink over the ``notifications`` table."""

    def __init__(self, client: PostgrestClient) -> None:
        self.client = client

    async def send_grouped(self, notification: GroupedNotification) -> None:
        existing = await self._find_group(notification)
        data: dict[str, Any] = {
            "kind": notification.kind.value,
            "post_id": str(notification.post_id),
            "link": notification.deep_link,
        }
        if notification.comment_id is not None:
            data["last_comment_id"] = str(notification.comment_id)
            data["last_comment_preview"] = notification.preview_text

        if existing is None:
            actors = [notification.actor_display_name]
            await self._insert(
                recipient_id=notification.recipient_id,
                row={
                    "user_id": str(notification.recipient_id),
                    "from_user_id": str(notification.actor_id),
                    "type": ROW_TYPES[notification.kind],
                    "title": notification.fallback_title,
                    "body": summarize_actors(actors, notification.kind),
                    "data": {**data, "actors": actors},
                    "is_unread": True,
                },
            )
            return

        previous = existing.get("data") or {}
        actors = add_actor(
            list(previous.get("actors") or []), notification.actor_display_name
        )
        await self.client.update(
            TABLE,
            {"id": f"eq.{existing['id']}"},
            {
                "from_user_id": str(notification.actor_id),
                "title": notification.fallback_title,
                "body": summarize_actors(actors, notification.kind),
                "data": {**previous, **data, "actors": actors},
                "is_unread": True,
                "read_at": None,
            },
        )
        logfire.debug(
            "Grouped notification updated",
            notification_id=str(existing["id"]),
            actors=len(actors),
        )

    async def send_individual(self, notification: IndividualNotification) -> None:
        await self._insert(
            recipient_id=notification.recipient_id,
            row={
                "user_id": str(notification.recipient_id),
                "from_user_id": str(notification.actor_id),
                "type": ROW_TYPES[notification.kind],
                "title": notification.title,
                "body": notification.body,
                "data": {
                    "kind": notification.kind.value,
                    "post_id": str(notification.data.post_id),
                    "link": notification.data.deep_link,
                },
                "is_unread": True,
            },
        )

    async def _find_group(self, notification: GroupedNotification) -> dict | None:
        rows = await self.client.select(
            TABLE,
            {
                "select": "*",
                "user_id": f"eq.{notification.recipient_id}",
                "type": f"eq.{ROW_TYPES[notification.kind]}",
                "data->>kind": f"eq.{notification.kind.value}",
                "data->>post_id": f"eq.{notification.post_id}",
                "order": "created_at.desc",
                "limit": 1,
            },
        )
        return rows[0] if rows else None

    async def _insert(self, recipient_id: UserId, row: dict[str, Any]) -> None:
        await self.client.insert(TABLE, row)
        try:
            await self.client.rpc("prune_old_notifications", {"p_user_id": str(recipient_id)})
        except Exception as e:
            # The notification itself is stored; pruning catches up next time
            logfire.warn(
                "Failed to prune notifications",
                recipient_id=str(recipient_id),
                error=str(e),
            )
