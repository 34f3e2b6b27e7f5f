"""Notification values and payloads."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from pawtalk.domain.model.common import DomainModel, utc_now
from pawtalk.domain.value import (
    CommentId,
    NotificationId,
    NotificationKind,
    PostId,
    UserId,
)


class NotificationIntent(DomainModel):
    """Decision that one recipient should hear about one comment.

    Ephemeral: produced by the target resolver and consumed by the
    dispatcher. ``exclude`` records the users already covered by a
    higher-priority intent for the same comment.
    """

    recipient_id: UserId
    kind: NotificationKind
    source_comment_id: CommentId
    exclude: frozenset[UserId] = frozenset()


class NotificationData(DomainModel):
    """Routing data attached to an individual notification."""

    post_id: PostId
    deep_link: str


class GroupedNotification(DomainModel):
    """Payload for the backend aggregation call.

    The backend collapses repeated actors into "X and N others ..." entries.
    """

    recipient_id: UserId
    actor_id: UserId
    kind: NotificationKind
    post_id: PostId
    actor_display_name: str
    preview_text: str
    deep_link: str
    fallback_title: str
    comment_id: Optional[CommentId] = None


class IndividualNotification(DomainModel):
    """Payload for a point-to-point notification."""

    recipient_id: UserId
    actor_id: UserId
    kind: NotificationKind
    title: str
    body: str
    data: NotificationData


class StoredNotification(DomainModel):
    """Notification row as held by a sink (one feed entry)."""

    id: NotificationId
    recipient_id: UserId
    actor_id: UserId
    kind: NotificationKind
    title: str
    body: str
    post_id: PostId
    deep_link: str
    actors: list[str] = Field(default_factory=list)
    is_unread: bool = True
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
