"""Notification dispatch domain service."""

import logfire

from pawtalk.config import EngineSettings
from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.notification import (
    GroupedNotification,
    IndividualNotification,
    NotificationData,
    NotificationIntent,
)
from pawtalk.domain.model.post import Post
from pawtalk.domain.repository import NotificationSink
from pawtalk.domain.value import CommentId, DeepLink, NotificationKind, PostId, UserId

from .base import Service

ELLIPSIS = "..."

_INDIVIDUAL_TITLES = {
    NotificationKind.REPLY: "{actor} replied to your comment",
    NotificationKind.MENTION: "{actor} mentioned you in a comment",
    NotificationKind.COMMENT_LIKE: "{actor} liked your comment",
}

_FALLBACK_TITLES = {
    NotificationKind.COMMENT: "New comment",
    NotificationKind.LIKE: "New like",
}


class NotificationDispatcher(Service):
    """Deliver notifications through the sink.

    Two delivery modes:
    - grouped (``like`` and root ``comment``): one aggregation call per
      event, the sink collapses repeated actors
    - individual (``reply``, ``mention``, ``comment_like``): one record per
      recipient with a deep link to the exact comment

    Delivery is best-effort. Failures are logged and never raised, so they
    can't reverse the write that triggered them.
    """

    def __init__(self, sink: NotificationSink, settings: EngineSettings) -> None:
        """Initialize dispatcher.

        Args:
            sink: Notification sink
            settings: Engine settings (preview length, post route)
        """
        self.sink = sink
        self.settings = settings

    def preview(self, text: str) -> str:
        """Stable short preview: trimmed, cut to the configured length."""
        text = " ".join(text.split())
        limit = self.settings.preview_length
        if len(text) <= limit:
            return text
        return text[:limit] + ELLIPSIS

    def deep_link(
        self,
        post_id: PostId,
        comment_id: CommentId | None = None,
        action: str | None = None,
    ) -> str:
        return DeepLink(
            post_route=self.settings.post_route,
            post_id=post_id,
            comment_id=comment_id,
            action=action,
        ).build()

    async def dispatch(
        self,
        intents: list[NotificationIntent],
        comment: Comment,
        post: Post,
        actor: AuthorProfile,
    ) -> int:
        """Deliver the intents resolved for an authored comment.

        Args:
            intents: Resolved intents (at most one per recipient)
            comment: The confirmed comment
            post: The post it belongs to
            actor: The comment's author

        Returns:
            Number of notifications delivered
        """
        if comment.is_pending:
            logfire.error(
                "Refusing to notify for a pending comment",
                comment_id=str(comment.id),
            )
            return 0

        delivered = 0
        for intent in intents:
            if intent.kind.is_grouped:
                ok = await self.send_grouped(
                    recipient_id=intent.recipient_id,
                    actor=actor,
                    kind=intent.kind,
                    post=post,
                    preview_source=comment.content,
                    comment_id=comment.id,
                )
            else:
                ok = await self.send_individual(
                    recipient_id=intent.recipient_id,
                    actor=actor,
                    kind=intent.kind,
                    post=post,
                    comment_id=comment.id,
                    body_source=comment.content,
                )
            if ok:
                delivered += 1
        return delivered

    async def notify_post_like(self, post: Post, actor: AuthorProfile) -> bool:
        """Grouped "liked your post" notification to the post owner."""
        if post.owner_id is None:
            return False
        return await self.send_grouped(
            recipient_id=post.owner_id,
            actor=actor,
            kind=NotificationKind.LIKE,
            post=post,
            preview_source=post.title or "",
            action="like",
        )

    async def notify_comment_like(
        self, comment: Comment, post: Post, actor: AuthorProfile
    ) -> bool:
        """Individual "liked your comment" notification to the comment author."""
        if comment.is_pending:
            return False
        return await self.send_individual(
            recipient_id=comment.author_id,
            actor=actor,
            kind=NotificationKind.COMMENT_LIKE,
            post=post,
            comment_id=comment.id,
            body_source=comment.content,
        )

    async def send_grouped(
        self,
        recipient_id: UserId,
        actor: AuthorProfile,
        kind: NotificationKind,
        post: Post,
        preview_source: str,
        comment_id: CommentId | None = None,
        action: str | None = None,
    ) -> bool:
        """Make one aggregation call; self-actions are skipped."""
        if recipient_id == actor.id:
            logfire.debug(
                "Skipping self notification", kind=kind.value, actor_id=str(actor.id)
            )
            return False

        notification = GroupedNotification(
            recipient_id=recipient_id,
            actor_id=actor.id,
            kind=kind,
            post_id=post.id,
            actor_display_name=actor.username,
            preview_text=self.preview(preview_source),
            deep_link=self.deep_link(post.id, comment_id, action),
            fallback_title=post.title or _FALLBACK_TITLES.get(kind, "New activity"),
            comment_id=comment_id,
        )
        try:
            await self.sink.send_grouped(notification)
        except Exception as e:
            logfire.error(
                "Grouped notification failed",
                kind=kind.value,
                recipient_id=str(recipient_id),
                post_id=str(post.id),
                error=str(e),
            )
            return False

        logfire.info(
            "Grouped notification sent",
            kind=kind.value,
            recipient_id=str(recipient_id),
            post_id=str(post.id),
        )
        return True

    async def send_individual(
        self,
        recipient_id: UserId,
        actor: AuthorProfile,
        kind: NotificationKind,
        post: Post,
        comment_id: CommentId,
        body_source: str,
    ) -> bool:
        """Create one point-to-point notification; self-actions are skipped."""
        if recipient_id == actor.id:
            logfire.debug(
                "Skipping self notification", kind=kind.value, actor_id=str(actor.id)
            )
            return False

        template = _INDIVIDUAL_TITLES.get(kind, "{actor} interacted with your comment")
        notification = IndividualNotification(
            recipient_id=recipient_id,
            actor_id=actor.id,
            kind=kind,
            title=template.format(actor=actor.username),
            body=self.preview(body_source),
            data=NotificationData(
                post_id=post.id,
                deep_link=self.deep_link(post.id, comment_id),
            ),
        )
        try:
            await self.sink.send_individual(notification)
        except Exception as e:
            logfire.error(
                "Individual notification failed",
                kind=kind.value,
                recipient_id=str(recipient_id),
                comment_id=str(comment_id),
                error=str(e),
            )
            return False

        logfire.info(
            "Individual notification sent",
            kind=kind.value,
            recipient_id=str(recipient_id),
            comment_id=str(comment_id),
        )
        return True
