"""Notification target resolution for authored comments."""

import logfire

from pawtalk.domain.model.comment import Comment
from pawtalk.domain.model.notification import NotificationIntent
from pawtalk.domain.model.post import Post
from pawtalk.domain.repository import ProfileRepository
from pawtalk.domain.value import MENTION_PATTERN, NotificationKind, UserId, Username

from .base import Service


def extract_mentions(content: str) -> list[Username]:
    """Distinct ``@handle`` tokens in first-seen order.

    Args:
        content: Comment text

    Returns:
        Usernames without the leading ``@``
    """
    seen: set[str] = set()
    handles: list[Username] = []
    for match in MENTION_PATTERN.finditer(content):
        handle = match.group(1)
        if handle in seen or len(handle) > 255:
            continue
        seen.add(handle)
        handles.append(Username(handle))
    return handles


class NotificationTargetResolver(Service):
    """Compute who hears about a confirmed comment, and why.

    Each recipient gets at most one intent per comment, chosen by priority
    reply > post owner (root comments) > mention. The comment's author
    never notifies themselves.
    """

    def __init__(self, profile_repository: ProfileRepository) -> None:
        """Initialize target resolver.

        Args:
            profile_repository: Profile repository for mention lookup
        """
        self.profile_repository = profile_repository

    async def resolve(
        self,
        comment: Comment,
        post: Post,
        reply_target: Comment | None = None,
    ) -> list[NotificationIntent]:
        """Resolve notification intents for a comment.

        Args:
            comment: The confirmed comment
            post: The post it belongs to
            reply_target: The comment the author chose to reply to, if any

        Returns:
            Intents in priority order

        Raises:
            ValueError: If the comment has not been confirmed yet
        """
        if comment.is_pending:
            raise ValueError("Cannot resolve notifications for a pending comment")

        with logfire.span(
            "target_resolver.resolve",
            comment_id=str(comment.id),
            post_id=str(post.id),
            is_reply=reply_target is not None,
        ):
            intents: list[NotificationIntent] = []
            excluded: set[UserId] = set()

            def emit(recipient_id: UserId, kind: NotificationKind) -> None:
                intents.append(
                    NotificationIntent(
                        recipient_id=recipient_id,
                        kind=kind,
                        source_comment_id=comment.id,
                        exclude=frozenset(excluded),
                    )
                )
                excluded.add(recipient_id)

            if reply_target is not None:
                if reply_target.author_id != comment.author_id:
                    emit(reply_target.author_id, NotificationKind.REPLY)
            elif comment.is_root:
                if post.owner_id is not None and post.owner_id != comment.author_id:
                    emit(post.owner_id, NotificationKind.COMMENT)

            for handle in extract_mentions(comment.content):
                profile = await self._lookup(handle)
                if profile is None:
                    continue
                if profile.id == comment.author_id or profile.id in excluded:
                    continue
                emit(profile.id, NotificationKind.MENTION)

            logfire.info(
                "Notification targets resolved",
                comment_id=str(comment.id),
                count=len(intents),
                kinds=[intent.kind.value for intent in intents],
            )
            return intents

    async def _lookup(self, handle: Username):
        # Unknown handles, and failed lookups, are not errors
        try:
            return await self.profile_repository.find_by_username(handle)
        except Exception as e:
            logfire.warn(
                "Mention lookup failed", handle=handle.root, error=str(e)
            )
            return None
