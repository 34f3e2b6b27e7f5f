"""Comment and post likes."""

import logfire

from pawtalk.domain.error import (
    InvalidEditOperationError,
    NotFoundError,
    ReactionWriteError,
)
from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.post import Post
from pawtalk.domain.model.reaction import LikeSummary
from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.repository import ReactionRepository
from pawtalk.domain.value import CommentId, UserId

from .base import Service
from .notification_dispatcher import NotificationDispatcher


class ReactionService(Service):
    """Optimistic like toggles with rollback on failure."""

    def __init__(
        self,
        reaction_repository: ReactionRepository,
        dispatcher: NotificationDispatcher,
    ) -> None:
        """Initialize reaction service.

        Args:
            reaction_repository: Reaction repository
            dispatcher: Notification dispatcher for like notifications
        """
        self.reaction_repository = reaction_repository
        self.dispatcher = dispatcher
        self._in_flight: set[CommentId] = set()

    async def toggle_comment_like(
        self,
        thread: CommentThread,
        comment_id: CommentId,
        actor: AuthorProfile,
    ) -> Comment:
        """Like or unlike a comment.

        A toggle already in flight for the same comment makes this a no-op.

        Args:
            thread: The thread holding the comment
            comment_id: The comment ID
            actor: The current user's profile

        Returns:
            The comment with its updated reaction summary

        Raises:
            NotFoundError: If the comment is not in the thread
            InvalidEditOperationError: If the comment is still pending
            ReactionWriteError: If the backing store rejected the change
        """
        current = thread.store.get(comment_id)
        if current is None:
            raise NotFoundError("Comment", str(comment_id))
        if current.is_pending:
            raise InvalidEditOperationError(
                "Cannot like a comment that is still being posted"
            )
        if comment_id in self._in_flight:
            return current

        before = LikeSummary(
            count=current.like_count, viewer_has_liked=current.viewer_has_liked
        )
        after = before.toggled()

        with logfire.span(
            "reaction.toggle_comment_like",
            comment_id=str(comment_id),
            user_id=str(actor.id),
            liking=after.viewer_has_liked,
        ):
            self._in_flight.add(comment_id)
            thread.store.upsert(self._with_summary(current, after))
            thread.changed()
            try:
                if after.viewer_has_liked:
                    await self.reaction_repository.like_comment(comment_id, actor.id)
                else:
                    await self.reaction_repository.unlike_comment(comment_id, actor.id)
            except Exception as e:
                logfire.warn(
                    "Comment like failed, rolling back",
                    comment_id=str(comment_id),
                    error=str(e),
                )
                latest = thread.store.get(comment_id)
                if thread.is_live and latest is not None:
                    thread.store.upsert(self._with_summary(latest, before))
                    thread.changed()
                raise ReactionWriteError("comment", str(comment_id), str(e)) from e
            finally:
                self._in_flight.discard(comment_id)

            updated = thread.store.get(comment_id) or self._with_summary(current, after)
            if after.viewer_has_liked:
                await self.dispatcher.notify_comment_like(updated, thread.post, actor)
            return updated

    async def refresh_comment_reactions(
        self, thread: CommentThread, viewer_id: UserId | None
    ) -> None:
        """Reload like counts for every confirmed comment in the thread.

        Failures leave the affected comment's summary as it was.
        """
        with logfire.span(
            "reaction.refresh_comment_reactions", post_id=str(thread.post.id)
        ):
            for comment in thread.store.all():
                if comment.is_pending:
                    continue
                try:
                    count = await self.reaction_repository.count_comment_likes(
                        comment.id
                    )
                    liked = (
                        await self.reaction_repository.has_liked_comment(
                            comment.id, viewer_id
                        )
                        if viewer_id is not None
                        else False
                    )
                except Exception as e:
                    logfire.warn(
                        "Comment like lookup failed",
                        comment_id=str(comment.id),
                        error=str(e),
                    )
                    continue

                latest = thread.store.get(comment.id)
                if not thread.is_live or latest is None:
                    continue
                thread.store.upsert(
                    self._with_summary(
                        latest, LikeSummary(count=count, viewer_has_liked=liked)
                    )
                )
            thread.changed()

    async def toggle_post_like(
        self, post: Post, actor: AuthorProfile, current: LikeSummary
    ) -> LikeSummary:
        """Like or unlike a post.

        The caller shows the returned summary right away and keeps
        ``current`` if this raises.

        Raises:
            ReactionWriteError: If the backing store rejected the change
        """
        after = current.toggled()
        with logfire.span(
            "reaction.toggle_post_like",
            post_id=str(post.id),
            user_id=str(actor.id),
            liking=after.viewer_has_liked,
        ):
            try:
                if after.viewer_has_liked:
                    await self.reaction_repository.like_post(post.id, actor.id)
                else:
                    await self.reaction_repository.unlike_post(post.id, actor.id)
            except Exception as e:
                logfire.warn(
                    "Post like failed", post_id=str(post.id), error=str(e)
                )
                raise ReactionWriteError("post", str(post.id), str(e)) from e

            if after.viewer_has_liked:
                await self.dispatcher.notify_post_like(post, actor)
            return after

    @staticmethod
    def _with_summary(comment: Comment, summary: LikeSummary) -> Comment:
        return comment.model_copy(
            update={
                "like_count": summary.count,
                "viewer_has_liked": summary.viewer_has_liked,
            }
        )
