"""Initial thread load."""

import logfire

from pawtalk.domain.model.comment import Comment
from pawtalk.domain.model.event import CommentEvent
from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.repository import CommentRepository, ProfileRepository
from pawtalk.domain.value import CommentId, CommentState

from .base import Service
from .realtime_service import ProfileCache


def flatten_replies(comments: list[Comment]) -> list[Comment]:
    """Re-point replies-to-replies at their thread root.

    Rows written before replies were flattened may point at another reply.
    Parents missing from the list are left untouched.
    """
    parents: dict[CommentId, CommentId | None] = {c.id: c.parent_id for c in comments}

    def root_of(comment_id: CommentId) -> CommentId:
        seen: set[CommentId] = set()
        current = comment_id
        while parents.get(current) is not None and current not in seen:
            seen.add(current)
            current = parents[current]
        return current

    flattened: list[Comment] = []
    for comment in comments:
        if comment.parent_id is not None and comment.parent_id in parents:
            root_id = root_of(comment.parent_id)
            if root_id != comment.parent_id:
                comment = comment.model_copy(update={"parent_id": root_id})
        flattened.append(comment)
    return flattened


class ThreadLoaderService(Service):
    """Fill a thread from the backing store.

    Reads the joined comments+profiles query first. If that fails, reads
    the flat comment list and a separate batch of profiles and merges them.
    If both fail the thread is left empty; a read failure is never raised.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        profile_repository: ProfileRepository,
        profile_cache: ProfileCache,
    ) -> None:
        """Initialize thread loader.

        Args:
            comment_repository: Comment repository
            profile_repository: Profile repository for the fallback path
            profile_cache: Cache primed with every loaded author
        """
        self.comment_repository = comment_repository
        self.profile_repository = profile_repository
        self.profile_cache = profile_cache

    async def load(self, thread: CommentThread) -> list[Comment]:
        """Load all comments for the thread's post.

        Args:
            thread: The thread to fill

        Returns:
            The loaded comments, oldest first
        """
        post_id = thread.post.id
        with logfire.span("thread_loader.load", post_id=str(post_id)):
            try:
                comments = await self.comment_repository.list_for_post_joined(post_id)
            except Exception as e:
                logfire.warn(
                    "Joined comment query failed, using fallback",
                    post_id=str(post_id),
                    error=str(e),
                )
                comments = await self._load_fallback(thread)

            comments = flatten_replies(sorted(comments, key=lambda c: c.created_at))
            for comment in comments:
                if comment.author.username != self.profile_cache.unknown_author:
                    self.profile_cache.prime(comment.author)

            if thread.is_live:
                # Keep anything merged or submitted while the read was in flight
                in_flight = thread.store.all()
                thread.store.clear()
                for comment in comments:
                    thread.store.upsert(comment)
                for comment in in_flight:
                    if comment.id not in thread.store:
                        thread.store.upsert(comment)
                thread.loaded = True
                thread.changed()

            logfire.info(
                "Thread loaded", post_id=str(post_id), count=len(comments)
            )
            return comments

    async def _load_fallback(self, thread: CommentThread) -> list[Comment]:
        post_id = thread.post.id
        try:
            rows = await self.comment_repository.list_for_post(post_id)
        except Exception as e:
            logfire.error(
                "Comment fallback query failed, showing empty thread",
                post_id=str(post_id),
                error=str(e),
            )
            return []

        author_ids = list(dict.fromkeys(row.author_id for row in rows))
        try:
            profiles = await self.profile_repository.get_many(author_ids)
        except Exception as e:
            logfire.warn(
                "Batch profile lookup failed, using placeholders",
                post_id=str(post_id),
                error=str(e),
            )
            profiles = {}

        return [self._from_row(row, profiles) for row in rows]

    def _from_row(self, row: CommentEvent, profiles: dict) -> Comment:
        author = profiles.get(row.author_id) or self.profile_cache.placeholder(
            row.author_id
        )
        return Comment(
            id=row.id,
            post_id=row.post_id,
            author_id=row.author_id,
            author=author,
            content=row.content,
            parent_id=row.parent_id,
            created_at=row.created_at,
            state=CommentState.CONFIRMED,
        )
