"""Realtime merge of remotely created comments."""

from collections.abc import Callable

import logfire

from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.event import CommentEvent
from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.repository import CommentFeed, ProfileRepository, Subscription
from pawtalk.domain.value import CommentState, UserId

from .base import Service

MergeHook = Callable[[CommentThread, Comment], None]


class ProfileCache(Service):
    """Session-wide author profile cache.

    Entries are overwritten idempotently, so concurrent misses for the same
    author are harmless. Placeholders for failed lookups are not cached.
    """

    def __init__(
        self, profile_repository: ProfileRepository, unknown_author: str = "Unknown"
    ) -> None:
        """Initialize profile cache.

        Args:
            profile_repository: Profile repository for cache misses
            unknown_author: Display name used when a lookup fails
        """
        self.profile_repository = profile_repository
        self.unknown_author = unknown_author
        self._profiles: dict[UserId, AuthorProfile] = {}

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._profiles

    def prime(self, profile: AuthorProfile) -> None:
        """Add a profile that was obtained elsewhere (e.g. a joined load)."""
        self._profiles[profile.id] = profile

    def placeholder(self, user_id: UserId) -> AuthorProfile:
        return AuthorProfile(id=user_id, username=self.unknown_author, avatar_url=None)

    async def resolve(self, user_id: UserId) -> AuthorProfile:
        """Get a profile, falling back to a placeholder when it can't be found.

        Args:
            user_id: The author's user ID

        Returns:
            The cached, fetched or placeholder profile
        """
        cached = self._profiles.get(user_id)
        if cached is not None:
            return cached

        try:
            profile = await self.profile_repository.get(user_id)
        except Exception as e:
            logfire.warn(
                "Profile lookup failed, using placeholder",
                user_id=str(user_id),
                error=str(e),
            )
            return self.placeholder(user_id)

        if profile is None:
            logfire.warn("Profile not found, using placeholder", user_id=str(user_id))
            return self.placeholder(user_id)

        self._profiles[user_id] = profile
        return profile


class RealtimeMergeService(Service):
    """Fold pushed "comment created" events into a thread exactly once."""

    def __init__(self, feed: CommentFeed, profile_cache: ProfileCache) -> None:
        """Initialize realtime merge service.

        Args:
            feed: Push channel of created comments
            profile_cache: Author profile cache for enrichment
        """
        self.feed = feed
        self.profile_cache = profile_cache

    async def subscribe(
        self, thread: CommentThread, on_merged: MergeHook | None = None
    ) -> Subscription:
        """Start merging pushed comments into a thread.

        Args:
            thread: The thread to merge into
            on_merged: Side effect run after each merged comment

        Returns:
            Subscription handle; close it when the view goes away
        """

        async def _handler(event: CommentEvent) -> None:
            await self.handle_event(thread, event, on_merged)

        subscription = await self.feed.subscribe(thread.post.id, _handler)
        logfire.info("Realtime subscription opened", post_id=str(thread.post.id))
        return subscription

    async def handle_event(
        self,
        thread: CommentThread,
        event: CommentEvent,
        on_merged: MergeHook | None = None,
    ) -> Comment | None:
        """Merge one pushed event.

        Steps:
        1. Drop events for other posts and self-echoes
        2. Resolve the author profile (placeholder on failure)
        3. Upsert the record, keeping any reaction summary already held
        4. Expand the thread root for replies
        5. Run the view side effect

        Args:
            thread: The thread to merge into
            event: The pushed row
            on_merged: Side effect run after the merge

        Returns:
            The merged comment, or None if the event was dropped
        """
        if not thread.is_live or event.post_id != thread.post.id:
            return None

        if thread.viewer_id is not None and event.author_id == thread.viewer_id:
            logfire.debug("Dropping self echo", comment_id=str(event.id))
            return None

        with logfire.span(
            "realtime_merge.handle_event",
            comment_id=str(event.id),
            post_id=str(event.post_id),
            author_id=str(event.author_id),
        ):
            author = await self.profile_cache.resolve(event.author_id)

            # The view may have been torn down while the profile was loading
            if not thread.is_live:
                return None

            parent_id = event.parent_id
            if parent_id is not None:
                parent = thread.store.get(parent_id)
                if parent is not None and parent.parent_id is not None:
                    parent_id = parent.parent_id

            existing = thread.store.get(event.id)
            merged = Comment(
                id=event.id,
                post_id=event.post_id,
                author_id=event.author_id,
                author=author,
                content=event.content,
                parent_id=parent_id,
                created_at=event.created_at,
                updated_at=existing.updated_at if existing else None,
                like_count=existing.like_count if existing else 0,
                viewer_has_liked=existing.viewer_has_liked if existing else False,
                state=CommentState.CONFIRMED,
            )
            thread.store.upsert(merged)

            if parent_id is not None:
                thread.expansion.expand(parent_id)
            thread.changed()

            logfire.info(
                "Remote comment merged",
                comment_id=str(merged.id),
                is_reply=parent_id is not None,
                replaced=existing is not None,
            )

            if on_merged is not None:
                try:
                    on_merged(thread, merged)
                except Exception as e:
                    logfire.error(
                        "Merge side effect failed",
                        comment_id=str(merged.id),
                        error=str(e),
                    )
            return merged
