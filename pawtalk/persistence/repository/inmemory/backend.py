"""Shared in-memory backing store.

Stands in for the relational backend in tests and local runs. Several
repositories (and several threads) share one instance, so a comment
created through one thread is visible to every other thread on the
same post.
"""

from datetime import datetime

from pawtalk.domain.model.comment import AuthorProfile
from pawtalk.domain.model.event import CommentEvent
from pawtalk.domain.value import CommentId, PostId, UserId

from .feed import InMemoryCommentFeed


class InMemoryBackend:
    """Tables of the in-memory backing store."""

    def __init__(self, feed: InMemoryCommentFeed | None = None) -> None:
        self.comments: dict[CommentId, CommentEvent] = {}
        self.comment_updated_at: dict[CommentId, datetime] = {}
        self.profiles: dict[UserId, AuthorProfile] = {}
        self.comment_likes: set[tuple[CommentId, UserId]] = set()
        self.post_likes: set[tuple[PostId, UserId]] = set()
        self.feed = feed or InMemoryCommentFeed()

    def add_profile(self, profile: AuthorProfile) -> AuthorProfile:
        self.profiles[profile.id] = profile
        return profile

    def add_comment(self, event: CommentEvent) -> CommentEvent:
        """Insert a row directly, without publishing it."""
        self.comments[event.id] = event
        return event
