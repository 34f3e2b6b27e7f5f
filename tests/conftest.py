"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from pawtalk.domain.model import AuthorProfile, Comment, Post
from pawtalk.domain.value import CommentId, CommentState, PostId, UserId

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_profile(username: str) -> AuthorProfile:
    """Profile with a fresh id."""
    return AuthorProfile(id=UserId(uuid4()), username=username)


def make_post(owner: AuthorProfile | None = None, title: str | None = "Beach day") -> Post:
    return Post(
        id=PostId(uuid4()),
        owner_id=owner.id if owner else None,
        title=title,
    )


def make_comment(
    post: Post,
    author: AuthorProfile,
    content: str = "Nice!",
    parent: Comment | None = None,
    minutes: int = 0,
    state: CommentState = CommentState.CONFIRMED,
) -> Comment:
    """Comment record ``minutes`` after a fixed base time.

    Replies are attached to ``parent`` as given; flattening is up to the
    code under test.
    """
    return Comment(
        id=CommentId(uuid4()),
        post_id=post.id,
        author_id=author.id,
        author=author,
        content=content,
        parent_id=parent.id if parent else None,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        state=state,
    )
