"""Comment entity.

Comments form two-level threads on a post: root comments and their
replies. A reply to a reply is attached to the thread root, so depth
never exceeds two.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from pawtalk.domain.model.common import DomainModel, utc_now
from pawtalk.domain.value import CommentId, CommentState, PostId, UserId


class AuthorProfile(DomainModel):
    """Denormalized author details shown next to a comment.

    Captured when the comment is loaded or merged and may be stale.
    """

    id: UserId
    username: str
    avatar_url: Optional[str] = None


class Comment(DomainModel):
    """Comment entity.

    A record is PENDING while the backing store has not acknowledged it;
    its id is then a locally generated placeholder. Once acknowledged the
    record is CONFIRMED and carries the durable id.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    author: AuthorProfile
    content: str
    parent_id: Optional[CommentId] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
    like_count: int = Field(default=0, ge=0)
    viewer_has_liked: bool = False
    state: CommentState = CommentState.CONFIRMED

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_pending(self) -> bool:
        return self.state is CommentState.PENDING

    @property
    def is_edited(self) -> bool:
        """True when the comment was updated after creation."""
        return self.updated_at is not None and self.updated_at != self.created_at

    @property
    def root_id(self) -> CommentId:
        """Id of the thread root this comment belongs to."""
        return self.parent_id if self.parent_id is not None else self.id
