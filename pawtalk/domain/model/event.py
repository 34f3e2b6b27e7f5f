"""Backing store row shapes crossing the engine boundary."""

from datetime import datetime
from typing import Optional

from pawtalk.domain.model.common import DomainModel
from pawtalk.domain.value import CommentId, PostId, UserId


class CommentEvent(DomainModel):
    """Raw "comment created" row delivered by the push channel.

    Carries no author profile; the merge engine enriches it.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    content: str
    created_at: datetime
    parent_id: Optional[CommentId] = None


class CreatedComment(DomainModel):
    """Acknowledgement returned by the backing store for a create."""

    id: CommentId
    created_at: datetime
