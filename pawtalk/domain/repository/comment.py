"""Comment repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from pawtalk.domain.model.comment import Comment
from pawtalk.domain.model.event import CommentEvent, CreatedComment
from pawtalk.domain.value import CommentId, PostId, UserId


class CommentRepository(ABC):
    """Repository for comments held by the backing store.

    Implementations live in the adapter and persistence layers.
    """

    @abstractmethod
    async def list_for_post_joined(self, post_id: PostId) -> List[Comment]:
        """Fetch all comments for a post joined with their author profiles.

        Args:
            post_id: The post ID

        Returns:
            Comments ordered by creation time ascending
        """
        pass

    @abstractmethod
    async def list_for_post(self, post_id: PostId) -> List[CommentEvent]:
        """Fetch all comments for a post without author profiles.

        Used when the joined query fails; profiles are then looked up
        separately and merged by the caller.

        Args:
            post_id: The post ID

        Returns:
            Raw comment rows ordered by creation time ascending
        """
        pass

    @abstractmethod
    async def create(
        self,
        post_id: PostId,
        author_id: UserId,
        content: str,
        parent_id: Optional[CommentId] = None,
    ) -> CreatedComment:
        """Create a comment.

        Args:
            post_id: The post ID
            author_id: The author's user ID
            content: Comment text
            parent_id: Thread root for replies, None for root comments

        Returns:
            The durable id and creation timestamp
        """
        pass

    @abstractmethod
    async def update(self, comment_id: CommentId, content: str) -> datetime:
        """Update a comment's text.

        Args:
            comment_id: The comment ID
            content: New text

        Returns:
            The new updated_at timestamp
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment (hard delete).

        Args:
            comment_id: The comment ID
        """
        pass
