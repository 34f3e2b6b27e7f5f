"""In-memory comment repository for testing."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.event import CommentEvent, CreatedComment
from pawtalk.domain.repository.comment import CommentRepository
from pawtalk.domain.value import CommentId, PostId, UserId

from .backend import InMemoryBackend


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing.

    Every create is published on the backend's feed once stored.
    """

    def __init__(self, backend: InMemoryBackend, unknown_author: str = "Unknown") -> None:
        self.backend = backend
        self.unknown_author = unknown_author

    async def list_for_post_joined(self, post_id: PostId) -> List[Comment]:
        """Comments for a post with author profiles joined in."""
        comments = []
        for row in await self.list_for_post(post_id):
            author = self.backend.profiles.get(row.author_id) or AuthorProfile(
                id=row.author_id, username=self.unknown_author
            )
            comments.append(
                Comment(
                    id=row.id,
                    post_id=row.post_id,
                    author_id=row.author_id,
                    author=author,
                    content=row.content,
                    parent_id=row.parent_id,
                    created_at=row.created_at,
                    updated_at=self.backend.comment_updated_at.get(row.id),
                )
            )
        return comments

    async def list_for_post(self, post_id: PostId) -> List[CommentEvent]:
        """Plain rows for a post, oldest first."""
        rows = [c for c in self.backend.comments.values() if c.post_id == post_id]
        rows.sort(key=lambda c: c.created_at)
        return rows

    async def create(
        self,
        post_id: PostId,
        author_id: UserId,
        content: str,
        parent_id: Optional[CommentId] = None,
    ) -> CreatedComment:
        """Store a comment and publish it."""
        event = CommentEvent(
            id=CommentId(uuid4()),
            post_id=post_id,
            author_id=author_id,
            content=content,
            created_at=datetime.now(timezone.utc),
            parent_id=parent_id,
        )
        self.backend.comments[event.id] = event
        await self.backend.feed.publish(event)
        return CreatedComment(id=event.id, created_at=event.created_at)

    async def update(self, comment_id: CommentId, content: str) -> datetime:
        """Replace a comment's content."""
        row = self.backend.comments.get(comment_id)
        if row is None:
            raise KeyError(f"Comment {comment_id} not found")
        updated_at = datetime.now(timezone.utc)
        self.backend.comments[comment_id] = row.model_copy(update={"content": content})
        self.backend.comment_updated_at[comment_id] = updated_at
        return updated_at

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment and its likes."""
        self.backend.comments.pop(comment_id, None)
        self.backend.comment_updated_at.pop(comment_id, None)
        self.backend.comment_likes = {
            like for like in self.backend.comment_likes if like[0] != comment_id
        }
