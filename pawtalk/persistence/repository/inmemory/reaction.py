"""In-memory reaction repository for testing."""

from pawtalk.domain.repository.reaction import ReactionRepository
from pawtalk.domain.value import CommentId, PostId, UserId

from .backend import InMemoryBackend


class InMemoryReactionRepository(ReactionRepository):
    """In-memory implementation of ReactionRepository for testing."""

    def __init__(self, backend: InMemoryBackend) -> None:
        self.backend = backend

    async def like_comment(self, comment_id: CommentId, user_id: UserId) -> None:
        self.backend.comment_likes.add((comment_id, user_id))

    async def unlike_comment(self, comment_id: CommentId, user_id: UserId) -> None:
        self.backend.comment_likes.discard((comment_id, user_id))

    async def count_comment_likes(self, comment_id: CommentId) -> int:
        return sum(1 for like in self.backend.comment_likes if like[0] == comment_id)

    async def has_liked_comment(self, comment_id: CommentId, user_id: UserId) -> bool:
        return (comment_id, user_id) in self.backend.comment_likes

    async def like_post(self, post_id: PostId, user_id: UserId) -> None:
        self.backend.post_likes.add((post_id, user_id))

    async def unlike_post(self, post_id: PostId, user_id: UserId) -> None:
        self.backend.post_likes.discard((post_id, user_id))
