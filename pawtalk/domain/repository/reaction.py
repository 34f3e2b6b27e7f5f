"""Reaction repository interface."""

from abc import ABC, abstractmethod

from pawtalk.domain.value import CommentId, PostId, UserId


class ReactionRepository(ABC):
    """Likes on comments and posts."""

    @abstractmethod
    async def like_comment(self, comment_id: CommentId, user_id: UserId) -> None:
        pass

    @abstractmethod
    async def unlike_comment(self, comment_id: CommentId, user_id: UserId) -> None:
        pass

    @abstractmethod
    async def count_comment_likes(self, comment_id: CommentId) -> int:
        pass

    @abstractmethod
    async def has_liked_comment(self, comment_id: CommentId, user_id: UserId) -> bool:
        pass

    @abstractmethod
    async def like_post(self, post_id: PostId, user_id: UserId) -> None:
        pass

    @abstractmethod
    async def unlike_post(self, post_id: PostId, user_id: UserId) -> None:
        pass
