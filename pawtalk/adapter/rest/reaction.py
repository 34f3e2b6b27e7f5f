"""REST reaction repository."""

from pawtalk.adapter.error import BackendError
from pawtalk.domain.repository.reaction import ReactionRepository
from pawtalk.domain.value import CommentId, PostId, UserId

from .client import PostgrestClient

COMMENT_LIKES = "comment_likes"
POST_LIKES = "likes"


class RestReactionRepository(ReactionRepository):
    """Likes over the ``comment_likes`` and ``likes`` tables."""

    def __init__(self, client: PostgrestClient) -> None:
        self.client = client

    async def like_comment(self, comment_id: CommentId, user_id: UserId) -> None:
        await self.client.insert(
            COMMENT_LIKES, {"comment_id": str(comment_id), "user_id": str(user_id)}
        )

    async def unlike_comment(self, comment_id: CommentId, user_id: UserId) -> None:
        await self.client.delete(
            COMMENT_LIKES,
            {"comment_id": f"eq.{comment_id}", "user_id": f"eq.{user_id}"},
        )

    async def count_comment_likes(self, comment_id: CommentId) -> int:
        response = await self.client.request(
            "HEAD",
            f"/{COMMENT_LIKES}",
            params={"select": "user_id", "comment_id": f"eq.{comment_id}"},
            headers={"Prefer": "count=exact"},
        )
        # Content-Range: "0-4/5", or "*/0" when empty
        content_range = response.headers.get("content-range", "")
        _, _, total = content_range.partition("/")
        if not total.isdigit():
            raise BackendError(f"Missing like count for comment {comment_id}")
        return int(total)

    async def has_liked_comment(self, comment_id: CommentId, user_id: UserId) -> bool:
        rows = await self.client.select(
            COMMENT_LIKES,
            {
                "select": "user_id",
                "comment_id": f"eq.{comment_id}",
                "user_id": f"eq.{user_id}",
                "limit": 1,
            },
        )
        return bool(rows)

    async def like_post(self, post_id: PostId, user_id: UserId) -> None:
        await self.client.insert(
            POST_LIKES, {"post_id": str(post_id), "user_id": str(user_id)}
        )

    async def unlike_post(self, post_id: PostId, user_id: UserId) -> None:
        await self.client.delete(
            POST_LIKES, {"post_id": f"eq.{post_id}", "user_id": f"eq.{user_id}"}
        )
