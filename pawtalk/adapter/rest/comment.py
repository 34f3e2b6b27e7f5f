"""REST comment repository."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

import logfire

from pawtalk.adapter.error import BackendError
from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.event import CommentEvent, CreatedComment
from pawtalk.domain.repository.comment import CommentRepository
from pawtalk.domain.value import CommentId, PostId, UserId

from .client import PostgrestClient

TABLE = "comments"
COLUMNS = "id,post_id,user_id,content,parent_id,created_at,updated_at"

# Tried in order: the named foreign key first, then the plain relation
JOINED_SELECTS = (
    "*,author:profiles!comments_user_profile_fkey(id,username,avatar_url)",
    "*,author:profiles(id,username,avatar_url)",
)


def parse_timestamp(value: str) -> datetime:
    # PostgREST emits ISO 8601; older Pythons reject a trailing "Z"
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def event_from_row(row: dict) -> CommentEvent:
    """Map a plain ``comments`` row to an event."""
    return CommentEvent(
        id=CommentId(UUID(row["id"])),
        post_id=PostId(UUID(row["post_id"])),
        author_id=UserId(UUID(row["user_id"])),
        content=row.get("content") or "",
        created_at=parse_timestamp(row["created_at"]),
        parent_id=CommentId(UUID(row["parent_id"])) if row.get("parent_id") else None,
    )


def profile_from_row(row: dict) -> AuthorProfile:
    return AuthorProfile(
        id=UserId(UUID(row["id"])),
        username=row.get("username") or "",
        avatar_url=row.get("avatar_url"),
    )


class RestCommentRepository(CommentRepository):
    """Comment repository over the ``comments`` table."""

    def __init__(self, client: PostgrestClient, unknown_author: str = "Unknown") -> None:
        self.client = client
        self.unknown_author = unknown_author

    async def list_for_post_joined(self, post_id: PostId) -> List[Comment]:
        errors: List[BackendError] = []
        for select in JOINED_SELECTS:
            try:
                rows = await self.client.select(
                    TABLE,
                    {
                        "select": select,
                        "post_id": f"eq.{post_id}",
                        "order": "created_at.asc",
                    },
                )
            except BackendError as e:
                logfire.warn("Joined comment select failed", select=select, error=str(e))
                errors.append(e)
                continue
            return [self._from_joined_row(row) for row in rows]

        raise BackendError(
            f"Joined comment select failed: {errors[-1]}",
            status_code=errors[-1].status_code,
        ) from errors[-1]

    async def list_for_post(self, post_id: PostId) -> List[CommentEvent]:
        rows = await self.client.select(
            TABLE,
            {"select": COLUMNS, "post_id": f"eq.{post_id}", "order": "created_at.asc"},
        )
        return [event_from_row(row) for row in rows]

    async def list_created_since(
        self, post_id: PostId, after: Optional[datetime]
    ) -> List[CommentEvent]:
        """Rows created at or after ``after`` (all rows when None)."""
        params = {"select": COLUMNS, "post_id": f"eq.{post_id}", "order": "created_at.asc"}
        if after is not None:
            params["created_at"] = f"gte.{after.isoformat()}"
        rows = await self.client.select(TABLE, params)
        return [event_from_row(row) for row in rows]

    async def create(
        self,
        post_id: PostId,
        author_id: UserId,
        content: str,
        parent_id: Optional[CommentId] = None,
    ) -> CreatedComment:
        row = await self.client.insert(
            TABLE,
            {
                "post_id": str(post_id),
                "user_id": str(author_id),
                "content": content,
                "parent_id": str(parent_id) if parent_id else None,
            },
            returning=True,
        )
        return CreatedComment(
            id=CommentId(UUID(row["id"])),
            created_at=parse_timestamp(row["created_at"]),
        )

    async def update(self, comment_id: CommentId, content: str) -> datetime:
        edited_at = datetime.now(timezone.utc)
        row = await self.client.update(
            TABLE,
            {"id": f"eq.{comment_id}", "select": "id,updated_at"},
            {"content": content, "updated_at": edited_at.isoformat()},
            returning=True,
        )
        updated_at = row.get("updated_at")
        return parse_timestamp(updated_at) if updated_at else edited_at

    async def delete(self, comment_id: CommentId) -> None:
        await self.client.delete(TABLE, {"id": f"eq.{comment_id}"})

    def _from_joined_row(self, row: dict) -> Comment:
        event = event_from_row(row)
        author_row = row.get("author")
        author = (
            profile_from_row(author_row)
            if author_row
            else AuthorProfile(id=event.author_id, username=self.unknown_author)
        )
        updated_at = row.get("updated_at")
        return Comment(
            id=event.id,
            post_id=event.post_id,
            author_id=event.author_id,
            author=author,
            content=event.content,
            parent_id=event.parent_id,
            created_at=event.created_at,
            updated_at=parse_timestamp(updated_at) if updated_at else None,
        )
