"""REST profile repository."""

from typing import Iterable, Optional

import logfire

from pawtalk.domain.model.comment import AuthorProfile
from pawtalk.domain.repository.profile import ProfileRepository
from pawtalk.domain.value import UserId, Username

from .client import PostgrestClient, in_list
from .comment import profile_from_row

TABLE = "profiles"
COLUMNS = "id,username,avatar_url"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so a handle only matches itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RestProfileRepository(ProfileRepository):
    """Profile repository over the ``profiles`` table."""

    def __init__(self, client: PostgrestClient) -> None:
        self.client = client

    async def get(self, user_id: UserId) -> Optional[AuthorProfile]:
        rows = await self.client.select(
            TABLE, {"select": COLUMNS, "id": f"eq.{user_id}", "limit": 1}
        )
        return profile_from_row(rows[0]) if rows else None

    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UserId, AuthorProfile]:
        ids = sorted({str(user_id) for user_id in user_ids})
        if not ids:
            return {}
        rows = await self.client.select(TABLE, {"select": COLUMNS, "id": in_list(ids)})
        profiles = [profile_from_row(row) for row in rows]
        return {profile.id: profile for profile in profiles}

    async def find_by_username(self, username: Username) -> Optional[AuthorProfile]:
        handle = username.root
        rows = await self.client.select(
            TABLE, {"select": COLUMNS, "username": f"eq.{handle}", "limit": 1}
        )
        if rows:
            return profile_from_row(rows[0])

        rows = await self.client.select(
            TABLE,
            {"select": COLUMNS, "username": f"ilike.{escape_like(handle)}", "limit": 2},
        )
        if len(rows) > 1:
            logfire.info("Ambiguous case-insensitive username", username=handle)
            return None
        return profile_from_row(rows[0]) if rows else None
