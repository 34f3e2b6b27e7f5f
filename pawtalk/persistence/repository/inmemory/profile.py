"""In-memory profile repository for testing."""

from typing import Iterable, Optional

from pawtalk.domain.model.comment import AuthorProfile
from pawtalk.domain.repository.profile import ProfileRepository
from pawtalk.domain.value import UserId, Username

from .backend import InMemoryBackend


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing."""

    def __init__(self, backend: InMemoryBackend) -> None:
        self.backend = backend

    async def get(self, user_id: UserId) -> Optional[AuthorProfile]:
        """Find a profile by user ID."""
        return self.backend.profiles.get(user_id)

    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UserId, AuthorProfile]:
        """Batch lookup of profiles."""
        return {
            user_id: self.backend.profiles[user_id]
            for user_id in set(user_ids)
            if user_id in self.backend.profiles
        }

    async def find_by_username(self, username: Username) -> Optional[AuthorProfile]:
        """Exact match first, then a unique case-insensitive match."""
        handle = username.root
        for profile in self.backend.profiles.values():
            if profile.username == handle:
                return profile

        matches = [
            profile
            for profile in self.backend.profiles.values()
            if profile.username.casefold() == handle.casefold()
        ]
        return matches[0] if len(matches) == 1 else None
