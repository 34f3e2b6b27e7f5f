"""Profile repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from pawtalk.domain.model.comment import AuthorProfile
from pawtalk.domain.value import UserId, Username


class ProfileRepository(ABC):
    """Read-only access to user display profiles."""

    @abstractmethod
    async def get(self, user_id: UserId) -> Optional[AuthorProfile]:
        """Find a profile by user ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_many(
        self, user_ids: Iterable[UserId]
    ) -> dict[UserId, AuthorProfile]:
        """Batch lookup of profiles.

        Args:
            user_ids: Distinct user IDs

        Returns:
            Profiles keyed by user ID; unknown IDs are absent
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: Username) -> Optional[AuthorProfile]:
        """Find a profile by username.

        An exact match wins. Otherwise a case-insensitive match is used if
        exactly one profile has it.

        Args:
            username: The username as typed in a mention

        Returns:
            The profile if found, None otherwise
        """
        pass
