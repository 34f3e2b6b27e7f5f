"""Backing store infrastructure providers."""

from collections.abc import AsyncIterator

import httpx
import logfire
from dishka import Scope, provide

from pawtalk.adapter.rest import (
    PostgrestClient,
    RestCommentRepository,
    RestNotificationSink,
    RestProfileRepository,
    RestReactionRepository,
    create_http_client,
)
from pawtalk.config import Settings
from pawtalk.domain.repository import (
    CommentRepository,
    NotificationSink,
    ProfileRepository,
    ReactionRepository,
)
from pawtalk.util.di.base import ProviderBase
from pawtalk.util.error import ConfigurationError


class BackendProvider(ProviderBase):
    """Backing store component base."""

    __mock_component__ = "backend"


class ProdBackendProvider(BackendProvider):
    """Production backend provider using the PostgREST API."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_http_client(self, settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
        """Provide the shared HTTP client, closed with the container.

        Raises:
            ConfigurationError: If the API key is left at its default in production
        """
        if (
            settings.environment == "production"
            and settings.backend.api_key == "CHANGE_ME_IN_PRODUCTION"
        ):
            raise ConfigurationError(
                "BACKEND__API_KEY", "the default key cannot be used in production"
            )

        client = create_http_client(settings.backend)
        try:
            yield client
        finally:
            await client.aclose()
            logfire.info("Backend HTTP client closed")

    @provide(scope=Scope.APP)
    def get_postgrest_client(self, http: httpx.AsyncClient) -> PostgrestClient:
        return PostgrestClient(http)

    @provide(scope=Scope.APP)
    def get_rest_comment_repository(
        self, client: PostgrestClient, settings: Settings
    ) -> RestCommentRepository:
        return RestCommentRepository(client, unknown_author=settings.engine.unknown_author)

    @provide(scope=Scope.APP)
    def get_comment_repository(
        self, repository: RestCommentRepository
    ) -> CommentRepository:
        """Provide Comment repository."""
        return repository

    @provide(scope=Scope.APP)
    def get_profile_repository(self, client: PostgrestClient) -> ProfileRepository:
        """Provide Profile repository."""
        return RestProfileRepository(client)

    @provide(scope=Scope.APP)
    def get_reaction_repository(self, client: PostgrestClient) -> ReactionRepository:
        """Provide Reaction repository."""
        return RestReactionRepository(client)

    @provide(scope=Scope.APP)
    def get_notification_sink(self, client: PostgrestClient) -> NotificationSink:
        """Provide notification sink."""
        return RestNotificationSink(client)
