"""Domain layer DI providers."""

from dishka import Scope, provide

from pawtalk.config import EngineSettings
from pawtalk.domain.repository import (
    CommentFeed,
    CommentRepository,
    NotificationSink,
    ProfileRepository,
    ReactionRepository,
)
from pawtalk.domain.service import (
    CommentMutationService,
    NotificationDispatcher,
    NotificationTargetResolver,
    ProfileCache,
    ReactionService,
    RealtimeMergeService,
    ThreadLoaderService,
)
from pawtalk.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped: one request scope per open thread
    view, so each view gets its own profile cache and in-flight bookkeeping.
    """

    scope = Scope.REQUEST

    @provide
    def get_profile_cache(
        self, profile_repository: ProfileRepository, settings: EngineSettings
    ) -> ProfileCache:
        """Provide the per-view author profile cache."""
        return ProfileCache(
            profile_repository=profile_repository,
            unknown_author=settings.unknown_author,
        )

    @provide
    def get_target_resolver(
        self, profile_repository: ProfileRepository
    ) -> NotificationTargetResolver:
        """Provide reply/mention target resolver."""
        return NotificationTargetResolver(profile_repository=profile_repository)

    @provide
    def get_dispatcher(
        self, sink: NotificationSink, settings: EngineSettings
    ) -> NotificationDispatcher:
        """Provide notification dispatcher."""
        return NotificationDispatcher(sink=sink, settings=settings)

    @provide
    def get_mutation_service(
        self,
        comment_repository: CommentRepository,
        target_resolver: NotificationTargetResolver,
        dispatcher: NotificationDispatcher,
    ) -> CommentMutationService:
        """Provide comment mutation service."""
        return CommentMutationService(
            comment_repository=comment_repository,
            target_resolver=target_resolver,
            dispatcher=dispatcher,
        )

    @provide
    def get_realtime_service(
        self, feed: CommentFeed, profile_cache: ProfileCache
    ) -> RealtimeMergeService:
        """Provide realtime merge service."""
        return RealtimeMergeService(feed=feed, profile_cache=profile_cache)

    @provide
    def get_thread_loader(
        self,
        comment_repository: CommentRepository,
        profile_repository: ProfileRepository,
        profile_cache: ProfileCache,
    ) -> ThreadLoaderService:
        """Provide thread loader."""
        return ThreadLoaderService(
            comment_repository=comment_repository,
            profile_repository=profile_repository,
            profile_cache=profile_cache,
        )

    @provide
    def get_reaction_service(
        self,
        reaction_repository: ReactionRepository,
        dispatcher: NotificationDispatcher,
    ) -> ReactionService:
        """Provide reaction service."""
        return ReactionService(
            reaction_repository=reaction_repository, dispatcher=dispatcher
        )
