"""Application layer DI providers."""

from dishka import Scope, provide

from pawtalk.application.usecase.thread import OpenThreadUseCase
from pawtalk.config import EngineSettings
from pawtalk.domain.service import (
    CommentMutationService,
    ReactionService,
    RealtimeMergeService,
    ThreadLoaderService,
)
from pawtalk.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_open_thread_use_case(
        self,
        loader: ThreadLoaderService,
        realtime: RealtimeMergeService,
        mutation_service: CommentMutationService,
        reaction_service: ReactionService,
        settings: EngineSettings,
    ) -> OpenThreadUseCase:
        """Provide open thread use case."""
        return OpenThreadUseCase(
            loader=loader,
            realtime=realtime,
            mutation_service=mutation_service,
            reaction_service=reaction_service,
            settings=settings,
        )
