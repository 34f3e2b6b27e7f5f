"""Realtime infrastructure providers."""

from dishka import Scope, provide

from pawtalk.adapter.rest import PollingCommentFeed, RestCommentRepository
from pawtalk.config import EngineSettings
from pawtalk.domain.repository import CommentFeed
from pawtalk.util.di.base import ProviderBase


class RealtimeProvider(ProviderBase):
    """Realtime component base."""

    __mock_component__ = "realtime"
    # Polls through the REST comment repository
    __depends_on__ = frozenset({"backend"})


class ProdRealtimeProvider(RealtimeProvider):
    """Production realtime provider polling the backing store."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_comment_feed(
        self, repository: RestCommentRepository, settings: EngineSettings
    ) -> CommentFeed:
        """Provide the comment feed."""
        return PollingCommentFeed(repository, interval=settings.poll_interval_seconds)
