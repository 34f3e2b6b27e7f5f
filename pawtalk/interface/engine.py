"""Engine entry point for views.

    engine = CommentEngine.create()
    async with engine.open_thread(OpenThreadRequest(post=post, viewer=me)) as session:
        await session.submit("Hello!")
    await engine.aclose()

Each open thread gets its own DI request scope, so profile caches and
in-flight bookkeeping are never shared between views.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer

from pawtalk.application.session import CommentThreadSession
from pawtalk.application.usecase.thread import OpenThreadRequest, OpenThreadUseCase
from pawtalk.config import Settings
from pawtalk.util.di.container import create_container
from pawtalk.util.logging import setup_logging
from pawtalk.util.observability import configure_logfire, instrument_httpx


class CommentEngine:
    """Owns the DI container shared by every open thread."""

    def __init__(self, container: AsyncContainer) -> None:
        self.container = container

    @classmethod
    def create(cls, settings: Settings | None = None) -> "CommentEngine":
        """Configure logging and observability, then build the container."""
        settings = settings or Settings()
        # Stdlib records are forwarded to logfire, so configure it first
        configure_logfire(settings)
        setup_logging(settings)
        instrument_httpx()
        return cls(create_container(settings))

    @asynccontextmanager
    async def open_thread(
        self, request: OpenThreadRequest
    ) -> AsyncIterator[CommentThreadSession]:
        """Open a live thread; it is closed when the block exits."""
        async with self.container() as scope:
            use_case = await scope.get(OpenThreadUseCase)
            session = await use_case.execute(request)
            async with session:
                yield session

    async def aclose(self) -> None:
        await self.container.close()
