"""Open comment thread use case."""

import logfire
from pydantic import BaseModel, ConfigDict, Field

from pawtalk.application.session import CommentThreadSession, ThreadViewHooks
from pawtalk.config import EngineSettings
from pawtalk.domain.model.comment import AuthorProfile
from pawtalk.domain.model.post import Post
from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.service import (
    CommentMutationService,
    HighlightController,
    ReactionService,
    RealtimeMergeService,
    ThreadLoaderService,
)
from pawtalk.domain.value import DeepLink


class OpenThreadRequest(BaseModel):
    """Open thread request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    post: Post
    viewer: AuthorProfile | None = None  # None for signed-out readers
    deep_link: str | None = None  # e.g. "/event/<post_id>?comment_id=<id>"
    hooks: ThreadViewHooks = Field(default_factory=ThreadViewHooks)


class OpenThreadUseCase:
    """Use case for opening a live comment thread for one view."""

    def __init__(
        self,
        loader: ThreadLoaderService,
        realtime: RealtimeMergeService,
        mutation_service: CommentMutationService,
        reaction_service: ReactionService,
        settings: EngineSettings,
    ) -> None:
        """Initialize open thread use case.

        Args:
            loader: Initial thread loader
            realtime: Realtime merge service
            mutation_service: Comment mutation service
            reaction_service: Reaction service
            settings: Engine settings
        """
        self.loader = loader
        self.realtime = realtime
        self.mutation_service = mutation_service
        self.reaction_service = reaction_service
        self.settings = settings

    async def execute(self, request: OpenThreadRequest) -> CommentThreadSession:
        """Execute open thread flow.

        Steps:
        1. Subscribe to pushed comments (so nothing created during the
           initial read is missed)
        2. Load the thread and the viewer's reaction summaries
        3. Locate the deep-link target, if any

        Args:
            request: Open thread request

        Returns:
            A live session; close it when the view goes away
        """
        viewer_id = request.viewer.id if request.viewer else None
        thread = CommentThread(request.post, viewer_id, request.hooks.on_change)
        highlighter = HighlightController(
            dwell_seconds=self.settings.highlight_dwell_seconds,
            reveal=request.hooks.reveal,
            clear=request.hooks.clear_highlight,
            pulse_like=request.hooks.pulse_like,
        )
        session = CommentThreadSession(
            thread=thread,
            viewer=request.viewer,
            mutation_service=self.mutation_service,
            reaction_service=self.reaction_service,
            highlighter=highlighter,
            hooks=request.hooks,
        )

        target = self._parse_target(request)
        if target is not None:
            highlighter.request(target.comment_id, target.action)

        with logfire.span("thread.open", post_id=str(request.post.id)):
            session.subscription = await self.realtime.subscribe(
                thread, session.on_merged
            )
            try:
                await self.loader.load(thread)
                await self.reaction_service.refresh_comment_reactions(thread, viewer_id)
            except Exception:
                await session.close()
                raise
            await highlighter.on_loaded(thread)

        return session

    def _parse_target(self, request: OpenThreadRequest) -> DeepLink | None:
        if not request.deep_link:
            return None
        try:
            link = DeepLink.parse(request.deep_link)
        except ValueError:
            logfire.warn("Ignoring malformed deep link", deep_link=request.deep_link)
            return None
        if link.post_id != request.post.id:
            logfire.warn(
                "Deep link points at another post",
                deep_link=request.deep_link,
                post_id=str(request.post.id),
            )
            return None
        return link

