"""View-facing comment thread session.

One session per open view of a post (comment modal, feed card, event
page). Views talk to the engine only through this object:

    async with session:
        await session.submit("Nice!")
        await session.submit("@alice thanks", reply_to=comment)
        session.toggle_replies(root.id)

Closing the session closes the realtime subscription, stops any running
highlight and marks the thread dead, so confirmations that land later
are no-ops.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

import logfire

from pawtalk.domain.error import ValidationError
from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.reaction import LikeSummary
from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.repository import Subscription
from pawtalk.domain.service import (
    CommentMutationService,
    HighlightController,
    ReactionService,
)
from pawtalk.domain.value import CommentId


def _nothing(*_: object) -> None:
    return None


@dataclass
class ThreadViewHooks:
    """Side effects a view wants run by the engine."""

    # Feed views scroll to the newest comment when a root arrives
    scroll_to_bottom: Callable[[], None] = _nothing
    # Deep-link views scroll to and pulse the target comment
    reveal: Callable[[CommentId], None] = _nothing
    clear_highlight: Callable[[CommentId], None] = _nothing
    pulse_like: Callable[[], None] = _nothing
    on_change: Callable[[CommentThread], None] = _nothing


class CommentThreadSession:
    """Narrow interface over the engine for one post and one viewer."""

    def __init__(
        self,
        thread: CommentThread,
        viewer: AuthorProfile | None,
        mutation_service: CommentMutationService,
        reaction_service: ReactionService,
        highlighter: HighlightController,
        hooks: ThreadViewHooks,
    ) -> None:
        self.thread = thread
        self.viewer = viewer
        self.mutation_service = mutation_service
        self.reaction_service = reaction_service
        self.highlighter = highlighter
        self.hooks = hooks
        self.post_likes = LikeSummary()
        self.subscription: Subscription | None = None
        self._tasks: set[asyncio.Task] = set()

    # --- Reading ---

    def roots(self) -> list[Comment]:
        return self.thread.store.roots()

    def replies(self, root_id: CommentId) -> list[Comment]:
        """Replies shown under a root (empty while collapsed)."""
        return self.thread.replies_shown(root_id)

    def reply_prefix(self, target: Comment) -> str:
        """Text a reply box starts with when replying to ``target``."""
        return f"@{target.author.username or 'user'} "

    # --- Mutations ---

    def _require_viewer(self) -> AuthorProfile:
        if self.viewer is None:
            raise ValidationError("Sign in to comment")
        return self.viewer

    async def submit(self, content: str, reply_to: Comment | None = None) -> Comment:
        return await self.mutation_service.submit_comment(
            self.thread, self._require_viewer(), content, reply_to
        )

    async def edit(self, comment_id: CommentId, content: str) -> Comment:
        return await self.mutation_service.edit_comment(self.thread, comment_id, content)

    async def delete(self, comment_id: CommentId) -> None:
        await self.mutation_service.delete_comment(self.thread, comment_id)

    async def toggle_comment_like(self, comment_id: CommentId) -> Comment:
        return await self.reaction_service.toggle_comment_like(
            self.thread, comment_id, self._require_viewer()
        )

    async def toggle_post_like(self) -> LikeSummary:
        """Flip the viewer's like on the post, restoring the summary on failure."""
        before = self.post_likes
        self.post_likes = before.toggled()
        try:
            self.post_likes = await self.reaction_service.toggle_post_like(
                self.thread.post, self._require_viewer(), before
            )
        except Exception:
            self.post_likes = before
            raise
        return self.post_likes

    # --- View state ---

    def toggle_replies(self, root_id: CommentId) -> bool:
        expanded = self.thread.expansion.toggle(root_id)
        self.thread.changed()
        return expanded

    async def highlight(self, comment_id: CommentId) -> bool:
        return await self.highlighter.locate(self.thread, comment_id)

    def on_merged(self, thread: CommentThread, comment: Comment) -> None:
        """Side effect for a comment merged from the push feed."""
        if comment.id == self.highlighter.target_id:
            task = asyncio.get_running_loop().create_task(
                self.highlighter.locate(thread, comment.id)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        elif comment.is_root:
            self.hooks.scroll_to_bottom()

    # --- Lifecycle ---

    async def close(self) -> None:
        if not self.thread.is_live:
            return
        self.thread.close()
        if self.subscription is not None:
            await self.subscription.close()
        for task in list(self._tasks):
            task.cancel()
        await self.highlighter.aclose()
        logfire.info("Comment thread session closed", post_id=str(self.thread.post.id))

    async def __aenter__(self) -> "CommentThreadSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
