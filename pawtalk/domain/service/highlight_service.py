"""Deep-link highlight controller.

States:

    IDLE --locate()--> LOCATING --found--> HIGHLIGHTED --dwell--> IDLE
                           |
                           +--not found--> IDLE

A target that arrives before the thread finished loading is remembered
and located once ``on_loaded`` runs. A target that is not found (e.g. the
comment was deleted) is a silent no-op, but it stays remembered so a
matching comment merged later is still highlighted.
"""

import asyncio
from collections.abc import Callable

import logfire

from pawtalk.domain.model.thread import CommentThread
from pawtalk.domain.value import CommentId, HighlightState

from .base import Service

CommentHook = Callable[[CommentId], None]


def _noop(_: CommentId) -> None:
    return None


class HighlightController(Service):
    """Reveal, scroll to and pulse one comment for a fixed dwell time."""

    def __init__(
        self,
        dwell_seconds: float = 3.0,
        reveal: CommentHook = _noop,
        clear: CommentHook = _noop,
        pulse_like: Callable[[], None] | None = None,
    ) -> None:
        """Initialize highlight controller.

        Args:
            dwell_seconds: How long the pulse stays on
            reveal: View hook that scrolls to and pulses a comment
            clear: View hook that removes the pulse
            pulse_like: View hook for the ``action=like`` button pulse
        """
        self.dwell_seconds = dwell_seconds
        self.reveal = reveal
        self.clear = clear
        self.pulse_like = pulse_like
        self.target_id: CommentId | None = None
        self.highlighted_id: CommentId | None = None
        self._state = HighlightState.IDLE
        self._dwell_task: asyncio.Task | None = None

    @property
    def state(self) -> HighlightState:
        return self._state

    def request(self, target_id: CommentId | None, action: str | None = None) -> None:
        """Remember the deep-link target (and run the like pulse if asked)."""
        self.target_id = target_id
        if action == "like" and self.pulse_like is not None:
            self.pulse_like()

    async def on_loaded(self, thread: CommentThread) -> bool:
        """Locate the remembered target once the initial load is done."""
        if self.target_id is None:
            return False
        return await self.locate(thread, self.target_id)

    async def locate(self, thread: CommentThread, target_id: CommentId) -> bool:
        """Try to highlight a comment.

        Args:
            thread: The thread to search
            target_id: The comment to highlight

        Returns:
            True if the comment was found and highlighted
        """
        self.target_id = target_id
        if not thread.loaded or not thread.is_live:
            return False

        self._cancel_dwell()
        self._state = HighlightState.LOCATING

        comment = thread.store.get(target_id)
        if comment is None:
            logfire.info("Highlight target not found", comment_id=str(target_id))
            self._state = HighlightState.IDLE
            return False

        if comment.parent_id is not None and comment.parent_id not in thread.expansion:
            thread.expansion.expand(comment.parent_id)
            thread.changed()

        self.reveal(target_id)
        self.highlighted_id = target_id
        self._state = HighlightState.HIGHLIGHTED
        self._dwell_task = asyncio.create_task(self._dwell(target_id))
        logfire.info("Comment highlighted", comment_id=str(target_id))
        return True

    async def wait(self) -> None:
        """Wait for a running dwell to finish."""
        if self._dwell_task is not None:
            try:
                await self._dwell_task
            except asyncio.CancelledError:
                pass

    async def aclose(self) -> None:
        """Stop any dwell and return to IDLE."""
        self._cancel_dwell()
        await self.wait()
        self._state = HighlightState.IDLE

    async def _dwell(self, comment_id: CommentId) -> None:
        await asyncio.sleep(self.dwell_seconds)
        self.clear(comment_id)
        self.highlighted_id = None
        self._state = HighlightState.IDLE

    def _cancel_dwell(self) -> None:
        """Stop a running dwell and clear its pulse right away."""
        if self._dwell_task is not None and not self._dwell_task.done():
            self._dwell_task.cancel()
            if self.highlighted_id is not None:
                self.clear(self.highlighted_id)
                self.highlighted_id = None
