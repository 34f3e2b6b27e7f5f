"""Polling comment feed.

Delivers "comment created" events by polling the ``comments`` table for
rows newer than the last one seen. Rows that already existed when the
subscription opened are not delivered; the thread loader reads those.

Known limitation: the cursor is the newest ``created_at`` seen, so a row
whose transaction commits after a row with a later timestamp was already
polled falls behind the cursor and is never delivered. Such a comment
shows up on the next full load of the thread.
"""

import asyncio
from datetime import datetime

import logfire

from pawtalk.domain.model.event import CommentEvent
from pawtalk.domain.repository.feed import CommentEventHandler, CommentFeed, Subscription
from pawtalk.domain.value import CommentId, PostId

from .comment import RestCommentRepository


class PollingSubscription(Subscription):
    """One polling loop for one post."""

    def __init__(
        self,
        repository: RestCommentRepository,
        post_id: PostId,
        handler: CommentEventHandler,
        interval: float,
    ) -> None:
        self.repository = repository
        self.post_id = post_id
        self.handler = handler
        self.interval = interval
        self._cursor: datetime | None = None
        # Ids seen at the cursor timestamp, so equal timestamps aren't replayed
        self._seen_at_cursor: set[CommentId] = set()
        self._task: asyncio.Task | None = None

    @property
    def is_open(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Take the current high-water mark and start polling."""
        self._advance(await self.repository.list_created_since(self.post_id, None))
        self._task = asyncio.create_task(self._run())

    async def close(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        logfire.info("Polling subscription closed", post_id=str(self.post_id))

    async def poll_once(self) -> int:
        """Fetch and deliver new rows; returns how many were delivered."""
        rows = await self.repository.list_created_since(self.post_id, self._cursor)
        fresh = [row for row in rows if not self._already_seen(row)]
        self._advance(fresh)
        for event in fresh:
            try:
                await self.handler(event)
            except Exception as e:
                logfire.error(
                    "Comment event handler failed",
                    comment_id=str(event.id),
                    error=str(e),
                )
        return len(fresh)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.poll_once()
            except Exception as e:
                logfire.warn("Comment poll failed", post_id=str(self.post_id), error=str(e))

    def _already_seen(self, event: CommentEvent) -> bool:
        if self._cursor is None:
            return False
        if event.created_at < self._cursor:
            return True
        return event.created_at == self._cursor and event.id in self._seen_at_cursor

    def _advance(self, events: list[CommentEvent]) -> None:
        for event in events:
            if self._cursor is None or event.created_at > self._cursor:
                self._cursor = event.created_at
                self._seen_at_cursor = {event.id}
            elif event.created_at == self._cursor:
                self._seen_at_cursor.add(event.id)


class PollingCommentFeed(CommentFeed):
    """Comment feed that polls the backing store."""

    def __init__(self, repository: RestCommentRepository, interval: float = 2.0) -> None:
        """Initialize polling feed.

        Args:
            repository: Comment repository used for the polls
            interval: Seconds between polls
        """
        self.repository = repository
        self.interval = interval

    async def subscribe(
        self, post_id: PostId, handler: CommentEventHandler
    ) -> Subscription:
        subscription = PollingSubscription(
            self.repository, post_id, handler, self.interval
        )
        await subscription.start()
        logfire.info("Polling subscription opened", post_id=str(post_id))
        return subscription
