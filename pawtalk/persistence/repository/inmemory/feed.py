"""In-memory comment feed."""

from collections import defaultdict

import logfire

from pawtalk.domain.model.event import CommentEvent
from pawtalk.domain.repository.feed import CommentEventHandler, CommentFeed, Subscription
from pawtalk.domain.value import PostId


class InMemorySubscription(Subscription):
    """Subscription to the in-memory feed."""

    def __init__(
        self, feed: "InMemoryCommentFeed", post_id: PostId, handler: CommentEventHandler
    ) -> None:
        self.feed = feed
        self.post_id = post_id
        self.handler = handler
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    async def close(self) -> None:
        if self._open:
            self._open = False
            self.feed._detach(self)


class InMemoryCommentFeed(CommentFeed):
    """Broadcast hub: every published event reaches every open subscription
    on the same post, in subscription order."""

    def __init__(self) -> None:
        self._subscriptions: dict[PostId, list[InMemorySubscription]] = defaultdict(list)

    async def subscribe(
        self, post_id: PostId, handler: CommentEventHandler
    ) -> Subscription:
        subscription = InMemorySubscription(self, post_id, handler)
        self._subscriptions[post_id].append(subscription)
        return subscription

    def subscriber_count(self, post_id: PostId) -> int:
        return len(self._subscriptions.get(post_id, []))

    async def publish(self, event: CommentEvent) -> int:
        """Deliver an event; returns the number of handlers reached."""
        delivered = 0
        for subscription in list(self._subscriptions.get(event.post_id, [])):
            if not subscription.is_open:
                continue
            try:
                await subscription.handler(event)
            except Exception as e:
                logfire.error(
                    "Comment event handler failed",
                    comment_id=str(event.id),
                    error=str(e),
                )
                continue
            delivered += 1
        return delivered

    def _detach(self, subscription: InMemorySubscription) -> None:
        subscriptions = self._subscriptions.get(subscription.post_id, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            self._subscriptions.pop(subscription.post_id, None)
