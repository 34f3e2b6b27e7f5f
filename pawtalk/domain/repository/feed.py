"""Push channel interface for newly created comments."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from pawtalk.domain.model.event import CommentEvent
from pawtalk.domain.value import PostId

CommentEventHandler = Callable[[CommentEvent], Awaitable[None]]


class Subscription(ABC):
    """Handle for one live subscription.

    Owned by the view's lifecycle. Closing it stops delivery; closing twice
    is harmless. Usable as an async context manager.
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class CommentFeed(ABC):
    """Per-post feed of "comment created" events."""

    @abstractmethod
    async def subscribe(
        self, post_id: PostId, handler: CommentEventHandler
    ) -> Subscription:
        """Start delivering events for a post.

        Args:
            post_id: The post to watch
            handler: Coroutine called once per event, in arrival order

        Returns:
            Subscription handle
        """
        pass
