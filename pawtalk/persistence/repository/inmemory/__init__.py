"""In-memory repository implementations for testing."""

from .backend import InMemoryBackend
from .comment import InMemoryCommentRepository
from .feed import InMemoryCommentFeed, InMemorySubscription
from .notification import InMemoryNotificationSink
from .profile import InMemoryProfileRepository
from .reaction import InMemoryReactionRepository

__all__ = [
    "InMemoryBackend",
    "InMemoryCommentFeed",
    "InMemoryCommentRepository",
    "InMemoryNotificationSink",
    "InMemoryProfileRepository",
    "InMemoryReactionRepository",
    "InMemorySubscription",
]
