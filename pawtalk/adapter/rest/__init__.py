"""PostgREST adapters."""

from .client import PostgrestClient, create_http_client
from .comment import RestCommentRepository
from .feed import PollingCommentFeed, PollingSubscription
from .notification import RestNotificationSink
from .profile import RestProfileRepository
from .reaction import RestReactionRepository

__all__ = [
    "PollingCommentFeed",
    "PollingSubscription",
    "PostgrestClient",
    "RestCommentRepository",
    "RestNotificationSink",
    "RestProfileRepository",
    "RestReactionRepository",
    "create_http_client",
]
