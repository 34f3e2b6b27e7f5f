"""Repository interfaces for pawtalk domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the adapter and persistence layers.
"""

from pawtalk.domain.repository.comment import CommentRepository
from pawtalk.domain.repository.feed import (
    CommentEventHandler,
    CommentFeed,
    Subscription,
)
from pawtalk.domain.repository.notification import NotificationSink
from pawtalk.domain.repository.profile import ProfileRepository
from pawtalk.domain.repository.reaction import ReactionRepository

__all__ = [
    "CommentEventHandler",
    "CommentFeed",
    "CommentRepository",
    "NotificationSink",
    "ProfileRepository",
    "ReactionRepository",
    "Subscription",
]
