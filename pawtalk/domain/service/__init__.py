"""Domain services."""

from .base import Service
from .highlight_service import HighlightController
from .mutation_service import CommentMutationService
from .notification_dispatcher import NotificationDispatcher
from .notification_grouping import add_actor, summarize_actors
from .reaction_service import ReactionService
from .realtime_service import MergeHook, ProfileCache, RealtimeMergeService
from .target_resolver import NotificationTargetResolver, extract_mentions
from .thread_loader import ThreadLoaderService, flatten_replies

__all__ = [
    "CommentMutationService",
    "HighlightController",
    "MergeHook",
    "NotificationDispatcher",
    "NotificationTargetResolver",
    "ProfileCache",
    "ReactionService",
    "RealtimeMergeService",
    "Service",
    "ThreadLoaderService",
    "add_actor",
    "extract_mentions",
    "flatten_replies",
    "summarize_actors",
]
