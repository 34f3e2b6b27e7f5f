"""Domain value objects for pawtalk."""

from pawtalk.domain.value.identifiers import (
    CommentId,
    NotificationId,
    PostId,
    UserId,
)
from pawtalk.domain.value.types import (
    MENTION_PATTERN,
    CommentState,
    DeepLink,
    HighlightState,
    NotificationKind,
    Username,
)

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    "NotificationId",
    # Types
    "MENTION_PATTERN",
    "CommentState",
    "DeepLink",
    "HighlightState",
    "NotificationKind",
    "Username",
]
