"""Domain model entities for pawtalk."""

from pawtalk.domain.model.comment import AuthorProfile, Comment
from pawtalk.domain.model.event import CommentEvent, CreatedComment
from pawtalk.domain.model.notification import (
    GroupedNotification,
    IndividualNotification,
    NotificationData,
    NotificationIntent,
    StoredNotification,
)
from pawtalk.domain.model.post import Post
from pawtalk.domain.model.reaction import LikeSummary
from pawtalk.domain.model.thread import CommentStore, CommentThread, ThreadExpansion

__all__ = [
    "AuthorProfile",
    "Comment",
    "CommentEvent",
    "CommentStore",
    "CommentThread",
    "CreatedComment",
    "GroupedNotification",
    "IndividualNotification",
    "LikeSummary",
    "NotificationData",
    "NotificationIntent",
    "Post",
    "StoredNotification",
    "ThreadExpansion",
]
