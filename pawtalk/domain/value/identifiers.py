"""Typed ids.

All ids are UUIDs minted by the backing store, except a pending
comment's, which is minted locally and replaced on confirmation.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
PostId = NewType("PostId", UUID)
CommentId = NewType("CommentId", UUID)
NotificationId = NewType("NotificationId", UUID)
