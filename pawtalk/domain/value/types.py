"""Domain value objects for pawtalk.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum
from urllib.parse import parse_qs, urlencode, urlsplit
from uuid import UUID

from pydantic import field_validator

from pawtalk.domain.value.common import RootValueObject, ValueObject
from pawtalk.domain.value.identifiers import CommentId, PostId

# "@" followed by one or more word, dot or hyphen characters
MENTION_PATTERN = re.compile(r"@([\w.-]+)")


class CommentState(str, Enum):
    """Lifecycle state of a comment record held by a thread.

    PENDING records carry a locally generated id that the backing store
    has never seen. CONFIRMED records carry the durable id it issued.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"


class NotificationKind(str, Enum):
    """Kind of notification produced by comment and reaction activity."""

    REPLY = "reply"
    MENTION = "mention"
    COMMENT_LIKE = "comment_like"
    LIKE = "like"
    COMMENT = "comment"

    @property
    def is_grouped(self) -> bool:
        """Whether the backend aggregates this kind per post."""
        return self in (NotificationKind.LIKE, NotificationKind.COMMENT)


class HighlightState(str, Enum):
    """State of the deep-link highlight controller."""

    IDLE = "idle"
    LOCATING = "locating"
    HIGHLIGHTED = "highlighted"


class Username(RootValueObject[str]):
    """Username as typed after ``@`` in comment text.

    Usernames may contain word characters, dots and hyphens.
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        if not re.fullmatch(r"[\w.-]{1,255}", v):
            raise ValueError(
                "Username must be 1-255 word, dot or hyphen characters"
            )
        return v


class DeepLink(ValueObject):
    """Link to a post, optionally targeting one comment.

    Shape: ``/<post_route>/<post_id>?comment_id=<id>&action=<action>``
    """

    post_route: str = "event"
    post_id: PostId
    comment_id: CommentId | None = None
    action: str | None = None

    def build(self) -> str:
        """Render the link as a relative URL."""
        path = f"/{self.post_route}/{self.post_id}"
        params: dict[str, str] = {}
        if self.comment_id is not None:
            params["comment_id"] = str(self.comment_id)
        if self.action:
            params["action"] = self.action
        if not params:
            return path
        return f"{path}?{urlencode(params)}"

    @classmethod
    def parse(cls, url: str) -> "DeepLink":
        """Parse a relative or absolute deep link.

        An unparseable ``comment_id`` is treated as absent.

        Raises:
            ValueError: If the path does not name a post
        """
        parts = urlsplit(url)
        segments = [s for s in parts.path.split("/") if s]
        if len(segments) < 2:
            raise ValueError(f"Not a post link: {url}")

        post_route, raw_post_id = segments[-2], segments[-1]
        post_id = PostId(UUID(raw_post_id))

        query = parse_qs(parts.query)
        comment_id: CommentId | None = None
        raw_comment = query.get("comment_id", [None])[0]
        if raw_comment:
            try:
                comment_id = CommentId(UUID(raw_comment))
            except ValueError:
                comment_id = None

        action = query.get("action", [None])[0] or None

        return cls(
            post_route=post_route,
            post_id=post_id,
            comment_id=comment_id,
            action=action,
        )

    def __str__(self) -> str:
        return self.build()
