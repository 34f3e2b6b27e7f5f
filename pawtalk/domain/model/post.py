"""Post entity.

Only the fields the comment engine needs: who owns the post (the
recipient of comment and like notifications) and its title.
"""

from typing import Optional

from pawtalk.domain.model.common import DomainModel
from pawtalk.domain.value import PostId, UserId


class Post(DomainModel):
    """Content item that comments attach to."""

    id: PostId
    owner_id: Optional[UserId] = None
    title: Optional[str] = None
