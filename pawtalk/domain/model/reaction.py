"""Reaction summaries."""

from pydantic import Field

from pawtalk.domain.model.common import DomainModel


class LikeSummary(DomainModel):
    """Like count and whether the viewer is among the likers."""

    count: int = Field(default=0, ge=0)
    viewer_has_liked: bool = False

    def toggled(self) -> "LikeSummary":
        """The summary after the viewer flips their like."""
        if self.viewer_has_liked:
            return LikeSummary(count=max(self.count - 1, 0), viewer_has_liked=False)
        return LikeSummary(count=self.count + 1, viewer_has_liked=True)
