"""Shared base for engine records."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Current time, timezone-aware like the timestamps the backend returns."""
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Immutable record.

    Stores never mutate a record in place; they swap in a copy made with
    ``model_copy(update=...)``, so a record handed to a view stays valid.
    """

    model_config = ConfigDict(frozen=True)
