"""Notification sink interface."""

from abc import ABC, abstractmethod

from pawtalk.domain.model.notification import (
    GroupedNotification,
    IndividualNotification,
)


class NotificationSink(ABC):
    """Destination for outbound notifications.

    Aggregation of grouped notifications is the sink's responsibility.
    """

    @abstractmethod
    async def send_grouped(self, notification: GroupedNotification) -> None:
        """Record one actor's action in the recipient's grouped entry."""
        pass

    @abstractmethod
    async def send_individual(self, notification: IndividualNotification) -> None:
        """Create a point-to-point notification."""
        pass
