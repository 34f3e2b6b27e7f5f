"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class InvalidEditOperationError(DomainError):
    """Raised when an edit operation violates business rules."""

    def __init__(self, message: str):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class CommentWriteError(DomainError):
    """Raised when a create, update or delete is rejected by the backing store.

    The optimistic change has already been rolled back when this is raised.
    Views show it as a transient, dismissable notice.
    """

    def __init__(self, operation: str, resource_id: str, reason: str):
        self.operation = operation
        self.resource_id = resource_id
        self.reason = reason
        super().__init__(f"Failed to {operation} comment {resource_id}: {reason}")


class ReactionWriteError(DomainError):
    """Raised when a like toggle is rejected by the backing store."""

    def __init__(self, target: str, target_id: str, reason: str):
        self.target = target
        self.target_id = target_id
        super().__init__(f"Failed to update like on {target} {target_id}: {reason}")
