"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class BackendError(AdapterError):
    """Backing store request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
