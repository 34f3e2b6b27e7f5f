"""Thread use cases."""

from .open_thread import OpenThreadRequest, OpenThreadUseCase

__all__ = [
    "OpenThreadRequest",
    "OpenThreadUseCase",
]
