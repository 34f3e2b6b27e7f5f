"""Mock providers for testing."""

from .backend import MockBackendProvider
from .container import build_test_container
from .realtime import MockRealtimeProvider

__all__ = [
    "MockBackendProvider",
    "MockRealtimeProvider",
    "build_test_container",
]
