"""Infrastructure providers."""

# Import bases
from .backend import BackendProvider
from .realtime import RealtimeProvider

# Import implementations (needed for __subclasses__())
from .backend import ProdBackendProvider  # noqa: F401
from .realtime import ProdRealtimeProvider  # noqa: F401

__all__ = [
    "BackendProvider",
    "ProdBackendProvider",
    "ProdRealtimeProvider",
    "RealtimeProvider",
]
