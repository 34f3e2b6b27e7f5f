"""Dependency injection wiring.

Core providers are concrete. Each infrastructure component (``backend``,
``realtime``) has a base provider with one production and one in-memory
subclass; ``get_provider`` picks between them.
"""

from typing import Type

from pawtalk.util.di.application import ProdApplicationProvider
from pawtalk.util.di.base import Component, ProviderBase
from pawtalk.util.di.core import ProdConfigProvider
from pawtalk.util.di.domain import ProdDomainProvider
from pawtalk.util.di.infrastructure import (
    BackendProvider,
    ProdBackendProvider,
    ProdRealtimeProvider,
    RealtimeProvider,
)

CORE_PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
]

COMPONENT_PROVIDERS: list[Type[ProviderBase]] = [
    BackendProvider,
    RealtimeProvider,
]

PROVIDERS = CORE_PROVIDERS + COMPONENT_PROVIDERS


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider class to the one to instantiate.

    Concrete providers resolve to themselves. For a component base the
    subclass with the matching ``__is_mock__`` flag is returned; the
    in-memory subclasses register themselves on import from ``tests.di``.

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    if base in CORE_PROVIDERS:
        return base

    by_kind = {impl.__is_mock__: impl for impl in base.__subclasses__()}
    if use_mock not in by_kind:
        kind = "in-memory" if use_mock else "production"
        raise ValueError(f"No {kind} provider for component '{base.__mock_component__}'")
    return by_kind[use_mock]


__all__ = [
    "COMPONENT_PROVIDERS",
    "CORE_PROVIDERS",
    "Component",
    "PROVIDERS",
    "ProviderBase",
    "get_provider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "BackendProvider",
    "ProdBackendProvider",
    "RealtimeProvider",
    "ProdRealtimeProvider",
]
