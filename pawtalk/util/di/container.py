"""Production container."""

from dishka import AsyncContainer, make_async_container

from pawtalk.config import Settings
from pawtalk.util.di import COMPONENT_PROVIDERS, get_provider
from pawtalk.util.di.application import ProdApplicationProvider
from pawtalk.util.di.core import ProdConfigProvider
from pawtalk.util.di.domain import ProdDomainProvider


def create_container(settings: Settings | None = None) -> AsyncContainer:
    """Build the production container.

    Open one request scope per comment thread view:

        async with container() as scope:
            use_case = await scope.get(OpenThreadUseCase)

    Args:
        settings: Settings to use; loaded from the environment when None
    """
    providers = [
        ProdConfigProvider(settings),
        ProdDomainProvider(),
        ProdApplicationProvider(),
    ]
    providers += [get_provider(base, use_mock=False)() for base in COMPONENT_PROVIDERS]
    return make_async_container(*providers)
