"""Configuration providers."""

from dishka import Scope, provide

from pawtalk.config import BackendSettings, EngineSettings, NotificationSettings, Settings
from pawtalk.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings and their sections, all APP scope.

    Uses the given settings, or loads them from the environment and
    ``.env`` when none are given.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self.settings = settings

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        return self.settings or Settings()

    @provide(scope=Scope.APP)
    def provide_backend_settings(self, settings: Settings) -> BackendSettings:
        return settings.backend

    @provide(scope=Scope.APP)
    def provide_engine_settings(self, settings: Settings) -> EngineSettings:
        return settings.engine

    @provide(scope=Scope.APP)
    def provide_notification_settings(self, settings: Settings) -> NotificationSettings:
        return settings.notifications
