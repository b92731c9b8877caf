"""A surface that renders the configuration and keeps itself current."""

from __future__ import annotations

from hopecity.site_config.schema import SiteConfiguration
from hopecity.site_config.store import ConfigStore


class ConfigView:
    """Holds the configuration one surface (e.g. the public page) shows.

    Starts from :meth:`ConfigStore.initial_config`, replaces it with the
    async result of :meth:`hydrate`, and re-fetches on every "configuration
    updated" notification until :meth:`close` is called.
    """

    def __init__(self, store: ConfigStore) -> None:
        self.current: SiteConfiguration = store.initial_config()
        self.hydrated = False
        self._subscription = store.subscribe(self._apply)

    def _apply(self, config: SiteConfiguration) -> None:
        self.current = config
        self.hydrated = True

    async def hydrate(self) -> SiteConfiguration:
        await self._subscription.refresh()
        return self.current

    def close(self) -> None:
        self._subscription()
