"""ConfigStore: what configuration should be shown right now, and how to save it.

One instance is built per process (API app factory, CLI command) and passed
to whoever needs it.  Remote mode is selected by handing the store a
:class:`~hopecity.site_config.remote.RemoteAdapter`; without one every
operation uses the local blob.
"""

from __future__ import annotations

import asyncio
import inspect
import json
from collections.abc import Awaitable, Callable, Coroutine, Mapping

import structlog

from hopecity.auth.session import Authenticator
from hopecity.site_config.local_storage import CONFIG_STORAGE_KEY, LocalStorage
from hopecity.site_config.merge import build_config
from hopecity.site_config.notifier import ChangeNotifier
from hopecity.site_config.remote import RemoteAdapter
from hopecity.site_config.results import SaveErrorKind, SaveResult
from hopecity.site_config.schema import SiteConfiguration

logger = structlog.get_logger()

ConfigCallback = Callable[[SiteConfiguration], object | Awaitable[object]]


class Subscription:
    """One registration made through :meth:`ConfigStore.subscribe`.

    Calling the object unsubscribes it.  Every notification (and every
    :meth:`refresh`) issues one fetch; a result is only delivered if no
    newer result has been delivered already and the subscription is still
    active, so a slow response can never overwrite fresher state.
    """

    def __init__(self, store: ConfigStore, callback: ConfigCallback) -> None:
        self._store = store
        self._callback = callback
        self._requested = 0
        self._delivered = 0
        self.active = True
        self._unsubscribe = store.notifier.subscribe(self._on_notify)

    def __call__(self) -> None:
        self.active = False
        self._unsubscribe()

    def _on_notify(self) -> None:
        self._store._spawn(self.refresh())

    async def refresh(self) -> bool:
        """Fetch the configuration and deliver it; return whether it was delivered."""
        self._requested += 1
        sequence = self._requested
        config = await self._store.get_config_async()
        if not self.active or sequence < self._delivered:
            logger.debug("config_refresh_discarded", sequence=sequence, delivered=self._delivered)
            return False
        self._delivered = sequence
        try:
            result = self._callback(config)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning("config_subscriber_failed", error=str(e))
        return True


class ConfigStore:
    def __init__(
        self,
        storage: LocalStorage,
        remote: RemoteAdapter | None = None,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self.storage = storage
        self.remote = remote
        self.notifier = notifier or ChangeNotifier()
        self._pending: set[asyncio.Task] = set()

    @property
    def remote_configured(self) -> bool:
        return self.remote is not None

    def get_local_config(self) -> SiteConfiguration:
        """Read the local copy merged over the defaults.  Never raises.

        A missing, unparseable or ill-typed blob yields the defaults.
        """
        try:
            raw = self.storage.get_item(CONFIG_STORAGE_KEY)
            if not raw:
                return build_config()
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
            return build_config(parsed)
        except (ValueError, OSError) as e:
            logger.warning("local_config_malformed", error=str(e))
            return build_config()

    def initial_config(self) -> SiteConfiguration:
        """Configuration to show before the first async load completes.

        In remote mode the defaults are used rather than a possibly stale
        local copy.
        """
        return build_config() if self.remote_configured else self.get_local_config()

    async def get_config_async(self) -> SiteConfiguration:
        """Remote configuration if available, else the local copy.  Never raises."""
        if self.remote is not None:
            try:
                payload = await self.remote.fetch()
                if payload is not None:
                    return build_config(payload)
            except Exception as e:
                logger.warning("remote_config_unusable", error=str(e))
        return self.get_local_config()

    def _write_local(self, config: SiteConfiguration) -> None:
        self.storage.set_item(
            CONFIG_STORAGE_KEY, json.dumps(config.to_canonical(), ensure_ascii=False)
        )

    async def save_config(
        self,
        config: SiteConfiguration | Mapping,
        auth: Authenticator | None = None,
    ) -> SaveResult:
        """Persist *config* and notify subscribers on success.

        Args:
            config: Full configuration in canonical shape.
            auth: Authenticator for a remote write (ignored in local mode).

        Returns:
            A :class:`SaveResult`.  On a remote save the result carries the
            re-fetched configuration with the store-assigned event ids.
        """
        if not isinstance(config, SiteConfiguration):
            config = SiteConfiguration.model_validate(config)

        if self.remote is None:
            try:
                self._write_local(config)
            except OSError as e:
                logger.error("local_config_write_failed", error=str(e))
                return SaveResult.failure(SaveErrorKind.STORAGE_FAILURE, str(e))
            logger.info("config_saved", mode="local", event_count=len(config.events))
            self.notify_updated()
            return SaveResult.success(config)

        result = await self.remote.save(config, auth=auth)
        if not result.ok:
            return result

        fresh = None
        payload = await self.remote.fetch()
        if payload is not None:
            try:
                fresh = build_config(payload)
                self._write_local(fresh)
            except (ValueError, OSError) as e:
                logger.warning("local_fallback_write_failed", error=str(e))
        logger.info("config_saved", mode="remote", event_count=len(config.events))
        self.notify_updated()
        return SaveResult.success(fresh or config)

    def notify_updated(self) -> None:
        self.notifier.notify()

    def reset_local_config(self) -> None:
        """Discard the local copy so local reads fall back to the defaults."""
        self.storage.remove_item(CONFIG_STORAGE_KEY)
        logger.info("local_config_reset")
        self.notify_updated()

    def subscribe(self, callback: ConfigCallback) -> Subscription:
        return Subscription(self, callback)

    def _spawn(self, coro: Coroutine) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning("config_refresh_skipped", reason="no_running_event_loop")
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_for_refreshes(self) -> None:
        """Wait until every refresh triggered by a notification has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
