"""Remote store adapter: canonical configuration <-> ``settings`` + ``events`` rows.

Reads issue the settings lookup and the events lookup concurrently and fail
as a whole if either fails.  Writes require an authenticated user and run in
two transactions:

1. update the singleton settings row;
2. replace the full event list (delete every row, insert the new ordered
   set with fresh store-assigned ids).

If step 2 fails, step 1 has already committed.  That partial write is
reported as :attr:`SaveErrorKind.PARTIAL_WRITE`; the event list itself is
left as it was because the delete and insert share a transaction.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import sqlalchemy as sa
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hopecity.auth.identity import IdentityError
from hopecity.auth.session import Authenticator
from hopecity.models.site_event import SiteEvent
from hopecity.models.site_settings import SETTINGS_ROW_ID, SiteSettings
from hopecity.site_config.defaults import default_config
from hopecity.site_config.results import SaveErrorKind, SaveResult
from hopecity.site_config.schema import Event, SiteConfiguration

logger = structlog.get_logger()

_STORE_ERRORS = (SQLAlchemyError, OSError)


def event_row_to_canonical(row: SiteEvent) -> dict:
    return {
        "id": row.id,
        "title": row.title or "",
        "date": row.date or "",
        "time": row.time or "",
        "signupUrl": row.signup_url or "",
    }


def event_to_row(event: Event, order_index: int) -> SiteEvent:
    """Build a new row for *event*; the client-side id is discarded."""
    return SiteEvent(
        title=event.title,
        date=event.date,
        time=event.time,
        signup_url=event.signup_url,
        order_index=order_index,
    )


class RemoteAdapter:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        auth: Authenticator | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._auth = auth

    async def _fetch_settings(self) -> SiteSettings:
        async with self._session_factory() as session:
            result = await session.execute(
                sa.select(SiteSettings).where(SiteSettings.id == SETTINGS_ROW_ID)
            )
            # A missing singleton row is a failed fetch, not an empty config
            return result.scalar_one()

    async def _fetch_events(self) -> list[SiteEvent]:
        async with self._session_factory() as session:
            result = await session.execute(
                sa.select(SiteEvent).order_by(SiteEvent.order_index.asc())
            )
            return list(result.scalars().all())

    async def fetch(self) -> dict | None:
        """Load the remote configuration as a canonical payload.

        Returns ``None`` if either lookup fails; the caller falls back to
        the local copy.  Sections stored as NULL are omitted so that the
        defaults fill them in on merge.  An empty events table yields an
        empty list.
        """
        settings_result, events_result = await asyncio.gather(
            self._fetch_settings(), self._fetch_events(), return_exceptions=True
        )
        for lookup, result in (("settings", settings_result), ("events", events_result)):
            if isinstance(result, BaseException):
                logger.warning(
                    "remote_fetch_failed",
                    lookup=lookup,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                return None

        payload: dict = {
            key: value
            for key, value in (
                ("announcement", settings_result.announcement),
                ("links", settings_result.links),
                ("socials", settings_result.socials),
            )
            if value is not None
        }
        payload["events"] = [event_row_to_canonical(row) for row in events_result]
        logger.debug("remote_fetch_complete", event_count=len(events_result))
        return payload

    async def save(
        self, config: SiteConfiguration, auth: Authenticator | None = None
    ) -> SaveResult:
        """Persist *config*: settings row first, then a full event-list replace.

        Args:
            config: The configuration to store.
            auth: Authenticator for this write; defaults to the adapter's own.

        Returns:
            A :class:`SaveResult`; failures carry a reason for the operator.
        """
        authenticator = auth or self._auth
        try:
            user = await authenticator.get_user() if authenticator is not None else None
        except IdentityError as e:
            logger.warning("remote_save_auth_check_failed", error=str(e))
            return SaveResult.failure(SaveErrorKind.TRANSPORT_FAILURE, str(e))
        if user is None:
            logger.info("remote_save_rejected", reason="not_authenticated")
            return SaveResult.failure(SaveErrorKind.AUTH_REQUIRED, "Not authenticated")

        canonical = config.to_canonical()
        now = datetime.now(timezone.utc)
        log = logger.bind(user=user.email or user.id)

        # Step 1: settings row
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    sa.update(SiteSettings)
                    .where(SiteSettings.id == SETTINGS_ROW_ID)
                    .values(
                        announcement=canonical["announcement"],
                        links=canonical["links"],
                        socials=canonical["socials"],
                        updated_at=now,
                        updated_by=user.email or user.id,
                    )
                )
                updated = result.rowcount
        except _STORE_ERRORS as e:
            log.warning("remote_settings_update_failed", error=str(e))
            return SaveResult.failure(SaveErrorKind.TRANSPORT_FAILURE, str(e))
        if not updated:
            log.warning("remote_settings_row_missing", settings_id=SETTINGS_ROW_ID)
            return SaveResult.failure(
                SaveErrorKind.MISSING_SETTINGS_ROW,
                f"Settings row {SETTINGS_ROW_ID} does not exist; run 'init-db' first",
            )

        # Step 2: full replace of the event list
        try:
            async with self._session_factory() as session, session.begin():
                existing_ids = (await session.execute(sa.select(SiteEvent.id))).scalars().all()
                if existing_ids:
                    await session.execute(
                        sa.delete(SiteEvent).where(SiteEvent.id.in_(existing_ids))
                    )
                session.add_all(
                    [event_to_row(event, index) for index, event in enumerate(config.events)]
                )
        except _STORE_ERRORS as e:
            log.error("remote_events_replace_failed", error=str(e))
            return SaveResult.failure(
                SaveErrorKind.PARTIAL_WRITE,
                f"Settings were saved but the event list was not: {e}",
            )

        log.info("remote_config_saved", event_count=len(config.events))
        return SaveResult.success()

    async def ensure_settings_row(self, sample_events: bool = False) -> bool:
        """Create the singleton settings row from the defaults if it is missing.

        Returns ``True`` if a row was created.
        """
        defaults = default_config()
        async with self._session_factory() as session, session.begin():
            if await session.get(SiteSettings, SETTINGS_ROW_ID) is not None:
                return False
            session.add(
                SiteSettings(
                    id=SETTINGS_ROW_ID,
                    announcement=defaults["announcement"],
                    links=defaults["links"],
                    socials=defaults["socials"],
                    updated_by="system",
                )
            )
            if sample_events:
                events = [Event.model_validate(e) for e in defaults["events"]]
                session.add_all([event_to_row(e, i) for i, e in enumerate(events)])
        logger.info("remote_settings_row_created", sample_events=sample_events)
        return True
