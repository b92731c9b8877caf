"""CLI entry point: python -m hopecity.cli {show,add-event,reset-local,init-db,set-pin}"""

import argparse
import asyncio
import getpass
import json
import sys

import structlog
import yaml
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hopecity.auth.identity import IdentityClient, IdentityError
from hopecity.auth.pin import PinGuard
from hopecity.auth.session import Authenticator, SessionAuth
from hopecity.config.settings import Settings, get_settings
from hopecity.db.engine import get_engine
from hopecity.db.session import get_session_factory
from hopecity.logging_config import configure_logging
from hopecity.models import Base
from hopecity.site_config.local_storage import LocalStorage
from hopecity.site_config.remote import RemoteAdapter
from hopecity.site_config.results import SaveResult
from hopecity.site_config.schema import Event, next_local_event_id
from hopecity.site_config.store import ConfigStore


def build_store(settings: Settings) -> ConfigStore:
    storage = LocalStorage(settings.storage_path)
    remote = RemoteAdapter(get_session_factory()) if settings.remote_configured else None
    return ConfigStore(storage, remote=remote)


async def run_show(store: ConfigStore, local_only: bool = False, fmt: str = "json") -> str:
    """Render the current configuration as JSON or YAML text."""
    config = store.get_local_config() if local_only else await store.get_config_async()
    data = config.to_canonical()
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


async def run_add_event(
    store: ConfigStore,
    title: str,
    date: str = "",
    time: str = "",
    signup_url: str = "",
    auth: Authenticator | None = None,
) -> SaveResult:
    """Append one event to the current configuration and save it."""
    config = await store.get_config_async()
    event = Event(
        id=next_local_event_id(config.events),
        title=title,
        date=date,
        time=time,
        signup_url=signup_url,
    )
    return await store.save_config(
        config.model_copy(update={"events": [*config.events, event]}), auth=auth
    )


async def run_admin_add_event(
    store: ConfigStore,
    identity: IdentityClient,
    email: str,
    password: str,
    **event_fields: str,
) -> SaveResult:
    """Sign in as an admin, add the event, and sign out again.

    Raises:
        IdentityError: If the sign-in is rejected.
    """
    auth = SessionAuth(identity)
    try:
        await auth.sign_in(email, password)
        return await run_add_event(store, auth=auth, **event_fields)
    finally:
        try:
            await auth.sign_out()
        except IdentityError as e:
            structlog.get_logger().warning("admin_sign_out_failed", error=str(e))


async def run_init_db(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    sample_events: bool = False,
) -> bool:
    """Create the remote tables and the singleton settings row.

    Returns ``True`` if the settings row was created by this call.
    """
    log = structlog.get_logger()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    created = await RemoteAdapter(session_factory).ensure_settings_row(sample_events=sample_events)
    log.info("init_db_complete", settings_row_created=created)
    return created


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="hopecity.cli",
        description="Hope City site configuration CLI",
    )
    subparsers = parser.add_subparsers(dest="command")

    show_parser = subparsers.add_parser("show", help="Print the current site configuration")
    show_parser.add_argument(
        "--local",
        action="store_true",
        help="Read only the local fallback copy, even if a remote store is configured",
    )
    show_parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="json",
        help="Output format (default: json)",
    )

    add_parser = subparsers.add_parser("add-event", help="Append an event to the events list")
    add_parser.add_argument("title", help="Event title")
    add_parser.add_argument("--date", default="", help='Display date, e.g. "Sun, Oct 12"')
    add_parser.add_argument("--time", default="", help='Display time, e.g. "10:00 AM"')
    add_parser.add_argument("--signup-url", default="", help="Sign-up link")
    add_parser.add_argument(
        "--email",
        help="Admin email for the identity provider (required with a remote store)",
    )

    subparsers.add_parser(
        "reset-local",
        help="Discard the local fallback copy so local reads use the defaults",
    )

    init_parser = subparsers.add_parser("init-db", help="Create remote tables and the settings row")
    init_parser.add_argument(
        "--sample-events",
        action="store_true",
        help="Also insert the default sample events when creating the settings row",
    )

    pin_parser = subparsers.add_parser("set-pin", help="Set the admin PIN used in local-only mode")
    pin_parser.add_argument("pin", help="New PIN (at least 4 characters)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)

    if args.command == "show":
        store = build_store(settings)
        print(asyncio.run(run_show(store, local_only=args.local, fmt=args.format)))

    elif args.command == "add-event":
        store = build_store(settings)
        fields = {
            "title": args.title,
            "date": args.date,
            "time": args.time,
            "signup_url": args.signup_url,
        }
        if store.remote_configured:
            identity = IdentityClient.from_settings(settings)
            if identity is None or not args.email:
                print("A remote store needs HOPECITY_IDENTITY_URL and --email.", file=sys.stderr)
                sys.exit(2)
            password = getpass.getpass(f"Password for {args.email}: ")
            try:
                result = asyncio.run(
                    run_admin_add_event(store, identity, args.email, password, **fields)
                )
            except IdentityError as e:
                print(f"Sign-in failed: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            result = asyncio.run(run_add_event(store, **fields))
        if not result.ok:
            print(f"Save failed ({result.kind.value}): {result.reason}", file=sys.stderr)
            sys.exit(1)
        print(f"Added {args.title!r}; {len(result.config.events)} events")

    elif args.command == "reset-local":
        build_store(settings).reset_local_config()

    elif args.command == "init-db":
        if not settings.remote_configured:
            print("HOPECITY_DATABASE_URL is not set; nothing to initialise.", file=sys.stderr)
            sys.exit(2)
        asyncio.run(run_init_db(get_engine(), get_session_factory(), args.sample_events))

    elif args.command == "set-pin":
        try:
            PinGuard(LocalStorage(settings.storage_path)).set_pin(args.pin)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            sys.exit(2)


if __name__ == "__main__":
    main()
