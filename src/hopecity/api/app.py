"""FastAPI application for the Hope City site."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from google import genai
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hopecity.api.routes.admin import router as admin_router
from hopecity.api.routes.assistant import router as assistant_router
from hopecity.api.routes.config import router as config_router
from hopecity.api.routes.health import router as health_router
from hopecity.assistant.client import create_client
from hopecity.auth.identity import IdentityClient
from hopecity.auth.pin import PinGuard
from hopecity.config.settings import Settings, get_settings
from hopecity.db.session import get_session_factory
from hopecity.site_config.local_storage import LocalStorage
from hopecity.site_config.remote import RemoteAdapter
from hopecity.site_config.store import ConfigStore
from hopecity.site_config.view import ConfigView

logger = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    *,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    identity: IdentityClient | None = None,
    assistant_client: genai.Client | None = None,
) -> FastAPI:
    """Build the application and the single ConfigStore it serves from.

    Remote mode is chosen when a session factory is passed or
    ``HOPECITY_DATABASE_URL`` is set; otherwise the local blob is used.
    """
    settings = settings or get_settings()

    if session_factory is None and settings.remote_configured:
        session_factory = get_session_factory()
    if identity is None:
        identity = IdentityClient.from_settings(settings)
    if assistant_client is None and settings.gemini_api_key:
        assistant_client = create_client(settings.gemini_api_key)

    storage = LocalStorage(settings.storage_path)
    remote = RemoteAdapter(session_factory) if session_factory is not None else None
    store = ConfigStore(storage, remote=remote)
    view = ConfigView(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("site_api_starting", mode="remote" if store.remote_configured else "local")
        yield
        view.close()
        if identity is not None:
            await identity.aclose()

    app = FastAPI(title="Hope City Site API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.view = view
    app.state.pins = PinGuard(storage)
    app.state.identity = identity
    app.state.assistant_client = assistant_client

    # CORS for the Vite dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(config_router)
    app.include_router(admin_router)
    app.include_router(assistant_router)
    return app


app = create_app()
