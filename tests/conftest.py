"""Shared test fixtures."""

from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hopecity.auth.identity import AuthUser, IdentityError
from hopecity.models.base import Base
from hopecity.site_config.local_storage import LocalStorage
from hopecity.site_config.remote import RemoteAdapter
from hopecity.site_config.store import ConfigStore

ADMIN = AuthUser(id="admin-1", email="admin@hopecity.test")


class FakeAuth:
    """Authenticator returning a fixed user (or ``None``) and counting calls."""

    def __init__(self, user: AuthUser | None = ADMIN, error: str | None = None) -> None:
        self.user = user
        self.error = error
        self.calls = 0

    async def get_user(self) -> AuthUser | None:
        self.calls += 1
        if self.error:
            raise IdentityError(self.error)
        return self.user


class CountingSessionFactory:
    """Wraps a session factory and counts how many sessions were opened."""

    def __init__(self, factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = factory
        self.opened = 0

    def __call__(self) -> AsyncSession:
        self.opened += 1
        return self._factory()


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "local_storage.json"


@pytest.fixture
def storage(storage_path: Path) -> LocalStorage:
    return LocalStorage(storage_path)


@pytest.fixture
def local_store(storage: LocalStorage) -> ConfigStore:
    """ConfigStore with no remote store configured."""
    return ConfigStore(storage)


@pytest.fixture
async def test_engine(tmp_path: Path):
    """Async SQLite engine on a per-test database file.

    A file (not ``:memory:``) so the concurrent settings/events lookups get
    independent connections.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'site.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def seeded_settings(test_session_factory) -> None:
    """Create the singleton settings row from the defaults (no events)."""
    await RemoteAdapter(test_session_factory).ensure_settings_row()


@pytest.fixture
def admin_auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def remote(test_session_factory, seeded_settings, admin_auth) -> RemoteAdapter:
    return RemoteAdapter(test_session_factory, auth=admin_auth)


@pytest.fixture
def remote_store(storage: LocalStorage, remote: RemoteAdapter) -> ConfigStore:
    return ConfigStore(storage, remote=remote)
