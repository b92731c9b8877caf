from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hopecity.db.engine import get_engine

_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory for the remote store.

    Objects stay usable after commit; the adapter reads row attributes
    after its transaction has closed.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory
