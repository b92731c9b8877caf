from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine as sa_create_async_engine

from hopecity.config.settings import get_settings

_engine: AsyncEngine | None = None


def get_engine(echo: bool = False) -> AsyncEngine:
    """Return a cached async engine instance.

    Raises:
        RuntimeError: If no remote store is configured.
    """
    global _engine
    if _engine is None:
        settings = get_settings()
        if not settings.remote_configured:
            raise RuntimeError("HOPECITY_DATABASE_URL is not set; remote store is not configured")
        _engine = sa_create_async_engine(settings.database_url, echo=echo)
    return _engine
