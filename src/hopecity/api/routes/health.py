"""Health check endpoint."""

from fastapi import APIRouter, Depends

from hopecity.api.deps import get_store
from hopecity.site_config.store import ConfigStore

router = APIRouter()


@router.get("/health")
async def health(store: ConfigStore = Depends(get_store)) -> dict:
    """Health check endpoint; also reports which backing store is in use."""
    return {"status": "ok", "mode": "remote" if store.remote_configured else "local"}
