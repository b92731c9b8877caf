"""Public configuration read and admin save."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query
from pydantic import ValidationError

from hopecity.api.deps import get_identity, get_pins, get_store, get_view
from hopecity.api.schemas import SaveResponse
from hopecity.auth.identity import IdentityClient
from hopecity.auth.pin import PinGuard
from hopecity.auth.session import BearerAuth, parse_bearer
from hopecity.site_config.merge import build_config
from hopecity.site_config.results import SaveErrorKind
from hopecity.site_config.store import ConfigStore
from hopecity.site_config.view import ConfigView

logger = structlog.get_logger()

router = APIRouter(prefix="/api/config", tags=["config"])

STATUS_FOR_KIND = {
    SaveErrorKind.AUTH_REQUIRED: 401,
    SaveErrorKind.MISSING_SETTINGS_ROW: 404,
    SaveErrorKind.TRANSPORT_FAILURE: 502,
    SaveErrorKind.PARTIAL_WRITE: 500,
    SaveErrorKind.STORAGE_FAILURE: 500,
}


@router.get("")
async def get_config(
    refresh: bool = Query(default=False),
    view: ConfigView = Depends(get_view),
) -> dict:
    """Return the configuration the public page renders.

    The first request (or ``?refresh=true``) loads it from the store; after
    that it is kept current by save notifications within this process.
    """
    if refresh or not view.hydrated:
        await view.hydrate()
    return view.current.to_canonical()


@router.put("", response_model=SaveResponse)
async def put_config(
    body: dict = Body(...),
    store: ConfigStore = Depends(get_store),
    pins: PinGuard = Depends(get_pins),
    identity: IdentityClient | None = Depends(get_identity),
    authorization: str | None = Header(default=None),
    x_admin_pin: str | None = Header(default=None),
) -> SaveResponse:
    """Replace the site configuration.

    Remote mode authenticates the bearer token with the identity provider;
    local mode checks the ``X-Admin-Pin`` header.  Sections missing from the
    body are filled from the defaults.
    """
    try:
        config = build_config(body)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False)) from e

    auth = None
    if store.remote_configured:
        auth = BearerAuth(identity, parse_bearer(authorization))
    elif not pins.verify(x_admin_pin):
        raise HTTPException(
            status_code=401,
            detail={"ok": False, "kind": SaveErrorKind.AUTH_REQUIRED.value, "reason": "Incorrect PIN"},
        )

    result = await store.save_config(config, auth=auth)
    if not result.ok:
        logger.warning("config_save_failed", kind=result.kind.value, reason=result.reason)
        raise HTTPException(
            status_code=STATUS_FOR_KIND[result.kind],
            detail={"ok": False, "kind": result.kind.value, "reason": result.reason},
        )

    # Let the public view pick up the change before answering
    await store.wait_for_refreshes()
    return SaveResponse(ok=True, config=result.config.to_canonical())
