"""Admin authentication endpoints and the invite-an-admin relay."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from hopecity.api.deps import get_identity, get_pins, get_store
from hopecity.api.schemas import LoginRequest, LoginResponse, PinSetRequest, PinVerifyRequest
from hopecity.auth.identity import IdentityClient, IdentityError
from hopecity.auth.pin import PinGuard
from hopecity.auth.session import parse_bearer
from hopecity.site_config.store import ConfigStore

logger = structlog.get_logger()

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _require_local_mode(store: ConfigStore) -> None:
    if store.remote_configured:
        raise HTTPException(
            status_code=409,
            detail="PIN login is only used when no remote store is configured",
        )


@router.post("/pin")
async def set_pin(
    body: PinSetRequest,
    store: ConfigStore = Depends(get_store),
    pins: PinGuard = Depends(get_pins),
) -> dict:
    """Set the operator PIN.  Changing an existing PIN requires the current one."""
    _require_local_mode(store)
    if pins.has_pin() and not pins.verify(body.current_pin):
        raise HTTPException(status_code=401, detail="Incorrect PIN")
    try:
        pins.set_pin(body.pin)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return {"ok": True}


@router.post("/pin/verify")
async def verify_pin(
    body: PinVerifyRequest,
    store: ConfigStore = Depends(get_store),
    pins: PinGuard = Depends(get_pins),
) -> dict:
    _require_local_mode(store)
    if not pins.verify(body.pin):
        raise HTTPException(status_code=401, detail="Incorrect PIN")
    return {"ok": True, "pin_set": pins.has_pin()}


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    identity: IdentityClient | None = Depends(get_identity),
) -> LoginResponse:
    """Password sign-in against the identity provider (no public sign-up)."""
    if identity is None:
        raise HTTPException(status_code=503, detail="Identity provider is not configured")
    try:
        session = await identity.sign_in_with_password(body.email, body.password)
    except IdentityError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    return LoginResponse(
        access_token=session.access_token,
        user_id=session.user.id,
        email=session.user.email,
    )


@router.post("/invite")
async def invite_admin(
    request: Request,
    identity: IdentityClient | None = Depends(get_identity),
    authorization: str | None = Header(default=None),
) -> JSONResponse:
    """Invite a new admin by email.  Only an existing admin may call this."""
    if identity is None:
        return _error(500, "Server configuration error")

    token = parse_bearer(authorization)
    if not token:
        return _error(401, "Missing or invalid Authorization header")

    try:
        caller = await identity.get_user(token)
    except IdentityError as e:
        logger.warning("invite_caller_check_failed", error=str(e))
        caller = None
    if caller is None:
        return _error(401, "Unauthorized")

    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Invalid JSON body")

    email = body.get("email") if isinstance(body, dict) else None
    email = email.strip() if isinstance(email, str) else ""
    if not email:
        return _error(400, "Email is required")

    try:
        invited = await identity.invite_user_by_email(email)
    except IdentityError as e:
        return _error(400, str(e))

    logger.info("admin_invite_relayed", invited_by=caller.email)
    return JSONResponse(status_code=200, content={"ok": True, "user": invited.email})
