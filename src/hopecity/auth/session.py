"""Answering "who is making this write?" for the remote store."""

from __future__ import annotations

from typing import Protocol

import structlog

from hopecity.auth.identity import AuthSession, AuthUser, IdentityClient

logger = structlog.get_logger()


class Authenticator(Protocol):
    async def get_user(self) -> AuthUser | None: ...


class SessionAuth:
    """One operator's signed-in session (admin CLI or a long-lived panel)."""

    def __init__(self, identity: IdentityClient) -> None:
        self._identity = identity
        self._session: AuthSession | None = None

    @property
    def session(self) -> AuthSession | None:
        return self._session

    async def sign_in(self, email: str, password: str) -> AuthUser:
        self._session = await self._identity.sign_in_with_password(email, password)
        logger.info("admin_signed_in", email=self._session.user.email)
        return self._session.user

    async def sign_out(self) -> None:
        if self._session is None:
            return
        session, self._session = self._session, None
        await self._identity.sign_out(session.access_token)

    async def get_user(self) -> AuthUser | None:
        if self._session is None:
            return None
        return await self._identity.get_user(self._session.access_token)


class BearerAuth:
    """A bearer token taken from one HTTP request."""

    def __init__(self, identity: IdentityClient | None, token: str | None) -> None:
        self._identity = identity
        self._token = token

    async def get_user(self) -> AuthUser | None:
        if not self._token or self._identity is None:
            return None
        return await self._identity.get_user(self._token)


def parse_bearer(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None
