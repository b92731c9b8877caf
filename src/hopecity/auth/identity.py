"""Async client for the hosted identity provider.

Speaks the GoTrue REST dialect (``/auth/v1/...``): password sign-in,
token verification, sign-out and invite-by-email.  Only the calls this
service needs are wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from hopecity.config.settings import Settings

logger = structlog.get_logger()


class IdentityError(Exception):
    """The identity provider rejected a call or could not be reached."""


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None

    @classmethod
    def from_payload(cls, payload: dict | None) -> AuthUser:
        """Build from a provider user object.

        Raises:
            IdentityError: If the payload has no user id.
        """
        if not isinstance(payload, dict) or not payload.get("id"):
            raise IdentityError("Identity provider returned no user id")
        email = payload.get("email")
        return cls(id=str(payload["id"]), email=email if isinstance(email, str) else None)


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: AuthUser


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]
    return f"Request failed ({response.status_code})"


def _json_object(response: httpx.Response) -> dict:
    """Decode a success body, or raise IdentityError if it is not a JSON object."""
    try:
        data = response.json()
    except ValueError as e:
        raise IdentityError(f"Unexpected response from identity provider ({response.status_code})") from e
    if not isinstance(data, dict):
        raise IdentityError(f"Unexpected response from identity provider ({response.status_code})")
    return data


class IdentityClient:
    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._service_key = service_key
        self._http = http_client or httpx.AsyncClient(timeout=15.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> IdentityClient | None:
        """Build a client, or return ``None`` when identity is not configured."""
        if not settings.identity_configured:
            return None
        return cls(
            settings.identity_url,
            settings.identity_anon_key,
            service_key=settings.identity_service_key,
        )

    async def _request(self, method: str, path: str, *, token: str | None = None,
                       api_key: str | None = None, **kwargs) -> httpx.Response:
        headers = {"apikey": api_key or self._anon_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            return await self._http.request(
                method, f"{self.base_url}/auth/v1{path}", headers=headers, **kwargs
            )
        except httpx.HTTPError as e:
            raise IdentityError(str(e) or "Network error") from e

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email + password for a session.

        Raises:
            IdentityError: On bad credentials or transport failure.
        """
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code != 200:
            raise IdentityError(_error_message(response))
        data = _json_object(response)
        token = data.get("access_token")
        if not isinstance(token, str) or not token:
            raise IdentityError("Identity provider returned no access token")
        return AuthSession(access_token=token, user=AuthUser.from_payload(data.get("user")))

    async def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning *access_token*, or ``None`` if it is not valid.

        Raises:
            IdentityError: On transport failure or an unexpected status.
        """
        response = await self._request("GET", "/user", token=access_token)
        if response.status_code in (401, 403):
            return None
        if response.status_code != 200:
            raise IdentityError(_error_message(response))
        return AuthUser.from_payload(_json_object(response))

    async def sign_out(self, access_token: str) -> None:
        response = await self._request("POST", "/logout", token=access_token)
        if response.status_code >= 400 and response.status_code not in (401, 403):
            raise IdentityError(_error_message(response))

    async def invite_user_by_email(self, email: str) -> AuthUser:
        """Send an invite link to *email* so the recipient can set a password.

        Requires the service key.

        Raises:
            IdentityError: If the service key is missing or the provider
                rejects the invite.
        """
        if not self._service_key:
            raise IdentityError("Service key not configured")
        response = await self._request(
            "POST",
            "/invite",
            token=self._service_key,
            api_key=self._service_key,
            json={"email": email},
        )
        if response.status_code not in (200, 201):
            raise IdentityError(_error_message(response))
        data = _json_object(response)
        user = AuthUser.from_payload(data.get("user", data))
        logger.info("admin_invited", email=user.email)
        return user

    async def aclose(self) -> None:
        await self._http.aclose()
