"""Pydantic request/response schemas for the site API."""

from __future__ import annotations

from pydantic import BaseModel


class SaveResponse(BaseModel):
    ok: bool
    config: dict


class PinSetRequest(BaseModel):
    pin: str
    current_pin: str | None = None


class PinVerifyRequest(BaseModel):
    pin: str


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    user_id: str
    email: str | None = None


class PrayerRequest(BaseModel):
    input: str


class PrayerResponse(BaseModel):
    text: str
