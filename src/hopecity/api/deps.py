"""FastAPI dependencies resolving the per-process components from app state."""

from fastapi import Request
from google import genai

from hopecity.auth.identity import IdentityClient
from hopecity.auth.pin import PinGuard
from hopecity.config.settings import Settings
from hopecity.site_config.store import ConfigStore
from hopecity.site_config.view import ConfigView


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ConfigStore:
    return request.app.state.store


def get_view(request: Request) -> ConfigView:
    return request.app.state.view


def get_pins(request: Request) -> PinGuard:
    return request.app.state.pins


def get_identity(request: Request) -> IdentityClient | None:
    return request.app.state.identity


def get_assistant_client(request: Request) -> genai.Client | None:
    return request.app.state.assistant_client
