"""Prayer assistant endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from google import genai

from hopecity.api.deps import get_app_settings, get_assistant_client
from hopecity.api.schemas import PrayerRequest, PrayerResponse
from hopecity.assistant.client import generate_prayer
from hopecity.config.settings import Settings

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


@router.post("/prayer", response_model=PrayerResponse)
async def prayer(
    body: PrayerRequest,
    client: genai.Client | None = Depends(get_assistant_client),
    settings: Settings = Depends(get_app_settings),
) -> PrayerResponse:
    if client is None:
        raise HTTPException(status_code=503, detail="Prayer assistant is not configured")
    if not body.input.strip():
        raise HTTPException(status_code=400, detail="Please share what is on your heart.")

    result = await generate_prayer(client, body.input, model=settings.gemini_model)
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.error)
    return PrayerResponse(text=result.text)
