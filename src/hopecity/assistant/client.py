"""Gemini API client wrapper for the prayer assistant.

Uses the google-genai SDK; the SDK retries transient errors itself.  Every
failure is returned as a :class:`PrayerResult` error so the page can show a
friendly message instead of crashing.
"""
from __future__ import annotations

from dataclasses import dataclass

import structlog
from google import genai
from google.genai import types

from hopecity.assistant.prompt import SYSTEM_PROMPT, format_user_input

logger = structlog.get_logger()

DEFAULT_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class PrayerResult:
    text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.text is not None


def create_client(api_key: str) -> genai.Client:
    """Create a Gemini API client.

    Args:
        api_key: Google AI Studio API key.

    Returns:
        Configured genai.Client instance.
    """
    return genai.Client(api_key=api_key)


async def generate_prayer(
    client: genai.Client,
    user_input: str,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.7,
    max_output_tokens: int = 400,
) -> PrayerResult:
    """Generate a short prayer and a Bible verse for what the visitor shared.

    Args:
        client: Gemini API client.
        user_input: The visitor's feeling or situation.
        model: Gemini model name.
        temperature: Sampling temperature.
        max_output_tokens: Upper bound on the generated length.

    Returns:
        PrayerResult with ``text`` on success, ``error`` otherwise.
    """
    if not user_input.strip():
        return PrayerResult(error="Please share what is on your heart.")

    try:
        response = await client.aio.models.generate_content(
            model=model,
            contents=format_user_input(user_input),
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_PROMPT,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        )
    except Exception as e:
        logger.warning("gemini_call_failed", model=model, error=str(e))
        return PrayerResult(error="Sorry, something went wrong. Please try again.")

    text = (response.text or "").strip()
    if not text:
        logger.info("gemini_empty_response", model=model)
        return PrayerResult(error="No text generated")

    usage = response.usage_metadata
    logger.debug(
        "gemini_call_complete",
        model=model,
        prompt_tokens=getattr(usage, "prompt_token_count", 0) or 0,
        completion_tokens=getattr(usage, "candidates_token_count", 0) or 0,
    )
    return PrayerResult(text=text)
