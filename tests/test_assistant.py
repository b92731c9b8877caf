"""Tests for the prayer assistant.  No Gemini API key required."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from hopecity.assistant.client import PrayerResult, generate_prayer
from hopecity.assistant.prompt import MAX_INPUT_CHARS, SYSTEM_PROMPT, format_user_input


def make_client(text: str | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.aio.models.generate_content = AsyncMock(side_effect=error)
    else:
        client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(
                text=text,
                usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=40),
            )
        )
    return client


class TestPrompt:
    def test_system_prompt_asks_for_prayer_and_verse(self):
        assert "prayer" in SYSTEM_PROMPT
        assert "Bible verse" in SYSTEM_PROMPT

    def test_format_user_input(self):
        assert format_user_input("  anxious about work  ") == "User input: anxious about work"

    def test_long_input_is_truncated(self):
        formatted = format_user_input("x" * (MAX_INPUT_CHARS + 50))
        assert formatted.endswith("...")
        assert len(formatted) <= len("User input: ") + MAX_INPUT_CHARS + 3


class TestGeneratePrayer:
    async def test_success(self):
        client = make_client(text="  Lord, grant peace.\n\nPhilippians 4:7  ")
        result = await generate_prayer(client, "I feel anxious", model="gemini-test")

        assert result == PrayerResult(text="Lord, grant peace.\n\nPhilippians 4:7")
        assert result.ok
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "User input: I feel anxious"
        assert kwargs["config"].system_instruction == SYSTEM_PROMPT

    async def test_blank_input_skips_the_call(self):
        client = make_client(text="unused")
        result = await generate_prayer(client, "   ")
        assert not result.ok
        assert result.error == "Please share what is on your heart."
        client.aio.models.generate_content.assert_not_awaited()

    async def test_empty_response(self):
        result = await generate_prayer(make_client(text=None), "hello")
        assert result.error == "No text generated"

    async def test_api_failure_becomes_error_result(self):
        result = await generate_prayer(make_client(error=RuntimeError("quota")), "hello")
        assert not result.ok
        assert result.error.startswith("Sorry")
