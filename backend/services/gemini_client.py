"""Google Gemini API wrapper with error handling."""

import logging
from typing import Protocol

from google import genai
from google.genai import types

from config import settings
from services.errors import AnalysisServiceError

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


class TextGenerator(Protocol):
    """Anything that turns a prompt into model text. Tests pass fakes."""

    async def generate(self, prompt: str) -> str:
        ...


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


class GeminiClient:
    """Async text generation against the configured Gemini model."""

    def __init__(
        self,
        client: genai.Client | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> None:
        self._client = client
        self.model = model or settings.gemini_model
        self.temperature = settings.gemini_temperature if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or settings.gemini_max_output_tokens

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(settings.gemini_api_key)

    async def generate(self, prompt: str) -> str:
        client = self._client or get_client()
        if client is None:
            raise AnalysisServiceError("Gemini API key is not configured")

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise AnalysisServiceError(f"Gemini API error: {e}") from e

        text = (response.text or "").strip()
        if not text:
            raise AnalysisServiceError("Gemini returned an empty response", code="malformed_response")
        return text
