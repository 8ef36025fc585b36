"""Google Gemini API wrapper with error handling."""

import logging

from google import genai
from google.genai import types

from services.errors import AITransportError, AIUnavailableError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin async wrapper that maps provider failures onto ExtractionFailure kinds.

    Timeouts are enforced by the caller (the reliability gate), not here.
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash") -> None:
        self.model = model
        self._client: genai.Client | None = None
        if api_key:
            self._client = genai.Client(api_key=api_key)
        else:
            logger.warning("No GEMINI_API_KEY set - AI extraction disabled")

    @property
    def is_available(self) -> bool:
        return self._client is not None

    async def generate(
        self, prompt: str, temperature: float = 0.3, max_output_tokens: int = 2000
    ) -> str:
        if self._client is None:
            raise AIUnavailableError("Gemini API key is not configured")

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            raise AITransportError(f"Gemini API error: {e}") from e

        text = (response.text or "").strip()
        if not text:
            raise AITransportError("Gemini returned an empty response")
        return text
