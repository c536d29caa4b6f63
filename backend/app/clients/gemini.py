"""Gemini generateContent client."""

import logging

import httpx

from app.clients.errors import NarrativeError
from app.config import ConfigError, GeminiConfig

logger = logging.getLogger(__name__)

FORMAT_ERROR_REPLY = (
    "Sorry, unable to generate analysis report. Please check API configuration."
)
PARSE_ERROR_REPLY = "Sorry, error occurred while parsing AI response."


class GeminiClient:
    """Text generation over the Gemini REST API."""

    BASE_URL = "https://generativelanguage.googleapis.com"

    def __init__(
        self,
        config: GeminiConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not config.api_key:
            raise ConfigError("GEMINI_API_KEY environment variable not set")
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Returns:
            The first candidate's first text part, or a fixed apology string
            when the response body cannot be read

        Raises:
            NarrativeError: on transport failure or non-2xx status
        """
        logger.debug(
            f"Sending request to Gemini API, prompt length: {len(prompt)} characters"
        )

        body = {"contents": [{"parts": [{"text": prompt}]}]}
        client = await self._get_client()
        try:
            response = await client.post(
                f"/v1beta/models/{self.config.model}:generateContent",
                params={"key": self.config.api_key},
                json=body,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Network request failed: {e!r}")
            raise NarrativeError(f"Network request failed: {e}") from e

        if not response.is_success:
            logger.warning(
                f"Gemini API request failed: {response.status_code} - {response.text}"
            )
            raise NarrativeError(
                f"Gemini API request failed: {response.status_code} - {response.text}"
            )

        try:
            payload = response.json()
            candidates = payload["candidates"]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to parse Gemini response: {e!r}")
            return PARSE_ERROR_REPLY

        text = extract_text(candidates)
        if text is None:
            logger.warning("Gemini API response format error")
            return FORMAT_ERROR_REPLY

        logger.info(f"Gemini API response successful, length: {len(text)} characters")
        return text


def extract_text(candidates) -> str | None:
    """First text part of the first candidate, if present."""
    try:
        return candidates[0]["content"]["parts"][0]["text"]
    except (IndexError, KeyError, TypeError):
        return None
