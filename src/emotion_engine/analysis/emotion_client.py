"""Emotion API REST client."""

from pathlib import Path

import httpx

from emotion_engine.config import EMOTION_API_ENDPOINT, EMOTION_API_KEY, HTTP_TIMEOUT
from emotion_engine.errors import ConfigurationError
from emotion_engine.models import EmotionResult

RECOGNIZE_PATH = "/emotion/v1.0/recognize"


class EmotionClient:
    """Client for the Cognitive Services Emotion recognize endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        timeout: float = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or EMOTION_API_KEY
        if not self.api_key:
            raise ConfigurationError(
                "Emotion API key is required. Set EMOTION_API_KEY in .env file."
            )
        self.endpoint = (endpoint or EMOTION_API_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def recognize(self, image: bytes) -> list[EmotionResult]:
        """Score emotions for every face in the image bytes."""
        headers = {
            "Ocp-Apim-Subscription-Key": self.api_key,
            "Content-Type": "application/octet-stream",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(self.endpoint + RECOGNIZE_PATH, headers=headers, content=image)
            resp.raise_for_status()
        return [EmotionResult.from_api(item) for item in resp.json()]

    async def recognize_file(self, path: Path) -> list[EmotionResult]:
        return await self.recognize(path.read_bytes())
