"""Face API REST client."""

from pathlib import Path

import httpx

from emotion_engine.config import FACE_API_ENDPOINT, FACE_API_KEY, FACE_ATTRIBUTES, HTTP_TIMEOUT
from emotion_engine.errors import ConfigurationError
from emotion_engine.models import FaceResult

DETECT_PATH = "/face/v1.0/detect"


class FaceClient:
    """Client for the Cognitive Services Face detect endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        timeout: float = HTTP_TIMEOUT,
        attributes: tuple[str, ...] = FACE_ATTRIBUTES,
        return_face_id: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or FACE_API_KEY
        if not self.api_key:
            raise ConfigurationError("Face API key is required. Set FACE_API_KEY in .env file.")
        self.endpoint = (endpoint or FACE_API_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self.attributes = attributes
        self.return_face_id = return_face_id
        self._transport = transport

    async def detect(self, image: bytes) -> list[FaceResult]:
        """Detect faces in JPEG/PNG bytes, in the order the service returns them."""
        params = {
            "returnFaceId": str(self.return_face_id).lower(),
            "returnFaceLandmarks": "true",
            "returnFaceAttributes": ",".join(self.attributes),
        }
        headers = {
            "Ocp-Apim-Subscription-Key": self.api_key,
            "Content-Type": "application/octet-stream",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                self.endpoint + DETECT_PATH, params=params, headers=headers, content=image
            )
            resp.raise_for_status()
        return [FaceResult.from_api(item) for item in resp.json()]

    async def detect_file(self, path: Path) -> list[FaceResult]:
        return await self.detect(path.read_bytes())
