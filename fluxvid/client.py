"""Python client for the video API, mirroring what the web UI calls."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from fluxvid.models import GenerationRequest, GenerationResult, ModelCandidate

logger = logging.getLogger(__name__)


class VideoApiError(Exception):
    """Raised when the video API answers with an error or an unreadable body."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class VideoApiClient:
    """Minimal async client for ``/api/video``."""

    def __init__(self, base_url: str = "http://localhost:8000", *, http_client: httpx.AsyncClient | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        # Generation can sit through a long model warm-up.
        self._client = http_client or httpx.AsyncClient(timeout=None)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_video_models(self) -> list[ModelCandidate]:
        resp = await self._client.get(f"{self._base_url}/api/video/models")
        data = _json_or_none(resp)
        if not resp.is_success:
            raise VideoApiError(resp.status_code, _error_message(data, "Failed to load models"))

        if not isinstance(data, dict) or not isinstance(data.get("models"), list):
            raise VideoApiError(resp.status_code, "Unable to parse models response")
        try:
            return [ModelCandidate.model_validate(item) for item in data["models"]]
        except ValidationError as exc:
            raise VideoApiError(resp.status_code, "Unable to parse models response") from exc

    async def generate_video(self, request: GenerationRequest) -> GenerationResult:
        payload = request.model_dump(by_alias=True, mode="json")
        logger.debug("POST generate %s", payload)
        resp = await self._client.post(f"{self._base_url}/api/video/generate", json=payload)
        data = _json_or_none(resp)
        if not resp.is_success:
            raise VideoApiError(resp.status_code, _error_message(data, "Failed to generate video"))

        if not isinstance(data, dict) or not isinstance(data.get("videoUrl"), str):
            raise VideoApiError(resp.status_code, "Invalid response from video generation service")
        try:
            return GenerationResult.model_validate(data)
        except ValidationError as exc:
            raise VideoApiError(resp.status_code, "Invalid response from video generation service") from exc

    async def close(self) -> None:
        await self._client.aclose()


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

def _json_or_none(resp: httpx.Response) -> Optional[Any]:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_message(data: Any, default: str) -> str:
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return default
