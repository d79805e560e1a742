"""Hugging Face hosted-inference wrapper for text-to-video models.

The hosted API answers 503 (or 202) with an ``estimated_time`` while a cold
model is loading. Those answers are retried after the suggested delay; every
other answer is handed back to the caller untouched.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

import httpx

from fluxvid.config import Settings
from fluxvid.models import GenerationRequest
from fluxvid.services.errors import InferenceTimeoutError, MissingCredentialError, UpstreamFailureError
from fluxvid.services.polling import PollTimeout, poll_until_ready

logger = logging.getLogger(__name__)

BACKPRESSURE_STATUSES = frozenset({202, 503})


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    """Request body understood by the common text-to-video pipelines."""

    frames = request.frame_count
    dims = request.dimensions
    return {
        "inputs": {
            "prompt": request.prompt,
            "fps": request.fps,
            "num_frames": frames,
            "max_frames": frames,
            "duration_seconds": request.duration,
            "max_duration_seconds": request.duration,
            "width": dims.width,
            "height": dims.height,
        },
        "parameters": {
            "max_video_duration": request.duration,
            "num_frames": frames,
            "fps": request.fps,
            "width": dims.width,
            "height": dims.height,
        },
        "options": {
            "wait_for_model": True,
            "use_cache": False,
        },
    }


def is_backpressure(response: httpx.Response) -> bool:
    return response.status_code in BACKPRESSURE_STATUSES


def estimated_time(response: httpx.Response) -> Optional[float]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("estimated_time")
    return None


class InferenceClient:  # pylint: disable=too-few-public-methods
    """Async client posting generation requests to one hosted model per call."""

    def __init__(
        self,
        *,
        token: str | None,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api-inference.huggingface.co/models",
        max_retries: int = 60,
        default_wait: float = 5.0,
        max_wait: float | None = None,
        max_total_wait: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._token = token
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._default_wait = default_wait
        self._max_wait = max_wait
        self._max_total_wait = max_total_wait
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient, **kwargs: Any) -> "InferenceClient":
        return cls(
            token=settings.huggingface_api_token,
            http_client=http_client,
            base_url=settings.inference_base_url,
            max_retries=settings.inference_max_retries,
            default_wait=settings.inference_default_wait,
            max_wait=settings.inference_max_wait,
            max_total_wait=settings.inference_max_total_wait,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def model_url(self, model_id: str) -> str:
        return f"{self._base_url}/{quote(model_id, safe='')}"

    async def request_inference(self, request: GenerationRequest) -> httpx.Response:
        """POST *request* to its model, waiting out "model loading" answers.

        Returns the first response that is not backpressure, whatever its
        status. Raises ``MissingCredentialError`` before any I/O when no token
        is configured and ``InferenceTimeoutError`` once the retry budget or
        the cumulative wait ceiling is spent.
        """

        if not self._token:
            raise MissingCredentialError()

        url = self.model_url(request.model_id)
        payload = build_payload(request)
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json,video/mp4",
        }
        logger.debug("POST %s -> %s", url, payload)

        async def send() -> httpx.Response:
            try:
                return await self._client.post(url, json=payload, headers=headers)
            except httpx.HTTPError as exc:
                raise UpstreamFailureError(str(exc) or "Could not reach inference endpoint", status_code=502) from exc

        try:
            response = await poll_until_ready(
                send,
                should_retry=is_backpressure,
                wait_hint=estimated_time,
                max_retries=self._max_retries,
                default_wait=self._default_wait,
                max_wait=self._max_wait,
                max_total_wait=self._max_total_wait,
                sleep=self._sleep,
            )
        except PollTimeout as exc:
            logger.warning("Model %s still loading: %s", request.model_id, exc)
            raise InferenceTimeoutError() from exc

        logger.info("Model %s answered %s", request.model_id, response.status_code)
        return response
