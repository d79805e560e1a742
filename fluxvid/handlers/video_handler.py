"""Video endpoints consumed by the web UI."""
from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends

from fluxvid.config import Settings, get_settings
from fluxvid.models import ErrorResponse, GenerationRequest, GenerationResult, ModelsResponse
from fluxvid.services.inference import InferenceClient
from fluxvid.services.registry import ModelRegistryClient
from fluxvid.services.video_service import generate_video

router = APIRouter(prefix="/api/video", tags=["video"])
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True) as client:
        yield client


def get_inference_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> InferenceClient:
    return InferenceClient.from_settings(settings, http_client)


def get_registry_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> ModelRegistryClient:
    return ModelRegistryClient.from_settings(settings, http_client)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/models", response_model=ModelsResponse, responses=_ERROR_RESPONSES)
async def list_models(registry: ModelRegistryClient = Depends(get_registry_client)):
    """Most downloaded recent text-to-video models."""
    models = await registry.list_candidate_models()
    logger.info("Listing %d candidate models", len(models))
    return ModelsResponse(models=models)


@router.post("/generate", response_model=GenerationResult, responses=_ERROR_RESPONSES)
async def generate(
    request: GenerationRequest,
    settings: Settings = Depends(get_settings),
    inference_client: InferenceClient = Depends(get_inference_client),
):
    """Generate a video for *request* and return a playable reference."""
    logger.info(
        "Generating %ss @ %sfps %s with %s",
        request.duration,
        request.fps,
        request.resolution.value,
        request.model_id,
    )
    return await generate_video(
        request,
        inference_client,
        max_depth=settings.decoder_max_depth,
        max_nodes=settings.decoder_max_nodes,
    )
