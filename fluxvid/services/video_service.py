"""Request -> inference -> decoded video, as one call for the API layer."""
from __future__ import annotations

import logging

from fluxvid.models import GenerationRequest, GenerationResult
from fluxvid.services.decoder import DEFAULT_MAX_DEPTH, DEFAULT_MAX_NODES, decode_video
from fluxvid.services.errors import UpstreamFailureError
from fluxvid.services.inference import InferenceClient

logger = logging.getLogger(__name__)


async def generate_video(
    request: GenerationRequest,
    inference_client: InferenceClient,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> GenerationResult:
    response = await inference_client.request_inference(request)

    if not response.is_success:
        logger.warning("Model %s failed with %s", request.model_id, response.status_code)
        raise UpstreamFailureError(response.text or None, status_code=response.status_code)

    decoded = decode_video(response, max_depth=max_depth, max_nodes=max_nodes)
    return GenerationResult(
        video_url=decoded.video_ref,
        model_id=request.model_id,
        duration=request.duration,
    )
