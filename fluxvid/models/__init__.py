from .candidate import ModelCandidate, ModelsResponse
from .generation import (
    GenerationRequest,
    GenerationResult,
    Resolution,
    ResolutionProfile,
    resolution_to_dimensions,
    total_frames,
)
from .video import DecodedVideo, ErrorResponse

__all__ = [
    "ModelCandidate",
    "ModelsResponse",
    "GenerationRequest",
    "GenerationResult",
    "Resolution",
    "ResolutionProfile",
    "resolution_to_dimensions",
    "total_frames",
    "DecodedVideo",
    "ErrorResponse",
]
