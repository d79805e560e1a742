"""Typed failures raised by the video generation pipeline.

Every error carries the HTTP status the API layer should answer with and a
message that is shown to the user verbatim.
"""
from __future__ import annotations


class VideoPipelineError(Exception):
    """Base class for all pipeline failures."""

    status_code: int = 500
    default_message: str = "Unexpected error during video generation"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# Configuration -------------------------------------------------------------


class ConfigurationError(VideoPipelineError):
    status_code = 500


class MissingCredentialError(ConfigurationError):
    default_message = "Hugging Face API token is not configured"


# Upstream inference --------------------------------------------------------


class UpstreamBackpressureError(VideoPipelineError):
    """The model host keeps answering "loading, try later"."""

    status_code = 502


class InferenceTimeoutError(UpstreamBackpressureError):
    default_message = "Timed out while waiting for Hugging Face model to generate a video"


class UpstreamFailureError(VideoPipelineError):
    """Terminal non-2xx answer from the inference endpoint."""

    status_code = 502
    default_message = "Video generation failed"


# Decoding ------------------------------------------------------------------


class DecodeError(VideoPipelineError):
    status_code = 502
    default_message = "Failed to decode video from Hugging Face response"


class EmptyResponseError(DecodeError):
    default_message = "Received empty response from video model"


class MissingVideoPayloadError(DecodeError):
    default_message = "Video payload missing in model response"


# Model registry ------------------------------------------------------------


class RegistryError(VideoPipelineError):
    status_code = 502
    default_message = "Failed to query Hugging Face"


class NoCandidatesError(VideoPipelineError):
    status_code = 404
    default_message = "No recent Hugging Face video models were found"
