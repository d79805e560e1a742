from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DecodedVideo(BaseModel):
    """A playable reference: a URL or a ``data:`` URI with embedded bytes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    video_ref: str
    mime_type: str | None = None


class ErrorResponse(BaseModel):
    error: str
