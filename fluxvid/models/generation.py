from __future__ import annotations

import math
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_DURATION_SECONDS = 60
DEFAULT_FPS = 24
MAX_DURATION_SECONDS = 300
MAX_FPS = 60
MAX_TOTAL_FRAMES = 18000


class Resolution(str, Enum):
    SD_480 = "480p"
    HD_720 = "720p"
    FHD_1080 = "1080p"


class ResolutionProfile(NamedTuple):
    width: int
    height: int


_RESOLUTION_PROFILES: dict[str, ResolutionProfile] = {
    Resolution.SD_480.value: ResolutionProfile(854, 480),
    Resolution.HD_720.value: ResolutionProfile(1280, 720),
    Resolution.FHD_1080.value: ResolutionProfile(1920, 1080),
}
_FALLBACK_PROFILE = _RESOLUTION_PROFILES[Resolution.HD_720.value]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def resolution_to_dimensions(resolution: Resolution | str | None) -> ResolutionProfile:
    """Map a resolution label to pixels; anything unknown is 1280x720."""
    if isinstance(resolution, Resolution):
        resolution = resolution.value
    if not isinstance(resolution, str):
        return _FALLBACK_PROFILE
    return _RESOLUTION_PROFILES.get(resolution, _FALLBACK_PROFILE)


def total_frames(duration_seconds: float, fps: float) -> int:
    return clamp(round_half_up(duration_seconds * fps), 1, MAX_TOTAL_FRAMES)


def _clamp_number(value: Any, default: int, high: int) -> Any:
    """Round and clamp numeric input; non-numeric values are left for validation to reject."""
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return default
        return clamp(round_half_up(value), 1, high)
    return value


class GenerationRequest(BaseModel):
    """A user's video generation order. Out-of-range numbers are clamped, not rejected."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    prompt: str = Field(..., min_length=1)
    model_id: str = Field(..., min_length=1)
    duration: int = DEFAULT_DURATION_SECONDS
    fps: int = DEFAULT_FPS
    resolution: Resolution = Resolution.HD_720

    @field_validator("prompt", "model_id", mode="before")
    @classmethod
    def _strip_required(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _clamp_duration(cls, value: Any) -> Any:
        return _clamp_number(value, DEFAULT_DURATION_SECONDS, MAX_DURATION_SECONDS)

    @field_validator("fps", mode="before")
    @classmethod
    def _clamp_fps(cls, value: Any) -> Any:
        return _clamp_number(value, DEFAULT_FPS, MAX_FPS)

    @field_validator("resolution", mode="before")
    @classmethod
    def _coerce_resolution(cls, value: Any) -> Any:
        if isinstance(value, Resolution):
            return value
        if not isinstance(value, str) or value not in _RESOLUTION_PROFILES:
            return Resolution.HD_720
        return value

    @property
    def dimensions(self) -> ResolutionProfile:
        return resolution_to_dimensions(self.resolution)

    @property
    def frame_count(self) -> int:
        return total_frames(self.duration, self.fps)


class GenerationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())

    video_url: str
    model_id: str
    duration: int | None = None
