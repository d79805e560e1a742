"""Turn whatever a video model returns into one playable reference.

Models answer either with raw video bytes or with JSON that hides the video
somewhere inside (``video``, ``generated_video``, ``videos[...]``,
``data[...]`` or deeper). The JSON search is depth-first with a fixed
field priority and stops at the first hit.
"""
from __future__ import annotations

import base64
import logging
import re
from typing import Any, NamedTuple, Optional

import httpx

from fluxvid.models import DecodedVideo
from fluxvid.services.errors import EmptyResponseError, MissingVideoPayloadError

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_MIME = "video/mp4"
DEFAULT_MAX_DEPTH = 32
DEFAULT_MAX_NODES = 10_000

_DIRECT_FIELDS = ("video", "generated_video")
_LIST_FIELDS = ("videos", "data")
_PASSTHROUGH_PREFIXES = ("data:", "http://", "https://")
_BASE64_RE = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")
_WHITESPACE_RE = re.compile(r"\s+")


class VideoCandidate(NamedTuple):
    video: str
    mime_type: Optional[str] = None


class _VideoSearch:
    """Depth-first search bounded by depth and by the number of nodes visited."""

    def __init__(self, max_depth: int, max_nodes: int) -> None:
        self.max_depth = max_depth
        self.max_nodes = max_nodes
        self.visited = 0

    def visit(self, node: Any, depth: int = 0) -> Optional[VideoCandidate]:
        if depth > self.max_depth or self.visited >= self.max_nodes:
            return None
        self.visited += 1

        if isinstance(node, dict):
            return self._visit_object(node, depth)
        if isinstance(node, list):
            return self._visit_array(node, depth)
        return None

    def _visit_object(self, node: dict, depth: int) -> Optional[VideoCandidate]:
        mime_type = node.get("mime_type")
        if not isinstance(mime_type, str):
            mime_type = None

        for field in _DIRECT_FIELDS:
            if isinstance(node.get(field), str):
                return VideoCandidate(node[field], mime_type)

        for field in _LIST_FIELDS:
            if isinstance(node.get(field), list):
                found = self._visit_array(node[field], depth)
                if found:
                    return found

        for value in node.values():
            found = self.visit(value, depth + 1)
            if found:
                return found
        return None

    def _visit_array(self, items: list, depth: int) -> Optional[VideoCandidate]:
        for item in items:
            found = self.visit(item, depth + 1)
            if found:
                return found
        return None


def extract_video_from_json(
    payload: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> Optional[VideoCandidate]:
    """Return the first video string in *payload*, or None."""

    return _VideoSearch(max_depth, max_nodes).visit(payload)


def normalise_video_data(video: str, mime_type: str | None = None) -> str:
    """Make *video* usable as a video source.

    URLs and data URIs pass through. Bare base64 is wrapped into a data URI.
    Anything else is returned stripped and otherwise untouched.
    """

    trimmed = video.strip()
    if trimmed.startswith(_PASSTHROUGH_PREFIXES):
        return trimmed
    candidate = _WHITESPACE_RE.sub("", trimmed)
    if _BASE64_RE.match(candidate):
        prefix = mime_type if mime_type and mime_type.startswith("video/") else DEFAULT_VIDEO_MIME
        return f"data:{prefix};base64,{candidate}"
    return trimmed


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def decode_video(
    response: httpx.Response,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> DecodedVideo:
    """Decode a successful inference response into a ``DecodedVideo``."""

    content_type = response.headers.get("content-type", "")

    if "application/json" not in content_type.lower():
        media_type = _media_type(content_type)
        mime_type = media_type if media_type.startswith("video/") else DEFAULT_VIDEO_MIME
        encoded = base64.b64encode(response.content).decode("ascii")
        logger.debug("Binary video response: %d bytes of %s", len(response.content), mime_type)
        return DecodedVideo(video_ref=f"data:{mime_type};base64,{encoded}", mime_type=mime_type)

    try:
        payload = response.json()
    except ValueError as exc:
        raise EmptyResponseError() from exc
    if not payload and not isinstance(payload, (dict, list)):
        raise EmptyResponseError()

    found = extract_video_from_json(payload, max_depth=max_depth, max_nodes=max_nodes)
    if found is None:
        logger.warning("No video field in model response with keys %s", _top_keys(payload))
        raise MissingVideoPayloadError()

    mime_type = found.mime_type if found.mime_type and found.mime_type.startswith("video/") else None
    return DecodedVideo(video_ref=normalise_video_data(found.video, found.mime_type), mime_type=mime_type)


def _top_keys(payload: Any) -> list[str]:
    if isinstance(payload, dict):
        return list(payload)[:20]
    return []
