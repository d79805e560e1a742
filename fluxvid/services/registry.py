"""Hugging Face model directory lookup.

Picks the most downloaded recent text-to-video models so the UI can offer a
short list instead of the full registry.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import httpx

from fluxvid.config import Settings
from fluxvid.models import ModelCandidate
from fluxvid.services.errors import NoCandidatesError, RegistryError

logger = logging.getLogger(__name__)


def _modified_year(timestamp: str) -> Optional[int]:
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.year


def _count(record: dict[str, Any], key: str) -> int:
    value = record.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    return 0


def _model_name(record: dict[str, Any]) -> str:
    model_id = record.get("modelId")
    if isinstance(model_id, str) and model_id:
        return model_id
    return record["id"]


def filter_recent_models(
    records: Iterable[dict[str, Any]],
    *,
    cutoff_year: int = 2025,
    limit: int = 10,
) -> list[dict[str, Any]]:
    """Drop incomplete, duplicate and stale records, then rank by popularity.

    Duplicates are detected on the source identifier (``modelId`` falling back
    to ``id``); the first record that passes every other check wins.
    """

    seen: set[str] = set()
    kept: list[dict[str, Any]] = []
    for record in records:
        if not isinstance(record, dict) or not record.get("id") or not isinstance(record["id"], str):
            continue
        source_id = _model_name(record)
        if source_id in seen:
            continue
        timestamp = record.get("lastModified")
        if not timestamp or not isinstance(timestamp, str):
            continue
        year = _modified_year(timestamp)
        if year is None or year < cutoff_year:
            continue
        seen.add(source_id)
        kept.append(record)

    kept.sort(key=lambda r: (_count(r, "downloads"), _count(r, "likes")), reverse=True)
    return kept[:limit]


def to_candidate(record: dict[str, Any]) -> ModelCandidate:
    return ModelCandidate(
        id=record["id"],
        name=_model_name(record),
        last_modified=record.get("lastModified") or datetime.now(timezone.utc).isoformat(),
        downloads=_count(record, "downloads"),
        likes=_count(record, "likes"),
    )


class ModelRegistryClient:  # pylint: disable=too-few-public-methods
    """Minimal async client for the public model listing endpoint."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        token: str | None = None,
        url: str = "https://huggingface.co/api/models",
        pipeline_tag: str = "text-to-video",
        fallback_search: str = "long video",
        page_limit: int = 200,
        cutoff_year: int = 2025,
        max_candidates: int = 10,
    ) -> None:
        self._client = http_client
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._url = url
        self._pipeline_tag = pipeline_tag
        self._fallback_search = fallback_search
        self._page_limit = page_limit
        self._cutoff_year = cutoff_year
        self._max_candidates = max_candidates

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient) -> "ModelRegistryClient":
        return cls(
            http_client=http_client,
            token=settings.huggingface_api_token,
            url=settings.registry_url,
            pipeline_tag=settings.registry_pipeline_tag,
            fallback_search=settings.registry_fallback_search,
            page_limit=settings.registry_page_limit,
            cutoff_year=settings.recency_cutoff_year,
            max_candidates=settings.max_candidates,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def list_candidate_models(self) -> list[ModelCandidate]:
        primary = self._filter(await self._fetch_models())

        if len(primary) < self._max_candidates:
            logger.info(
                "Only %d recent models for %s, widening search with %r",
                len(primary),
                self._pipeline_tag,
                self._fallback_search,
            )
            fallback = await self._fetch_models(search=self._fallback_search)
            merged: dict[Any, dict[str, Any]] = {}
            for record in [*primary, *fallback]:
                if isinstance(record, dict) and isinstance(record.get("id"), str):
                    merged[record["id"]] = record
            primary = self._filter(merged.values())

        if not primary:
            raise NoCandidatesError(f"No Hugging Face video models from {self._cutoff_year} were found")

        return [to_candidate(record) for record in primary]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _filter(self, records: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        return filter_recent_models(records, cutoff_year=self._cutoff_year, limit=self._max_candidates)

    async def _fetch_models(self, *, search: str | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if search:
            params["search"] = search
        params.update(
            {
                "pipeline_tag": self._pipeline_tag,
                "sort": "downloads",
                "direction": "-1",
                "limit": str(self._page_limit),
            }
        )
        logger.debug("GET %s %s", self._url, params)
        try:
            resp = await self._client.get(self._url, params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise RegistryError(str(exc) or None) from exc
        if not resp.is_success:
            raise RegistryError(resp.text or None)
        try:
            data = resp.json()
        except ValueError as exc:
            raise RegistryError("Unable to parse model registry response") from exc
        if not isinstance(data, list):
            raise RegistryError("Unexpected model registry response")
        return data
