from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    # Hugging Face
    huggingface_api_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("HUGGINGFACE_API_TOKEN", "HF_API_TOKEN"),
        description="Bearer token for the hosted inference API.",
    )
    inference_base_url: str = "https://api-inference.huggingface.co/models"
    registry_url: str = "https://huggingface.co/api/models"

    # Model directory
    registry_pipeline_tag: str = "text-to-video"
    registry_fallback_search: str = "long video"
    registry_page_limit: int = Field(200, ge=1)
    recency_cutoff_year: int = Field(2025, description="Models last modified before this year are skipped.")
    max_candidates: int = Field(10, ge=1)

    # Inference retry loop
    inference_max_retries: int = Field(60, ge=0)
    inference_default_wait: float = Field(5.0, ge=0, description="Seconds to wait when the model gives no estimate.")
    inference_max_wait: float = Field(120.0, ge=0, description="Upper bound on a single server-suggested wait.")
    inference_max_total_wait: float = Field(1800.0, ge=0, description="Upper bound on cumulative waiting per request.")

    # Response decoding
    decoder_max_depth: int = Field(32, ge=1)
    decoder_max_nodes: int = Field(10_000, ge=1)

    # Server
    http_timeout: float = 120.0
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
