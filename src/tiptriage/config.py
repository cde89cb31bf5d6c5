from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration sourced from environment variables."""

    service_title: str = "Tip Triage Service"
    service_version: str = "1.0.0"
    data_dir: str | None = None
    cors_origins: str = "*"

    auto_verify_threshold: float = 75.0
    spam_threshold: float = 70.0
    review_threshold: float = 40.0

    max_plausible_distance_km: float = Field(default=500.0, gt=100.0)
    max_travel_speed_kmh: float = 200.0
    impossible_timeline_window_hours: float = 48.0

    lead_proximity_km: float = Field(default=0.5, gt=0.0)
    location_similarity_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    duplicate_similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    sla_hours: dict[str, int] = Field(
        default_factory=lambda: {"critical": 1, "high": 4, "medium": 24, "low": 72}
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "TIPTRIAGE_",
        "case_sensitive": False,
    }


@lru_cache(1)
def get_settings() -> Settings:
    return Settings()
