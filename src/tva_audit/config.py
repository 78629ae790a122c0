"""Runtime configuration for TVA Schedule Audit."""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings


TVA_2010_NAMESPACE = "urn:tva:metadata:2010"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Anomaly detection
    guard_minutes: float = Field(
        default=5.0,
        ge=0,
        validation_alias="TVA_AUDIT_GUARD_MINUTES",
        description="Events must end this long before capture to count as wrong",
    )
    first_file_lookback_hours: float = Field(
        default=6.0,
        ge=0,
        validation_alias="TVA_AUDIT_FIRST_FILE_LOOKBACK_HOURS",
        description="Assumed gap before the first file of a run",
    )
    batch_gap_seconds: float = Field(
        default=60.0,
        ge=0,
        validation_alias="TVA_AUDIT_BATCH_GAP_SECONDS",
    )

    # File selection
    file_pattern: str = Field(
        default="*.xml",
        validation_alias="TVA_AUDIT_FILE_PATTERN"
    )
    exclude_marker: str | None = Field(
        default="_Loaded",
        validation_alias="TVA_AUDIT_EXCLUDE_MARKER"
    )
    capture_year: int | None = Field(
        default=None,
        validation_alias="TVA_AUDIT_CAPTURE_YEAR"
    )
    max_age_days: float | None = Field(
        default=None,
        ge=0,
        validation_alias="TVA_AUDIT_MAX_AGE_DAYS"
    )

    # Parsing
    tva_namespace: str = Field(
        default=TVA_2010_NAMESPACE,
        validation_alias="TVA_AUDIT_NAMESPACE"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def guard_interval(self) -> timedelta:
        """Guard interval as a timedelta."""
        return timedelta(minutes=self.guard_minutes)

    @property
    def first_file_lookback(self) -> timedelta:
        """Fallback gap before the first file as a timedelta."""
        return timedelta(hours=self.first_file_lookback_hours)

    @property
    def batch_gap(self) -> timedelta:
        return timedelta(seconds=self.batch_gap_seconds)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
