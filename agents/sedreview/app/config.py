"""Configuration for the sediment review agent."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ReviewSettings(BaseSettings):
    """Runtime configuration driven by environment variables."""

    qa_db: str = Field(default="02", validation_alias=AliasChoices("SEDREVIEW_QA_DB", "QA_DB"))
    include_uv: bool = Field(
        default=False, validation_alias=AliasChoices("SEDREVIEW_INCLUDE_UV", "INCLUDE_UV")
    )
    return_all_tables: bool = Field(
        default=False,
        validation_alias=AliasChoices("SEDREVIEW_RETURN_ALL_TABLES", "RETURN_ALL_TABLES"),
    )
    artifacts_dir: Path = Field(
        default_factory=lambda: Path("artifacts"),
        validation_alias=AliasChoices("SEDREVIEW_ARTIFACTS_DIR", "ARTIFACTS_DIR"),
    )
    log_level: str = Field(
        default="INFO", validation_alias=AliasChoices("SEDREVIEW_LOG_LEVEL", "LOG_LEVEL")
    )

    model_config = SettingsConfigDict(env_file=None, extra="ignore", populate_by_name=True)

    @field_validator("qa_db")
    @classmethod
    def _two_digit_database(cls, value: str) -> str:
        value = value.strip()
        if len(value) != 2 or not value.isdigit():
            raise ValueError(f"qa_db must be a two-digit database number, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return value

    @property
    def resolved_artifacts_dir(self) -> Path:
        """Return a writable artifacts directory, creating it if necessary."""

        path = Path(self.artifacts_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path


def get_settings() -> ReviewSettings:
    """Load :class:`ReviewSettings` using the default environment lookup."""

    return ReviewSettings()
