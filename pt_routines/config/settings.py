from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get default database URL, using an absolute path for SQLite.

    The routine store is a local key/value store; a SQLite file next to the
    project is enough for development and the CLI.
    """
    db_path = Path(__file__).parent.parent.parent / "pt_routines.db"
    return f"sqlite:///{db_path.resolve()}"


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="PT_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="PT_LOG_FILE")
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="PT_DATABASE_URL",
    )
    duration_convention: Literal["average", "max"] = Field(
        default="average",
        validation_alias="PT_DURATION_CONVENTION",
        description="How a ranged duration hint ('3–5 minutes') becomes minutes",
    )
    swap_time_tolerance_min: int = Field(
        default=10,
        validation_alias="PT_SWAP_TIME_TOLERANCE_MIN",
        description="Maximum minute difference for a like-for-like swap candidate",
    )
    planning_window_days: int = Field(
        default=21,
        validation_alias="PT_PLANNING_WINDOW_DAYS",
        description="Horizon (days from today) within which sessions get reminders",
    )
    reminder_day_before_hour: int = Field(default=19, validation_alias="PT_REMINDER_DAY_BEFORE_HOUR")
    reminder_day_of_hour: int = Field(default=9, validation_alias="PT_REMINDER_DAY_OF_HOUR")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid PT_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("swap_time_tolerance_min", "planning_window_days")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("reminder_day_before_hour", "reminder_day_of_hour")
    @classmethod
    def validate_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError("reminder hour must be between 0 and 23")
        return value


settings = Settings()
