"""Runtime configuration for the Crew Timeline layout engine."""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

from crew_timeline.models.viewport import ViewMode


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Schedule data
    data_file: Path = Field(
        default=Path("./schedule.json"),
        validation_alias="CREW_TIMELINE_DATA_FILE"
    )

    # Day-granular (multi-day Gantt) geometry
    day_width_px: int = Field(
        default=140,
        gt=0,
        validation_alias="CREW_TIMELINE_DAY_WIDTH"
    )
    item_inset_px: int = Field(
        default=4,
        ge=0,
        validation_alias="CREW_TIMELINE_ITEM_INSET"
    )
    shift_inset_px: int = Field(
        default=6,
        ge=0,
        validation_alias="CREW_TIMELINE_SHIFT_INSET"
    )
    default_range_days: int = Field(
        default=90,
        gt=0,
        validation_alias="CREW_TIMELINE_RANGE_DAYS"
    )

    # Hour-granular (single-day) geometry
    hour_width_px: int = Field(
        default=80,
        gt=0,
        validation_alias="CREW_TIMELINE_HOUR_WIDTH"
    )
    name_column_px: int = Field(
        default=180,
        ge=0,
        validation_alias="CREW_TIMELINE_NAME_COLUMN"
    )

    # Lane stacking
    lane_height_px: int = Field(
        default=70,
        gt=0,
        validation_alias="CREW_TIMELINE_LANE_HEIGHT"
    )
    lane_base_offset_px: int = Field(
        default=20,
        ge=0,
        validation_alias="CREW_TIMELINE_LANE_OFFSET"
    )

    # Live time indicator
    indicator_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        le=1.0,
        validation_alias="CREW_TIMELINE_INDICATOR_INTERVAL"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        validation_alias="CREW_TIMELINE_LOG_LEVEL"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    def get_unit_width(self, mode: ViewMode) -> int:
        """Get the pixel width of one grid unit for a view mode."""
        match mode:
            case ViewMode.DAILY:
                return self.day_width_px
            case ViewMode.HOURLY:
                return self.hour_width_px

    def get_day_width_total(self) -> int:
        """Width of a full 24-hour row in the hourly view."""
        return self.hour_width_px * 24


# Cached instance for the CLI; library code takes Settings as an argument
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
