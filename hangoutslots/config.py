"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class AppConfig(BaseModel):
    """Application configuration."""
    granularity_minutes: int = 30
    selectable_durations: List[int] = Field(default_factory=lambda: [30, 60])
    default_duration_minutes: int = 30
    timezone: str = "UTC"
    visible_days: int = 3
    events_file: Optional[Path] = None

    @field_validator("granularity_minutes")
    @classmethod
    def validate_granularity(cls, value: int) -> int:
        """Grid cells must tile an hour exactly."""
        if value <= 0 or 60 % value != 0:
            raise ValueError(f"granularity_minutes must evenly divide 60, got {value}")
        return value

    @field_validator("selectable_durations")
    @classmethod
    def validate_selectable_durations(cls, value: List[int]) -> List[int]:
        """Ensure durations are positive and deduplicated."""
        if not value:
            raise ValueError("selectable_durations must not be empty")
        invalid = [duration for duration in value if duration <= 0]
        if invalid:
            raise ValueError(f"selectable_durations must be positive, got {invalid}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for duration in value:
            if duration not in seen:
                deduped.append(duration)
                seen.add(duration)
        return deduped

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("visible_days")
    @classmethod
    def validate_visible_days(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"visible_days must be at least 1, got {value}")
        return value

    @model_validator(mode="after")
    def validate_durations_against_granularity(self) -> "AppConfig":
        """Every selectable duration must be a whole number of grid cells."""
        misaligned = [
            duration for duration in self.selectable_durations
            if duration % self.granularity_minutes != 0
        ]
        if misaligned:
            raise ValueError(
                f"selectable_durations must be multiples of {self.granularity_minutes}, "
                f"got {misaligned}"
            )
        if self.default_duration_minutes not in self.selectable_durations:
            raise ValueError(
                f"default_duration_minutes {self.default_duration_minutes} "
                f"is not one of {self.selectable_durations}"
            )
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative event files are resolved next to the config file
        if config.events_file is not None and not config.events_file.is_absolute():
            config.events_file = config_path.parent / config.events_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of hangoutslots/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the given config file, or the default one if it exists.

    An explicit path must exist; without one, a missing default file
    yields the built-in defaults.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()
