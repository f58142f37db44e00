"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.time_converter import DEFAULT_TIMEZONE, is_valid_timezone

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CacheConfig(BaseModel):
    """Settings for the fully-booked month cache."""
    ttl_seconds: float = 300.0
    max_entries: int = 512

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl(cls, value: float) -> float:
        """Ensure entries live for a positive amount of time."""
        if value <= 0:
            raise ValueError("ttl_seconds must be greater than zero")
        return value

    @field_validator("max_entries")
    @classmethod
    def validate_max_entries(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_entries must be greater than zero")
        return value


class EngineConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    step_min: int = 15
    tenant_id: str = "default"
    data_file: Optional[Path] = None
    log_level: str = "WARNING"
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject names missing from the timezone database."""
        if not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("step_min")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure the slot step is positive."""
        if value <= 0:
            raise ValueError("step_min must be greater than zero")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            EngineConfig instance

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

        # Relative data paths are resolved against the config file location.
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = (config_path.parent / config.data_file).resolve()

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
