"""Checks Happy configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from checkshappy.exceptions import ConfigurationError, check_config_keys

if TYPE_CHECKING:
    from checkshappy.amendments.text import SimilarityThresholds


class ChecksHappySettings(BaseSettings):
    """Checks Happy configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
    2. Config file values (YAML, TOML, or JSON)
       Multiple files: Later files override earlier ones
    3. Environment variables (prefixed with CHECKSHAPPY_)
       Example: export CHECKSHAPPY_LOG_LEVEL=DEBUG
    4. .env file (in current directory or specified path)
    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="CHECKSHAPPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # Amendment review thresholds (content similarity, 0-100)
    amendment_unchanged_threshold: int = Field(
        default=95,
        description="Similarity at or above which a revised scene counts as unchanged",
        ge=0,
        le=100,
    )
    amendment_minor_changes_threshold: int = Field(
        default=80,
        description="Similarity at or above which a change is minor dialogue/action",
        ge=0,
        le=100,
    )
    amendment_significant_changes_threshold: int = Field(
        default=50,
        description="Similarity at or above which a change is significant, "
        "below which it is a major rewrite",
        ge=0,
        le=100,
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and resolve path."""
        if v is None:
            return None
        if isinstance(v, str):
            expanded = os.path.expandvars(v)
            return Path(expanded).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        raise ValueError(
            f"Path fields must be string or Path. Got {type(v).__name__}: {v!r}"
        )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> str:
        """Normalize log format to lowercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"log_format must be a string, got {type(v).__name__}")

    @model_validator(mode="after")
    def check_threshold_order(self) -> ChecksHappySettings:
        """Thresholds must descend: unchanged >= minor >= significant."""
        if not (
            self.amendment_unchanged_threshold
            >= self.amendment_minor_changes_threshold
            >= self.amendment_significant_changes_threshold
        ):
            raise ValueError(
                "Amendment thresholds must satisfy unchanged >= minor_changes "
                ">= significant_changes, got "
                f"{self.amendment_unchanged_threshold}/"
                f"{self.amendment_minor_changes_threshold}/"
                f"{self.amendment_significant_changes_threshold}"
            )
        return self

    def similarity_thresholds(self) -> SimilarityThresholds:
        """Build the threshold policy used by the script amendment engine."""
        # Imported here to avoid a circular import through checkshappy.config
        from checkshappy.amendments.text import SimilarityThresholds

        return SimilarityThresholds(
            unchanged=self.amendment_unchanged_threshold,
            minor_changes=self.amendment_minor_changes_threshold,
            significant_changes=self.amendment_significant_changes_threshold,
        )

    @classmethod
    def from_env(cls) -> ChecksHappySettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> ChecksHappySettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> ChecksHappySettings:
        """Load settings with proper precedence from multiple sources.

        Args:
            config_files: List of config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        if config_files:
            for config_file in config_files:
                try:
                    file_settings = cls.from_file(config_file)
                except FileNotFoundError:
                    from checkshappy.config.logging import get_logger as _get_logger

                    _get_logger("checkshappy.config.settings").warning(
                        "Configuration file not found, using defaults",
                        config_file=str(config_file),
                    )
                    continue
                data.update(file_settings.model_dump(exclude_unset=True))

        if env_file:
            # pydantic-settings v2 supports the _env_file parameter
            settings = cast(
                "ChecksHappySettings", cast(Any, cls)(_env_file=env_file, **data)
            )
        else:
            settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: ChecksHappySettings | None = None
# Cache for config file paths that exist
_config_paths_cache: list[Path | str] | None = None


def _get_config_paths() -> list[Path | str]:
    """Get list of config file paths to check.

    Returns paths in priority order (later files override earlier).
    """
    global _config_paths_cache

    if _config_paths_cache is not None:
        return _config_paths_cache

    potential_paths = [
        # User config in home directory
        Path.home() / ".checkshappy" / "config.yaml",
        Path.home() / ".checkshappy" / "config.json",
        Path.home() / ".checkshappy" / "config.toml",
        # User config in .config directory (XDG standard)
        Path.home() / ".config" / "checkshappy" / "config.yaml",
        Path.home() / ".config" / "checkshappy" / "config.json",
        Path.home() / ".config" / "checkshappy" / "config.toml",
        # Project config in current directory
        Path.cwd() / "checkshappy.yaml",
        Path.cwd() / "checkshappy.json",
        Path.cwd() / "checkshappy.toml",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue

    _config_paths_cache = existing_paths
    return existing_paths


def get_settings() -> ChecksHappySettings:
    """Get the global settings instance.

    Returns:
        Global ChecksHappySettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = ChecksHappySettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = ChecksHappySettings.from_env()
    return _settings


def set_settings(settings: ChecksHappySettings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Clear the global settings cache.

    This forces get_settings() to re-read from environment variables
    and configuration files on the next call.
    """
    global _settings, _config_paths_cache
    _settings = None
    _config_paths_cache = None


def reset_settings() -> None:
    """Reset the global settings instance."""
    clear_settings_cache()


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ChecksHappySettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses standard config locations.
        cli_overrides: Dictionary of CLI argument overrides.
                      Only non-None values are applied.

    Returns:
        ChecksHappySettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return ChecksHappySettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered_overrides:
            data = settings.model_dump()
            data.update(filtered_overrides)
            settings = ChecksHappySettings(**data)

    return settings
