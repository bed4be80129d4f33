"""episodeforge configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from episodeforge.exceptions import ConfigurationError, check_config_keys


class EpisodeForgeSettings(BaseSettings):
    """episodeforge configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
    2. Config file values (YAML, TOML, or JSON); later files override earlier
    3. Environment variables (prefixed with EPISODEFORGE_)
       Example: export EPISODEFORGE_BULK_ITEM_DELAY_SECONDS=2
    4. .env file in the current directory
    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="EPISODEFORGE_",
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
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # Quality analysis
    quality_min_narration_length: int = Field(
        default=20,
        description="Minimum narration length considered for duplicate detection",
        ge=1,
    )
    quality_oversized_threshold: int = Field(
        default=2000,
        description="Prompt text longer than this many characters is oversized",
        ge=1,
    )
    quality_filler_phrases: list[str] | None = Field(
        default=None,
        description="Replace the built-in filler phrase list",
    )

    # Character consistency
    consistency_min_keyword_length: int = Field(
        default=5,
        description=(
            "Host clothing/appearance keywords must be longer than this many "
            "characters before they are checked"
        ),
        ge=0,
    )

    # Analytics
    default_scene_duration: int = Field(
        default=8,
        description="Duration in seconds assumed for scenes without one",
        ge=0,
    )

    # Bulk generation
    bulk_item_delay_seconds: float = Field(
        default=1.0,
        description="Pause between consecutive batch items (rate limiting)",
        ge=0.0,
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and user home in path values."""
        if v is None:
            return None
        if isinstance(v, str):
            return Path(os.path.expandvars(v)).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        raise ValueError(
            f"Path fields must be str or Path, got {type(v).__name__}: {v!r}"
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

    @classmethod
    def from_env(cls) -> EpisodeForgeSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> EpisodeForgeSettings:
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
    ) -> EpisodeForgeSettings:
        """Load settings with proper precedence from multiple sources.

        Args:
            config_files: Config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments; None values are ignored.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        for config_file in config_files or []:
            try:
                file_settings = cls.from_file(config_file)
            except FileNotFoundError:
                from episodeforge.config.logging import get_logger as _get_logger

                _get_logger("episodeforge.config.settings").warning(
                    "Configuration file not found, using defaults",
                    config_file=str(config_file),
                )
                continue
            data.update(file_settings.model_dump(exclude_unset=True))

        if env_file:
            settings = cast(
                "EpisodeForgeSettings", cast(Any, cls)(_env_file=env_file, **data)
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
_settings: EpisodeForgeSettings | None = None


def _get_config_paths() -> list[Path | str]:
    """Get existing config files in priority order (later overrides earlier)."""
    potential_paths = [
        Path.home() / ".config" / "episodeforge" / "config.yaml",
        Path.home() / ".config" / "episodeforge" / "config.toml",
        Path.cwd() / "episodeforge.yaml",
        Path.cwd() / "episodeforge.json",
        Path.cwd() / "episodeforge.toml",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> EpisodeForgeSettings:
    """Get the global settings instance.

    Returns:
        Global EpisodeForgeSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = EpisodeForgeSettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = EpisodeForgeSettings.from_env()
    return _settings


def set_settings(settings: EpisodeForgeSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Force get_settings() to re-read environment and config files."""
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> EpisodeForgeSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file; standard locations otherwise.
        cli_overrides: CLI argument overrides. Only non-None values are applied.

    Returns:
        EpisodeForgeSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return EpisodeForgeSettings.from_multiple_sources(
            config_files=[config_file], cli_args=cli_overrides
        )
    if cli_overrides:
        return EpisodeForgeSettings.from_multiple_sources(
            config_files=_get_config_paths(), cli_args=cli_overrides
        )
    return get_settings()
