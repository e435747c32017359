"""
FrameWalk Configuration
=======================

This module handles configuration loading for FrameWalk.

Configuration Sources (in order of precedence):
    1. Command-line flags (applied by the CLI)
    2. Environment variables
    3. config.yaml file
    4. Default values (lowest priority)

Environment Variable Mapping:
    FRAMEWALK_MAX_FRAMES        -> selection.max_frames
    FRAMEWALK_LEADING_COPIES    -> selection.leading_copies
    FRAMEWALK_WEIGHT_LOCAL      -> selection.weight_local
    FRAMEWALK_WEIGHT_GLOBAL     -> selection.weight_global
    FRAMEWALK_METRIC            -> selection.metric
    FRAMEWALK_PREFILTER_K       -> selection.prefilter_k
    FRAMEWALK_FORCE_GRAYSCALE   -> decode.force_grayscale
    FRAMEWALK_FRAME_DURATION_MS -> output.frame_duration_ms
    FRAMEWALK_LOG_LEVEL         -> logging.level
    FRAMEWALK_LOG_FORMAT        -> logging.format

Example:
    from framewalk.config import load_config

    settings = load_config()
    print(settings.selection.max_frames)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from framewalk.errors import ConfigurationError
from framewalk.selection.metrics import available_metrics


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class SelectionConfig(BaseModel):
    """Frame selection configuration."""

    max_frames: int = Field(default=10, ge=1, description="Maximum frames in the output")
    leading_copies: int = Field(
        default=1,
        ge=0,
        description="Copies of the reference frame at the start (0 acts as 1)",
    )
    weight_local: float = Field(
        default=1.0,
        ge=0,
        allow_inf_nan=False,
        description="Weight of the distance to the previous frame",
    )
    weight_global: float = Field(
        default=1.0,
        ge=0,
        allow_inf_nan=False,
        description="Weight of the distance to the reference frame",
    )
    metric: str = Field(
        default="squared_error",
        description="Distance metric: 'squared_error' or 'hamming'",
    )
    prefilter_k: int = Field(
        default=0,
        ge=0,
        description="Keep only the k candidates closest to the reference (0 = off)",
    )

    @field_validator("metric")
    @classmethod
    def _known_metric(cls, value: str) -> str:
        if value not in available_metrics():
            raise ValueError(
                f"unknown metric {value!r}, expected one of {available_metrics()}"
            )
        return value


class DecodeConfig(BaseModel):
    """Image decoding configuration."""

    force_grayscale: bool = Field(
        default=True,
        description="Convert images to grayscale while decoding",
    )
    extensions: List[str] = Field(
        default_factory=lambda: [".jpg", ".jpeg"],
        description="File suffixes read from the input directory (empty = all files)",
    )


class OutputConfig(BaseModel):
    """Output container configuration."""

    frame_duration_ms: int = Field(
        default=100,
        gt=0,
        description="Display time of each frame in milliseconds",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for FrameWalk.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class RunConfig(BaseModel):
    """
    Fully resolved parameters of one run.

    Every field is required. Built by the CLI from its positional
    arguments and the loaded Settings.
    """

    reference_path: Path
    input_dir: Path
    output_path: Path
    max_frames: int = Field(ge=1)
    leading_copies: int = Field(ge=0)
    weight_local: float = Field(ge=0, allow_inf_nan=False)
    weight_global: float = Field(ge=0, allow_inf_nan=False)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        ConfigurationError: If the file cannot be parsed or values are invalid
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".config" / "framewalk" / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break
    elif not Path(config_path).exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    try:
        _apply_env_overrides(config_data)
        settings = Settings.model_validate(config_data)
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    return settings


def _parse_bool(value: str) -> bool:
    """Parse an environment flag."""
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Selection settings
    if env_max := os.environ.get("FRAMEWALK_MAX_FRAMES"):
        config_data.setdefault("selection", {})["max_frames"] = int(env_max)
    if env_lead := os.environ.get("FRAMEWALK_LEADING_COPIES"):
        config_data.setdefault("selection", {})["leading_copies"] = int(env_lead)
    if env_wl := os.environ.get("FRAMEWALK_WEIGHT_LOCAL"):
        config_data.setdefault("selection", {})["weight_local"] = float(env_wl)
    if env_wg := os.environ.get("FRAMEWALK_WEIGHT_GLOBAL"):
        config_data.setdefault("selection", {})["weight_global"] = float(env_wg)
    if env_metric := os.environ.get("FRAMEWALK_METRIC"):
        config_data.setdefault("selection", {})["metric"] = env_metric
    if env_k := os.environ.get("FRAMEWALK_PREFILTER_K"):
        config_data.setdefault("selection", {})["prefilter_k"] = int(env_k)

    # Decode settings
    if env_gray := os.environ.get("FRAMEWALK_FORCE_GRAYSCALE"):
        config_data.setdefault("decode", {})["force_grayscale"] = _parse_bool(env_gray)

    # Output settings
    if env_duration := os.environ.get("FRAMEWALK_FRAME_DURATION_MS"):
        config_data.setdefault("output", {})["frame_duration_ms"] = int(env_duration)

    # Logging settings
    if env_log := os.environ.get("FRAMEWALK_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("FRAMEWALK_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
