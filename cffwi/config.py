"""
Configuration loading and validation for cffwi.

This module provides Pydantic models for validating the cffwi.yaml
configuration file and utility functions for loading and saving
configurations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# Configuration Models
# =============================================================================


class StationConfig(BaseModel):
    """Weather station location, in degrees and hours."""

    name: str = Field("station", description="Station name")
    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude (degrees)")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude (degrees)")
    timezone_offset_hours: float = Field(
        0.0, ge=-14.0, le=14.0, description="Local standard time offset from UTC (hours)"
    )
    dst_hours: float = Field(0.0, ge=0.0, le=2.0, description="Daylight saving shift in effect (hours)")


class StartupCodes(BaseModel):
    """Moisture codes used to start the season."""

    ffmc: float = Field(85.0, ge=0.0, le=101.0, description="Start-up FFMC")
    dmc: float = Field(25.0, ge=0.0, description="Start-up DMC")
    dc: float = Field(200.0, ge=0.0, description="Start-up DC")


class HourlySettings(BaseModel):
    """Hourly FFMC model selection."""

    use_van_wagner_hourly_model: bool = Field(
        False, description="Step FFMC with Van Wagner's model instead of Lawson's tables"
    )
    use_lawson_previous_hour_seed: bool = Field(
        False, description="Seed Van Wagner from the Lawson previous-hour FFMC"
    )
    use_contiguous_lawson: bool = Field(
        False, description="Blend Lawson values across hour boundaries in the morning"
    )

    @model_validator(mode="after")
    def check_model_choice(self) -> "HourlySettings":
        if self.use_van_wagner_hourly_model and self.use_contiguous_lawson:
            raise ValueError("use_contiguous_lawson cannot be combined with use_van_wagner_hourly_model")
        return self


class CalculatorConfig(BaseModel):
    """Root configuration model."""

    station: StationConfig
    startup: StartupCodes = Field(default_factory=StartupCodes)
    hourly: HourlySettings = Field(default_factory=HourlySettings)
    calculate_hourly: bool = Field(False, description="Run the hourly stage after the daily one")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "WARNING", description="Logging level when no verbosity flag is given"
    )

    def to_yaml(self, path: str | Path) -> Path:
        """
        Write the configuration to a YAML file.

        Parameters
        ----------
        path : str or Path
            Destination file; parent directories are created.

        Returns
        -------
        Path
            The written file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False)
        logger.info(f"Configuration written to {path}")
        return path


def default_config() -> CalculatorConfig:
    """Configuration template with a sample station in central Alberta."""
    return CalculatorConfig(
        station=StationConfig(
            name="sample",
            latitude=53.5,
            longitude=-113.5,
            timezone_offset_hours=-7.0,
            dst_hours=0.0,
        )
    )


# =============================================================================
# Loading
# =============================================================================


def load_config(config_path: str | Path) -> CalculatorConfig:
    """
    Load and validate configuration from a YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to the cffwi.yaml configuration file.

    Returns
    -------
    CalculatorConfig
        Validated configuration object.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    ValueError
        If the configuration is empty or invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raise ValueError(f"Empty configuration file: {config_path}")

    config = CalculatorConfig.model_validate(raw_config)

    logger.info(f"Configuration loaded: {config.station.name}")

    return config


def setup_logging(level: str | int = "INFO") -> None:
    """
    Configure root logging for command-line use.

    Parameters
    ----------
    level : str or int
        Logging level name (e.g. "DEBUG") or numeric level.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        force=True,
    )
