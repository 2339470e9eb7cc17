"""
Command-line interface for cffwi.

Commands:
- cffwi init: Generate configuration template
- cffwi daily: Step the daily codes and indices by one day
- cffwi hourly: Daily step followed by the hourly indices for a clock time
- cffwi validate: Validate configuration

Relative humidity is entered in percent on the command line.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from cffwi import __version__
from cffwi.calculator import (
    DailyObservation,
    FWICalculator,
    HourlyObservation,
    MoistureState,
)
from cffwi.config import (
    CalculatorConfig,
    HourlySettings,
    StationConfig,
    default_config,
    load_config,
    setup_logging,
)
from cffwi.context import ClockTime

logger = logging.getLogger(__name__)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(version=__version__, prog_name="cffwi")
def main():
    """
    Canadian Forest Fire Weather Index (FWI) System calculator.

    \b
    Quick Start:
        cffwi init                                  # Create config template
        cffwi daily -c cffwi.yaml --temp 25 --rh 40 --wind 15
        cffwi hourly -c cffwi.yaml --temp 25 --rh 40 --wind 15 --time 15:00
    """
    pass


# =============================================================================
# Shared Helpers
# =============================================================================

def _configure_logging(verbose: bool, quiet: bool, config_level: Optional[str] = None) -> None:
    """The verbosity flags win over the configured level."""
    if quiet:
        setup_logging(logging.ERROR)
    elif verbose:
        setup_logging(logging.DEBUG)
    else:
        setup_logging(config_level or logging.WARNING)


def _resolve_config(
    config_path: Optional[Path],
    lat: Optional[float],
    lon: Optional[float],
    dst: Optional[float],
) -> CalculatorConfig:
    """Load the configuration file, if any, and apply station overrides."""
    if config_path is not None:
        config = load_config(config_path)
    elif lat is None or lon is None:
        raise click.UsageError("Provide --lat and --lon, or a configuration file with --config")
    else:
        config = CalculatorConfig(station=StationConfig(latitude=lat, longitude=lon))

    overrides = {}
    if lat is not None:
        overrides["latitude"] = lat
    if lon is not None:
        overrides["longitude"] = lon
    if dst is not None:
        overrides["dst_hours"] = dst
    if overrides:
        station = StationConfig.model_validate(
            {**config.station.model_dump(), **overrides}
        )
        config = config.model_copy(update={"station": station})
    return config


def _starting_state(config: CalculatorConfig, ffmc, dmc, dc) -> MoistureState:
    startup = config.startup
    return MoistureState(
        ffmc=startup.ffmc if ffmc is None else ffmc,
        dmc=startup.dmc if dmc is None else dmc,
        dc=startup.dc if dc is None else dc,
    )


def _parse_time(value: str) -> tuple[int, int, int]:
    parts = value.split(":")
    if not 2 <= len(parts) <= 3:
        raise click.BadParameter(f"expected HH:MM or HH:MM:SS, got {value!r}", param_hint="--time")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        raise click.BadParameter(f"expected HH:MM or HH:MM:SS, got {value!r}", param_hint="--time")
    if len(numbers) == 2:
        numbers.append(0)
    return numbers[0], numbers[1], numbers[2]


def _echo_indices(title: str, values: dict) -> None:
    click.echo(title)
    for name, value in values.items():
        if value is None:
            continue
        click.echo(f"  {name.upper():<26} {value:10.4f}")


def _common_options(func):
    """Options shared by the daily and hourly commands."""
    options = [
        click.option("--config", "-c", "config_path", type=click.Path(exists=True, path_type=Path),
                     help="Configuration file (station and start-up codes)"),
        click.option("--lat", type=float, help="Latitude (degrees)"),
        click.option("--lon", type=float, help="Longitude (degrees)"),
        click.option("--month", "-m", type=click.IntRange(1, 12), default=7, show_default=True,
                     help="Month of the observation"),
        click.option("--ffmc", type=float, help="Yesterday's FFMC"),
        click.option("--dmc", type=float, help="Yesterday's DMC"),
        click.option("--dc", type=float, help="Yesterday's DC"),
        click.option("--temp", type=float, required=True, help="Noon temperature (C)"),
        click.option("--rh", type=float, required=True, help="Noon relative humidity (%)"),
        click.option("--wind", type=float, required=True, help="Noon wind speed (km/h)"),
        click.option("--rain", type=float, default=0.0, show_default=True,
                     help="24-hour precipitation (mm)"),
        click.option("--json", "as_json", is_flag=True, help="Print results as JSON"),
        click.option("--verbose", "-v", is_flag=True, help="Verbose output"),
        click.option("--quiet", "-q", is_flag=True, help="Suppress log output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


# =============================================================================
# Init Command
# =============================================================================

@main.command()
@click.option("--output", "-o", type=click.Path(path_type=Path), default=Path("cffwi.yaml"),
              show_default=True, help="Output path for configuration")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
def init(output: Path, force: bool):
    """
    Generate configuration template.

    Writes a YAML file with a sample station, the standard start-up codes
    and the hourly model settings.
    """
    output = Path(output)
    if output.exists() and not force:
        click.echo(f"File exists: {output}. Use --force to overwrite.", err=True)
        sys.exit(1)

    default_config().to_yaml(output)
    click.echo(f"Created configuration: {output}")


# =============================================================================
# Daily Command
# =============================================================================

@main.command()
@_common_options
def daily(config_path, lat, lon, month, ffmc, dmc, dc, temp, rh, wind, rain, as_json, verbose, quiet):
    """
    Calculate one day of FWI codes and indices.

    Yesterday's codes default to the start-up codes of the configuration
    (FFMC 85, DMC 25, DC 200 without one).
    """
    _configure_logging(verbose, quiet)

    try:
        config = _resolve_config(config_path, lat, lon, None)
        _configure_logging(verbose, quiet, config.log_level)
        state = _starting_state(config, ffmc, dmc, dc)
        calculator = FWICalculator.from_config(config)
        noon = DailyObservation(temp, rh / 100.0, rain, wind)
        result = calculator.run(state, noon, ClockTime(month=month))
    except (ValidationError, ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"daily": result.daily.to_dict()}, indent=2))
    else:
        _echo_indices(f"Daily indices ({config.station.name})", result.daily.to_dict())


# =============================================================================
# Hourly Command
# =============================================================================

@main.command()
@_common_options
@click.option("--time", "-t", "time_of_day", default="12:00", show_default=True,
              help="Local clock time, HH:MM or HH:MM:SS")
@click.option("--dst", type=float, help="Daylight saving shift in effect (hours)")
@click.option("--hour-temp", type=float, help="Temperature for the hour (C), defaults to noon")
@click.option("--hour-rh", type=float, help="Relative humidity for the hour (%), defaults to noon")
@click.option("--hour-wind", type=float, help="Wind speed for the hour (km/h), defaults to noon")
@click.option("--hour-rain", type=float, default=0.0, show_default=True,
              help="Precipitation during the hour (mm)")
@click.option("--prev-hourly-ffmc", type=float, help="FFMC of the previous hour (Van Wagner seed)")
@click.option("--van-wagner/--lawson", default=None,
              help="Hourly FFMC model (defaults to the configuration)")
@click.option("--contiguous", is_flag=True, help="Use the contiguous Lawson model")
def hourly(config_path, lat, lon, month, ffmc, dmc, dc, temp, rh, wind, rain, as_json,
           verbose, quiet, time_of_day, dst, hour_temp, hour_rh, hour_wind, hour_rain,
           prev_hourly_ffmc, van_wagner, contiguous):
    """
    Calculate hourly FFMC, ISI and FWI for a clock time.

    The daily step runs first with the noon weather; the hourly stage then
    uses the hour's weather, which defaults to the noon values.
    """
    _configure_logging(verbose, quiet)
    hour, minute, second = _parse_time(time_of_day)

    try:
        config = _resolve_config(config_path, lat, lon, dst)
        _configure_logging(verbose, quiet, config.log_level)
        settings_update = {}
        if van_wagner is not None:
            settings_update["use_van_wagner_hourly_model"] = van_wagner
        if contiguous:
            settings_update["use_contiguous_lawson"] = True
        if settings_update:
            settings = HourlySettings.model_validate(
                {**config.hourly.model_dump(), **settings_update}
            )
            config = config.model_copy(update={"hourly": settings})
        # Requesting hourly output overrides calculate_hourly.
        config = config.model_copy(update={"calculate_hourly": True})

        state = _starting_state(config, ffmc, dmc, dc)
        calculator = FWICalculator.from_config(config)
        noon = DailyObservation(temp, rh / 100.0, rain, wind)
        observation = HourlyObservation(
            temperature=temp if hour_temp is None else hour_temp,
            relative_humidity=(rh if hour_rh is None else hour_rh) / 100.0,
            precipitation=hour_rain,
            wind_speed=wind if hour_wind is None else hour_wind,
            previous_hourly_ffmc=prev_hourly_ffmc,
        )
        clock = ClockTime(month=month, hour=hour, minute=minute, second=second)
        result = calculator.run(state, noon, clock, observation)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        payload = {"daily": result.daily.to_dict(), "hourly": result.hourly.to_dict()}
        click.echo(json.dumps(payload, indent=2))
    else:
        _echo_indices(f"Daily indices ({config.station.name})", result.daily.to_dict())
        _echo_indices(f"Hourly indices at {time_of_day}", result.hourly.to_dict())


# =============================================================================
# Validate Command
# =============================================================================

@main.command()
@click.argument("config_path", type=click.Path(exists=True, path_type=Path))
def validate(config_path):
    """
    Validate configuration file.
    """
    click.echo(f"Validating: {config_path}")

    try:
        config = load_config(config_path)
    except (ValidationError, ValueError) as e:
        click.echo(f"\n✗ Validation failed: {e}", err=True)
        sys.exit(1)

    station = config.station
    click.echo("\n✓ Configuration loaded successfully")
    click.echo(f"\nStation: {station.name} ({station.latitude:.4f}, {station.longitude:.4f})")
    click.echo(f"UTC offset: {station.timezone_offset_hours:+.1f} h, DST: {station.dst_hours:.1f} h")
    click.echo(
        f"Start-up codes: FFMC {config.startup.ffmc}, DMC {config.startup.dmc}, DC {config.startup.dc}"
    )
    click.echo(f"Hourly stage: {'on' if config.calculate_hourly else 'off'}")
    for name, value in config.hourly.model_dump().items():
        click.echo(f"  {name}: {value}")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
