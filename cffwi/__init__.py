"""
cffwi: Canadian Forest Fire Weather Index System
================================================

Daily and hourly calculations of the Canadian Forest Fire Weather Index
(FWI) System: the three fuel moisture codes, the fire behaviour indices
derived from them, and sub-daily FFMC by Van Wagner's physical model or
Lawson's diurnal tables.

Modules
-------
tables : Lawson diurnal tables and day-length tables
sentinel : Domain-violation sentinel and checked index values
lawson : Diurnal table interpolation
daily : Daily FFMC, DMC and DC
indices : ISI, BUI, FWI and DSR
hourly : Hourly FFMC (Van Wagner and Lawson)
context : Location and clock interfaces
calculator : Daily/hourly orchestration
config : Configuration loading and validation
cli : Command-line interface

References
----------
- Van Wagner (1987). Development and Structure of the Canadian Forest
  Fire Weather Index System.
- Lawson, Armitage & Hoskins (1996). Diurnal variation in the Fine Fuel
  Moisture Code: tables and computer source code.
"""

__version__ = "0.1.0"

from cffwi.sentinel import INVALID, FWIDomainError, IndexValue, is_invalid

from cffwi.daily import daily_dc, daily_dmc, daily_ffmc

from cffwi.indices import bui, dsr, ff, fwi, isi_fbp, isi_fwi

from cffwi.hourly import (
    hourly_ffmc_lawson,
    hourly_ffmc_lawson_contiguous,
    hourly_ffmc_van_wagner,
    hourly_ffmc_van_wagner_previous,
)

from cffwi.context import Clock, ClockTime, Location, LocationProvider

from cffwi.config import (
    CalculatorConfig,
    HourlySettings,
    StartupCodes,
    StationConfig,
    load_config,
)

from cffwi.calculator import (
    CalculationResult,
    DailyIndices,
    DailyObservation,
    FWICalculator,
    HourlyIndices,
    HourlyObservation,
    MoistureState,
    compute_daily,
    compute_hourly,
)

__all__ = [
    "__version__",
    "INVALID",
    "FWIDomainError",
    "IndexValue",
    "is_invalid",
    "daily_ffmc",
    "daily_dmc",
    "daily_dc",
    "ff",
    "isi_fwi",
    "isi_fbp",
    "bui",
    "fwi",
    "dsr",
    "hourly_ffmc_van_wagner",
    "hourly_ffmc_van_wagner_previous",
    "hourly_ffmc_lawson",
    "hourly_ffmc_lawson_contiguous",
    "Clock",
    "ClockTime",
    "Location",
    "LocationProvider",
    "CalculatorConfig",
    "HourlySettings",
    "StartupCodes",
    "StationConfig",
    "load_config",
    "CalculationResult",
    "DailyIndices",
    "DailyObservation",
    "FWICalculator",
    "HourlyIndices",
    "HourlyObservation",
    "MoistureState",
    "compute_daily",
    "compute_hourly",
]
