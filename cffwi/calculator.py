"""
Daily and hourly FWI orchestration.

``compute_daily`` steps yesterday's moisture codes forward with the noon
observation and derives the intensity indices. ``compute_hourly`` then
produces an hourly FFMC (Lawson's tables or Van Wagner's model), hourly
ISI and hourly FWI for a clock time on the same day.

The formulas report bad inputs with the -98.0 sentinel and do not
recognise it as an input, so every composition step here checks its
operands first: a failed moisture code marks its dependents invalid and
logs a warning instead of producing a meaningless number.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from cffwi.config import CalculatorConfig, HourlySettings
from cffwi.context import Clock, Location, LocationProvider
from cffwi.daily import daily_dc, daily_dmc, daily_ffmc
from cffwi.hourly import (
    hourly_ffmc_lawson,
    hourly_ffmc_lawson_contiguous,
    hourly_ffmc_van_wagner,
    hourly_ffmc_van_wagner_previous,
)
from cffwi.indices import bui, dsr, fwi, isi_fwi
from cffwi.sentinel import INVALID, IndexValue, is_invalid

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class MoistureState:
    """Yesterday's moisture codes; replaced, never mutated, each day."""

    ffmc: float = 85.0
    dmc: float = 25.0
    dc: float = 200.0


@dataclass(frozen=True)
class DailyObservation:
    """
    Noon LST weather.

    Attributes
    ----------
    temperature : float
        Temperature (degrees Celsius).
    relative_humidity : float
        Relative humidity as a fraction (0-1).
    precipitation : float
        Precipitation over the prior 24 hours (mm).
    wind_speed : float
        Wind speed (km/h).
    """

    temperature: float
    relative_humidity: float
    precipitation: float
    wind_speed: float


@dataclass(frozen=True)
class HourlyObservation:
    """
    Weather for one hour.

    ``rh_start`` and ``rh_end`` are the relative humidity at the start and
    end of the hour, used by the contiguous Lawson model; both default to
    ``relative_humidity``. ``previous_hourly_ffmc`` is the FFMC carried
    from the previous hour, used to seed Van Wagner's model.
    """

    temperature: float
    relative_humidity: float
    precipitation: float
    wind_speed: float
    rh_start: float | None = None
    rh_end: float | None = None
    previous_hourly_ffmc: float | None = None


def _checked(indices, name: str) -> IndexValue:
    if name not in indices.__dataclass_fields__:
        raise KeyError(f"Unknown index: {name}")
    return IndexValue.of(getattr(indices, name), name)


@dataclass(frozen=True)
class DailyIndices:
    """Results of the daily stage."""

    ffmc: float
    dmc: float
    dc: float
    bui: float
    isi: float
    fwi: float
    dsr: float

    def next_state(self) -> MoistureState:
        """Moisture codes to carry into tomorrow."""
        return MoistureState(ffmc=self.ffmc, dmc=self.dmc, dc=self.dc)

    def checked(self, name: str) -> IndexValue:
        """Return the named index wrapped with its validity."""
        return _checked(self, name)

    def to_dict(self) -> dict[str, float]:
        """Indices keyed by name, for JSON output."""
        return asdict(self)


@dataclass(frozen=True)
class HourlyIndices:
    """
    Results of the hourly stage.

    Attributes
    ----------
    ffmc, isi, fwi : float
        Hourly FFMC, ISI and FWI.
    bui : float
        BUI used for the hourly FWI (yesterday's before noon).
    previous_ffmc : float
        Lawson FFMC one hour earlier, for diagnostics.
    previous_ffmc_van_wagner : float or None
        FFMC one hour earlier recovered by inverting Van Wagner's model,
        only when that model is active.
    """

    ffmc: float
    isi: float
    fwi: float
    bui: float
    previous_ffmc: float
    previous_ffmc_van_wagner: float | None = None

    def checked(self, name: str) -> IndexValue:
        """Return the named index wrapped with its validity."""
        if name == "previous_ffmc_van_wagner" and self.previous_ffmc_van_wagner is None:
            return IndexValue(INVALID, False, name)
        return _checked(self, name)

    def to_dict(self) -> dict[str, float | None]:
        """Indices keyed by name; the Van Wagner field may be None."""
        return asdict(self)


@dataclass(frozen=True)
class CalculationResult:
    """Output of one ``FWICalculator.run`` call."""

    daily: DailyIndices
    hourly: HourlyIndices | None
    next_state: MoistureState


# =============================================================================
# Daily Stage
# =============================================================================


def _guard(name: str, value: float) -> bool:
    """True if ``value`` is usable; logs a warning for sentinels."""
    if is_invalid(value):
        logger.warning(f"{name} is invalid; dependent indices are reported as {INVALID}")
        return False
    return True


def compute_daily(
    state: MoistureState,
    observation: DailyObservation,
    location: LocationProvider,
    clock: Clock,
) -> tuple[DailyIndices, MoistureState]:
    """
    Step the daily moisture codes and derive the daily indices.

    Parameters
    ----------
    state : MoistureState
        Yesterday's codes.
    observation : DailyObservation
        Noon LST weather.
    location : LocationProvider
        Site; latitude selects the day-length tables.
    clock : Clock
        Provides the month (1-12).

    Returns
    -------
    tuple[DailyIndices, MoistureState]
        Today's indices and the state to carry into tomorrow.
    """
    month = clock.month - 1
    rain = observation.precipitation
    temperature = observation.temperature
    rh = observation.relative_humidity
    wind_speed = observation.wind_speed

    ffmc = daily_ffmc(state.ffmc, rain, temperature, rh, wind_speed)
    dc = daily_dc(state.dc, rain, temperature, location.latitude, location.longitude, month)
    dmc = daily_dmc(state.dmc, rain, temperature, location.latitude, location.longitude, month, rh)

    ffmc_ok = _guard("Daily FFMC", ffmc)
    dc_ok = _guard("Daily DC", dc)
    dmc_ok = _guard("Daily DMC", dmc)

    day_bui = bui(dc, dmc) if dc_ok and dmc_ok else INVALID
    day_isi = isi_fwi(ffmc, wind_speed, SECONDS_PER_DAY) if ffmc_ok else INVALID
    if is_invalid(day_bui) or is_invalid(day_isi):
        day_fwi = INVALID
        day_dsr = INVALID
    else:
        day_fwi = fwi(day_isi, day_bui)
        day_dsr = dsr(day_fwi)

    indices = DailyIndices(
        ffmc=ffmc, dmc=dmc, dc=dc,
        bui=day_bui, isi=day_isi, fwi=day_fwi, dsr=day_dsr,
    )
    return indices, indices.next_state()


# =============================================================================
# Hourly Stage
# =============================================================================


def compute_hourly(
    state: MoistureState,
    daily: DailyIndices,
    observation: HourlyObservation,
    location: LocationProvider,
    clock: Clock,
    config: HourlySettings | None = None,
) -> HourlyIndices:
    """
    Compute hourly FFMC, ISI and FWI for a clock time.

    Parameters
    ----------
    state : MoistureState
        Yesterday's codes (the start of the diurnal curve and the
        morning BUI).
    daily : DailyIndices
        Today's daily results.
    observation : HourlyObservation
        Weather for the hour.
    location : LocationProvider
        Site; its DST amount shifts the clock to local standard time.
    clock : Clock
        Local clock time of the observation.
    config : HourlySettings, optional
        Model selection; defaults to Lawson's tables.

    Returns
    -------
    HourlyIndices
    """
    if config is None:
        config = HourlySettings()

    local_seconds = clock.hour * 3600 + clock.minute * 60 + clock.second - location.dst_amount
    # Truncate toward zero like a time span's hour component
    local_hour = int(local_seconds / 3600)

    rh = observation.relative_humidity
    rain = observation.precipitation
    temperature = observation.temperature
    wind_speed = observation.wind_speed

    previous_ffmc = hourly_ffmc_lawson(state.ffmc, daily.ffmc, rh, local_hour * 3600 - 3600)

    previous_ffmc_van_wagner = None
    if config.use_van_wagner_hourly_model:
        if config.use_lawson_previous_hour_seed or observation.previous_hourly_ffmc is None:
            seed = previous_ffmc
        else:
            seed = observation.previous_hourly_ffmc
        logger.debug(f"Hourly FFMC: Van Wagner from seed {seed:.4f}")
        ffmc = hourly_ffmc_van_wagner(seed, rain, temperature, rh, wind_speed, 3600)
    elif config.use_contiguous_lawson:
        rh_start = rh if observation.rh_start is None else observation.rh_start
        rh_end = rh if observation.rh_end is None else observation.rh_end
        logger.debug(f"Hourly FFMC: contiguous Lawson at {local_seconds} s")
        ffmc = hourly_ffmc_lawson_contiguous(
            state.ffmc, daily.ffmc, rh_start, rh, rh_end, local_seconds
        )
    else:
        logger.debug(f"Hourly FFMC: Lawson at hour {local_hour}")
        ffmc = hourly_ffmc_lawson(state.ffmc, daily.ffmc, rh, local_hour * 3600)

    if _guard("Hourly FFMC", ffmc):
        if config.use_van_wagner_hourly_model:
            previous_ffmc_van_wagner = hourly_ffmc_van_wagner_previous(
                ffmc, rain, temperature, rh, wind_speed
            )
        hour_isi = isi_fwi(ffmc, wind_speed, clock.second + clock.minute * 60)
    else:
        hour_isi = INVALID

    # Before noon (LST) yesterday's codes are still the current ones
    noon_hour = 13 if location.dst_amount > 0 else 12
    if clock.hour >= noon_hour:
        hour_bui = daily.bui
    elif state.dc < 0.0 or state.dmc < 0.0:
        hour_bui = INVALID
    else:
        hour_bui = bui(state.dc, state.dmc)

    if is_invalid(hour_isi) or not _guard("Hourly BUI", hour_bui):
        hour_fwi = INVALID
    else:
        hour_fwi = fwi(hour_isi, hour_bui)

    return HourlyIndices(
        ffmc=ffmc,
        isi=hour_isi,
        fwi=hour_fwi,
        bui=hour_bui,
        previous_ffmc=previous_ffmc,
        previous_ffmc_van_wagner=previous_ffmc_van_wagner,
    )


# =============================================================================
# Calculator
# =============================================================================


class FWICalculator:
    """
    Runs the daily stage and, optionally, the hourly stage for one site.

    Parameters
    ----------
    location : LocationProvider
        Observation site.
    settings : HourlySettings, optional
        Hourly model selection.
    calculate_hourly : bool
        Run the hourly stage when an hourly observation is given.

    Examples
    --------
    >>> calc = FWICalculator(Location.from_degrees(53.5, -113.5))
    >>> result = calc.run(MoistureState(), noon, ClockTime(month=7))
    >>> result.daily.fwi
    """

    def __init__(
        self,
        location: LocationProvider,
        settings: HourlySettings | None = None,
        calculate_hourly: bool = True,
    ):
        self.location = location
        self.settings = settings if settings is not None else HourlySettings()
        self.calculate_hourly = calculate_hourly

    @classmethod
    def from_config(cls, config: CalculatorConfig) -> "FWICalculator":
        """Build a calculator for the configured station."""
        station = config.station
        location = Location.from_degrees(
            station.latitude,
            station.longitude,
            station.timezone_offset_hours,
            station.dst_hours,
        )
        return cls(location, config.hourly, config.calculate_hourly)

    def run(
        self,
        state: MoistureState,
        noon: DailyObservation,
        clock: Clock,
        hourly: HourlyObservation | None = None,
    ) -> CalculationResult:
        """
        Run the daily stage, then the hourly stage if ``hourly`` is given
        and ``calculate_hourly`` is set.

        Parameters
        ----------
        state : MoistureState
            Yesterday's codes.
        noon : DailyObservation
            Noon LST weather.
        clock : Clock
            Month and, for the hourly stage, the time of day.
        hourly : HourlyObservation, optional
            Weather for the hour; the hourly stage is skipped when omitted.

        Returns
        -------
        CalculationResult
        """
        daily, next_state = compute_daily(state, noon, self.location, clock)
        logger.debug(f"Daily codes: FFMC {daily.ffmc:.2f}, DMC {daily.dmc:.2f}, DC {daily.dc:.2f}")
        hourly_indices = None
        if hourly is not None and not self.calculate_hourly:
            logger.debug("Hourly stage disabled; hourly observation ignored")
        elif hourly is not None:
            hourly_indices = compute_hourly(
                state, daily, hourly, self.location, clock, self.settings
            )
        return CalculationResult(daily=daily, hourly=hourly_indices, next_state=next_state)
