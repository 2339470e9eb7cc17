"""
Hourly (sub-daily) Fine Fuel Moisture Code models.

Two independent models are provided:

- Van Wagner's physical model steps the FFMC forward over an elapsed
  time of up to two hours, relaxing fuel moisture toward the drying or
  wetting equilibrium. ``hourly_ffmc_van_wagner_previous`` inverts it
  numerically to recover the FFMC one hour earlier.
- Lawson's empirical model reads the diurnal tables anchored on the
  standard daily FFMCs of the previous and current days. The contiguous
  variant blends across hour boundaries in the morning so the curve has
  no jump at 05:00 or noon.

Relative humidity is a fraction (0-1) at this interface. All functions
return -98.0 for out-of-domain primary inputs.

References
----------
- Van Wagner, C.E. (1977). A method of computing fine fuel moisture
  content throughout the diurnal cycle. Information Report PS-X-69.
- Lawson, B.D., Armitage, O.B. & Hoskins, W.D. (1996). Diurnal variation
  in the Fine Fuel Moisture Code: tables and computer source code.
  FRDA Report 245.
"""

from __future__ import annotations

import logging

import numpy as np

from cffwi.lawson import SECONDS_PER_DAY, calc_hourly_ffmc_lawson
from cffwi.moisture import (
    MAX_MOISTURE,
    clamp_weather,
    equilibrium_moisture,
    ffmc_scale,
    ffmc_to_moisture,
    log_drying_rate,
    moisture_to_ffmc,
)
from cffwi.sentinel import INVALID

logger = logging.getLogger(__name__)

MAX_TEMPERATURE = 60.0
MAX_RAIN = 300.0
MAX_ELAPSED_SECONDS = 7200

# Convergence tolerance of the previous-hour solver
TOLERANCE = 1e-7

# Contiguous Lawson window, relative to the local standard midnight
CONTIGUOUS_START = -43200
CONTIGUOUS_END = 126000
MORNING_BLEND_START = 5 * 3600
NOON = 12 * 3600


# =============================================================================
# Van Wagner Hourly FFMC
# =============================================================================


def hourly_ffmc_van_wagner(
    prev_ffmc: float,
    rain: float,
    temperature: float,
    relative_humidity: float,
    wind_speed: float,
    elapsed_seconds: float,
) -> float:
    """
    Step the FFMC forward with Van Wagner's hourly model.

    Parameters
    ----------
    prev_ffmc : float
        FFMC at the start of the step (0-101).
    rain : float
        Precipitation since ``prev_ffmc`` was observed (mm).
    temperature : float
        Temperature (degrees Celsius).
    relative_humidity : float
        Relative humidity as a fraction (0-1).
    wind_speed : float
        Wind speed (km/h).
    elapsed_seconds : float
        Length of the step, in (0, 7200] seconds.

    Returns
    -------
    float
        FFMC at the end of the step (0-101), or -98.0 on invalid input.
    """
    if (
        prev_ffmc < 0.0 or prev_ffmc > 101.0
        or temperature > MAX_TEMPERATURE
        or rain < 0.0 or rain > MAX_RAIN
        or elapsed_seconds > MAX_ELAPSED_SECONDS or elapsed_seconds <= 0
    ):
        return INVALID

    temperature, rh, wind_speed = clamp_weather(temperature, relative_humidity, wind_speed)
    rhp = rh * 100.0

    hour_frac = elapsed_seconds / 3600.0
    scale = ffmc_scale(elapsed_seconds)

    mo = ffmc_to_moisture(prev_ffmc, scale)
    if rain != 0:
        mo += rain * 42.5 * np.exp(-100.0 / (251.0 - mo)) * (1.0 - np.exp(-6.93 / rain))
    if mo > MAX_MOISTURE:
        mo = MAX_MOISTURE

    ed, ew = equilibrium_moisture(rhp, temperature)
    moed = mo - ed
    moew = mo - ew

    if moed == 0.0 or (moew >= 0.0 and moed < 0.0):
        # Between the equilibria: no exchange
        xm = mo
    else:
        if moed > 0.0:
            a1, e, moe = rh, ed, moed
        else:
            a1, e, moe = 1.0 - rh, ew, moew
        xkd = log_drying_rate(a1, wind_speed) * 0.0579 * np.exp(0.0365 * temperature)
        xm = e + moe * 10.0 ** (-xkd * hour_frac)

    return moisture_to_ffmc(xm, scale)


def hourly_ffmc_van_wagner_previous(
    curr_ffmc: float,
    rain: float,
    temperature: float,
    relative_humidity: float,
    wind_speed: float,
) -> float:
    """
    Recover the FFMC one hour earlier by inverting Van Wagner's model.

    The search starts at ``curr_ffmc`` and repeatedly moves the guess by
    half of the output error until the forward model reproduces
    ``curr_ffmc`` to within 1e-7. It stops early when the forward output
    leaves [0, 101], returning ``curr_ffmc`` unchanged, or when the output
    no longer responds to the guess, returning the guess.

    Parameters
    ----------
    curr_ffmc : float
        FFMC at the end of the hour.
    rain, temperature, relative_humidity, wind_speed : float
        Weather over that hour (mm, C, fraction, km/h).

    Returns
    -------
    float
        Implied FFMC at the start of the hour, or -98.0 on invalid input.
    """
    if (
        curr_ffmc < 0.0 or curr_ffmc > 101.0
        or temperature > MAX_TEMPERATURE
        or rain < 0.0 or rain > MAX_RAIN
    ):
        return INVALID

    temperature, rh, wind_speed = clamp_weather(temperature, relative_humidity, wind_speed)

    guess = curr_ffmc
    out = hourly_ffmc_van_wagner(guess, rain, temperature, rh, wind_speed, 3600)
    diff = abs(out - curr_ffmc)
    iterations = 0

    while diff > TOLERANCE:
        if out > curr_ffmc:
            guess -= diff / 2.0
        else:
            guess += diff / 2.0

        prior = out
        out = hourly_ffmc_van_wagner(guess, rain, temperature, rh, wind_speed, 3600)
        diff = abs(out - curr_ffmc)
        iterations += 1

        if out < 0.0 or out > 101.0:
            logger.debug(f"Previous FFMC search left the valid range after {iterations} steps")
            return float(curr_ffmc)

        if abs(out - prior) < TOLERANCE:
            logger.debug(f"Previous FFMC search insensitive after {iterations} steps")
            break

    return float(guess)


# =============================================================================
# Lawson Hourly FFMC
# =============================================================================


def _lawson_between_days(
    prev_ffmc: float,
    curr_ffmc: float,
    seconds: int,
    rh_start: float,
    rh: float,
    rh_end: float,
    contiguous: bool,
) -> float:
    """
    Choose the daily FFMC anchoring the diurnal curve and blend hours.

    RH values are in percent here.
    """
    if (
        prev_ffmc < 0.0 or prev_ffmc > 101.0
        or curr_ffmc < 0.0 or curr_ffmc > 101.0
        or seconds < CONTIGUOUS_START or seconds >= CONTIGUOUS_END
    ):
        return INVALID

    # From noon on, today's standard FFMC applies
    if seconds >= NOON:
        return calc_hourly_ffmc_lawson(curr_ffmc, seconds, rh)

    if seconds < MORNING_BLEND_START or not contiguous:
        return calc_hourly_ffmc_lawson(prev_ffmc, seconds, rh)

    h0 = seconds - seconds % 3600
    if h0 == seconds:
        return calc_hourly_ffmc_lawson(prev_ffmc, seconds, rh_start)

    h1 = h0 + 3600
    ffmc0 = calc_hourly_ffmc_lawson(prev_ffmc, h0, rh_start)
    if h1 == NOON:
        ffmc1 = calc_hourly_ffmc_lawson(curr_ffmc, h1, rh_end)
    else:
        ffmc1 = calc_hourly_ffmc_lawson(prev_ffmc, h1, rh_end)

    sec = seconds % 3600
    return (ffmc1 * sec + ffmc0 * (3600.0 - sec)) / 3600.0


def hourly_ffmc_lawson(
    prev_ffmc: float,
    curr_ffmc: float,
    relative_humidity: float,
    seconds_into_day: int,
) -> float:
    """
    Calculate hourly FFMC with Lawson's diurnal tables.

    Parameters
    ----------
    prev_ffmc : float
        Previous day's standard daily FFMC.
    curr_ffmc : float
        Current day's standard daily FFMC.
    relative_humidity : float
        Relative humidity as a fraction (0-1).
    seconds_into_day : int
        Seconds since local standard midnight (at most 86400).

    Returns
    -------
    float
        Hourly FFMC, or -98.0 on invalid input.
    """
    seconds = int(seconds_into_day)
    if seconds > SECONDS_PER_DAY:
        return INVALID
    rhp = relative_humidity * 100.0
    return _lawson_between_days(prev_ffmc, curr_ffmc, seconds, rhp, rhp, rhp, contiguous=False)


def hourly_ffmc_lawson_contiguous(
    prev_ffmc: float,
    curr_ffmc: float,
    rh_start: float,
    relative_humidity: float,
    rh_end: float,
    seconds_into_day: int,
) -> float:
    """
    Calculate a contiguous hourly FFMC with Lawson's diurnal tables.

    Between 05:00 and noon LST the value is linearly interpolated between
    the table values at the surrounding hour boundaries, so the curve is
    continuous where the previous day's tables hand over to the current
    day's.

    Parameters
    ----------
    prev_ffmc : float
        Previous day's standard daily FFMC.
    curr_ffmc : float
        Current day's standard daily FFMC.
    rh_start : float
        Relative humidity at the start of the hour (fraction).
    relative_humidity : float
        Instantaneous relative humidity (fraction).
    rh_end : float
        Relative humidity at the end of the hour (fraction).
    seconds_into_day : int
        Seconds relative to local standard midnight, in [-43200, 126000).

    Returns
    -------
    float
        Hourly FFMC, or -98.0 on invalid input.
    """
    return _lawson_between_days(
        prev_ffmc,
        curr_ffmc,
        int(seconds_into_day),
        rh_start * 100.0,
        relative_humidity * 100.0,
        rh_end * 100.0,
        contiguous=True,
    )
