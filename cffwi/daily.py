"""
Daily moisture codes of the Canadian Fire Weather Index (FWI) System.

The daily codes step forward once per day from yesterday's value and the
noon (LST) weather observation:

- FFMC: Van Wagner's fine fuel moisture model over a full 24 h step
- DMC: duff moisture code, with latitude dependent day lengths
- DC: drought code, with latitude dependent day-length factors

Every function validates its own primary inputs and returns -98.0 when
they fall outside the documented domain. Inputs are never checked for
the sentinel itself; see ``cffwi.sentinel``.

References
----------
- Van Wagner, C.E. (1987). Development and Structure of the Canadian
  Forest Fire Weather Index System. Forestry Technical Report 35.
- Van Wagner, C.E. & Pickett, T.L. (1985). Equations and FORTRAN program
  for the Canadian Forest Fire Weather Index System. Forestry Technical
  Report 33.
"""

from __future__ import annotations

import numpy as np

from cffwi.moisture import (
    MAX_MOISTURE,
    clamp_weather,
    equilibrium_moisture,
    ffmc_to_moisture,
    log_drying_rate,
    moisture_to_ffmc,
)
from cffwi.sentinel import INVALID
from cffwi.tables import dc_day_length_factor, dmc_day_length

MAX_TEMPERATURE = 60.0
MAX_RAIN = 300.0


def _invalid_weather(temperature: float, rain: float) -> bool:
    return temperature > MAX_TEMPERATURE or rain < 0.0 or rain > MAX_RAIN


def _invalid_month(month: int) -> bool:
    return month < 0 or month > 11


# =============================================================================
# Fine Fuel Moisture Code (FFMC)
# =============================================================================


def daily_ffmc(
    prev_ffmc: float,
    rain: float,
    temperature: float,
    relative_humidity: float,
    wind_speed: float,
) -> float:
    """
    Calculate the daily Fine Fuel Moisture Code (FFMC).

    FFMC represents the moisture content of litter and other cured
    fine fuels on the forest floor. It indicates the ease of ignition
    and flammability of fine fuels.

    Parameters
    ----------
    prev_ffmc : float
        Previous day's FFMC (0-101).
    rain : float
        Precipitation over the prior 24 hours, noon to noon LST (mm).
    temperature : float
        Noon LST temperature (degrees Celsius).
    relative_humidity : float
        Noon LST relative humidity as a fraction (0-1).
    wind_speed : float
        Noon LST wind speed (km/h).

    Returns
    -------
    float
        Fine Fuel Moisture Code (0-101), or -98.0 on invalid input.
    """
    if prev_ffmc < 0.0 or prev_ffmc > 101.0 or _invalid_weather(temperature, rain):
        return INVALID

    temperature, rh, wind_speed = clamp_weather(temperature, relative_humidity, wind_speed)
    rhp = rh * 100.0

    # Convert FFMC to moisture content (percent)
    wmo = ffmc_to_moisture(prev_ffmc)

    # Apply rainfall effect
    if rain > 0.5:
        rf = rain - 0.5
        wetting = 42.5 * rf * np.exp(-100.0 / (251.0 - wmo)) * (1.0 - np.exp(-6.93 / rf))
        if wmo > 150.0:
            wmo = wmo + wetting + 0.0015 * (wmo - 150.0) ** 2 * np.sqrt(rf)
        else:
            wmo = wmo + wetting
    if wmo > MAX_MOISTURE:
        wmo = MAX_MOISTURE

    ed, ew = equilibrium_moisture(rhp, temperature)

    if wmo < ed and wmo < ew:
        # Wetting
        k1 = 0.424 * (1.0 - ((100.0 - rhp) / 100.0) ** 1.7) + \
             0.0694 * np.sqrt(wind_speed) * (1.0 - (1.0 - rh) ** 8.0)
        kw = k1 * 0.581 * np.exp(0.0365 * temperature)
        wm = ew - (ew - wmo) / 10.0 ** kw
    elif wmo > ed:
        # Drying
        kd = log_drying_rate(rh, wind_speed) * 0.581 * np.exp(0.0365 * temperature)
        wm = ed + (wmo - ed) / 10.0 ** kd
    else:
        wm = wmo

    return moisture_to_ffmc(wm)


# =============================================================================
# Duff Moisture Code (DMC)
# =============================================================================


def daily_dmc(
    prev_dmc: float,
    rain: float,
    temperature: float,
    latitude: float,
    longitude: float,
    month: int,
    relative_humidity: float,
) -> float:
    """
    Calculate the daily Duff Moisture Code (DMC).

    DMC represents the moisture content of loosely compacted organic
    layers of moderate depth (5-10 cm).

    Parameters
    ----------
    prev_dmc : float
        Previous day's DMC.
    rain : float
        Precipitation over the prior 24 hours (mm).
    temperature : float
        Noon LST temperature (degrees Celsius).
    latitude : float
        Latitude in radians, selects the day-length table.
    longitude : float
        Longitude in radians. Accepted for regional constants, unused.
    month : int
        Month index, January = 0.
    relative_humidity : float
        Noon LST relative humidity as a fraction (0-1).

    Returns
    -------
    float
        Duff Moisture Code, or -98.0 on invalid input.
    """
    if prev_dmc < 0.0 or _invalid_weather(temperature, rain) or _invalid_month(month):
        return INVALID

    temperature = min(max(float(temperature), -50.0), 45.0)
    rh = min(max(float(relative_humidity), 0.0), 1.0)
    day_length = dmc_day_length(latitude, month)

    po = prev_dmc

    # Temperature effect (only if T > -1.1)
    if temperature < -1.1:
        rk = 0.0
    else:
        rk = 1.894 * (temperature + 1.1) * (1.0 - rh) * day_length * 0.01

    # Rain effect
    if rain > 1.5:
        rw = 0.92 * rain - 1.27
        wmi = 20.0 + np.exp(5.6348 - po / 43.43)
        if po <= 33.0:
            b = 100.0 / (0.5 + 0.3 * po)
        elif po > 65.0:
            b = 6.2 * np.log(po) - 17.2
        else:
            b = 14.0 - 1.3 * np.log(po)
        wmr = wmi + 1000.0 * rw / (48.77 + b * rw)
        pr = 43.43 * (5.6348 - np.log(wmr - 20.0))
    else:
        pr = po

    if pr < 0.0:
        pr = 0.0

    return float(max(0.0, pr + rk))


# =============================================================================
# Drought Code (DC)
# =============================================================================


def daily_dc(
    prev_dc: float,
    rain: float,
    temperature: float,
    latitude: float,
    longitude: float,
    month: int,
) -> float:
    """
    Calculate the daily Drought Code (DC).

    DC represents the moisture content of deep, compact organic layers
    (10-24 cm). It is a useful indicator of seasonal drought effects on
    forest fuels and of smouldering in deep duff layers and large logs.

    Parameters
    ----------
    prev_dc : float
        Previous day's DC.
    rain : float
        Precipitation over the prior 24 hours (mm).
    temperature : float
        Noon LST temperature (degrees Celsius).
    latitude : float
        Latitude in radians, selects the day-length factor table.
    longitude : float
        Longitude in radians. Accepted for regional constants, unused.
    month : int
        Month index, January = 0.

    Returns
    -------
    float
        Drought Code, or -98.0 on invalid input.
    """
    if prev_dc < 0.0 or _invalid_weather(temperature, rain) or _invalid_month(month):
        return INVALID

    temperature = min(max(float(temperature), -2.8), 45.0)
    day_length_factor = dc_day_length_factor(latitude, month)

    # Potential evapotranspiration
    pe = (0.36 * (temperature + 2.8) + day_length_factor) / 2.0

    # Rain effect
    if rain <= 2.8:
        dr = prev_dc
    else:
        rd = 0.83 * rain - 1.27
        smi = 800.0 * np.exp(-prev_dc / 400.0)
        dr = prev_dc - 400.0 * np.log(1.0 + 3.937 * rd / smi)
        if dr < 0.0:
            dr = 0.0

    return float(max(0.0, dr + pe))
