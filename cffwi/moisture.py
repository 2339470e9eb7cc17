"""
Fine fuel moisture helpers shared by the daily and hourly FFMC models.
"""

from __future__ import annotations

import numpy as np

# FFMC <-> moisture content scale constants. The hourly constant applies
# when the time step is not a whole number of hours.
FFMC_SCALE = 147.2
FFMC_SCALE_SUBHOURLY = 147.27723

MAX_MOISTURE = 250.0


def clamp_weather(temperature: float, rh: float, wind_speed: float) -> tuple[float, float, float]:
    """
    Clamp weather inputs to the ranges the moisture equations accept.

    Temperature is limited to [-50, 45] C, relative humidity (fraction)
    to [0, 1] and wind speed to [0, 200] km/h.
    """
    temperature = min(max(float(temperature), -50.0), 45.0)
    rh = min(max(float(rh), 0.0), 1.0)
    wind_speed = min(max(float(wind_speed), 0.0), 200.0)
    return temperature, rh, wind_speed


def ffmc_scale(seconds: float) -> float:
    """Pick the FFMC scale constant for a time step given in seconds."""
    hour_frac = seconds / 3600.0
    if hour_frac - np.floor(hour_frac) > 1e-4:
        return FFMC_SCALE_SUBHOURLY
    return FFMC_SCALE


def ffmc_to_moisture(ffmc: float, scale: float = FFMC_SCALE) -> float:
    """Convert FFMC to fine fuel moisture content (percent)."""
    return scale * (101.0 - ffmc) / (59.5 + ffmc)


def moisture_to_ffmc(moisture: float, scale: float = FFMC_SCALE) -> float:
    """Convert moisture content back to FFMC, clamped to [0, 101]."""
    ffmc = 59.5 * (250.0 - moisture) / (scale + moisture)
    return float(min(max(ffmc, 0.0), 101.0))


def equilibrium_moisture(rhp: float, temperature: float) -> tuple[float, float]:
    """
    Drying and wetting equilibrium moisture contents.

    Parameters
    ----------
    rhp : float
        Relative humidity (percent).
    temperature : float
        Temperature (degrees Celsius).

    Returns
    -------
    tuple[float, float]
        (ed, ew), the drying and wetting equilibria (percent).
    """
    temp_term = 0.18 * (21.1 - temperature) * (1.0 - np.exp(-0.115 * rhp))
    ed = 0.942 * rhp ** 0.679 + 11.0 * np.exp((rhp - 100.0) / 10.0) + temp_term
    ew = 0.618 * rhp ** 0.753 + 10.0 * np.exp((rhp - 100.0) / 10.0) + temp_term
    return float(ed), float(ew)


def log_drying_rate(a: float, wind_speed: float) -> float:
    """
    Base log drying/wetting rate for a humidity term ``a``.

    ``a`` is the RH fraction when drying and ``1 - rh`` when wetting.
    """
    return 0.424 * (1.0 - a ** 1.7) + 0.0694 * np.sqrt(wind_speed) * (1.0 - a ** 8.0)
