"""
Fire behaviour indices of the FWI System.

Stateless formulas operating on already computed moisture codes:

- ISI: Initial Spread Index, from FFMC and wind
- BUI: Buildup Index, from DMC and DC
- FWI: Fire Weather Index, from ISI and BUI
- DSR: Daily Severity Rating, from FWI

None of these functions validate their inputs. A -98.0 sentinel passed in
produces a meaningless number rather than another sentinel, so callers
must check moisture codes before composing them (``cffwi.sentinel``).
"""

from __future__ import annotations

import numpy as np

from cffwi.moisture import ffmc_scale, ffmc_to_moisture


# =============================================================================
# Initial Spread Index (ISI)
# =============================================================================


def ff(ffmc: float, seconds: float) -> float:
    """
    Calculate the fine fuel moisture function f(F) of the ISI equation.

    Parameters
    ----------
    ffmc : float
        Fine Fuel Moisture Code.
    seconds : float
        Time since the FFMC was observed; a step that is not a whole
        number of hours uses the sub-hourly moisture constant.

    Returns
    -------
    float
        f(F).
    """
    fm = ffmc_to_moisture(ffmc, ffmc_scale(seconds))
    return float(91.9 * np.exp(fm * -0.1386) * (1.0 + np.power(fm, 5.31) / 49300000.0))


def _fwi_wind_function(wind_speed: float) -> float:
    return np.exp(0.05039 * wind_speed)


def _fbp_wind_function(wind_speed: float) -> float:
    if wind_speed <= 40.0:
        return np.exp(0.05039 * wind_speed)
    # Saturating response at high wind speeds (FBP eq. 53a)
    return 12.0 * (1.0 - np.exp(-0.0818 * (wind_speed - 28.0)))


def isi_from_ff(wind_speed: float, sf: float) -> float:
    """ISI from wind speed (km/h) and a precomputed f(F)."""
    return float(0.208 * sf * _fwi_wind_function(wind_speed))


def isi_fbp_from_ff(wind_speed: float, sf: float) -> float:
    """FBP site-specific ISI from wind speed (km/h) and a precomputed f(F)."""
    return float(0.208 * _fbp_wind_function(wind_speed) * sf)


def isi_fwi(ffmc: float, wind_speed: float, seconds: float) -> float:
    """
    Calculate the Initial Spread Index (ISI).

    ISI combines the effects of wind and fine fuel moisture on
    rate of spread without the influence of variable quantities
    of fuel.

    Parameters
    ----------
    ffmc : float
        Fine Fuel Moisture Code.
    wind_speed : float
        Wind speed (km/h).
    seconds : float
        Time since the FFMC was observed (86400 for the daily index).

    Returns
    -------
    float
        Initial Spread Index.
    """
    return isi_from_ff(wind_speed, ff(ffmc, seconds))


def isi_fbp(ffmc: float, wind_speed: float, seconds: float) -> float:
    """
    Calculate the FBP System Initial Spread Index.

    The FBP System uses a local, site-specific ISI whose wind function
    levels off above 40 km/h to represent topographic effects.
    """
    return isi_fbp_from_ff(wind_speed, ff(ffmc, seconds))


# =============================================================================
# Buildup Index (BUI)
# =============================================================================


def bui(dc: float, dmc: float) -> float:
    """
    Calculate the Buildup Index (BUI).

    BUI combines DMC and DC to represent the total amount of fuel
    available for combustion.

    Parameters
    ----------
    dc : float
        Drought Code.
    dmc : float
        Duff Moisture Code.

    Returns
    -------
    float
        Buildup Index (>= 0).
    """
    if dmc == 0.0 and dc == 0.0:
        value = 0.0
    else:
        value = 0.8 * dc * dmc / (dmc + 0.4 * dc)

    # Keep BUI from falling implausibly far below DMC
    if value < dmc:
        p = (dmc - value) / dmc
        cc = 0.92 + np.power(0.0114 * dmc, 1.7)
        value = dmc - cc * p
        if value < 0.0:
            value = 0.0

    return float(value)


# =============================================================================
# Fire Weather Index (FWI)
# =============================================================================


def fwi(isi: float, bui: float) -> float:
    """
    Calculate the Fire Weather Index (FWI).

    FWI combines ISI and BUI to represent fire intensity.

    Parameters
    ----------
    isi : float
        Initial Spread Index.
    bui : float
        Buildup Index.

    Returns
    -------
    float
        Fire Weather Index.
    """
    if bui > 80.0:
        bb = 0.1 * isi * (1000.0 / (25.0 + 108.64 / np.exp(0.023 * bui)))
    else:
        bb = 0.1 * isi * (0.626 * np.power(bui, 0.809) + 2.0)

    if bb <= 1.0:
        return float(bb)
    return float(np.exp(2.72 * np.power(0.434 * np.log(bb), 0.647)))


def dsr(fwi: float) -> float:
    """
    Calculate the Daily Severity Rating (DSR).

    DSR is a transformation of FWI that is more suitable for
    averaging over time.
    """
    return float(0.0272 * np.power(fwi, 1.77))
