"""
Lawson diurnal FFMC table interpolation.

Given a standard daily FFMC and a time of day, the adjusted (hourly) FFMC
is read from Lawson's diurnal tables by bilinear interpolation: across
the FFMC header columns and between consecutive time rows, blended by the
minutes elapsed within the hour. Morning hours (0600-1159) use one of
three tables selected by relative humidity class; every other hour uses
the main table.

Two behaviours of the published tables are reproduced unchanged because
downstream consumers compare results against the canonical model:

- at hour 11 the minute blend divides by 59 rather than 60 (the last
  morning row is 1159, not 1200);
- the medium-RH table reads its fourth interpolation corner from the
  current time row instead of the next one.
"""

from __future__ import annotations

import math

import numpy as np

from cffwi.sentinel import INVALID
from cffwi.tables import HIGH_RH, LOW_RH, MAIN, MEDIUM_RH, MORNING_HOURS, RH_CLASS

SECONDS_PER_DAY = 86400

# Table domain limits
MIN_TABLE_FFMC = 17.5
RH_FALLBACK = 95.0

_RH_LOW, _RH_MEDIUM, _RH_HIGH = 1, 2, 3


def _split_time(seconds: int) -> tuple[int, int]:
    """Return (hour of day, minute of hour) for non-negative seconds."""
    hour = seconds // 3600 - (seconds // SECONDS_PER_DAY) * 24
    minute = seconds // 60 - (seconds // 3600) * 60
    return hour, minute


def _ffmc_column(table: np.ndarray, ffmc: float) -> tuple[int, float]:
    """
    Locate the header column at or below ``ffmc``.

    Returns the column index and the fractional position of ``ffmc``
    between that column and the next one.
    """
    header = table[0]
    last = header.shape[0] - 2
    i = 1
    while i <= last and ffmc >= header[i]:
        i += 1
    # ffmc == 101.0 stops on the last interval instead of running past it
    i -= 1
    fraction = (ffmc - header[i]) / (header[i + 1] - header[i])
    return i, fraction


def interpolate(
    i1: float,
    i2: float,
    i3: float,
    i4: float,
    fraction: float,
    hour: int,
    minute: int,
) -> float:
    """
    Interpolate between FFMC columns, then between time rows.

    Parameters
    ----------
    i1, i2 : float
        Current time row at the lower and upper FFMC columns.
    i3, i4 : float
        Next time row at the lower and upper FFMC columns.
    fraction : float
        Position of the FFMC between the two columns (0-1).
    hour, minute : int
        Time of day; the minute weights the two rows.
    """
    i12 = i1 + (i2 - i1) * fraction
    i34 = i3 + (i4 - i3) * fraction

    # 1100 -> 1159 spans 59 minutes in the tables
    if hour == 11:
        return i12 + ((i34 - i12) / 59.0) * minute
    return i12 + ((i34 - i12) / 60.0) * minute


def low_rh(ffmc: float, tindex: int, hour: int, minute: int) -> float:
    """Adjusted FFMC for low RH during morning hours."""
    i, fraction = _ffmc_column(LOW_RH, ffmc)
    return interpolate(
        LOW_RH[tindex, i], LOW_RH[tindex, i + 1],
        LOW_RH[tindex + 1, i], LOW_RH[tindex + 1, i + 1],
        fraction, hour, minute,
    )


def medium_rh(ffmc: float, tindex: int, hour: int, minute: int) -> float:
    """Adjusted FFMC for medium RH during morning hours."""
    i, fraction = _ffmc_column(MEDIUM_RH, ffmc)
    # Fourth corner reads the current row, as in the published source
    return interpolate(
        MEDIUM_RH[tindex, i], MEDIUM_RH[tindex, i + 1],
        MEDIUM_RH[tindex + 1, i], MEDIUM_RH[tindex, i + 1],
        fraction, hour, minute,
    )


def high_rh(ffmc: float, tindex: int, hour: int, minute: int) -> float:
    """
    Adjusted FFMC for high RH during morning hours.

    This is also the default table when the RH class cannot be resolved.
    """
    i, fraction = _ffmc_column(HIGH_RH, ffmc)
    return interpolate(
        HIGH_RH[tindex, i], HIGH_RH[tindex, i + 1],
        HIGH_RH[tindex + 1, i], HIGH_RH[tindex + 1, i + 1],
        fraction, hour, minute,
    )


def main_table(ffmc: float, hour: int, minute: int) -> float:
    """Adjusted FFMC for every hour outside 0600-1159."""
    hhmm = hour * 100 + minute
    if hhmm < 100:
        hhmm += 2400

    tindex = 1
    while hhmm >= MAIN[tindex, 0]:
        tindex += 1
    tindex -= 1

    i, fraction = _ffmc_column(MAIN, ffmc)
    return interpolate(
        MAIN[tindex, i], MAIN[tindex, i + 1],
        MAIN[tindex + 1, i], MAIN[tindex + 1, i + 1],
        fraction, hour, minute,
    )


def rh_class(rh: float, hour: int, minute: int) -> tuple[int, int]:
    """
    Classify RH for a morning hour.

    Parameters
    ----------
    rh : float
        Relative humidity (percent).
    hour, minute : int
        Time of day, hour within 6-11.

    Returns
    -------
    tuple[int, int]
        (time band index, RH class) where the class is 1 (low), 2 (medium)
        or 3 (high).
    """
    tindex = 0
    for band in range(RH_CLASS.shape[1]):
        if 100.0 * hour < RH_CLASS[0, band, 0]:
            tindex = band
            break

    # First half of the hour uses the thresholds of the band just started
    column = tindex - 1 if minute <= 30 else tindex
    if rh > RH_CLASS[1, column, 0]:
        return tindex, _RH_HIGH
    if rh < RH_CLASS[3, column, 0]:
        return tindex, _RH_LOW
    return tindex, _RH_MEDIUM


def calc_hourly_ffmc_lawson(ffmc: float, seconds: int, rh: float) -> float:
    """
    Look up the hourly FFMC from the diurnal tables.

    Parameters
    ----------
    ffmc : float
        Standard daily FFMC the diurnal curve is anchored to.
    seconds : int
        Seconds into the local standard day; negative values wrap to the
        previous day.
    rh : float
        Relative humidity (percent).

    Returns
    -------
    float
        Adjusted FFMC, or -98.0 if ``ffmc`` is outside [0, 101].
    """
    seconds = int(seconds)
    while seconds < 0:
        seconds += SECONDS_PER_DAY

    hour, minute = _split_time(seconds)
    if ffmc < 0.0 or ffmc > 101.0:
        return INVALID

    if ffmc < MIN_TABLE_FFMC:
        ffmc = MIN_TABLE_FFMC

    rh = min(max(rh, 0.0), 100.0)
    rh = math.floor(rh * 100.0 + 0.5) * 0.01
    if rh < 1.0:
        rh = RH_FALLBACK

    if hour in MORNING_HOURS:
        tindex, rh_cls = rh_class(rh, hour, minute)
        if rh_cls == _RH_LOW:
            adjusted = low_rh(ffmc, tindex, hour, minute)
        elif rh_cls == _RH_MEDIUM:
            adjusted = medium_rh(ffmc, tindex, hour, minute)
        else:
            adjusted = high_rh(ffmc, tindex, hour, minute)
    else:
        adjusted = min(max(main_table(ffmc, hour, minute), 0.0), 101.0)

    return float(adjusted)
