"""
Tests for the hourly FFMC models.
"""

import numpy as np
import pytest

from cffwi.hourly import (
    hourly_ffmc_lawson,
    hourly_ffmc_lawson_contiguous,
    hourly_ffmc_van_wagner,
    hourly_ffmc_van_wagner_previous,
)
from cffwi.lawson import calc_hourly_ffmc_lawson
from cffwi.sentinel import INVALID


class TestVanWagner:
    """Tests for Van Wagner's hourly model."""

    def test_drying_hour(self):
        """A warm dry windy hour raises FFMC."""
        assert hourly_ffmc_van_wagner(80.0, 0.0, 25.0, 0.30, 20.0, 3600) > 80.0

    def test_rain_hour(self):
        """Rain lowers FFMC."""
        dry = hourly_ffmc_van_wagner(85.0, 0.0, 20.0, 0.5, 5.0, 3600)
        wet = hourly_ffmc_van_wagner(85.0, 5.0, 20.0, 0.5, 5.0, 3600)
        assert wet < dry
        assert wet < 85.0

    def test_longer_step_dries_more(self):
        """Two hours of drying exceed one."""
        one = hourly_ffmc_van_wagner(80.0, 0.0, 25.0, 0.30, 20.0, 3600)
        two = hourly_ffmc_van_wagner(80.0, 0.0, 25.0, 0.30, 20.0, 7200)
        assert two > one

    def test_output_range(self):
        """FFMC stays in [0, 101] for valid inputs."""
        for prev in np.linspace(0.0, 101.0, 12):
            for rain in (0.0, 1.0, 30.0, 300.0):
                for temp in (-30.0, 10.0, 35.0):
                    for rh in (0.0, 0.5, 1.0):
                        for seconds in (600, 3600, 7200):
                            value = hourly_ffmc_van_wagner(prev, rain, temp, rh, 15.0, seconds)
                            assert 0.0 <= value <= 101.0

    def test_invalid_inputs(self):
        """Out-of-domain inputs return the sentinel."""
        assert hourly_ffmc_van_wagner(85.0, -0.1, 20.0, 0.5, 5.0, 3600) == INVALID
        assert hourly_ffmc_van_wagner(85.0, 300.1, 20.0, 0.5, 5.0, 3600) == INVALID
        assert hourly_ffmc_van_wagner(85.0, 0.0, 60.1, 0.5, 5.0, 3600) == INVALID
        assert hourly_ffmc_van_wagner(101.1, 0.0, 20.0, 0.5, 5.0, 3600) == INVALID
        assert hourly_ffmc_van_wagner(85.0, 0.0, 20.0, 0.5, 5.0, 0) == INVALID
        assert hourly_ffmc_van_wagner(85.0, 0.0, 20.0, 0.5, 5.0, 7201) == INVALID

    def test_two_hour_limit_inclusive(self):
        """Exactly two hours is accepted."""
        assert hourly_ffmc_van_wagner(85.0, 0.0, 20.0, 0.5, 5.0, 7200) != INVALID


class TestVanWagnerPrevious:
    """Tests for recovering the previous hour's FFMC."""

    @pytest.mark.parametrize(
        "rain, temperature, rh, wind",
        [
            (0.0, 20.0, 0.5, 5.0),
            (0.0, 30.0, 0.2, 20.0),
            (1.5, 15.0, 0.7, 10.0),
            (0.0, -5.0, 0.6, 5.0),
        ],
    )
    @pytest.mark.parametrize("start", np.arange(20.0, 100.01, 2.5))
    def test_round_trip(self, start, rain, temperature, rh, wind):
        """Stepping forward then back recovers the starting FFMC."""
        forward = hourly_ffmc_van_wagner(start, rain, temperature, rh, wind, 3600)
        previous = hourly_ffmc_van_wagner_previous(forward, rain, temperature, rh, wind)
        assert previous == pytest.approx(start, abs=1e-6)

    def test_forward_of_previous(self):
        """The recovered FFMC steps forward onto the current one."""
        previous = hourly_ffmc_van_wagner_previous(85.0, 0.0, 20.0, 0.5, 5.0)
        assert hourly_ffmc_van_wagner(previous, 0.0, 20.0, 0.5, 5.0, 3600) == pytest.approx(85.0, abs=1e-6)

    def test_invalid_inputs(self):
        """Out-of-domain inputs return the sentinel."""
        assert hourly_ffmc_van_wagner_previous(101.5, 0.0, 20.0, 0.5, 5.0) == INVALID
        assert hourly_ffmc_van_wagner_previous(-1.0, 0.0, 20.0, 0.5, 5.0) == INVALID
        assert hourly_ffmc_van_wagner_previous(85.0, -1.0, 20.0, 0.5, 5.0) == INVALID
        assert hourly_ffmc_van_wagner_previous(85.0, 301.0, 20.0, 0.5, 5.0) == INVALID
        assert hourly_ffmc_van_wagner_previous(85.0, 0.0, 61.0, 0.5, 5.0) == INVALID

    def test_always_terminates_in_range(self):
        """Unreachable targets exit through the escape hatches."""
        for curr in (0.0, 1.0, 50.0, 100.0, 101.0):
            for rain in (0.0, 20.0):
                value = hourly_ffmc_van_wagner_previous(curr, rain, 30.0, 0.2, 30.0)
                assert isinstance(value, float)


class TestLawson:
    """Tests for Lawson's hourly FFMC."""

    def test_before_noon_uses_previous_day(self):
        """Before noon the curve is anchored on yesterday's FFMC."""
        value = hourly_ffmc_lawson(85.0, 90.0, 0.5, 3 * 3600)
        assert value == pytest.approx(calc_hourly_ffmc_lawson(85.0, 3 * 3600, 50.0))
        assert value == pytest.approx(71.4)

    def test_after_noon_uses_current_day(self):
        """From noon the curve is anchored on today's FFMC."""
        assert hourly_ffmc_lawson(85.0, 90.0, 0.5, 16 * 3600) == pytest.approx(90.0)

    def test_plain_limits(self):
        """More than a day is rejected; invalid FFMCs return the sentinel."""
        assert hourly_ffmc_lawson(85.0, 90.0, 0.5, 86401) == INVALID
        assert hourly_ffmc_lawson(85.0, 90.0, 0.5, 86400) != INVALID
        assert hourly_ffmc_lawson(-1.0, 90.0, 0.5, 3600) == INVALID
        assert hourly_ffmc_lawson(85.0, 102.0, 0.5, 3600) == INVALID

    def test_contiguous_window(self):
        """The contiguous variant accepts [-43200, 126000)."""
        assert hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, -43200) != INVALID
        assert hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, -43201) == INVALID
        assert hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, 125999) != INVALID
        assert hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, 126000) == INVALID

    @pytest.mark.parametrize("seam", [18000, 43200])
    def test_contiguous_seams(self, seam):
        """The blend is continuous across 05:00 and noon."""
        before = hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, seam - 1)
        at = hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, seam)
        after = hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, seam + 1)
        assert before == pytest.approx(at, abs=0.05)
        assert after == pytest.approx(at, abs=0.05)

    def test_contiguous_on_the_hour(self):
        """On an hour boundary the start-of-hour RH is used."""
        value = hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.4, 0.9, 0.9, 8 * 3600)
        assert value == pytest.approx(calc_hourly_ffmc_lawson(85.0, 8 * 3600, 40.0))

    def test_contiguous_blends_hours(self):
        """Mid-hour values are a time weighted blend of the two hours."""
        start = calc_hourly_ffmc_lawson(85.0, 8 * 3600, 50.0)
        end = calc_hourly_ffmc_lawson(85.0, 9 * 3600, 50.0)
        value = hourly_ffmc_lawson_contiguous(85.0, 90.0, 0.5, 0.5, 0.5, 8 * 3600 + 900)
        assert value == pytest.approx((end * 900 + start * 2700) / 3600)

    def test_output_range(self):
        """Both Lawson variants stay in [0, 101]."""
        for prev in np.linspace(0.0, 101.0, 8):
            for curr in (0.0, 60.0, 101.0):
                for seconds in range(-43200, 126000, 5400):
                    contiguous = hourly_ffmc_lawson_contiguous(prev, curr, 0.3, 0.5, 0.7, seconds)
                    assert 0.0 <= contiguous <= 101.0
                for seconds in range(0, 86401, 5400):
                    plain = hourly_ffmc_lawson(prev, curr, 0.5, seconds)
                    assert 0.0 <= plain <= 101.0
