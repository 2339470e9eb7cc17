"""
Tests for daily/hourly orchestration.
"""

import logging
import math
from datetime import datetime

import pytest

from cffwi.calculator import (
    DailyObservation,
    FWICalculator,
    HourlyObservation,
    MoistureState,
    compute_daily,
    compute_hourly,
)
from cffwi.config import CalculatorConfig, HourlySettings, StationConfig
from cffwi.context import ClockTime, Location
from cffwi.daily import daily_dc, daily_dmc, daily_ffmc
from cffwi.hourly import (
    hourly_ffmc_lawson,
    hourly_ffmc_lawson_contiguous,
    hourly_ffmc_van_wagner,
    hourly_ffmc_van_wagner_previous,
)
from cffwi.indices import bui, dsr, fwi, isi_fwi
from cffwi.sentinel import INVALID, FWIDomainError


@pytest.fixture
def location():
    return Location.from_degrees(53.5, -113.5, -7.0)


@pytest.fixture
def noon():
    return DailyObservation(temperature=20.0, relative_humidity=0.40, precipitation=0.0, wind_speed=10.0)


@pytest.fixture
def afternoon():
    return HourlyObservation(temperature=24.0, relative_humidity=0.30, precipitation=0.0, wind_speed=15.0)


class TestContext:
    """Tests for location and clock carriers."""

    def test_location_from_degrees(self):
        """Degrees and hours are converted to radians and seconds."""
        loc = Location.from_degrees(45.0, -75.0, -5.0, 1.0)
        assert loc.latitude == pytest.approx(math.pi / 4)
        assert loc.longitude == pytest.approx(-75.0 * math.pi / 180.0)
        assert loc.timezone_offset == -18000
        assert loc.dst_amount == 3600

    def test_clock_from_datetime(self):
        """Month and time of day come from the datetime."""
        clock = ClockTime.from_datetime(datetime(2024, 7, 15, 14, 30, 5))
        assert (clock.month, clock.hour, clock.minute, clock.second) == (7, 14, 30, 5)

    def test_clock_validation(self):
        """Months outside 1-12 are rejected."""
        with pytest.raises(ValueError):
            ClockTime(month=13)
        with pytest.raises(ValueError):
            ClockTime(month=0)


class TestComputeDaily:
    """Tests for the daily stage."""

    def test_matches_formulas(self, location, noon):
        """The daily stage composes the individual formulas."""
        state = MoistureState()
        daily, next_state = compute_daily(state, noon, location, ClockTime(month=7))

        ffmc = daily_ffmc(85.0, 0.0, 20.0, 0.40, 10.0)
        dmc = daily_dmc(25.0, 0.0, 20.0, location.latitude, location.longitude, 6, 0.40)
        dc = daily_dc(200.0, 0.0, 20.0, location.latitude, location.longitude, 6)
        assert daily.ffmc == pytest.approx(ffmc)
        assert daily.dmc == pytest.approx(dmc)
        assert daily.dc == pytest.approx(dc)
        assert daily.bui == pytest.approx(bui(dc, dmc))
        assert daily.isi == pytest.approx(isi_fwi(ffmc, 10.0, 86400))
        assert daily.fwi == pytest.approx(fwi(daily.isi, daily.bui))
        assert daily.dsr == pytest.approx(dsr(daily.fwi))
        assert next_state == MoistureState(ffmc=ffmc, dmc=dmc, dc=dc)

    def test_state_is_immutable(self):
        """Moisture state is replaced, never mutated."""
        state = MoistureState()
        with pytest.raises(AttributeError):
            state.ffmc = 90.0

    def test_invalid_weather_marks_everything(self, location, caplog):
        """A rejected observation leaves every index invalid."""
        obs = DailyObservation(temperature=61.0, relative_humidity=0.4, precipitation=0.0, wind_speed=10.0)
        with caplog.at_level(logging.WARNING, logger="cffwi.calculator"):
            daily, _ = compute_daily(MoistureState(), obs, location, ClockTime(month=7))
        assert daily.ffmc == INVALID
        assert daily.bui == INVALID
        assert daily.isi == INVALID
        assert daily.fwi == INVALID
        assert daily.dsr == INVALID
        assert "Daily FFMC is invalid" in caplog.text

    def test_invalid_dmc_only_blocks_dependents(self, location, noon):
        """A bad DMC invalidates BUI, FWI and DSR but not FFMC or ISI."""
        daily, _ = compute_daily(MoistureState(dmc=-1.0), noon, location, ClockTime(month=7))
        assert daily.dmc == INVALID
        assert daily.ffmc != INVALID
        assert daily.dc != INVALID
        assert daily.isi != INVALID
        assert daily.bui == INVALID
        assert daily.fwi == INVALID
        assert daily.dsr == INVALID

    def test_checked_values(self, location, noon):
        """Checked access raises for invalid indices."""
        daily, _ = compute_daily(MoistureState(dmc=-1.0), noon, location, ClockTime(month=7))
        assert daily.checked("ffmc").valid
        assert daily.checked("ffmc").unwrap() == daily.ffmc
        with pytest.raises(FWIDomainError, match="fwi"):
            daily.checked("fwi").unwrap()
        with pytest.raises(KeyError):
            daily.checked("nonsense")


class TestComputeHourly:
    """Tests for the hourly stage."""

    def _daily(self, location, noon, state=None):
        state = state or MoistureState()
        daily, _ = compute_daily(state, noon, location, ClockTime(month=7))
        return state, daily

    def test_lawson_afternoon(self, location, noon, afternoon):
        """Default settings use Lawson's tables and today's BUI after noon."""
        state, daily = self._daily(location, noon)
        clock = ClockTime(month=7, hour=16)
        hourly = compute_hourly(state, daily, afternoon, location, clock)

        ffmc = hourly_ffmc_lawson(85.0, daily.ffmc, 0.30, 16 * 3600)
        assert hourly.ffmc == pytest.approx(ffmc)
        assert hourly.previous_ffmc == pytest.approx(hourly_ffmc_lawson(85.0, daily.ffmc, 0.30, 15 * 3600))
        assert hourly.isi == pytest.approx(isi_fwi(ffmc, 15.0, 0))
        assert hourly.bui == pytest.approx(daily.bui)
        assert hourly.fwi == pytest.approx(fwi(hourly.isi, daily.bui))
        assert hourly.previous_ffmc_van_wagner is None

    def test_morning_uses_yesterdays_bui(self, location, noon, afternoon):
        """Before noon the BUI comes from yesterday's codes."""
        state, daily = self._daily(location, noon)
        hourly = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=9))
        assert hourly.bui == pytest.approx(bui(200.0, 25.0))

    def test_dst_shifts_hour_and_bui(self, noon, afternoon):
        """With DST the table hour moves back and the BUI switch moves to 13:00."""
        location = Location.from_degrees(53.5, -113.5, -7.0, 1.0)
        state, daily = self._daily(location, noon)
        hourly = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=12, minute=30))
        assert hourly.ffmc == pytest.approx(hourly_ffmc_lawson(85.0, daily.ffmc, 0.30, 11 * 3600))
        assert hourly.bui == pytest.approx(bui(200.0, 25.0))

        later = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=13))
        assert later.bui == pytest.approx(daily.bui)

    def test_no_dst_noon_uses_todays_bui(self, location, noon, afternoon):
        """Without DST the BUI switches at 12:00."""
        state, daily = self._daily(location, noon)
        hourly = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=12, minute=30))
        assert hourly.bui == pytest.approx(daily.bui)

    def test_hourly_isi_uses_minutes(self, location, noon, afternoon):
        """Hourly ISI uses the seconds past the hour."""
        state, daily = self._daily(location, noon)
        hourly = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=16, minute=30))
        assert hourly.isi == pytest.approx(isi_fwi(hourly.ffmc, 15.0, 1800))

    def test_van_wagner_with_carried_seed(self, location, noon):
        """Van Wagner steps from the carried previous hourly FFMC."""
        state, daily = self._daily(location, noon)
        obs = HourlyObservation(24.0, 0.30, 0.0, 15.0, previous_hourly_ffmc=80.0)
        settings = HourlySettings(use_van_wagner_hourly_model=True)
        hourly = compute_hourly(state, daily, obs, location, ClockTime(month=7, hour=16), settings)

        expected = hourly_ffmc_van_wagner(80.0, 0.0, 24.0, 0.30, 15.0, 3600)
        assert hourly.ffmc == pytest.approx(expected)
        assert hourly.previous_ffmc_van_wagner == pytest.approx(
            hourly_ffmc_van_wagner_previous(expected, 0.0, 24.0, 0.30, 15.0)
        )
        assert hourly.checked("previous_ffmc_van_wagner").valid

    def test_van_wagner_lawson_seed(self, location, noon):
        """The Lawson previous-hour FFMC seeds Van Wagner when requested."""
        state, daily = self._daily(location, noon)
        obs = HourlyObservation(24.0, 0.30, 0.0, 15.0, previous_hourly_ffmc=80.0)
        settings = HourlySettings(use_van_wagner_hourly_model=True, use_lawson_previous_hour_seed=True)
        hourly = compute_hourly(state, daily, obs, location, ClockTime(month=7, hour=16), settings)

        seed = hourly_ffmc_lawson(85.0, daily.ffmc, 0.30, 15 * 3600)
        assert hourly.ffmc == pytest.approx(hourly_ffmc_van_wagner(seed, 0.0, 24.0, 0.30, 15.0, 3600))

    def test_van_wagner_without_carried_seed(self, location, noon, afternoon):
        """Without a carried FFMC the Lawson previous hour is the seed."""
        state, daily = self._daily(location, noon)
        settings = HourlySettings(use_van_wagner_hourly_model=True)
        hourly = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=16), settings)
        assert hourly.ffmc == pytest.approx(
            hourly_ffmc_van_wagner(hourly.previous_ffmc, 0.0, 24.0, 0.30, 15.0, 3600)
        )

    def test_contiguous_lawson(self, location, noon):
        """The contiguous model uses the exact local time and hour RH values."""
        state, daily = self._daily(location, noon)
        obs = HourlyObservation(18.0, 0.50, 0.0, 8.0, rh_start=0.55, rh_end=0.45)
        settings = HourlySettings(use_contiguous_lawson=True)
        clock = ClockTime(month=7, hour=8, minute=15)
        hourly = compute_hourly(state, daily, obs, location, clock, settings)
        assert hourly.ffmc == pytest.approx(
            hourly_ffmc_lawson_contiguous(85.0, daily.ffmc, 0.55, 0.50, 0.45, 8 * 3600 + 900)
        )

    def test_invalid_daily_ffmc_propagates(self, location, afternoon, caplog):
        """A rejected daily FFMC leaves the hourly indices invalid."""
        obs = DailyObservation(temperature=20.0, relative_humidity=0.4, precipitation=-1.0, wind_speed=10.0)
        state = MoistureState()
        daily, _ = compute_daily(state, obs, location, ClockTime(month=7))
        with caplog.at_level(logging.WARNING, logger="cffwi.calculator"):
            hourly = compute_hourly(state, daily, afternoon, location, ClockTime(month=7, hour=16))
        assert hourly.ffmc == INVALID
        assert hourly.isi == INVALID
        assert hourly.fwi == INVALID
        assert "Hourly FFMC is invalid" in caplog.text
        assert not hourly.checked("previous_ffmc_van_wagner").valid


class TestFWICalculator:
    """Tests for the calculator facade."""

    def test_daily_only(self, location, noon):
        """Without an hourly observation only the daily stage runs."""
        calc = FWICalculator(location)
        result = calc.run(MoistureState(), noon, ClockTime(month=7))
        assert result.hourly is None
        assert result.next_state == result.daily.next_state()

    def test_daily_and_hourly(self, location, noon, afternoon):
        """Both stages run when an hourly observation is given."""
        calc = FWICalculator(location)
        clock = ClockTime(month=7, hour=16)
        result = calc.run(MoistureState(), noon, clock, afternoon)
        expected = compute_hourly(MoistureState(), result.daily, afternoon, location, clock)
        assert result.hourly == expected

    def test_consecutive_days(self, location, noon):
        """Each day's output state feeds the next day."""
        calc = FWICalculator(location)
        state = MoistureState()
        for _ in range(3):
            result = calc.run(state, noon, ClockTime(month=7))
            assert result.daily.dmc > state.dmc
            assert result.daily.dc > state.dc
            state = result.next_state

    def test_from_config(self):
        """The calculator takes its station and settings from a configuration."""
        config = CalculatorConfig(
            station=StationConfig(latitude=45.0, longitude=-75.0, dst_hours=1.0),
            hourly=HourlySettings(use_van_wagner_hourly_model=True),
        )
        calc = FWICalculator.from_config(config)
        assert calc.location.latitude == pytest.approx(math.radians(45.0))
        assert calc.location.dst_amount == 3600
        assert calc.settings.use_van_wagner_hourly_model

    def test_hourly_disabled_by_config(self, noon, afternoon):
        """With calculate_hourly off the hourly observation is ignored."""
        config = CalculatorConfig(
            station=StationConfig(latitude=53.5, longitude=-113.5, timezone_offset_hours=-7.0),
            calculate_hourly=False,
        )
        calc = FWICalculator.from_config(config)
        assert not calc.calculate_hourly
        result = calc.run(MoistureState(), noon, ClockTime(month=7, hour=16), afternoon)
        assert result.hourly is None
        assert result.daily == compute_daily(MoistureState(), noon, calc.location, ClockTime(month=7, hour=16))[0]

    def test_hourly_enabled_by_config(self, noon, afternoon):
        """With calculate_hourly on both stages run."""
        config = CalculatorConfig(
            station=StationConfig(latitude=53.5, longitude=-113.5, timezone_offset_hours=-7.0),
            calculate_hourly=True,
        )
        result = FWICalculator.from_config(config).run(
            MoistureState(), noon, ClockTime(month=7, hour=16), afternoon
        )
        assert result.hourly is not None
