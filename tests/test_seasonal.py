from datetime import datetime, timedelta, timezone

import pytest

from miqat.seasonal import (
    Shafaq, evaluate_seasonal_adjustment, evening_coefficients, morning_coefficients,
    season_adjusted_evening_twilight, season_adjusted_morning_twilight,
)

SUNRISE = datetime(2024, 6, 21, 3, 0, tzinfo=timezone.utc)
SUNSET = datetime(2024, 6, 21, 21, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(('dyy', 'expected'), (
    (0, 10),
    (91, 20),
    (137, 30),
    (183, 40),
    (229, 30),
    (275, 20),
))
def test_seasonal_breakpoints(dyy: int, expected: float) -> None:
    assert evaluate_seasonal_adjustment(dyy, 10, 20, 30, 40) == pytest.approx(expected)


def test_seasonal_segments_are_linear() -> None:
    assert evaluate_seasonal_adjustment(45, 10, 20, 30, 40) == pytest.approx(10 + 10*45/91)
    assert evaluate_seasonal_adjustment(160, 10, 20, 30, 40) == pytest.approx(35)
    assert evaluate_seasonal_adjustment(365, 10, 20, 30, 40) == pytest.approx(20 - 10*90/91)


def test_coefficients_at_equator() -> None:
    assert morning_coefficients(0) == (75, 75, 75, 75)
    assert evening_coefficients(0, Shafaq.AHMER) == (62, 62, 62, 62)
    assert evening_coefficients(0, Shafaq.GENERAL) == (75, 75, 75, 75)


def test_coefficients_scale_with_latitude() -> None:
    assert morning_coefficients(55) == pytest.approx((103.65, 94.44, 107.74, 123.1))
    assert morning_coefficients(-55) == morning_coefficients(55)
    assert evening_coefficients(55, Shafaq.ABYAD) == pytest.approx((100.6, 82.16, 111.84, 156.84))


def test_equator_offsets() -> None:
    fajr = season_adjusted_morning_twilight(0, 173, 2024, SUNRISE)
    assert fajr == SUNRISE - timedelta(minutes=75)
    isha = season_adjusted_evening_twilight(0, 173, 2024, SUNSET, Shafaq.AHMER)
    assert isha == SUNSET + timedelta(minutes=62)


def test_northern_summer_is_longest() -> None:
    # Day 173 of 2024 is the day after the June solstice
    summer = season_adjusted_morning_twilight(55, 173, 2024, SUNRISE)
    winter = season_adjusted_morning_twilight(55, 355, 2024, SUNRISE)
    assert SUNRISE - summer > SUNRISE - winter


def test_hemispheres_mirror() -> None:
    north = season_adjusted_evening_twilight(50, 355, 2024, SUNSET)
    south = season_adjusted_evening_twilight(-50, 173, 2024, SUNSET)
    assert abs(north - south) <= timedelta(seconds=60)


@pytest.mark.parametrize('shafaq', tuple(Shafaq))
def test_offsets_are_whole_seconds(shafaq: Shafaq) -> None:
    isha = season_adjusted_evening_twilight(47.3, 40, 2023, SUNSET, shafaq)
    assert isha.microsecond == 0
    assert isha > SUNSET
