import math
from datetime import date, datetime, timedelta, timezone

import pytest

from miqat.geo import Coordinates
from miqat.transit import (
    SolarTime, approximate_transit, hours_to_instant, interpolate, interpolate_angles,
)

CITIES = (
    Coordinates(43.6532, -79.3832),    # Toronto
    Coordinates(-33.8688, 151.2093),   # Sydney
    Coordinates(21.4225, 39.8262),     # Makkah
    Coordinates(51.5072, -0.1276),     # London
    Coordinates(-6.2088, 106.8456),    # Jakarta
)


def test_interpolate() -> None:
    assert interpolate(2, 1, 3, 0.5) == pytest.approx(2.5)
    assert interpolate(2, 1, 3, 0) == 2


def test_interpolate_angles_across_zero() -> None:
    assert interpolate_angles(1, 359, 3, 0.5) == pytest.approx(2)
    assert interpolate_angles(1, 359, 3, -0.5) == pytest.approx(0)


def test_approximate_transit_is_day_fraction() -> None:
    assert 0 <= approximate_transit(-79.3832, 170.5, 350.2) < 1
    assert 0 <= approximate_transit(151.2, 10, 5) < 1


@pytest.mark.parametrize('coordinates', CITIES)
@pytest.mark.parametrize('day', (date(2024, 1, 15), date(2024, 4, 30), date(2024, 8, 10)))
def test_corrected_transit_near_approximation(coordinates: Coordinates, day: date) -> None:
    solar_time = SolarTime.for_day(day, coordinates)
    approx = hours_to_instant(solar_time.approx_transit*24, day)
    corrected = hours_to_instant(solar_time.transit, day)
    assert abs(corrected - approx) < timedelta(minutes=20)


@pytest.mark.parametrize('coordinates', CITIES)
def test_sunrise_transit_sunset_order(coordinates: Coordinates) -> None:
    solar_time = SolarTime.for_day(date(2024, 3, 11), coordinates)
    assert solar_time.sunrise < solar_time.transit < solar_time.sunset
    assert solar_time.transit - solar_time.sunrise == pytest.approx(
        solar_time.sunset - solar_time.transit, abs=0.1,
    )


def test_toronto_sunrise_and_sunset(toronto: Coordinates, march_11: date) -> None:
    solar_time = SolarTime.for_day(march_11, toronto)
    sunrise = hours_to_instant(solar_time.sunrise, march_11)
    sunset = hours_to_instant(solar_time.sunset, march_11)
    utc = timezone.utc
    assert abs(sunrise - datetime(2024, 3, 11, 11, 38, tzinfo=utc)) < timedelta(minutes=5)
    assert abs(sunset - datetime(2024, 3, 11, 23, 18, tzinfo=utc)) < timedelta(minutes=5)


def test_unreachable_altitude_is_nan() -> None:
    reykjavik = Coordinates(64.1466, -21.9426)
    solar_time = SolarTime.for_day(date(2024, 6, 21), reykjavik)
    assert math.isnan(solar_time.hour_angle(-18, after_transit=False))
    assert math.isnan(solar_time.hour_angle(-18, after_transit=True))
    assert not math.isnan(solar_time.sunrise)


def test_polar_day_has_no_sunrise() -> None:
    longyearbyen = Coordinates(78.2232, 15.6267)
    solar_time = SolarTime.for_day(date(2024, 6, 21), longyearbyen)
    assert math.isnan(solar_time.sunrise)
    assert math.isnan(solar_time.sunset)
    assert not math.isnan(solar_time.transit)


def test_hanafi_afternoon_is_later(toronto: Coordinates, march_11: date) -> None:
    solar_time = SolarTime.for_day(march_11, toronto)
    shafi = solar_time.afternoon(1)
    hanafi = solar_time.afternoon(2)
    assert solar_time.transit < shafi < hanafi < solar_time.sunset


@pytest.mark.parametrize(('hours', 'expected'), (
    (0, datetime(2024, 3, 11, tzinfo=timezone.utc)),
    (17.5, datetime(2024, 3, 11, 17, 30, tzinfo=timezone.utc)),
    (-1.5, datetime(2024, 3, 10, 22, 30, tzinfo=timezone.utc)),
    (25.25, datetime(2024, 3, 12, 1, 15, tzinfo=timezone.utc)),
))
def test_hours_to_instant(hours: float, expected: datetime) -> None:
    assert hours_to_instant(hours, date(2024, 3, 11)) == expected


def test_hours_to_instant_truncates_to_second() -> None:
    instant = hours_to_instant(10 + 1/60 + 1.9/3600, date(2024, 3, 11))
    assert instant.microsecond == 0
    assert instant.second in (1, 2)


def test_nan_hours_are_none() -> None:
    assert hours_to_instant(math.nan, date(2024, 3, 11)) is None
