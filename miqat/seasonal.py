"""
Seasonal twilight offsets used by the Moonsighting Committee Worldwide (Khalid Shaukat). Rather than a
fixed depression angle, Fajr and Isha are a number of minutes from sunrise and sunset that varies with
latitude and with the time since the winter solstice, fitted to observed twilight.
"""

import typing
from datetime import timedelta
from enum import Enum

import numpy as np

from .julian import days_since_solstice

if typing.TYPE_CHECKING:
    from datetime import datetime
    from .types import GeoDeg, Minute


class Shafaq(str, Enum):
    """Which evening twilight marks the start of Isha"""
    GENERAL = 'general'  # a blend of red and white, tuned for high latitudes
    AHMER = 'ahmer'      # red twilight, the earliest
    ABYAD = 'abyad'      # white twilight, the latest


class SeasonCoefficients(typing.NamedTuple):
    """Minutes at the winter solstice (a), the equinoxes (b, c) and the summer solstice (d)"""
    a: 'Minute'
    b: 'Minute'
    c: 'Minute'
    d: 'Minute'


def _scaled(
    base: 'Minute', slopes: tuple[float, float, float, float], latitude: 'GeoDeg',
) -> SeasonCoefficients:
    # The published table is given at 55 degrees
    scale = abs(latitude)/55
    return SeasonCoefficients(*(base + slope*scale for slope in slopes))


def morning_coefficients(latitude: 'GeoDeg') -> SeasonCoefficients:
    return _scaled(75, (28.65, 19.44, 32.74, 48.1), latitude)


def evening_coefficients(latitude: 'GeoDeg', shafaq: Shafaq) -> SeasonCoefficients:
    match shafaq:
        case Shafaq.AHMER:
            return _scaled(62, (17.4, -7.16, 5.12, 19.44), latitude)
        case Shafaq.ABYAD:
            return _scaled(75, (25.6, 7.16, 36.84, 81.84), latitude)
        case Shafaq.GENERAL:
            return _scaled(75, (25.6, 2.05, -9.21, 6.14), latitude)
    raise ValueError(f'Unknown shafaq {shafaq!r}')


def evaluate_seasonal_adjustment(
    dyy: int, a: 'Minute', b: 'Minute', c: 'Minute', d: 'Minute',
) -> 'Minute':
    """
    Piecewise-linear through a -> b -> c -> d -> c -> b -> a over the year.
    :param dyy: days since the winter solstice
    """
    if dyy < 91:
        return a + (b - a)/91*dyy
    if dyy < 137:
        return b + (c - b)/46*(dyy - 91)
    if dyy < 183:
        return c + (d - c)/46*(dyy - 137)
    if dyy < 229:
        return d + (c - d)/46*(dyy - 183)
    if dyy < 275:
        return c + (b - c)/46*(dyy - 229)
    return b + (a - b)/91*(dyy - 275)


def _round_seconds(minutes: 'Minute') -> int:
    # Half-seconds round toward +infinity
    return int(np.floor(minutes*60 + 0.5))


def season_adjusted_morning_twilight(
    latitude: 'GeoDeg', day_of_year: int, year: int, sunrise: 'datetime',
) -> 'datetime':
    dyy = days_since_solstice(day_of_year, year, latitude)
    minutes = evaluate_seasonal_adjustment(dyy, *morning_coefficients(latitude))
    return sunrise + timedelta(seconds=_round_seconds(-minutes))


def season_adjusted_evening_twilight(
    latitude: 'GeoDeg', day_of_year: int, year: int, sunset: 'datetime',
    shafaq: Shafaq = Shafaq.GENERAL,
) -> 'datetime':
    dyy = days_since_solstice(day_of_year, year, latitude)
    minutes = evaluate_seasonal_adjustment(dyy, *evening_coefficients(latitude, shafaq))
    return sunset + timedelta(seconds=_round_seconds(minutes))
