"""
Rising, transit and setting after Meeus ch. 15, generalised to any target altitude of the sun.

Times are solved for one UTC calendar day from the solar coordinates at 0h of the day before, the day
itself and the day after, interpolated to the instant of interest. Results are hours since 0h UTC of
that day, and may fall outside [0, 24) for observers far from the prime meridian.
"""

import math
import typing
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np

from .angles import (
    degrees_to_radians, normalize_to_scale, quadrant_shift_angle, radians_to_degrees,
    unwind_angle,
)
from .astro import SOLAR_ALTITUDE, SolarCoordinates, altitude_of_celestial_body
from .julian import julian_day_for

if typing.TYPE_CHECKING:
    from datetime import date
    from .geo import Coordinates
    from .types import DayFraction, Degree, GeoDeg, Hour, RawSolution

# Sidereal degrees per solar day
SIDEREAL_RATE = 360.985647


def interpolate(y2: float, y1: float, y3: float, n: float) -> float:
    """
    Three-point interpolation, eq. 3.3.
    :param y2: value at the central point
    :param y1: value one interval before
    :param y3: value one interval after
    :param n: interpolating factor, in intervals from the central point
    """
    a = y2 - y1
    b = y3 - y2
    c = b - a
    return y2 + n/2*(a + b + n*c)


def interpolate_angles(y2: 'Degree', y1: 'Degree', y3: 'Degree', n: float) -> 'Degree':
    """As interpolate(), but differences are unwound so that 359 -> 1 is a step of +2"""
    a = unwind_angle(y2 - y1)
    b = unwind_angle(y3 - y2)
    c = b - a
    return y2 + n/2*(a + b + n*c)


def approximate_transit(
    longitude: 'GeoDeg', sidereal_time: 'Degree', right_ascension: 'Degree',
) -> 'DayFraction':
    """m0, eq. 15.2"""
    Lw = -longitude
    return normalize_to_scale((right_ascension + Lw - sidereal_time)/360, 1)


def corrected_transit(
    m0: 'DayFraction',
    longitude: 'GeoDeg',
    sidereal_time: 'Degree',
    right_ascension: 'Degree',
    previous_right_ascension: 'Degree',
    next_right_ascension: 'Degree',
) -> 'Hour':
    Lw = -longitude
    Theta = unwind_angle(sidereal_time + SIDEREAL_RATE*m0)
    alpha = unwind_angle(interpolate_angles(
        right_ascension, previous_right_ascension, next_right_ascension, m0,
    ))
    H = quadrant_shift_angle(Theta - Lw - alpha)
    dm = H/-360
    return (m0 + dm)*24


def corrected_hour_angle(
    m0: 'DayFraction',
    h0: 'Degree',
    coordinates: 'Coordinates',
    after_transit: bool,
    sidereal_time: 'Degree',
    right_ascension: 'Degree',
    previous_right_ascension: 'Degree',
    next_right_ascension: 'Degree',
    declination: 'Degree',
    previous_declination: 'Degree',
    next_declination: 'Degree',
) -> 'Hour':
    """
    Time at which the sun passes altitude h0 before (rising) or after (setting) transit.

    :return: hours since 0h UTC, or NaN if the sun never reaches h0 on this day
    """
    Lw = -coordinates.longitude
    phi = degrees_to_radians(coordinates.latitude)

    cos_H0 = (
        np.sin(degrees_to_radians(h0)) - np.sin(phi)*np.sin(degrees_to_radians(declination))
    ) / (
        np.cos(phi)*np.cos(degrees_to_radians(declination))
    )
    if not -1 <= cos_H0 <= 1:
        # Polar day or night for this altitude
        return math.nan
    H0 = radians_to_degrees(np.arccos(cos_H0))

    m = m0 + H0/360 if after_transit else m0 - H0/360
    Theta = unwind_angle(sidereal_time + SIDEREAL_RATE*m)
    alpha = unwind_angle(interpolate_angles(
        right_ascension, previous_right_ascension, next_right_ascension, m,
    ))
    delta = interpolate(declination, previous_declination, next_declination, m)
    H = Theta - Lw - alpha
    h = altitude_of_celestial_body(coordinates.latitude, delta, H)

    dm = (h - h0) / (
        360
        * np.cos(degrees_to_radians(delta))
        * np.cos(phi)
        * np.sin(degrees_to_radians(H))
    )
    return float((m + dm)*24)


def hours_to_instant(hours: 'Hour', day: 'date') -> 'RawSolution':
    """
    Convert hours since 0h UTC of a day to an aware instant, truncated to the second.

    :return: None for a NaN hour count, i.e. an altitude the sun never reaches
    """
    if math.isnan(hours):
        return None
    hour = math.floor(hours)
    minute = math.floor((hours - hour)*60)
    second = math.floor((hours - (hour + minute/60))*3600)
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return midnight + timedelta(hours=hour, minutes=minute, seconds=second)


@dataclass(frozen=True, slots=True)
class SolarTime:
    """Transit, sunrise and sunset for one UTC day at one location, in hours since 0h UTC"""
    observer: 'Coordinates'
    solar: SolarCoordinates
    prev_solar: SolarCoordinates
    next_solar: SolarCoordinates
    approx_transit: 'DayFraction'
    transit: 'Hour'
    sunrise: 'Hour'
    sunset: 'Hour'

    @classmethod
    def for_day(cls, day: 'date', coordinates: 'Coordinates') -> 'SolarTime':
        jd = julian_day_for(day)
        solar = SolarCoordinates.from_julian_day(jd)
        prev_solar = SolarCoordinates.from_julian_day(jd - 1)
        next_solar = SolarCoordinates.from_julian_day(jd + 1)

        m0 = approximate_transit(
            coordinates.longitude, solar.apparent_sidereal_time, solar.right_ascension,
        )
        transit = corrected_transit(
            m0, coordinates.longitude, solar.apparent_sidereal_time,
            solar.right_ascension, prev_solar.right_ascension, next_solar.right_ascension,
        )

        def solve(after_transit: bool) -> 'Hour':
            return _hour_angle(
                m0, SOLAR_ALTITUDE, coordinates, after_transit, solar, prev_solar, next_solar,
            )

        return cls(
            observer=coordinates, solar=solar, prev_solar=prev_solar, next_solar=next_solar,
            approx_transit=m0, transit=transit,
            sunrise=solve(after_transit=False), sunset=solve(after_transit=True),
        )

    def hour_angle(self, angle: 'Degree', after_transit: bool) -> 'Hour':
        """
        :param angle: target solar altitude; negative below the horizon, e.g. -18 for astronomical
                      twilight
        """
        return _hour_angle(
            self.approx_transit, angle, self.observer, after_transit,
            self.solar, self.prev_solar, self.next_solar,
        )

    def afternoon(self, shadow_length: float) -> 'Hour':
        """
        The time after transit when an object's shadow equals its noon shadow plus shadow_length
        times its height.
        """
        tangent = abs(self.observer.latitude - self.solar.declination)
        inverse = shadow_length + np.tan(degrees_to_radians(tangent))
        angle = radians_to_degrees(np.arctan(1/inverse))
        return self.hour_angle(angle, after_transit=True)


def _hour_angle(
    m0: 'DayFraction',
    angle: 'Degree',
    coordinates: 'Coordinates',
    after_transit: bool,
    solar: SolarCoordinates,
    prev_solar: SolarCoordinates,
    next_solar: SolarCoordinates,
) -> 'Hour':
    return corrected_hour_angle(
        m0, angle, coordinates, after_transit,
        solar.apparent_sidereal_time,
        solar.right_ascension, prev_solar.right_ascension, next_solar.right_ascension,
        solar.declination, prev_solar.declination, next_solar.declination,
    )
