"""
Low-precision solar ephemeris after Meeus, Astronomical Algorithms (2nd ed.) chapters 12, 22 and 25.
Angles are in degrees throughout; accuracy is on the order of 0.01 degrees for dates near J2000,
which is well under a minute of prayer time.
"""

import typing
from datetime import timezone

import numpy as np

from .angles import degrees_to_radians, quadrant_shift_angle, radians_to_degrees, unwind_angle
from .julian import J2000, DAYS_PER_CENTURY, julian_century, julian_day

if typing.TYPE_CHECKING:
    from datetime import datetime
    from .geo import Coordinates
    from .types import Degree, GeoDeg, JulianCentury, JulianDay


# Altitude of the solar centre at sunrise and sunset: 34' refraction plus 16' semidiameter
SOLAR_ALTITUDE: 'Degree' = -50/60


def mean_solar_longitude(T: 'JulianCentury') -> 'Degree':
    """L0, eq. 25.2"""
    L0 = 280.4664567 + 36_000.76983*T + 0.0003032*T**2
    return unwind_angle(L0)


def mean_lunar_longitude(T: 'JulianCentury') -> 'Degree':
    """L', ch. 22"""
    Lp = 218.3165 + 481_267.8813*T
    return unwind_angle(Lp)


def ascending_lunar_node_longitude(T: 'JulianCentury') -> 'Degree':
    """Omega, ch. 22"""
    Omega = 125.04452 - 1934.136261*T + 0.0020708*T**2 + T**3/450_000
    return unwind_angle(Omega)


def mean_solar_anomaly(T: 'JulianCentury') -> 'Degree':
    """M, eq. 25.3"""
    M = 357.52911 + 35_999.05029*T - 0.0001537*T**2
    return unwind_angle(M)


def solar_equation_of_the_center(T: 'JulianCentury', M: 'Degree') -> 'Degree':
    """C, the difference between true and mean anomaly"""
    Mrad = degrees_to_radians(M)
    return (
        + (1.914602 - 0.004817*T - 0.000014*T**2)*np.sin(Mrad)
        + (0.019993 - 0.000101*T)*np.sin(2*Mrad)
        + 0.000289*np.sin(3*Mrad)
    )


def apparent_solar_longitude(T: 'JulianCentury', L0: 'Degree') -> 'Degree':
    """lambda: true longitude corrected for nutation and aberration"""
    longitude = L0 + solar_equation_of_the_center(T, mean_solar_anomaly(T))
    Omega = 125.04 - 1934.136*T
    Lambda = longitude - 0.00569 - 0.00478*np.sin(degrees_to_radians(Omega))
    return unwind_angle(Lambda)


def mean_obliquity_of_the_ecliptic(T: 'JulianCentury') -> 'Degree':
    """epsilon0, eq. 22.2"""
    return 23.439291 - 0.013004167*T - 0.0000001639*T**2 + 0.0000005036*T**3


def apparent_obliquity_of_the_ecliptic(T: 'JulianCentury', epsilon0: 'Degree') -> 'Degree':
    Omega = 125.04 - 1934.136*T
    return epsilon0 + 0.00256*np.cos(degrees_to_radians(Omega))


def mean_sidereal_time(T: 'JulianCentury') -> 'Degree':
    """Greenwich mean sidereal time, eq. 12.4"""
    jd = T*DAYS_PER_CENTURY + J2000
    Theta = (
        280.46061837
        + 360.98564736629*(jd - J2000)
        + 0.000387933*T**2
        - T**3/38_710_000
    )
    return unwind_angle(Theta)


def nutation_in_longitude(
    L0: 'Degree', Lp: 'Degree', Omega: 'Degree',
) -> 'Degree':
    """Delta psi, ch. 22, accurate to 0.5 arcsecond"""
    return (
        - 17.2/3600*np.sin(degrees_to_radians(Omega))
        - 1.32/3600*np.sin(2*degrees_to_radians(L0))
        - 0.23/3600*np.sin(2*degrees_to_radians(Lp))
        + 0.21/3600*np.sin(2*degrees_to_radians(Omega))
    )


def nutation_in_obliquity(
    L0: 'Degree', Lp: 'Degree', Omega: 'Degree',
) -> 'Degree':
    """Delta epsilon, ch. 22, accurate to 0.1 arcsecond"""
    return (
        + 9.2/3600*np.cos(degrees_to_radians(Omega))
        + 0.57/3600*np.cos(2*degrees_to_radians(L0))
        + 0.10/3600*np.cos(2*degrees_to_radians(Lp))
        - 0.09/3600*np.cos(2*degrees_to_radians(Omega))
    )


def altitude_of_celestial_body(
    latitude: 'GeoDeg', declination: 'Degree', local_hour_angle: 'Degree',
) -> 'Degree':
    """eq. 13.6"""
    phi = degrees_to_radians(latitude)
    delta = degrees_to_radians(declination)
    H = degrees_to_radians(local_hour_angle)
    return radians_to_degrees(np.arcsin(
        np.sin(phi)*np.sin(delta) + np.cos(phi)*np.cos(delta)*np.cos(H)
    ))


class SolarCoordinates(typing.NamedTuple):
    """
    Equatorial position of the sun and the sidereal time at one instant.

    symbol      meaning
    ------      -------
    delta       declination, signed, (-90, 90)
    alpha       right ascension, [0, 360)
    Theta0      apparent sidereal time at Greenwich
    """
    julian_day: 'JulianDay'
    declination: 'Degree'
    right_ascension: 'Degree'
    apparent_sidereal_time: 'Degree'

    @classmethod
    def from_julian_day(cls, jd: 'JulianDay') -> 'SolarCoordinates':
        T = julian_century(jd)
        L0 = mean_solar_longitude(T)
        Lp = mean_lunar_longitude(T)
        Omega = ascending_lunar_node_longitude(T)
        Lambda = degrees_to_radians(apparent_solar_longitude(T, L0))

        Theta0 = mean_sidereal_time(T)
        d_psi = nutation_in_longitude(L0, Lp, Omega)
        d_epsilon = nutation_in_obliquity(L0, Lp, Omega)

        epsilon0 = mean_obliquity_of_the_ecliptic(T)
        epsilon_app = degrees_to_radians(apparent_obliquity_of_the_ecliptic(T, epsilon0))

        declination = radians_to_degrees(np.arcsin(
            np.sin(epsilon_app)*np.sin(Lambda)
        ))
        right_ascension = unwind_angle(radians_to_degrees(np.arctan2(
            np.cos(epsilon_app)*np.sin(Lambda), np.cos(Lambda),
        )))

        # Equation of the equinoxes, ch. 12
        apparent_sidereal_time = Theta0 + d_psi*np.cos(degrees_to_radians(epsilon0 + d_epsilon))

        return cls(
            julian_day=jd,
            declination=float(declination),
            right_ascension=float(right_ascension),
            apparent_sidereal_time=float(apparent_sidereal_time),
        )


class SolarPosition(typing.NamedTuple):
    """Horizontal position of the sun for one observer and instant"""
    altitude: 'Degree'                # negative below the horizon
    azimuth: 'Degree'                 # clockwise from geographic north
    declination: 'Degree'
    right_ascension: 'Degree'
    local_hour_angle: 'Degree'        # [-180, 180], zero at transit
    apparent_sidereal_time: 'Degree'


def solar_position(instant: 'datetime', coordinates: 'Coordinates') -> SolarPosition:
    """
    :param instant: an aware datetime; converted to UTC before use
    """
    utc = instant.astimezone(timezone.utc)
    hours = (
        utc.hour + utc.minute/60 + utc.second/3600 + utc.microsecond/3_600_000_000
    )
    sun = SolarCoordinates.from_julian_day(
        julian_day(utc.year, utc.month, utc.day, hours),
    )

    local_sidereal_time = unwind_angle(sun.apparent_sidereal_time + coordinates.longitude)
    local_hour_angle = quadrant_shift_angle(local_sidereal_time - sun.right_ascension)
    altitude = altitude_of_celestial_body(
        coordinates.latitude, sun.declination, local_hour_angle,
    )

    H = degrees_to_radians(local_hour_angle)
    phi = degrees_to_radians(coordinates.latitude)
    delta = degrees_to_radians(sun.declination)
    # eq. 13.5 measures from the south; shift to north-based
    azimuth = unwind_angle(radians_to_degrees(np.arctan2(
        np.sin(H),
        np.cos(H)*np.sin(phi) - np.tan(delta)*np.cos(phi),
    )) + 180)

    return SolarPosition(
        altitude=float(altitude),
        azimuth=float(azimuth),
        declination=sun.declination,
        right_ascension=sun.right_ascension,
        local_hour_angle=float(local_hour_angle),
        apparent_sidereal_time=sun.apparent_sidereal_time,
    )
