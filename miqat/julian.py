import typing

if typing.TYPE_CHECKING:
    from datetime import date
    from .types import GeoDeg, Hour, JulianCentury, JulianDay

# 2000-01-01 12:00 TT
J2000: 'JulianDay' = 2_451_545.
DAYS_PER_CENTURY = 36_525

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def julian_day(year: int, month: int, day: int, hours: 'Hour' = 0) -> 'JulianDay':
    """
    Meeus, Astronomical Algorithms ch. 7, Gregorian calendar only. January and February count as
    months 13 and 14 of the previous year.
    """
    Y = year if month > 2 else year - 1
    M = month if month > 2 else month + 12
    D = day + hours/24

    A = int(Y/100)
    B = int(2 - A + int(A/4))

    i0 = int(365.25*(Y + 4716))
    i1 = int(30.6001*(M + 1))

    return i0 + i1 + D + B - 1524.5


def julian_day_for(when: 'date', hours: 'Hour' = 0) -> 'JulianDay':
    return julian_day(when.year, when.month, when.day, hours)


def julian_century(jd: 'JulianDay') -> 'JulianCentury':
    """Julian centuries from J2000"""
    return (jd - J2000)/DAYS_PER_CENTURY


def is_leap_year(year: int) -> bool:
    if year % 4 != 0:
        return False
    if year % 100 == 0 and year % 400 != 0:
        return False
    return True


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def day_of_year(when: 'date') -> int:
    """1-based"""
    lengths = list(_MONTH_LENGTHS)
    if is_leap_year(when.year):
        lengths[1] = 29
    return sum(lengths[:when.month - 1]) + when.day


def days_since_solstice(day_of_year_value: int, year: int, latitude: 'GeoDeg') -> int:
    """
    Days elapsed since the winter solstice of the observer's hemisphere. Day 10 stands in for the
    northern solstice (about 21 December); 172, or 173 in a leap year, for the southern one.
    """
    n_days = days_in_year(year)

    if latitude >= 0:
        since = day_of_year_value + 10
        if since >= n_days:
            since -= n_days
        return since

    since = day_of_year_value - (173 if is_leap_year(year) else 172)
    if since < 0:
        since += n_days
    return since
