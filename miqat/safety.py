"""
Fajr and Isha far from the equator. In summer the sun may never sink to the twilight angle, and even
where it does, twilight can eat most of a short night. Each of the two is therefore solved twice: raw,
from the configured angle, and safe, as a bounded share of the night (or, for the Moonsighting
Committee, from its seasonal table). The selection between them is a pure function of the two.
"""

import logging
import typing
from datetime import timedelta

from .julian import day_of_year
from .methods import Method
from .seasonal import season_adjusted_evening_twilight, season_adjusted_morning_twilight
from .transit import hours_to_instant

if typing.TYPE_CHECKING:
    from datetime import date, datetime
    from .geo import Coordinates
    from .methods import CalculationParameters
    from .transit import SolarTime
    from .types import RawSolution

logger = logging.getLogger(__name__)


def select_fajr(raw: 'RawSolution', safe: 'datetime') -> 'datetime':
    """The later of the two; the safe value when the sun never reaches the Fajr angle"""
    if raw is None or safe > raw:
        return safe
    return raw


def select_isha(raw: 'RawSolution', safe: 'datetime') -> 'datetime':
    """The earlier of the two; the safe value when the sun never reaches the Isha angle"""
    if raw is None or safe < raw:
        return safe
    return raw


class TwilightResolution(typing.NamedTuple):
    raw_fajr: 'RawSolution'
    safe_fajr: 'datetime'
    fajr: 'datetime'
    raw_isha: 'RawSolution'
    safe_isha: 'datetime | None'  # None when Isha is a fixed interval after sunset
    isha: 'datetime'
    night: timedelta              # today's sunset to tomorrow's sunrise


def resolve_twilight(
    coordinates: 'Coordinates',
    day: 'date',
    params: 'CalculationParameters',
    solar_time: 'SolarTime',
    sunrise: 'datetime',
    sunset: 'datetime',
    tomorrow_sunrise: 'datetime',
    log: logging.Logger = logger,
) -> TwilightResolution:
    """
    :param solar_time: solved for `day`; used for the raw angle solutions
    :param sunrise: today's sunrise before any minute adjustment
    :param sunset: today's sunset before any minute adjustment
    :param tomorrow_sunrise: the next day's sunrise before any minute adjustment
    """
    night = tomorrow_sunrise - sunset
    fajr_portion, isha_portion = params.night_portions()
    moonsighting = params.method is Method.MOONSIGHTING_COMMITTEE

    raw_fajr = hours_to_instant(
        solar_time.hour_angle(-params.fajr_angle, after_transit=False), day,
    )
    if moonsighting:
        safe_fajr = season_adjusted_morning_twilight(
            coordinates.latitude, day_of_year(day), day.year, sunrise,
        )
    else:
        safe_fajr = sunrise - night*fajr_portion
    fajr = select_fajr(raw_fajr, safe_fajr)
    if fajr is not raw_fajr:
        log.debug(
            '%s: Fajr safeguard %s replaces %s', day, safe_fajr.isoformat(),
            'undefined' if raw_fajr is None else raw_fajr.isoformat(),
        )

    if params.isha_interval > 0:
        isha = sunset + timedelta(minutes=params.isha_interval)
        return TwilightResolution(
            raw_fajr=raw_fajr, safe_fajr=safe_fajr, fajr=fajr,
            raw_isha=isha, safe_isha=None, isha=isha, night=night,
        )

    raw_isha = hours_to_instant(
        solar_time.hour_angle(-params.isha_angle, after_transit=True), day,
    )
    if moonsighting:
        safe_isha = season_adjusted_evening_twilight(
            coordinates.latitude, day_of_year(day), day.year, sunset, params.shafaq,
        )
    else:
        safe_isha = sunset + night*isha_portion
    isha = select_isha(raw_isha, safe_isha)
    if isha is not raw_isha:
        log.debug(
            '%s: Isha safeguard %s replaces %s', day, safe_isha.isoformat(),
            'undefined' if raw_isha is None else raw_isha.isoformat(),
        )

    return TwilightResolution(
        raw_fajr=raw_fajr, safe_fajr=safe_fajr, fajr=fajr,
        raw_isha=raw_isha, safe_isha=safe_isha, isha=isha, night=night,
    )
