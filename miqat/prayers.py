import calendar
import logging
import typing
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from .errors import PolarCircleError
from .methods import CalculationParameters, Rounding
from .safety import resolve_twilight
from .transit import SolarTime, hours_to_instant

if typing.TYPE_CHECKING:
    from .geo import Coordinates
    from .types import Minute

logger = logging.getLogger(__name__)


class Event(str, Enum):
    """Daily events in the order they normally occur"""
    FAJR = 'fajr'
    SUNRISE = 'sunrise'
    DHUHR = 'dhuhr'
    ASR = 'asr'
    MAGHRIB = 'maghrib'
    ISHA = 'isha'
    MIDDLE_OF_THE_NIGHT = 'middleOfTheNight'
    LAST_THIRD_OF_THE_NIGHT = 'lastThirdOfTheNight'


# The five obligatory prayers
FARD = frozenset((Event.FAJR, Event.DHUHR, Event.ASR, Event.MAGHRIB, Event.ISHA))


def is_fard(event: 'Event | str') -> bool:
    try:
        return Event(event) in FARD
    except ValueError:
        return False


def as_utc_day(when: date | datetime) -> date:
    """The UTC calendar day of an instant. Naive datetimes are taken to be UTC already."""
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)
        return when.date()
    return when


def rounded_minute(instant: datetime, rounding: Rounding = Rounding.NEAREST) -> datetime:
    instant = instant.replace(microsecond=0)
    seconds = instant.second
    match rounding:
        case Rounding.NEAREST:
            offset = 60 - seconds if seconds >= 30 else -seconds
        case Rounding.UP:
            # A whole minute still moves forward
            offset = 60 - seconds
        case _:
            offset = 0
    return instant + timedelta(seconds=offset)


@dataclass(frozen=True, slots=True)
class PrayerTimes:
    coordinates: 'Coordinates'
    date: date
    params: CalculationParameters
    fajr: datetime
    sunrise: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime

    @classmethod
    def calculate(
        cls,
        coordinates: 'Coordinates',
        when: date | datetime,
        params: CalculationParameters,
        log: logging.Logger = logger,
    ) -> 'PrayerTimes':
        """
        :param when: the day to solve; a datetime contributes only its UTC calendar date
        :raises PolarCircleError: if the sun does not rise, set or reach the Asr altitude
        """
        day = as_utc_day(when)
        tomorrow = day + timedelta(days=1)
        solar_time = SolarTime.for_day(day, coordinates)
        tomorrow_solar_time = SolarTime.for_day(tomorrow, coordinates)

        dhuhr = hours_to_instant(solar_time.transit, day)
        sunrise = hours_to_instant(solar_time.sunrise, day)
        sunset = hours_to_instant(solar_time.sunset, day)
        asr = hours_to_instant(solar_time.afternoon(params.madhab.shadow_length), day)
        tomorrow_sunrise = hours_to_instant(tomorrow_solar_time.sunrise, tomorrow)

        for name, value in (
            ('sunrise', sunrise),
            ('sunset', sunset),
            ('Asr', asr),
            ("tomorrow's sunrise", tomorrow_sunrise),
        ):
            if value is None:
                raise PolarCircleError(
                    f'No {name} on {day} at latitude {coordinates.latitude}'
                )

        twilight = resolve_twilight(
            coordinates=coordinates, day=day, params=params, solar_time=solar_time,
            sunrise=sunrise, sunset=sunset, tomorrow_sunrise=tomorrow_sunrise, log=log,
        )

        adjustments = params.total_adjustments

        def finish(instant: datetime, minutes: 'Minute') -> datetime:
            return rounded_minute(instant + timedelta(minutes=minutes), params.rounding)

        return cls(
            coordinates=coordinates,
            date=day,
            params=params,
            fajr=finish(twilight.fajr, adjustments.fajr),
            sunrise=finish(sunrise, adjustments.sunrise),
            dhuhr=finish(dhuhr, adjustments.dhuhr),
            asr=finish(asr, adjustments.asr),
            maghrib=finish(sunset, adjustments.maghrib),
            isha=finish(twilight.isha, adjustments.isha),
        )

    def time_for(self, event: Event) -> datetime:
        return getattr(self, event.value)


@dataclass(frozen=True, slots=True)
class SunnahTimes:
    middle_of_the_night: datetime
    last_third_of_the_night: datetime

    @classmethod
    def from_prayer_times(cls, today: PrayerTimes, tomorrow: PrayerTimes) -> 'SunnahTimes':
        """The night runs from today's maghrib to tomorrow's fajr"""
        night = tomorrow.fajr - today.maghrib
        return cls(
            middle_of_the_night=rounded_minute(today.maghrib + night/2),
            last_third_of_the_night=rounded_minute(today.maghrib + night*2/3),
        )


class Timing(typing.NamedTuple):
    event: Event
    is_fard: bool
    value: datetime


class DailyTimings(typing.NamedTuple):
    date: date
    prayer_times: PrayerTimes
    sunnah_times: SunnahTimes
    timings: tuple[Timing, ...]  # chronological


def daily(
    coordinates: 'Coordinates',
    when: date | datetime,
    params: CalculationParameters,
    log: logging.Logger | None = None,
) -> DailyTimings:
    """
    All eight events of one day, sorted by time. Tomorrow is solved as well, to bound the night.
    """
    log = log or logger
    day = as_utc_day(when)
    today = PrayerTimes.calculate(coordinates, day, params, log)
    tomorrow = PrayerTimes.calculate(coordinates, day + timedelta(days=1), params, log)
    sunnah = SunnahTimes.from_prayer_times(today, tomorrow)

    values = {
        Event.FAJR: today.fajr,
        Event.SUNRISE: today.sunrise,
        Event.DHUHR: today.dhuhr,
        Event.ASR: today.asr,
        Event.MAGHRIB: today.maghrib,
        Event.ISHA: today.isha,
        Event.MIDDLE_OF_THE_NIGHT: sunnah.middle_of_the_night,
        Event.LAST_THIRD_OF_THE_NIGHT: sunnah.last_third_of_the_night,
    }
    timings = tuple(
        Timing(event=event, is_fard=event in FARD, value=value)
        for event, value in sorted(values.items(), key=lambda item: item[1])
    )
    if log.isEnabledFor(logging.DEBUG):
        log.debug('%s at %s: %s', params.method.value, day, ', '.join(
            f'{timing.event.value} {timing.value:%H:%M}' for timing in timings
        ))
    return DailyTimings(date=day, prayer_times=today, sunnah_times=sunnah, timings=timings)


def date_range(start: date, stop: date) -> typing.Iterator[date]:
    """Days from start, inclusive, to stop, exclusive"""
    day = start
    while day < stop:
        yield day
        day += timedelta(days=1)


def generate(
    coordinates: 'Coordinates',
    days: typing.Iterable[date],
    params: CalculationParameters,
    log: logging.Logger | None = None,
    max_workers: int | None = None,
) -> list[DailyTimings]:
    """
    Each day is solved independently. With max_workers > 1 the days are spread over a thread pool;
    either way the result is sorted by date.
    """
    log = log or logger
    days = list(days)
    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(daily, coordinates, day, params, log)
                for day in days
            ]
            results = [future.result() for future in futures]
    else:
        results = [daily(coordinates, day, params, log) for day in days]

    log.info('Calculated %d days for %s', len(results), params.method.value)
    return sorted(results, key=lambda result: result.date)


def monthly(
    coordinates: 'Coordinates',
    year: int,
    month: int,
    params: CalculationParameters,
    log: logging.Logger | None = None,
    max_workers: int | None = None,
) -> list[DailyTimings]:
    _, n_days = calendar.monthrange(year, month)
    start = date(year, month, 1)
    return generate(
        coordinates=coordinates, params=params, log=log, max_workers=max_workers,
        days=date_range(start, start + timedelta(days=n_days)),
    )


def yearly(
    coordinates: 'Coordinates',
    year: int,
    params: CalculationParameters,
    log: logging.Logger | None = None,
    max_workers: int | None = None,
) -> list[DailyTimings]:
    return generate(
        coordinates=coordinates, params=params, log=log, max_workers=max_workers,
        days=date_range(date(year, 1, 1), date(year + 1, 1, 1)),
    )


def next_event(timings: typing.Iterable[Timing], at: datetime) -> Timing | None:
    """The first timing strictly after `at`, if any remain in the day"""
    return next(
        (timing for timing in timings if timing.value > at),
        None,
    )
