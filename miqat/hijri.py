"""
Gregorian to Hijri conversion with the Kuwaiti algorithm: a tabular Islamic calendar of 30-year
cycles, 11 of them leap years, fitted so that 1 Muharram 1 AH falls on 16 July 622 CE (Julian).
Tabular dates can differ by a day or two from an observed crescent, hence the adjustment parameter.
"""

import math
import typing
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

WEEKDAY_NAMES = (
    'al-ʾAḥad',       # Sunday
    'al-ʾIthnayn',
    'ath-Thulāthāʾ',
    'al-ʾArbiʿāʾ',
    'al-Khamīs',
    'al-Jumuʿah',
    'al-Sabt',        # Saturday
)

MONTH_NAMES = (
    'al-Muḥarram',
    'Ṣafar',
    'Rabīʿ al-ʾAwwal',
    'Rabīʿ al-ʾĀkhir',
    'Jumadā al-ʾŪlā',
    'Jumādā al-ʾĀkhirah',
    'Rajab',
    'Shaʿbān',
    'Ramaḍān',
    'Shawwāl',
    'Ḏū ʾl-Qaʿdah',
    'Ḏū ʾl-Ḥijjah',
)

# Days in one 30-year cycle
CYCLE_DAYS = 10_631
AVERAGE_YEAR = CYCLE_DAYS/30
# Julian day number of 1 Muharram 1 AH, less one
EPOCH = 1_948_084
# 8.01 minutes of a day, aligning the leap years of the cycle
SHIFT = 8.01/60

# Last Julian day number of the Julian calendar, 4 October 1582
GREGORIAN_CUTOVER_JDN = 2_299_160


class KuwaitiResult(typing.NamedTuple):
    """Every intermediate of one conversion"""
    ce_day: int
    ce_month: int
    ce_year: int
    raw_julian_day: int
    weekday_index: int             # 0 = Sunday
    cycle_index: int               # complete 30-year cycles since the epoch
    remainder_after_cycles: int    # days into the current cycle
    years_into_cycle: int
    remainder_after_years: int     # days into the current year
    raw_month: int                 # 1-12
    islamic_day: int
    islamic_month_index: int       # 0 = al-Muharram
    islamic_year: int


def _adjusted_day(adjust_days: int, when: date | datetime) -> date:
    if isinstance(when, datetime):
        if when.tzinfo is not None:
            when = when.astimezone(timezone.utc)
        return (when + timedelta(days=adjust_days)).date()
    return when + timedelta(days=adjust_days)


def _gregorian_correction(y: int, m: int, day: int) -> int:
    """
    The B term of the Julian day number. The Gregorian calendar was adopted on Friday 15 October 1582,
    which directly followed Thursday 4 October; before that the Julian calendar applies and the
    correction is zero. Dates from 5 October 1582 onward, including the ten days that never existed,
    are read as Gregorian.

    :param y: year, counting January and February as months 13 and 14 of the previous year
    :param m: month in that convention, 3-14
    """
    if y < 1582:
        return 0
    if y == 1582:
        if m > 10:
            return -10
        if m == 10:
            return -10 if day > 4 else 0
        return 0
    a = y//100
    return 2 - a + a//4


def kuwaiti_calendar(adjust_days: int, when: date | datetime) -> KuwaitiResult:
    """
    :param adjust_days: signed days added to the Gregorian date before conversion. The weekday is
                        still that of the unadjusted date.
    :param when: a datetime contributes its UTC calendar date
    """
    today = _adjusted_day(adjust_days, when)
    day = today.day
    m = today.month
    y = today.year
    if m < 3:
        y -= 1
        m += 12

    b = _gregorian_correction(y, m, day)
    raw_julian_day = (
        math.floor(365.25*(y + 4716)) + math.floor(30.6001*(m + 1)) + day + b - 1524
    )

    # Back to a civil date, Meeus ch. 7
    b = 0
    if raw_julian_day > GREGORIAN_CUTOVER_JDN:
        a = math.floor((raw_julian_day - 1_867_216.25)/36_524.25)
        b = 1 + a - a//4
    bb = raw_julian_day + b + 1524
    cc = math.floor((bb - 122.1)/365.25)
    dd = math.floor(365.25*cc)
    ee = math.floor((bb - dd)/30.6001)
    ce_day = bb - dd - math.floor(30.6001*ee)
    ce_month = ee - 1
    if ee > 13:
        cc += 1
        ce_month = ee - 13
    ce_year = cc - 4716

    weekday_index = (raw_julian_day + 1 - adjust_days) % 7

    remainder_after_cycles = raw_julian_day - EPOCH
    cycle_index = remainder_after_cycles//CYCLE_DAYS
    remainder_after_cycles -= CYCLE_DAYS*cycle_index
    years_into_cycle = math.floor((remainder_after_cycles - SHIFT)/AVERAGE_YEAR)
    islamic_year = 30*cycle_index + years_into_cycle
    remainder_after_years = remainder_after_cycles - math.floor(
        years_into_cycle*AVERAGE_YEAR + SHIFT
    )
    raw_month = min(math.floor((remainder_after_years + 28.5001)/29.5), 12)
    islamic_day = math.floor(remainder_after_years - math.floor(29.5001*raw_month - 29))

    return KuwaitiResult(
        ce_day=ce_day, ce_month=ce_month, ce_year=ce_year,
        raw_julian_day=raw_julian_day,
        weekday_index=weekday_index,
        cycle_index=cycle_index,
        remainder_after_cycles=remainder_after_cycles,
        years_into_cycle=years_into_cycle,
        remainder_after_years=remainder_after_years,
        raw_month=raw_month,
        islamic_day=islamic_day,
        islamic_month_index=raw_month - 1,
        islamic_year=islamic_year,
    )


class HijriDate(typing.NamedTuple):
    year: int
    month_index: int    # 0-11
    day: int            # 1-30
    weekday_index: int  # 0 = Sunday

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month_index]

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[self.weekday_index]

    def __str__(self) -> str:
        return f'{self.weekday_name}, {self.day} {self.month_name} {self.year} AH'


@dataclass(frozen=True, slots=True)
class HijriExplanation:
    """A read-only view of every step of one conversion, for display"""
    result: KuwaitiResult

    @property
    def epoch(self) -> int:
        return EPOCH

    @property
    def cycle_days(self) -> int:
        return CYCLE_DAYS

    @property
    def average_year(self) -> float:
        return AVERAGE_YEAR

    @property
    def shift(self) -> float:
        return SHIFT

    @property
    def julian_day_number(self) -> int:
        return self.result.raw_julian_day - 1

    @property
    def offset_from_epoch(self) -> int:
        return self.result.raw_julian_day - self.epoch

    @property
    def gregorian(self) -> tuple[int, int, int]:
        """(year, month, day) of the adjusted date, recovered from the Julian day number"""
        return self.result.ce_year, self.result.ce_month, self.result.ce_day

    @property
    def hijri(self) -> HijriDate:
        return HijriDate(
            year=self.result.islamic_year,
            month_index=self.result.islamic_month_index,
            day=self.result.islamic_day,
            weekday_index=self.result.weekday_index,
        )

    def steps(self) -> list[tuple[str, str]]:
        """Labelled intermediate values in the order they are computed"""
        r = self.result
        return [
            ('Julian day number', f'{self.julian_day_number}'),
            ('Days since epoch', f'{r.raw_julian_day} - {self.epoch} = {self.offset_from_epoch}'),
            (
                '30-year cycles',
                f'floor({self.offset_from_epoch} / {self.cycle_days}) = {r.cycle_index}',
            ),
            ('Days into cycle', f'{r.remainder_after_cycles}'),
            (
                'Years into cycle',
                f'floor(({r.remainder_after_cycles} - {self.shift:.4f}) / {self.average_year:.5f})'
                f' = {r.years_into_cycle}',
            ),
            ('Year', f'30 × {r.cycle_index} + {r.years_into_cycle} = {r.islamic_year}'),
            ('Days into year', f'{r.remainder_after_years}'),
            ('Month', f'floor(({r.remainder_after_years} + 28.5001) / 29.5) = {r.raw_month}'),
            ('Day', f'{r.islamic_day}'),
        ]


def explain(adjustment_days: int, when: date | datetime) -> HijriExplanation:
    return HijriExplanation(result=kuwaiti_calendar(adjustment_days, when))


def convert(adjustment_days: int, when: date | datetime) -> HijriDate:
    return explain(adjustment_days, when).hijri
