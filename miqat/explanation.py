"""
A read-only walk through one day's calculation: every intermediate from the Julian day to the final
Fajr and Isha, for display alongside the times themselves. Nothing here feeds back into the times;
each value is recomputed from the same functions the calculation uses.
"""

import logging
import typing
from datetime import date, datetime, timedelta

from .astro import (
    SolarCoordinates, apparent_obliquity_of_the_ecliptic, apparent_solar_longitude,
    ascending_lunar_node_longitude, mean_lunar_longitude, mean_obliquity_of_the_ecliptic,
    mean_solar_anomaly, mean_solar_longitude, nutation_in_longitude, nutation_in_obliquity,
    solar_equation_of_the_center,
)
from .hijri import HijriExplanation, explain as explain_hijri
from .julian import day_of_year, days_since_solstice, julian_century, julian_day_for
from .methods import CalculationParameters, Method
from .prayers import PrayerTimes, SunnahTimes, as_utc_day
from .safety import TwilightResolution, resolve_twilight
from .seasonal import (
    SeasonCoefficients, evaluate_seasonal_adjustment, evening_coefficients, morning_coefficients,
)
from .transit import SolarTime, hours_to_instant

if typing.TYPE_CHECKING:
    from .geo import Coordinates
    from .types import DayFraction, Degree, JulianCentury, JulianDay, Minute

logger = logging.getLogger(__name__)


class OrbitalTerms(typing.NamedTuple):
    mean_longitude: 'Degree'        # L0
    mean_anomaly: 'Degree'          # M
    equation_of_center: 'Degree'    # C
    apparent_longitude: 'Degree'    # lambda
    lunar_longitude: 'Degree'       # L'
    ascending_node: 'Degree'        # Omega


class ObliquityTerms(typing.NamedTuple):
    mean: 'Degree'
    apparent: 'Degree'
    nutation_in_longitude: 'Degree'
    nutation_in_obliquity: 'Degree'


class TransitTerms(typing.NamedTuple):
    approx_fraction: 'DayFraction'
    approx_transit: datetime
    solar_noon: datetime            # corrected, before adjustment and rounding
    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime


class SafetyTerms(typing.NamedTuple):
    night: timedelta                # sunset to the next sunrise
    night_portions: tuple[float, float]
    fajr_night: timedelta
    isha_night: timedelta
    twilight: TwilightResolution
    used_safe_fajr: bool
    used_safe_isha: bool
    uses_moonsighting: bool
    uses_isha_interval: bool
    morning_coefficients: SeasonCoefficients
    evening_coefficients: SeasonCoefficients
    morning_adjustment: 'Minute'
    evening_adjustment: 'Minute'
    day_of_year: int
    days_from_solstice: int
    fajr_offset: timedelta          # sunrise less the final Fajr
    isha_offset: timedelta          # the final Isha less sunset


class CalculationExplanation(typing.NamedTuple):
    coordinates: 'Coordinates'
    date: date
    params: CalculationParameters
    julian_day: 'JulianDay'
    julian_century: 'JulianCentury'
    orbital: OrbitalTerms
    obliquity: ObliquityTerms
    solar: SolarCoordinates
    transit: TransitTerms
    safety: SafetyTerms
    asr_shadow: int
    latitude_declination_separation: 'Degree'
    transit_difference: timedelta   # final Dhuhr less the approximate transit
    prayer_times: PrayerTimes
    sunnah_times: SunnahTimes
    hijri: HijriExplanation

    @property
    def sidereal_hours(self) -> float:
        return self.solar.apparent_sidereal_time/15

    @property
    def transit_direction(self) -> str:
        """Where the final Dhuhr falls relative to the approximate transit"""
        if not self.transit_difference:
            return 'exact'
        return 'later' if self.transit_difference > timedelta(0) else 'earlier'

    def steps(self) -> list[tuple[str, str]]:
        """Labelled headline values in the order they are computed"""
        safety = self.safety
        return [
            ('Julian day', f'{self.julian_day:.1f}'),
            ('Julian century', f'{self.julian_century:.8f}'),
            ('Apparent solar longitude', f'{self.orbital.apparent_longitude:.4f}°'),
            ('Apparent obliquity', f'{self.obliquity.apparent:.5f}°'),
            ('Declination', f'{self.solar.declination:.4f}°'),
            ('Right ascension', f'{self.solar.right_ascension:.4f}°'),
            ('Apparent sidereal time', f'{self.sidereal_hours:.4f} h'),
            ('Approximate transit', self.transit.approx_transit.isoformat()),
            ('Solar noon', self.transit.solar_noon.isoformat()),
            ('Sunrise', self.transit.sunrise.isoformat()),
            ('Sunset', self.transit.sunset.isoformat()),
            ('Night', str(safety.night)),
            ('Fajr', f'{safety.twilight.fajr.isoformat()}'
                     f'{" (safeguard)" if safety.used_safe_fajr else ""}'),
            ('Isha', f'{safety.twilight.isha.isoformat()}'
                     f'{" (safeguard)" if safety.used_safe_isha else ""}'),
            ('Asr shadow', f'{self.asr_shadow} + tan {self.latitude_declination_separation:.4f}°'),
        ]


def explain(
    coordinates: 'Coordinates',
    when: date | datetime,
    params: CalculationParameters,
    hijri_adjust: int = 0,
    log: logging.Logger = logger,
) -> CalculationExplanation:
    """
    :raises PolarCircleError: under the same conditions as PrayerTimes.calculate
    """
    day = as_utc_day(when)
    tomorrow = day + timedelta(days=1)

    prayer_times = PrayerTimes.calculate(coordinates, day, params, log)
    sunnah_times = SunnahTimes.from_prayer_times(
        prayer_times, PrayerTimes.calculate(coordinates, tomorrow, params, log),
    )

    jd = julian_day_for(day)
    T = julian_century(jd)
    L0 = mean_solar_longitude(T)
    M = mean_solar_anomaly(T)
    Lp = mean_lunar_longitude(T)
    Omega = ascending_lunar_node_longitude(T)
    epsilon0 = mean_obliquity_of_the_ecliptic(T)

    orbital = OrbitalTerms(
        mean_longitude=float(L0),
        mean_anomaly=float(M),
        equation_of_center=float(solar_equation_of_the_center(T, M)),
        apparent_longitude=float(apparent_solar_longitude(T, L0)),
        lunar_longitude=float(Lp),
        ascending_node=float(Omega),
    )
    obliquity = ObliquityTerms(
        mean=float(epsilon0),
        apparent=float(apparent_obliquity_of_the_ecliptic(T, epsilon0)),
        nutation_in_longitude=float(nutation_in_longitude(L0, Lp, Omega)),
        nutation_in_obliquity=float(nutation_in_obliquity(L0, Lp, Omega)),
    )

    # Already known to be defined; calculate() raised otherwise
    solar_time = SolarTime.for_day(day, coordinates)
    sunrise = hours_to_instant(solar_time.sunrise, day)
    sunset = hours_to_instant(solar_time.sunset, day)
    next_sunrise = hours_to_instant(SolarTime.for_day(tomorrow, coordinates).sunrise, tomorrow)
    transit = TransitTerms(
        approx_fraction=solar_time.approx_transit,
        approx_transit=hours_to_instant(solar_time.approx_transit*24, day),
        solar_noon=hours_to_instant(solar_time.transit, day),
        sunrise=sunrise,
        sunset=sunset,
        next_sunrise=next_sunrise,
    )

    twilight = resolve_twilight(
        coordinates=coordinates, day=day, params=params, solar_time=solar_time,
        sunrise=sunrise, sunset=sunset, tomorrow_sunrise=next_sunrise, log=log,
    )
    fajr_portion, isha_portion = params.night_portions()
    uses_isha_interval = params.isha_interval > 0

    doy = day_of_year(day)
    morning = morning_coefficients(coordinates.latitude)
    evening = evening_coefficients(coordinates.latitude, params.shafaq)
    days_from_solstice = days_since_solstice(doy, day.year, coordinates.latitude)

    safety = SafetyTerms(
        night=twilight.night,
        night_portions=(fajr_portion, isha_portion),
        fajr_night=twilight.night*fajr_portion,
        isha_night=twilight.night*isha_portion,
        twilight=twilight,
        used_safe_fajr=twilight.fajr is not twilight.raw_fajr,
        used_safe_isha=twilight.isha is not twilight.raw_isha,
        uses_moonsighting=params.method is Method.MOONSIGHTING_COMMITTEE,
        uses_isha_interval=uses_isha_interval,
        morning_coefficients=morning,
        evening_coefficients=evening,
        morning_adjustment=evaluate_seasonal_adjustment(days_from_solstice, *morning),
        evening_adjustment=evaluate_seasonal_adjustment(days_from_solstice, *evening),
        day_of_year=doy,
        days_from_solstice=days_from_solstice,
        fajr_offset=sunrise - twilight.fajr,
        isha_offset=twilight.isha - sunset,
    )

    return CalculationExplanation(
        coordinates=coordinates,
        date=day,
        params=params,
        julian_day=jd,
        julian_century=T,
        orbital=orbital,
        obliquity=obliquity,
        solar=solar_time.solar,
        transit=transit,
        safety=safety,
        asr_shadow=params.madhab.shadow_length,
        latitude_declination_separation=abs(coordinates.latitude - solar_time.solar.declination),
        transit_difference=prayer_times.dhuhr - transit.approx_transit,
        prayer_times=prayer_times,
        sunnah_times=sunnah_times,
        hijri=explain_hijri(hijri_adjust, day),
    )
