import math
import typing
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from .seasonal import Shafaq

if typing.TYPE_CHECKING:
    from .geo import Coordinates
    from .types import Degree, Minute


class Method(str, Enum):
    """Named conventions for the Fajr and Isha twilight definitions"""
    OTHER = 'Other'
    MUSLIM_WORLD_LEAGUE = 'MuslimWorldLeague'
    EGYPTIAN = 'Egyptian'
    KARACHI = 'Karachi'
    UMM_AL_QURA = 'UmmAlQura'
    DUBAI = 'Dubai'
    MOONSIGHTING_COMMITTEE = 'MoonsightingCommittee'
    NORTH_AMERICA = 'NorthAmerica'
    KUWAIT = 'Kuwait'
    QATAR = 'Qatar'
    SINGAPORE = 'Singapore'
    TURKEY = 'Turkey'

    @classmethod
    def parse(cls, value: 'str | Method') -> 'Method':
        """Unrecognised names fall back to OTHER rather than failing"""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class Madhab(str, Enum):
    SHAFI = 'shafi'
    HANAFI = 'hanafi'

    @property
    def shadow_length(self) -> int:
        """Asr begins when a shadow exceeds its noon length by this many object heights"""
        return 2 if self is Madhab.HANAFI else 1


class HighLatitudeRule(str, Enum):
    """How much of the night Fajr and Isha may at most take when twilight persists"""
    MIDDLE_OF_THE_NIGHT = 'middleOfTheNight'
    SEVENTH_OF_THE_NIGHT = 'seventhOfTheNight'
    TWILIGHT_ANGLE = 'twilightAngle'

    @classmethod
    def recommended(cls, coordinates: 'Coordinates') -> 'HighLatitudeRule':
        if coordinates.latitude > 48:
            return cls.SEVENTH_OF_THE_NIGHT
        return cls.MIDDLE_OF_THE_NIGHT


class Rounding(str, Enum):
    NEAREST = 'nearest'
    UP = 'up'
    NONE = 'none'


@dataclass(frozen=True, slots=True)
class PrayerAdjustments:
    """Minutes added to each computed time"""
    fajr: 'Minute' = 0
    sunrise: 'Minute' = 0
    dhuhr: 'Minute' = 0
    asr: 'Minute' = 0
    maghrib: 'Minute' = 0
    isha: 'Minute' = 0

    def __add__(self, other: 'PrayerAdjustments') -> 'PrayerAdjustments':
        return PrayerAdjustments(
            fajr=self.fajr + other.fajr,
            sunrise=self.sunrise + other.sunrise,
            dhuhr=self.dhuhr + other.dhuhr,
            asr=self.asr + other.asr,
            maghrib=self.maghrib + other.maghrib,
            isha=self.isha + other.isha,
        )


NO_ADJUSTMENTS = PrayerAdjustments()


class MethodPreset(typing.NamedTuple):
    fajr_angle: 'Degree'
    isha_angle: 'Degree'
    isha_interval: 'Minute' = 0
    adjustments: PrayerAdjustments = NO_ADJUSTMENTS
    rounding: Rounding = Rounding.NEAREST


# Nautical twilight, used for OTHER and wherever a user value is unusable
DEFAULT_FAJR_ANGLE: 'Degree' = 12
DEFAULT_ISHA_ANGLE: 'Degree' = 12
DEFAULT_ISHA_INTERVAL: 'Minute' = 0


def _preset_for(method: Method) -> MethodPreset:
    match method:
        case Method.OTHER:
            return MethodPreset(DEFAULT_FAJR_ANGLE, DEFAULT_ISHA_ANGLE, DEFAULT_ISHA_INTERVAL)
        case Method.MUSLIM_WORLD_LEAGUE:
            return MethodPreset(18, 17, adjustments=PrayerAdjustments(dhuhr=1))
        case Method.EGYPTIAN:
            return MethodPreset(19.5, 17.5, adjustments=PrayerAdjustments(dhuhr=1))
        case Method.KARACHI:
            return MethodPreset(18, 18, adjustments=PrayerAdjustments(dhuhr=1))
        case Method.UMM_AL_QURA:
            return MethodPreset(18.5, 0, isha_interval=90)
        case Method.DUBAI:
            return MethodPreset(18.2, 18.2, adjustments=PrayerAdjustments(
                sunrise=-3, dhuhr=3, asr=3, maghrib=3,
            ))
        case Method.MOONSIGHTING_COMMITTEE:
            return MethodPreset(18, 18, adjustments=PrayerAdjustments(dhuhr=5, maghrib=3))
        case Method.NORTH_AMERICA:
            return MethodPreset(15, 15, adjustments=PrayerAdjustments(dhuhr=1))
        case Method.KUWAIT:
            return MethodPreset(18, 17.5)
        case Method.QATAR:
            return MethodPreset(18, 0, isha_interval=90)
        case Method.SINGAPORE:
            return MethodPreset(
                20, 18, adjustments=PrayerAdjustments(dhuhr=1), rounding=Rounding.UP,
            )
        case Method.TURKEY:
            return MethodPreset(18, 17, adjustments=PrayerAdjustments(
                sunrise=-7, dhuhr=5, asr=4, maghrib=7,
            ))
    raise ValueError(f'Unknown method {method!r}')


# Built once at import; read-only
METHOD_PRESETS: typing.Mapping[Method, MethodPreset] = MappingProxyType({
    method: _preset_for(method) for method in Method
})

METHOD_LABELS: typing.Mapping[Method, str] = MappingProxyType({
    Method.OTHER: 'Nautical Twilight (12°, 12°)',
    Method.MUSLIM_WORLD_LEAGUE: 'Muslim World League (18°, 17°)',
    Method.EGYPTIAN: 'Egyptian General Authority (19.5°, 17.5°)',
    Method.KARACHI: 'Karachi - University of Islamic Sciences (18°, 18°)',
    Method.UMM_AL_QURA: 'Umm al-Qura - Makkah (18.5°, 90 min)',
    Method.DUBAI: 'Dubai (18.2°, 18.2°)',
    Method.MOONSIGHTING_COMMITTEE: 'Moonsighting Committee Worldwide (18°, 18°)',
    Method.NORTH_AMERICA: 'North America - ISNA (15°, 15°)',
    Method.KUWAIT: 'Kuwait (18°, 17.5°)',
    Method.QATAR: 'Qatar (18°, 90 min)',
    Method.SINGAPORE: 'Singapore (20°, 18°)',
    Method.TURKEY: 'Turkey - Diyanet (18°, 17°)',
})


@dataclass(frozen=True, slots=True)
class CalculationParameters:
    method: Method = Method.OTHER
    fajr_angle: 'Degree' = DEFAULT_FAJR_ANGLE
    isha_angle: 'Degree' = DEFAULT_ISHA_ANGLE
    isha_interval: 'Minute' = DEFAULT_ISHA_INTERVAL  # when > 0, replaces isha_angle
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    shafaq: Shafaq = Shafaq.GENERAL
    adjustments: PrayerAdjustments = field(default=NO_ADJUSTMENTS)
    method_adjustments: PrayerAdjustments = field(default=NO_ADJUSTMENTS)
    rounding: Rounding = Rounding.NEAREST

    @classmethod
    def for_method(cls, method: 'Method | str', **kwargs) -> 'CalculationParameters':
        """
        Parameters of a named preset. Keyword arguments override individual fields, e.g. madhab or
        user adjustments.
        """
        method = Method.parse(method)
        preset = METHOD_PRESETS[method]
        params = cls(
            method=method,
            fajr_angle=preset.fajr_angle,
            isha_angle=preset.isha_angle,
            isha_interval=preset.isha_interval,
            method_adjustments=preset.adjustments,
            rounding=preset.rounding,
        )
        return replace(params, **kwargs)

    @property
    def total_adjustments(self) -> PrayerAdjustments:
        return self.adjustments + self.method_adjustments

    def night_portions(self) -> tuple[float, float]:
        """Fractions of the night that bound Fajr (before sunrise) and Isha (after sunset)"""
        match self.high_latitude_rule:
            case HighLatitudeRule.MIDDLE_OF_THE_NIGHT:
                return 1/2, 1/2
            case HighLatitudeRule.SEVENTH_OF_THE_NIGHT:
                return 1/7, 1/7
            case HighLatitudeRule.TWILIGHT_ANGLE:
                return self.fajr_angle/60, self.isha_angle/60
        raise ValueError(f'Unknown high latitude rule {self.high_latitude_rule!r}')


def _finite_or(value: float | None, fallback: float) -> float:
    if value is None or not math.isfinite(value):
        return fallback
    return value


def create_parameters(
    method: 'Method | str',
    fajr_angle: 'Degree | None' = None,
    isha_angle: 'Degree | None' = None,
    isha_interval: 'Minute | None' = None,
    **kwargs,
) -> CalculationParameters:
    """
    Preset parameters with user-supplied angles on top. Missing or non-finite values keep the preset
    value. A positive Isha interval restores the preset Isha angle, which it makes irrelevant anyway.
    """
    params = CalculationParameters.for_method(method, **kwargs)
    preset = METHOD_PRESETS[params.method]
    interval = _finite_or(isha_interval, preset.isha_interval)
    return replace(
        params,
        fajr_angle=_finite_or(fajr_angle, preset.fajr_angle),
        isha_angle=preset.isha_angle if interval > 0 else _finite_or(isha_angle, preset.isha_angle),
        isha_interval=interval,
    )


METHOD_TOLERANCE: 'Degree' = 0.01


def detect_method(
    fajr_angle: 'Degree', isha_angle: 'Degree', isha_interval: 'Minute',
) -> Method:
    """
    The first preset, in label order, whose angles and interval all match within METHOD_TOLERANCE.
    Presets sharing the same triple resolve to the earlier one: Turkey reads as Muslim World League
    and the Moonsighting Committee as Karachi.
    """
    for method, preset in METHOD_PRESETS.items():
        if (
            abs(preset.isha_interval - isha_interval) < METHOD_TOLERANCE
            and abs(preset.fajr_angle - fajr_angle) < METHOD_TOLERANCE
            and abs(preset.isha_angle - isha_angle) < METHOD_TOLERANCE
        ):
            return method
    return Method.OTHER
