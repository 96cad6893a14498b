import math
from dataclasses import dataclass

from .errors import InvalidCoordinates
from .types import GeoDeg


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Observer location in decimal degrees, north and east positive"""
    latitude: GeoDeg
    longitude: GeoDeg

    def __post_init__(self) -> None:
        for name, value, bound in (
            ('latitude', self.latitude, 90),
            ('longitude', self.longitude, 180),
        ):
            try:
                finite = math.isfinite(value)
            except TypeError as e:
                raise InvalidCoordinates(f'{name} must be a number, not {value!r}') from e
            if not finite:
                raise InvalidCoordinates(f'{name} must be finite, not {value}')
            if abs(value) > bound:
                raise InvalidCoordinates(f'{name} {value} is outside [-{bound}, {bound}]')

    @classmethod
    def parse(cls, latitude: str | float, longitude: str | float) -> 'Coordinates':
        """Build from user-supplied text, e.g. form fields or a settings file"""
        try:
            lat, lon = float(latitude), float(longitude)
        except (TypeError, ValueError) as e:
            raise InvalidCoordinates(
                f'cannot parse coordinates {latitude!r}, {longitude!r}'
            ) from e
        return cls(latitude=lat, longitude=lon)
