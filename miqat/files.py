import json
import math
import typing
from pathlib import Path

from .geo import Coordinates
from .methods import HighLatitudeRule, Madhab, create_parameters
from .seasonal import Shafaq

if typing.TYPE_CHECKING:
    from .methods import CalculationParameters

HOME_PATH = Path('.home.json')


def _load(path: Path) -> dict[str, typing.Any]:
    with path.open() as f:
        return json.load(f)


def load_home(path: Path = HOME_PATH) -> Coordinates:
    """
    Load the prayer coordinate, e.g. {"lat": 43.6532, "lon": -79.3832}
    """
    coords = _load(path)
    return Coordinates.parse(latitude=coords['lat'], longitude=coords['lon'])


def load_parameters(path: Path = HOME_PATH) -> 'CalculationParameters':
    """
    Load calculation settings kept alongside the coordinate. Every key is optional:

        {"method": "MuslimWorldLeague", "fajrAngle": 18, "ishaAngle": 17, "ishaInterval": 0,
         "madhab": "shafi", "highLatitudeRule": "middleOfTheNight", "shafaq": "general"}

    Numbers that do not parse keep the preset value.
    """
    settings = _load(path) if path.is_file() else {}

    def number(key: str) -> float | None:
        value = settings.get(key)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return math.nan

    kwargs = {}
    if 'madhab' in settings:
        kwargs['madhab'] = Madhab(settings['madhab'])
    if 'highLatitudeRule' in settings:
        kwargs['high_latitude_rule'] = HighLatitudeRule(settings['highLatitudeRule'])
    if 'shafaq' in settings:
        kwargs['shafaq'] = Shafaq(settings['shafaq'])

    return create_parameters(
        method=settings.get('method', 'Other'),
        fajr_angle=number('fajrAngle'),
        isha_angle=number('ishaAngle'),
        isha_interval=number('ishaInterval'),
        **kwargs,
    )
