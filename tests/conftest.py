from datetime import date

import pytest

from miqat.geo import Coordinates
from miqat.methods import CalculationParameters, Method


@pytest.fixture
def toronto() -> Coordinates:
    return Coordinates(latitude=43.6532, longitude=-79.3832)


@pytest.fixture
def helsinki() -> Coordinates:
    return Coordinates(latitude=60.1699, longitude=24.9384)


@pytest.fixture
def march_11() -> date:
    return date(2024, 3, 11)


@pytest.fixture
def mwl() -> CalculationParameters:
    return CalculationParameters.for_method(Method.MUSLIM_WORLD_LEAGUE)
