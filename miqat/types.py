import typing
from datetime import datetime

Radian = float
Degree = float
GeoDeg = Degree  # geographic
Hour = float
Minute = float

# Fraction of a UTC day, [0, 1)
DayFraction = float

# Continuous day count from -4712-01-01 12:00
JulianDay = float
JulianCentury = float

# A solved event instant, or None where the sun never reaches the target altitude
RawSolution = typing.Optional[datetime]
