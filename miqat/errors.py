class MiqatError(Exception):
    """Base class for errors raised by miqat"""


class InvalidCoordinates(MiqatError, ValueError):
    """
    A latitude or longitude that is not finite or falls outside its range. The trig pipeline has no
    guard of its own and would silently carry a NaN through every downstream value.
    """


class PolarCircleError(MiqatError, ArithmeticError):
    """
    The sun never crosses the altitude of sunrise, sunset or Asr on this day at this latitude. Unlike
    Fajr and Isha there is no safeguard to fall back on.
    """
