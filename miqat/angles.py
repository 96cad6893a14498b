import typing

import numpy as np

if typing.TYPE_CHECKING:
    from .types import Degree, Radian


def degrees_to_radians(degrees: 'Degree') -> 'Radian':
    return np.deg2rad(degrees)


def radians_to_degrees(radians: 'Radian') -> 'Degree':
    return np.rad2deg(radians)


def normalize_to_scale(num: float, max_: float) -> float:
    """Wrap into [0, max_); negative input wraps upward"""
    return num - max_*np.floor(num/max_)


def unwind_angle(angle: 'Degree') -> 'Degree':
    """[0, 360)"""
    return normalize_to_scale(angle, 360.)


def quadrant_shift_angle(angle: 'Degree') -> 'Degree':
    """
    [-180, 180], by subtracting the nearest multiple of a full turn. Halves round up, so 540 maps to
    -180, as does -540.
    """
    if -180 <= angle <= 180:
        return angle
    return angle - 360*np.floor(angle/360 + 0.5)
