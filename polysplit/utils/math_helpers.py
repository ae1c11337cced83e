"""Math helpers — angle normalisation. No engine imports."""

from __future__ import annotations

import math


def modang(degrees: float) -> float:
    """Normalise an angle into (-180, 180]."""
    a = math.fmod(degrees, 360.0)
    if a <= -180.0:
        a += 360.0
    elif a > 180.0:
        a -= 360.0
    return a


def heading(dx: float, dy: float) -> float:
    """Direction of a vector in degrees ccw, 0 along the x axis."""
    return math.degrees(math.atan2(dy, dx))


def turn_angle(incoming: tuple[float, float], outgoing: tuple[float, float]) -> float:
    """Signed turn from one direction vector to the next, in (-180, 180].

    Negative turns go right (clockwise), positive turns go left; a reversal
    is exactly 180.
    """
    return modang(heading(*outgoing) - heading(*incoming))
