#!/usr/bin/env python3
"""
Mass-to-radius mappings for drawing bodies.

Radius is presentational only: the integrator never reads it. Each mapping
is monotonic in mass and is looked up by name so the choice is configuration
rather than a per-variant hard-coded exponent.
"""
import math
from typing import Callable, Dict

from .constants import (
    CBRT_RADIUS_FACTOR,
    LINEAR_RADIUS_FACTOR,
    MIN_VISUAL_RADIUS,
    SQRT_RADIUS_FACTOR,
)
from .errors import InvalidConfigError

RadiusMapping = Callable[[float], float]


def sqrt_radius(mass: float) -> float:
    """Radius grows with the square root of mass (area proportional to mass)."""
    return max(MIN_VISUAL_RADIUS, SQRT_RADIUS_FACTOR * math.sqrt(mass))


def cbrt_radius(mass: float) -> float:
    """Radius grows with the cube root of mass (volume proportional to mass)."""
    return max(MIN_VISUAL_RADIUS, CBRT_RADIUS_FACTOR * mass ** (1.0 / 3.0))


def linear_radius(mass: float) -> float:
    return max(MIN_VISUAL_RADIUS, LINEAR_RADIUS_FACTOR * mass)


RADIUS_MAPPINGS: Dict[str, RadiusMapping] = {
    "sqrt": sqrt_radius,
    "cbrt": cbrt_radius,
    "linear": linear_radius,
}


def get_radius_mapping(name: str) -> RadiusMapping:
    try:
        return RADIUS_MAPPINGS[name]
    except KeyError:
        raise InvalidConfigError(
            f"unknown radius mapping {name!r}; expected one of {', '.join(RADIUS_MAPPINGS)}"
        ) from None
