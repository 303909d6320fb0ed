#!/usr/bin/env python3
"""
Simulation settings for Gravity Lab.

SimulationSettings bundles every tunable the integrator, trail tracker and
controller read. It is immutable; build a modified copy with with_overrides().
The named instances at the bottom are the canonical settings for each preset
family. Their gravitational constants differ by design because the presets
work in pixel/frame units rather than SI.
"""
import math
from dataclasses import asdict, dataclass, replace
from typing import Optional

from .constants import (
    BASE_DT,
    BOUNDARY_DAMPING,
    BOUNDARY_PADDING,
    DEFAULT_RADIUS_MAPPING,
    G_THREE_BODY,
    G_TWO_BODY,
    G_UNIT,
    MAX_TRAIL_POINTS,
    MIN_FORCE_DISTANCE,
    TRAIL_MIN_DISTANCE,
    TWO_BODY_MAX_VELOCITY,
)
from .errors import InvalidConfigError
from .sizing import RADIUS_MAPPINGS

INTEGRATOR_EULER = "euler"
INTEGRATOR_AVERAGE = "average"
INTEGRATORS = (INTEGRATOR_EULER, INTEGRATOR_AVERAGE)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _positive(name: str, value: float) -> None:
    if not (_is_number(value) and value > 0):
        raise InvalidConfigError(f"{name} must be a positive finite number, got {value!r}")


def _non_negative(name: str, value: float) -> None:
    if not (_is_number(value) and value >= 0):
        raise InvalidConfigError(f"{name} must be a finite number >= 0, got {value!r}")


@dataclass(frozen=True)
class SimulationSettings:
    """
    Tunables for one simulation instance.

    Fields:
    - gravitational_constant: G used in F = G * m1 * m2 / r^2
    - base_dt: simulated time per nominal frame at time scale 1.0
    - integrator: "average" (velocity-Verlet form) or "euler" (semi-implicit)
    - min_distance: pairs closer than this are skipped for the tick
    - max_velocity: speed ceiling applied after integration; None disables it
    - max_step: split a tick into substeps no longer than this; None disables it
    - boundary_enabled: clamp and reflect bodies at the padded viewport edge
    - boundary_padding: inset of the reflecting rectangle from the viewport edge
    - boundary_damping: factor applied to the reflected velocity component
    - max_trail_points: FIFO bound of each body's trail
    - trail_min_distance: new trail points must be further than this from the last
    - radius_mapping: name of the mass-to-radius function (see gravsim.sizing)
    """
    gravitational_constant: float = G_UNIT
    base_dt: float = BASE_DT
    integrator: str = INTEGRATOR_AVERAGE
    min_distance: float = MIN_FORCE_DISTANCE
    max_velocity: Optional[float] = None
    max_step: Optional[float] = None
    boundary_enabled: bool = False
    boundary_padding: float = BOUNDARY_PADDING
    boundary_damping: float = BOUNDARY_DAMPING
    max_trail_points: int = MAX_TRAIL_POINTS
    trail_min_distance: float = TRAIL_MIN_DISTANCE
    radius_mapping: str = DEFAULT_RADIUS_MAPPING

    def validate(self) -> "SimulationSettings":
        """Raise InvalidConfigError for any out-of-range field; return self."""
        _positive("gravitational_constant", self.gravitational_constant)
        _positive("base_dt", self.base_dt)
        if self.integrator not in INTEGRATORS:
            raise InvalidConfigError(
                f"integrator must be one of {', '.join(INTEGRATORS)}, got {self.integrator!r}"
            )
        _non_negative("min_distance", self.min_distance)
        if self.max_velocity is not None:
            _positive("max_velocity", self.max_velocity)
        if self.max_step is not None:
            _positive("max_step", self.max_step)
        if not isinstance(self.boundary_enabled, bool):
            raise InvalidConfigError(f"boundary_enabled must be a bool, got {self.boundary_enabled!r}")
        _non_negative("boundary_padding", self.boundary_padding)
        if not (_is_number(self.boundary_damping) and 0.0 <= self.boundary_damping <= 1.0):
            raise InvalidConfigError(f"boundary_damping must be in [0, 1], got {self.boundary_damping!r}")
        # deque(maxlen=...) only takes a real int
        if not (isinstance(self.max_trail_points, int) and not isinstance(self.max_trail_points, bool)
                and self.max_trail_points >= 1):
            raise InvalidConfigError(f"max_trail_points must be an integer >= 1, got {self.max_trail_points!r}")
        _non_negative("trail_min_distance", self.trail_min_distance)
        if not (isinstance(self.radius_mapping, str) and self.radius_mapping in RADIUS_MAPPINGS):
            raise InvalidConfigError(f"unknown radius mapping {self.radius_mapping!r}")
        return self

    def with_overrides(self, **overrides) -> "SimulationSettings":
        """Return a validated copy with the given fields replaced."""
        unknown = set(overrides) - set(asdict(self))
        if unknown:
            raise InvalidConfigError(f"unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **overrides).validate()


DEFAULT_SETTINGS = SimulationSettings()

TWO_BODY_SETTINGS = SimulationSettings(
    gravitational_constant=G_TWO_BODY,
    max_velocity=TWO_BODY_MAX_VELOCITY,
)

THREE_BODY_SETTINGS = SimulationSettings(
    gravitational_constant=G_THREE_BODY,
    boundary_enabled=True,
)

FIGURE_EIGHT_SETTINGS = SimulationSettings(
    gravitational_constant=G_UNIT,
    max_step=0.25,
)
