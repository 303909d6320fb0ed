#!/usr/bin/env python3
"""
Data models for Gravity Lab.

This module defines the Body dataclass shared by the integrator, trail tracker
and controller, the BodyConfig record used to create bodies, and the
immutable BodySnapshot handed to renderers. The 2D vector helpers live here
too since every other module works on the same (x, y) tuples.

Units and usage
- position and velocity are in simulation units (pixels, pixels per frame).
- mass is a positive simulation mass; radius is presentational only.
- trail stores past positions for drawing motion paths; only the trail tracker
  appends to it.
- Body instances are owned by one SimulationController, which guards them with
  its lock.
"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Mapping, Optional, Sequence, Tuple

from .constants import DEFAULT_BODY_COLOR, MAX_TRAIL_POINTS
from .errors import InvalidConfigError

Vec2 = Tuple[float, float]
Color = Tuple[int, ...]


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def coerce_color(c: Any, default: Color = DEFAULT_BODY_COLOR) -> Color:
    """
    Normalise a colour to an RGB or RGBA tuple of ints in 0..255.

    Accepts tuples/lists of 3 or 4 numbers and "#rrggbb" / "#rrggbbaa" strings.
    Anything else yields the default.
    """
    if c is None:
        return tuple(default)
    if isinstance(c, str):
        text = c.strip().lstrip("#")
        if len(text) not in (6, 8):
            return tuple(default)
        try:
            c = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError:
            return tuple(default)
    try:
        channels = [int(v) for v in c]
    except (TypeError, ValueError):
        return tuple(default)
    if len(channels) not in (3, 4):
        return tuple(default)
    return tuple(max(0, min(255, v)) for v in channels)


def _finite(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidConfigError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidConfigError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class BodyConfig:
    """
    Creation parameters for one body, validated on construction.

    Fields:
    - mass: positive simulation mass
    - x, y: initial position
    - velocity_x, velocity_y: initial velocity
    - color: body colour (RGB tuple or "#rrggbb")
    - trail_color: trail colour; defaults to the body colour at half alpha
    - radius: explicit visual radius; None derives it from mass
    - fixed: pinned in place; still attracts the other bodies
    """
    mass: float
    x: float
    y: float
    velocity_x: float = 0.0
    velocity_y: float = 0.0
    color: Color = DEFAULT_BODY_COLOR
    trail_color: Optional[Color] = None
    radius: Optional[float] = None
    fixed: bool = False

    def __post_init__(self):
        mass = _finite("mass", self.mass)
        if mass <= 0:
            raise InvalidConfigError(f"mass must be positive, got {self.mass!r}")
        object.__setattr__(self, "mass", mass)
        for name in ("x", "y", "velocity_x", "velocity_y"):
            object.__setattr__(self, name, _finite(name, getattr(self, name)))
        if self.radius is not None:
            radius = _finite("radius", self.radius)
            if radius <= 0:
                raise InvalidConfigError(f"radius must be positive, got {self.radius!r}")
            object.__setattr__(self, "radius", radius)
        color = coerce_color(self.color)
        object.__setattr__(self, "color", color)
        trail_default = color[:3] + (128,)
        object.__setattr__(self, "trail_color", coerce_color(self.trail_color, trail_default))
        object.__setattr__(self, "fixed", bool(self.fixed))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BodyConfig":
        """
        Build a config from a plain mapping.

        Both snake_case keys and the camelCase keys used by the front-end
        (velocityX, velocityY, trailColor) are accepted.
        """
        if "mass" not in data:
            raise InvalidConfigError("body config is missing 'mass'")
        return cls(
            mass=data["mass"],
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            velocity_x=data.get("velocity_x", data.get("velocityX", 0.0)),
            velocity_y=data.get("velocity_y", data.get("velocityY", 0.0)),
            color=data.get("color", DEFAULT_BODY_COLOR),
            trail_color=data.get("trail_color", data.get("trailColor")),
            radius=data.get("radius"),
            fixed=data.get("fixed", False),
        )

    @property
    def position(self) -> Vec2:
        return (self.x, self.y)

    @property
    def velocity(self) -> Vec2:
        return (self.velocity_x, self.velocity_y)


@dataclass(frozen=True)
class BodySnapshot:
    """Read-only copy of a body's state for rendering."""
    id: int
    position: Vec2
    velocity: Vec2
    mass: float
    radius: float
    color: Color
    trail_color: Color
    trail: Tuple[Vec2, ...]
    fixed: bool = False


@dataclass
class Body:
    """
    One simulated point mass.

    Fields:
    - id: identifier, unique within its simulation, never changed
    - mass: positive simulation mass; change it through set_mass()
    - radius: visual radius derived from mass
    - position: 2D position (x, y)
    - velocity: 2D velocity (vx, vy)
    - color, trail_color: rendering colours
    - fixed: pinned bodies are never integrated
    - trail: bounded deque of past positions, oldest first
    """
    id: int
    mass: float
    radius: float
    position: Vec2
    velocity: Vec2
    color: Color = DEFAULT_BODY_COLOR
    trail_color: Color = DEFAULT_BODY_COLOR + (128,)
    fixed: bool = False
    trail: Deque[Vec2] = field(default_factory=lambda: deque(maxlen=MAX_TRAIL_POINTS))

    @classmethod
    def from_config(cls, body_id: int, config: BodyConfig, radius: float,
                    max_trail_points: int = MAX_TRAIL_POINTS) -> "Body":
        body = cls(
            id=body_id,
            mass=config.mass,
            radius=radius,
            position=config.position,
            velocity=(0.0, 0.0) if config.fixed else config.velocity,
            color=config.color,
            trail_color=config.trail_color,
            fixed=config.fixed,
            trail=deque(maxlen=max_trail_points),
        )
        body.trail.append(body.position)
        return body

    def set_mass(self, mass: float, radius: float) -> None:
        """Replace mass and radius; callers validate mass > 0 first."""
        self.mass = mass
        self.radius = radius

    @property
    def speed(self) -> float:
        return vec_len(self.velocity)

    def snapshot(self) -> BodySnapshot:
        return BodySnapshot(
            id=self.id,
            position=self.position,
            velocity=self.velocity,
            mass=self.mass,
            radius=self.radius,
            color=self.color,
            trail_color=self.trail_color,
            trail=tuple(self.trail),
            fixed=self.fixed,
        )


def configs_from(items: Sequence[Any]) -> Tuple[BodyConfig, ...]:
    """Accept BodyConfig instances or mappings and return BodyConfigs."""
    configs = []
    for item in items:
        if isinstance(item, BodyConfig):
            configs.append(item)
        elif isinstance(item, Mapping):
            configs.append(BodyConfig.from_dict(item))
        else:
            raise InvalidConfigError(f"expected BodyConfig or mapping, got {type(item).__name__}")
    return tuple(configs)
