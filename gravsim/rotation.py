#!/usr/bin/env python3
"""
Rotation/orbit composite: a kinematic sun, planet and moon.

Nothing here integrates forces. Each body spins about its own axis at
rotation_speed radians per frame and moves on a circle of orbit_radius around
its parent at orbit_speed radians per frame: the planet around the sun, the
moon around the planet. It shares the controller's lifecycle conventions:
reset() pauses and also revives a destroyed system, tick() does nothing
while paused or for a non-positive step, destroy() is idempotent.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Dict, Optional

from .constants import (
    FRAME_MS,
    MAX_TRAIL_POINTS,
    MOON_COLOR,
    PLANET_COLOR,
    SUN_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import Color, Vec2
from .errors import InvalidConfigError, SimulationStateError, UnknownBodyError
from .trails import TrailTracker

logger = logging.getLogger(__name__)

BODY_IDS = ("sun", "planet", "moon")


def _finite(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidConfigError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidConfigError(f"{name} must be finite, got {value!r}")
    return number


def _positive(name: str, value) -> float:
    number = _finite(name, value)
    if number <= 0:
        raise InvalidConfigError(f"{name} must be positive, got {value!r}")
    return number


@dataclass
class RotatingBody:
    """One body of the composite; angles in radians, speeds in radians per frame."""
    id: str
    radius: float
    color: Color
    rotation_speed: float
    orbit_radius: float = 0.0
    orbit_speed: float = 0.0
    orbit_angle: float = 0.0
    display_trail: bool = False
    position: Vec2 = (0.0, 0.0)
    angle: float = 0.0
    orbit_center: Vec2 = (0.0, 0.0)
    trail: Deque[Vec2] = field(default_factory=lambda: deque(maxlen=MAX_TRAIL_POINTS))


def default_bodies() -> Dict[str, RotatingBody]:
    return {
        "sun": RotatingBody("sun", radius=60, color=SUN_COLOR, rotation_speed=0.001),
        "planet": RotatingBody("planet", radius=25, color=PLANET_COLOR, rotation_speed=0.01,
                               orbit_radius=200, orbit_speed=0.005, display_trail=True),
        "moon": RotatingBody("moon", radius=8, color=MOON_COLOR, rotation_speed=0.02,
                             orbit_radius=60, orbit_speed=0.02, orbit_angle=math.pi / 4,
                             display_trail=True),
    }


@dataclass(frozen=True)
class RotationState:
    """Snapshot returned by RotationSystem.get_state()."""
    sun: RotatingBody
    planet: RotatingBody
    moon: RotatingBody
    paused: bool
    time_scale: float


def _copy(body: RotatingBody) -> RotatingBody:
    return replace(body, trail=deque(body.trail, maxlen=body.trail.maxlen))


class RotationSystem:
    """Sun, planet and moon with independent spin and orbit speeds."""

    def __init__(self, width: float = VIEW_WIDTH, height: float = VIEW_HEIGHT):
        self.width = _positive("width", width)
        self.height = _positive("height", height)
        self.bodies = default_bodies()
        self.trails = TrailTracker(MAX_TRAIL_POINTS, min_distance=0.0)
        self.time_scale = 1.0
        self.paused = True
        self.destroyed = False
        self.reset()

    def reset(self, width: Optional[float] = None, height: Optional[float] = None) -> None:
        """Put the sun at the viewport centre and restart every orbit; pauses."""
        if width is not None:
            self.width = _positive("width", width)
        if height is not None:
            self.height = _positive("height", height)
        center = (self.width / 2.0, self.height / 2.0)
        sun, planet, moon = self.bodies["sun"], self.bodies["planet"], self.bodies["moon"]

        sun.position = center
        sun.orbit_center = center
        sun.angle = 0.0
        sun.trail = deque(maxlen=MAX_TRAIL_POINTS)

        planet.orbit_angle = 0.0
        planet.angle = 0.0
        planet.orbit_center = center
        planet.position = (center[0] + planet.orbit_radius, center[1])
        self.trails.reset(planet)

        moon.orbit_angle = math.pi / 4
        moon.angle = 0.0
        moon.orbit_center = planet.position
        moon.position = (planet.position[0] + moon.orbit_radius, planet.position[1])
        self.trails.reset(moon)

        self.paused = True
        self.destroyed = False
        logger.info("rotation system reset")

    def tick(self, dt_ms: Optional[float] = None) -> RotationState:
        """Advance spins and orbits by (dt_ms / FRAME_MS) * time_scale frames."""
        frames = 1.0 if dt_ms is None else _finite("dt_ms", dt_ms) / FRAME_MS
        self._require_alive("tick")
        step = frames * self.time_scale
        if not self.paused and step > 0:
            sun, planet, moon = self.bodies["sun"], self.bodies["planet"], self.bodies["moon"]

            sun.angle += sun.rotation_speed * step

            planet.orbit_angle += planet.orbit_speed * step
            planet.angle += planet.rotation_speed * step
            planet.orbit_center = sun.position
            planet.position = (
                sun.position[0] + math.cos(planet.orbit_angle) * planet.orbit_radius,
                sun.position[1] + math.sin(planet.orbit_angle) * planet.orbit_radius,
            )

            moon.orbit_angle += moon.orbit_speed * step
            moon.angle += moon.rotation_speed * step
            moon.orbit_center = planet.position
            moon.position = (
                planet.position[0] + math.cos(moon.orbit_angle) * moon.orbit_radius,
                planet.position[1] + math.sin(moon.orbit_angle) * moon.orbit_radius,
            )

            for body in (planet, moon):
                if body.display_trail:
                    self.trails.record(body)
        return self.get_state()

    def toggle_pause(self) -> bool:
        self._require_alive("toggle_pause")
        self.paused = not self.paused
        return self.paused

    def set_time_scale(self, scale: float) -> None:
        self._require_alive("set_time_scale")
        self.time_scale = _positive("time scale", scale)

    def set_rotation_speed(self, body_id: str, speed: float) -> None:
        self._require_alive("set_rotation_speed")
        self._body(body_id).rotation_speed = _finite("rotation speed", speed)

    def set_orbit_speed(self, body_id: str, speed: float) -> None:
        self._require_alive("set_orbit_speed")
        body = self._body(body_id)
        if body_id == "sun":
            raise InvalidConfigError("the sun does not orbit anything")
        body.orbit_speed = _finite("orbit speed", speed)

    def get_state(self) -> RotationState:
        return RotationState(
            sun=_copy(self.bodies["sun"]),
            planet=_copy(self.bodies["planet"]),
            moon=_copy(self.bodies["moon"]),
            paused=self.paused,
            time_scale=self.time_scale,
        )

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        self.paused = True
        logger.info("rotation system destroyed")

    def _body(self, body_id: str) -> RotatingBody:
        try:
            return self.bodies[body_id]
        except KeyError:
            raise UnknownBodyError(body_id) from None

    def _require_alive(self, operation: str) -> None:
        if self.destroyed:
            raise SimulationStateError(f"{operation}() called on a destroyed rotation system")
