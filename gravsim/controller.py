#!/usr/bin/env python3
"""
Simulation controller: the state machine that render loops and UIs drive.

States
    UNINITIALIZED -> PAUSED <-> RUNNING, and DESTROYED after destroy().
    init()/reset()/randomize() always land in PAUSED so the starting
    configuration can be inspected before it runs. After destroy() only
    init()/reset() are accepted.

Ownership
- The controller owns its bodies exclusively. They are created in batch by
  init()/reset(), mutated in place by tick(), and dropped by destroy().
- get_bodies() and tick() return BodySnapshot copies, so callers may keep
  them around; they never change after being handed out.

Threading
- A render loop calls tick() once per frame. Setters may be called from a UI
  callback or another thread between ticks; every public method takes the
  same re-entrant lock. tick() must not be re-entered while it is running.
"""
import logging
import math
import random
import threading
from collections import deque
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .config import DEFAULT_SETTINGS, SimulationSettings
from .constants import FRAME_MS, MAX_BODIES, MIN_BODIES, VIEW_HEIGHT, VIEW_WIDTH
from .data_models import Body, BodySnapshot, Vec2, configs_from
from .errors import (
    IndexOutOfRangeError,
    InvalidConfigError,
    SimulationStateError,
)
from .physics import (
    GravityIntegrator,
    center_of_mass,
    kinetic_energy,
    potential_energy,
    total_momentum,
)
from .presets import RandomThreeBodyPreset, default_preset_for
from .sizing import get_radius_mapping
from .trails import TrailTracker

logger = logging.getLogger(__name__)


class SimState(Enum):
    UNINITIALIZED = "uninitialized"
    PAUSED = "paused"
    RUNNING = "running"
    DESTROYED = "destroyed"


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


class SimulationController:
    """
    Owns one body set plus the integrator and trail tracker that advance it.

    Args:
        settings: Simulation tunables; defaults to DEFAULT_SETTINGS.
        width, height: Viewport size used by presets and boundary reflection.
        seed: Seed for randomize(); None seeds from the OS.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None,
                 width: float = VIEW_WIDTH, height: float = VIEW_HEIGHT,
                 seed: Optional[int] = None):
        self.lock = threading.RLock()
        self.settings = (settings or DEFAULT_SETTINGS).validate()
        self.physics = GravityIntegrator(self.settings)
        self.trails = TrailTracker(self.settings.max_trail_points, self.settings.trail_min_distance)
        self._radius_for = get_radius_mapping(self.settings.radius_mapping)
        self.width = _positive("width", width)
        self.height = _positive("height", height)
        self.time_scale = 1.0
        self.elapsed = 0.0
        self.state = SimState.UNINITIALIZED
        self._bodies: List[Body] = []
        self._preset = None
        self._rng = random.Random(seed)
        self._ticking = False

    @classmethod
    def from_preset(cls, preset, width: float = VIEW_WIDTH, height: float = VIEW_HEIGHT,
                    seed: Optional[int] = None,
                    settings: Optional[SimulationSettings] = None) -> "SimulationController":
        """Build a controller with the preset's settings and reset it to the preset."""
        controller = cls(settings or preset.default_settings(), width, height, seed)
        controller.reset(preset)
        return controller

    # -----------------------
    # Queries
    # -----------------------

    @property
    def paused(self) -> bool:
        return self.state is not SimState.RUNNING

    @property
    def body_count(self) -> int:
        with self.lock:
            return len(self._bodies)

    @property
    def preset(self):
        return self._preset

    def get_bodies(self) -> Tuple[BodySnapshot, ...]:
        """Snapshot every body; empty before init and after destroy."""
        with self.lock:
            return tuple(b.snapshot() for b in self._bodies)

    def total_momentum(self) -> Vec2:
        with self.lock:
            return total_momentum(self._bodies)

    def total_energy(self) -> float:
        with self.lock:
            return kinetic_energy(self._bodies) + potential_energy(
                self._bodies, self.settings.gravitational_constant, self.settings.min_distance)

    def center_of_mass(self) -> Vec2:
        with self.lock:
            return center_of_mass(self._bodies)

    # -----------------------
    # Lifecycle
    # -----------------------

    def init(self, configs: Iterable) -> None:
        """
        Replace the body set with fresh bodies built from configs, then pause.

        configs may hold BodyConfig instances or plain mappings. Raises
        InvalidConfigError for anything but two or three bodies or for any
        invalid entry, in which case the previous body set is left untouched.
        """
        configs = configs_from(list(configs))
        if not MIN_BODIES <= len(configs) <= MAX_BODIES:
            raise InvalidConfigError(
                f"need {MIN_BODIES} to {MAX_BODIES} bodies, got {len(configs)}")
        with self.lock:
            bodies = [
                Body.from_config(
                    i + 1, cfg,
                    cfg.radius if cfg.radius is not None else self._radius_for(cfg.mass),
                    self.settings.max_trail_points,
                )
                for i, cfg in enumerate(configs)
            ]
            self._bodies = bodies
            self.elapsed = 0.0
            self.state = SimState.PAUSED
        logger.info("initialized %d bodies", len(bodies))

    def reset(self, preset=None) -> None:
        """
        Rebuild the canonical starting configuration and pause.

        Without an argument the last preset is reused; failing that, the
        default preset for the current body count (three bodies if none).
        """
        with self.lock:
            if preset is None:
                preset = self._preset or default_preset_for(len(self._bodies) or 3)
            configs = preset.build(self.width, self.height,
                                   self.settings.gravitational_constant, self._rng)
            self.init(configs)
            self._preset = preset
        logger.info("reset to %s preset", preset.kind)

    def randomize(self) -> None:
        """Replace the three bodies with a random configuration and pause."""
        with self.lock:
            self._require_bodies("randomize")
            if len(self._bodies) != 3:
                raise SimulationStateError("randomize() is only available for three-body systems")
            configs = RandomThreeBodyPreset().build(
                self.width, self.height, self.settings.gravitational_constant, self._rng)
            self.init(configs)
        logger.info("randomized three-body configuration")

    def destroy(self) -> None:
        """Drop all bodies and enter DESTROYED. Safe to call more than once."""
        with self.lock:
            if self.state is SimState.DESTROYED:
                return
            self._bodies = []
            self._preset = None
            self.state = SimState.DESTROYED
        logger.info("simulation destroyed")

    # -----------------------
    # Per-frame update
    # -----------------------

    def tick(self, dt_ms: Optional[float] = None) -> Tuple[BodySnapshot, ...]:
        """
        Advance the simulation by one frame unless paused.

        The simulated step is base_dt * (dt_ms / FRAME_MS) * time_scale;
        dt_ms defaults to one nominal frame. Paused ticks and non-positive
        steps change nothing, so paused wall-clock time contributes no
        simulated time. A non-finite dt_ms raises InvalidConfigError.

        Returns:
            Snapshots of all bodies after the update.
        """
        if dt_ms is not None:
            dt_ms = _finite("dt_ms", dt_ms)
        with self.lock:
            self._require_bodies("tick")
            if self._ticking:
                raise SimulationStateError("tick() called while a tick is in progress")
            if self.state is SimState.RUNNING:
                frames = 1.0 if dt_ms is None else dt_ms / FRAME_MS
                dt = self.settings.base_dt * frames * self.time_scale
                if dt > 0:
                    self._ticking = True
                    try:
                        self.physics.step(self._bodies, dt, bounds=(self.width, self.height))
                        self.trails.record_all(self._bodies)
                        self.elapsed += dt
                    finally:
                        self._ticking = False
            return self.get_bodies()

    # -----------------------
    # Parameter changes
    # -----------------------

    def toggle_pause(self) -> bool:
        """Flip between RUNNING and PAUSED; return the new paused flag."""
        with self.lock:
            self._require_bodies("toggle_pause")
            self.state = SimState.PAUSED if self.state is SimState.RUNNING else SimState.RUNNING
            logger.debug("simulation %s", self.state.value)
            return self.paused

    def set_time_scale(self, scale: float) -> None:
        """Multiplier for the per-tick step; takes effect on the next tick."""
        scale = _positive("time scale", scale)
        with self.lock:
            self._require_alive("set_time_scale")
            self.time_scale = scale
        logger.debug("time scale set to %.3g", scale)

    def set_mass(self, index: int, mass: float) -> None:
        """Change one body's mass (and radius); forces use it from the next tick."""
        mass = _positive("mass", mass)
        with self.lock:
            body = self._body_at(index)
            body.set_mass(mass, self._radius_for(mass))
        logger.debug("body %d mass set to %.4g", body.id, mass)

    def set_position(self, index: int, x: float, y: float) -> None:
        """Move one body; its trail restarts at the new position."""
        x, y = _finite("x", x), _finite("y", y)
        with self.lock:
            body = self._body_at(index)
            body.position = (x, y)
            self.trails.reset(body)

    def set_velocity(self, index: int, vx: float, vy: float) -> None:
        vx, vy = _finite("velocity_x", vx), _finite("velocity_y", vy)
        with self.lock:
            body = self._body_at(index)
            if body.fixed:
                raise InvalidConfigError(f"body {body.id} is fixed and cannot be given a velocity")
            body.velocity = (vx, vy)

    def configure(self, **overrides) -> None:
        """
        Replace individual settings (see SimulationSettings) from the next tick.

        A changed radius mapping is applied to the existing bodies at once; a
        changed trail bound trims existing trails from the oldest end.
        Nothing changes if any override is rejected.
        """
        with self.lock:
            self._require_alive("configure")
            settings = self.settings.with_overrides(**overrides)
            trails = TrailTracker(settings.max_trail_points, settings.trail_min_distance)
            radius_for = get_radius_mapping(settings.radius_mapping)
            radii = [radius_for(body.mass) if "radius_mapping" in overrides else body.radius
                     for body in self._bodies]
            body_trails = [deque(body.trail, maxlen=settings.max_trail_points)
                           if "max_trail_points" in overrides else body.trail
                           for body in self._bodies]

            self.settings = settings
            self.physics.configure(settings)
            self.trails = trails
            self._radius_for = radius_for
            for body, radius, trail in zip(self._bodies, radii, body_trails):
                body.radius = radius
                body.trail = trail
        logger.debug("settings updated: %s", overrides)

    def set_gravitational_constant(self, g: float) -> None:
        self.configure(gravitational_constant=g)

    def set_boundary(self, enabled: bool) -> None:
        self.configure(boundary_enabled=bool(enabled))

    def resize(self, width: float, height: float) -> None:
        """Change the viewport used for boundary reflection and future presets."""
        width, height = _positive("width", width), _positive("height", height)
        with self.lock:
            self._require_alive("resize")
            self.width, self.height = width, height

    def clear_trails(self) -> None:
        with self.lock:
            for body in self._bodies:
                self.trails.reset(body)

    # -----------------------
    # Helpers
    # -----------------------

    def _require_alive(self, operation: str) -> None:
        if self.state is SimState.DESTROYED:
            raise SimulationStateError(f"{operation}() called on a destroyed simulation")

    def _require_bodies(self, operation: str) -> None:
        self._require_alive(operation)
        if self.state is SimState.UNINITIALIZED:
            raise SimulationStateError(f"{operation}() called before init()")

    def _body_at(self, index: int) -> Body:
        self._require_bodies("body update")
        if not isinstance(index, int) or not 0 <= index < len(self._bodies):
            raise IndexOutOfRangeError(index, len(self._bodies))
        return self._bodies[index]
