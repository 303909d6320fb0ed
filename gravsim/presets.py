#!/usr/bin/env python3
"""
Built-in starting configurations.

Each preset is a small frozen record tagged with a ``kind`` string. build()
turns it into BodyConfigs for a viewport of the given size, and
default_settings() returns the SimulationSettings the preset was tuned for.

Presets
- TwoBodyPreset: heavy central body with a lighter body on a (by default
  elliptical) orbit.
- ThreeBodyPreset: three unequal masses at rest on a triangle.
- RandomThreeBodyPreset: three bodies with random masses, positions and velocities.
- FigureEightPreset: Chenciner-Montgomery equal-mass figure-eight orbit.
- LagrangePreset: equal masses rotating rigidly on an equilateral triangle.
"""
import math
import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .config import (
    FIGURE_EIGHT_SETTINGS,
    THREE_BODY_SETTINGS,
    TWO_BODY_SETTINGS,
    SimulationSettings,
)
from .constants import BODY_PALETTE, PLANET_COLOR, SUN_COLOR
from .data_models import BodyConfig
from .errors import InvalidConfigError
from .physics import circular_orbit_velocity

Configs = Tuple[BodyConfig, ...]


def _center(width: float, height: float) -> Tuple[float, float]:
    return width / 2.0, height / 2.0


def _palette(index: int):
    return BODY_PALETTE[index % len(BODY_PALETTE)]


def _check_masses(masses) -> None:
    if any(m <= 0 for m in masses):
        raise InvalidConfigError(f"preset masses must be positive, got {masses!r}")


@dataclass(frozen=True)
class TwoBodyPreset:
    """
    Star and planet. The planet starts at distance_fraction * min(width, height)
    to the right of the star with tangential speed
    velocity_factor * sqrt(G * M / r); 1.0 gives a circular orbit around a
    fixed star, the default 0.6 an ellipse.
    """
    central_mass: float = 300.0
    orbiting_mass: float = 30.0
    distance_fraction: float = 0.2
    velocity_factor: float = 0.6
    fix_central: bool = False
    kind: str = field(default="two_body", init=False)

    def build(self, width: float, height: float, g: float,
              rng: Optional[random.Random] = None) -> Configs:
        _check_masses((self.central_mass, self.orbiting_mass))
        cx, cy = _center(width, height)
        distance = min(width, height) * self.distance_fraction
        speed = circular_orbit_velocity(g, self.central_mass, distance) * self.velocity_factor
        return (
            BodyConfig(
                mass=self.central_mass, x=cx, y=cy,
                color=SUN_COLOR, trail_color=SUN_COLOR + (26,),
                fixed=self.fix_central,
            ),
            BodyConfig(
                mass=self.orbiting_mass, x=cx + distance, y=cy,
                velocity_x=0.0, velocity_y=speed,
                color=PLANET_COLOR, trail_color=PLANET_COLOR + (77,),
            ),
        )

    def default_settings(self) -> SimulationSettings:
        return TWO_BODY_SETTINGS


@dataclass(frozen=True)
class ThreeBodyPreset:
    """Three bodies at rest on the vertices of a triangle around the centre."""
    masses: Tuple[float, float, float] = (50.0, 70.0, 35.0)
    radius_fraction: float = 0.15
    kind: str = field(default="three_body", init=False)

    def build(self, width: float, height: float, g: float,
              rng: Optional[random.Random] = None) -> Configs:
        _check_masses(self.masses)
        cx, cy = _center(width, height)
        radius = min(width, height) * self.radius_fraction
        configs = []
        for i, mass in enumerate(self.masses):
            angle = 2.0 * math.pi * i / 3.0
            color, trail = _palette(i)
            configs.append(BodyConfig(
                mass=mass,
                x=cx + radius * math.cos(angle),
                y=cy + radius * math.sin(angle),
                color=color,
                trail_color=trail,
            ))
        return tuple(configs)

    def default_settings(self) -> SimulationSettings:
        return THREE_BODY_SETTINGS


@dataclass(frozen=True)
class RandomThreeBodyPreset:
    """
    Three bodies with random masses in [min_mass, max_mass], positions within
    spread_fraction * 0.7 * min(width, height) of the centre, and velocity
    components in [-max_speed / 2, max_speed / 2].
    """
    min_mass: float = 30.0
    max_mass: float = 100.0
    spread_fraction: float = 0.3
    max_speed: float = 3.0
    kind: str = field(default="random_three_body", init=False)

    def build(self, width: float, height: float, g: float,
              rng: Optional[random.Random] = None) -> Configs:
        _check_masses((self.min_mass, self.max_mass))
        rng = rng or random.Random()
        cx, cy = _center(width, height)
        radius = min(width, height) * self.spread_fraction
        configs = []
        for i in range(3):
            angle = rng.random() * 2.0 * math.pi
            distance = rng.random() * radius * 0.7
            color, trail = _palette(i)
            configs.append(BodyConfig(
                mass=self.min_mass + rng.random() * (self.max_mass - self.min_mass),
                x=cx + math.cos(angle) * distance,
                y=cy + math.sin(angle) * distance,
                velocity_x=(rng.random() - 0.5) * self.max_speed,
                velocity_y=(rng.random() - 0.5) * self.max_speed,
                color=color,
                trail_color=trail[:3] + (51,),
            ))
        return tuple(configs)

    def default_settings(self) -> SimulationSettings:
        return THREE_BODY_SETTINGS


# Dimensionless initial conditions for G = 1, m = 1
FIGURE_EIGHT_POSITIONS = ((-0.97000436, 0.24308753), (0.97000436, -0.24308753), (0.0, 0.0))
FIGURE_EIGHT_VELOCITIES = ((0.4662036850, 0.4323657300),
                           (0.4662036850, 0.4323657300),
                           (-0.93240737, -0.86473146))


@dataclass(frozen=True)
class FigureEightPreset:
    """
    Classic equal-mass figure-eight periodic solution, scaled to the viewport.

    Lengths scale by L = scale_fraction * min(width, height) and velocities by
    V = sqrt(G * m / L), which keeps the orbit periodic for any G and m.
    """
    mass: float = 100.0
    scale_fraction: float = 0.3
    kind: str = field(default="figure_eight", init=False)

    def build(self, width: float, height: float, g: float,
              rng: Optional[random.Random] = None) -> Configs:
        _check_masses((self.mass,))
        cx, cy = _center(width, height)
        length = min(width, height) * self.scale_fraction
        speed = math.sqrt(g * self.mass / length)
        configs = []
        for i, ((px, py), (vx, vy)) in enumerate(zip(FIGURE_EIGHT_POSITIONS, FIGURE_EIGHT_VELOCITIES)):
            color, trail = _palette(i)
            configs.append(BodyConfig(
                mass=self.mass,
                x=cx + px * length, y=cy + py * length,
                velocity_x=vx * speed, velocity_y=vy * speed,
                color=color, trail_color=trail,
            ))
        return tuple(configs)

    def default_settings(self) -> SimulationSettings:
        return FIGURE_EIGHT_SETTINGS


@dataclass(frozen=True)
class LagrangePreset:
    """
    Equal masses on an equilateral triangle of circumradius R, each moving
    tangentially with v = sqrt(G * m / (sqrt(3) * R)) so the triangle rotates
    rigidly about its centre. The configuration is unstable and breaks up
    after a few turns, which is the point of the demo.
    """
    mass: float = 100.0
    radius_fraction: float = 0.25
    kind: str = field(default="lagrange", init=False)

    def build(self, width: float, height: float, g: float,
              rng: Optional[random.Random] = None) -> Configs:
        _check_masses((self.mass,))
        cx, cy = _center(width, height)
        radius = min(width, height) * self.radius_fraction
        speed = math.sqrt(g * self.mass / (math.sqrt(3.0) * radius))
        configs = []
        for i in range(3):
            angle = 2.0 * math.pi * i / 3.0
            color, trail = _palette(i)
            configs.append(BodyConfig(
                mass=self.mass,
                x=cx + radius * math.cos(angle),
                y=cy + radius * math.sin(angle),
                velocity_x=-math.sin(angle) * speed,
                velocity_y=math.cos(angle) * speed,
                color=color,
                trail_color=trail,
            ))
        return tuple(configs)

    def default_settings(self) -> SimulationSettings:
        return FIGURE_EIGHT_SETTINGS


PRESETS = {
    "two": TwoBodyPreset,
    "three": ThreeBodyPreset,
    "random": RandomThreeBodyPreset,
    "figure8": FigureEightPreset,
    "lagrange": LagrangePreset,
}


def default_preset_for(count: int):
    """Canonical preset for a body count: two-body for 2, triangle otherwise."""
    return TwoBodyPreset() if count == 2 else ThreeBodyPreset()
