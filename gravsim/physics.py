#!/usr/bin/env python3
"""
Core Physics Engine for Gravity Lab

Responsibilities
- Accumulate pairwise Newtonian gravitational forces between a small set of bodies.
- Advance body states by one (optionally substepped) time step.
- Apply the stability policies: close-pair skipping, velocity capping and
  boundary reflection.
- Provide small helpers for orbital set-ups and conservation checks.

Units and conventions
- Positions are in pixels, velocities in pixels per simulated time unit.
- G is a simulation parameter read from SimulationSettings; nothing here
  assumes SI.

Numerical notes
- Close pairs: if two bodies are closer than settings.min_distance (or exactly
  coincident), that pair contributes no force for the step. This is a
  deliberate pedagogical policy, not physics: it trades accuracy during a
  close pass for the absence of singular kicks and ejections.
- Integrators:
    "euler"    v += a*dt; x += v*dt (semi-implicit Euler, one force evaluation).
    "average"  x += (v_old + v_pred)/2 * dt with v_pred = v_old + a_old*dt,
               then v = v_old + (a_old + a_new)/2 * dt using forces at the new
               positions. This is velocity Verlet: second order and
               time-reversible, which keeps bound orbits closed over many
               periods. It costs two force evaluations per step.
- Forces are always applied as equal and opposite pairs in a fixed (i < j)
  order, so total momentum is conserved up to rounding and runs are
  reproducible bit-for-bit. Velocity capping, boundary reflection and fixed
  bodies break momentum conservation by design.
- Complexity is O(N^2) per force evaluation, irrelevant for N <= 3.

Threading
- The integrator holds no body state. The controller calls it under its lock.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_SETTINGS, INTEGRATOR_EULER, SimulationSettings
from .constants import MAX_SUBSTEPS
from .data_models import Body, Vec2, vec_len

logger = logging.getLogger(__name__)


class GravityIntegrator:
    """
    N-body gravitational integrator with stability safeguards.

    The force between bodies i and j is
    F = G * m_i * m_j / r^2
    directed along the line joining them, pulling each toward the other.
    """

    def __init__(self, settings: SimulationSettings = DEFAULT_SETTINGS):
        """
        Initialize the integrator.

        Args:
            settings: Simulation settings; validated here.
        """
        self.settings = settings.validate()
        self.skipped_pairs = 0

    def configure(self, settings: SimulationSettings) -> None:
        """Swap in new settings; they apply from the next step."""
        self.settings = settings.validate()

    def compute_forces(self, bodies: Sequence[Body],
                       positions: Optional[Sequence[Vec2]] = None) -> List[Vec2]:
        """
        Compute the net gravitational force on every body.

        Pairs are visited in the fixed order (0,1), (0,2), ..., (1,2), ... and
        each pair's force is added to one body and subtracted from the other
        before any integration happens.

        Args:
            bodies: Bodies to evaluate (mass is read from them).
            positions: Optional positions overriding body.position, same order.

        Returns:
            List of (fx, fy) net forces, same order as the input.
        """
        n = len(bodies)
        if positions is None:
            positions = [b.position for b in bodies]
        g = self.settings.gravitational_constant
        min_distance = self.settings.min_distance
        fx = [0.0] * n
        fy = [0.0] * n
        self.skipped_pairs = 0

        for i in range(n):
            xi, yi = positions[i]
            mi = bodies[i].mass
            for j in range(i + 1, n):
                xj, yj = positions[j]

                # Vector from body i to body j
                dx = xj - xi
                dy = yj - yi
                dist_sq = dx * dx + dy * dy
                dist = math.sqrt(dist_sq)

                if dist_sq == 0 or dist < min_distance:
                    self.skipped_pairs += 1
                    logger.debug(
                        "skipping pair (%d, %d): separation %.4g below %.4g",
                        bodies[i].id, bodies[j].id, dist, min_distance,
                    )
                    continue

                force = g * mi * bodies[j].mass / dist_sq
                pair_fx = force * dx / dist
                pair_fy = force * dy / dist

                # Newton's third law: i is pulled toward j, j toward i
                fx[i] += pair_fx
                fy[i] += pair_fy
                fx[j] -= pair_fx
                fy[j] -= pair_fy

        return list(zip(fx, fy))

    def compute_accelerations(self, bodies: Sequence[Body],
                              positions: Optional[Sequence[Vec2]] = None) -> List[Vec2]:
        """Net force divided by mass; fixed bodies get zero acceleration."""
        forces = self.compute_forces(bodies, positions)
        accelerations = []
        for body, (fx, fy) in zip(bodies, forces):
            if body.fixed:
                accelerations.append((0.0, 0.0))
            else:
                accelerations.append((fx / body.mass, fy / body.mass))
        return accelerations

    def step(self, bodies: Sequence[Body], dt: float,
             bounds: Optional[Tuple[float, float]] = None) -> int:
        """
        Advance all bodies by dt, splitting into substeps if max_step is set.

        Args:
            bodies: Bodies to integrate (modified in place).
            dt: Scaled time step; non-positive or non-finite values do nothing.
            bounds: (width, height) of the viewport, used when boundary
                reflection is enabled.

        Returns:
            Number of substeps taken.
        """
        if not bodies or not math.isfinite(dt) or dt <= 0:
            return 0

        max_step = self.settings.max_step
        steps = 1
        if max_step is not None and dt > max_step:
            steps = min(MAX_SUBSTEPS, math.ceil(dt / max_step))
        dt_per = dt / steps

        for _ in range(steps):
            self._substep(bodies, dt_per)
            self.apply_velocity_cap(bodies)
            if self.settings.boundary_enabled and bounds is not None:
                self.apply_boundary(bodies, bounds[0], bounds[1])
        return steps

    def _substep(self, bodies: Sequence[Body], dt: float) -> None:
        accelerations = self.compute_accelerations(bodies)

        if self.settings.integrator == INTEGRATOR_EULER:
            for body, (ax, ay) in zip(bodies, accelerations):
                if body.fixed:
                    continue
                vx = body.velocity[0] + ax * dt
                vy = body.velocity[1] + ay * dt
                body.velocity = (vx, vy)
                body.position = (body.position[0] + vx * dt, body.position[1] + vy * dt)
            return

        old_velocities = [b.velocity for b in bodies]
        for body, (vx, vy), (ax, ay) in zip(bodies, old_velocities, accelerations):
            if body.fixed:
                continue
            pred_vx = vx + ax * dt
            pred_vy = vy + ay * dt
            body.position = (
                body.position[0] + (vx + pred_vx) * 0.5 * dt,
                body.position[1] + (vy + pred_vy) * 0.5 * dt,
            )

        new_accelerations = self.compute_accelerations(bodies)
        for body, (vx, vy), (ax, ay), (nax, nay) in zip(
                bodies, old_velocities, accelerations, new_accelerations):
            if body.fixed:
                continue
            body.velocity = (vx + (ax + nax) * 0.5 * dt, vy + (ay + nay) * 0.5 * dt)

    def apply_velocity_cap(self, bodies: Sequence[Body]) -> None:
        """Rescale any velocity faster than max_velocity, keeping its direction."""
        cap = self.settings.max_velocity
        if cap is None:
            return
        for body in bodies:
            speed = body.speed
            if speed > cap:
                ratio = cap / speed
                body.velocity = (body.velocity[0] * ratio, body.velocity[1] * ratio)

    def apply_boundary(self, bodies: Sequence[Body], width: float, height: float) -> None:
        """
        Clamp bodies into the padded viewport and reflect the offending velocity axis.

        The reflected component is multiplied by boundary_damping. A viewport
        narrower than twice the padding collapses to its centre line.
        """
        pad = self.settings.boundary_padding
        damping = self.settings.boundary_damping
        lo_x, hi_x = _padded_range(width, pad)
        lo_y, hi_y = _padded_range(height, pad)

        for body in bodies:
            if body.fixed:
                continue
            x, y = body.position
            vx, vy = body.velocity
            if x < lo_x:
                x, vx = lo_x, abs(vx) * damping
            elif x > hi_x:
                x, vx = hi_x, -abs(vx) * damping
            if y < lo_y:
                y, vy = lo_y, abs(vy) * damping
            elif y > hi_y:
                y, vy = hi_y, -abs(vy) * damping
            body.position = (x, y)
            body.velocity = (vx, vy)


def _padded_range(extent: float, pad: float) -> Tuple[float, float]:
    lo, hi = pad, extent - pad
    if hi < lo:
        lo = hi = extent / 2.0
    return lo, hi


def circular_orbit_velocity(g: float, central_mass: float, orbital_radius: float) -> float:
    """
    Calculate the speed needed for a circular orbit around a much heavier body.

    For a circular orbit, gravity provides exactly the centripetal force:
    G * M / r = v^2 / r, therefore v = sqrt(G * M / r).

    Args:
        g: Gravitational constant in simulation units
        central_mass: Mass of the central body
        orbital_radius: Orbital radius

    Returns:
        Orbital speed, or 0.0 for a non-positive radius
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(g * central_mass / orbital_radius)


def total_momentum(bodies: Sequence[Body]) -> Vec2:
    px = sum(b.mass * b.velocity[0] for b in bodies)
    py = sum(b.mass * b.velocity[1] for b in bodies)
    return (px, py)


def center_of_mass(bodies: Sequence[Body]) -> Vec2:
    total = sum(b.mass for b in bodies)
    if total <= 0:
        return (0.0, 0.0)
    cx = sum(b.mass * b.position[0] for b in bodies) / total
    cy = sum(b.mass * b.position[1] for b in bodies) / total
    return (cx, cy)


def kinetic_energy(bodies: Sequence[Body]) -> float:
    return sum(0.5 * b.mass * (b.velocity[0] ** 2 + b.velocity[1] ** 2) for b in bodies)


def potential_energy(bodies: Sequence[Body], g: float, min_distance: float = 0.0) -> float:
    """Pairwise -G*m_i*m_j/r, skipping the same close pairs the force loop skips."""
    energy = 0.0
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            r = vec_len((bodies[j].position[0] - bodies[i].position[0],
                         bodies[j].position[1] - bodies[i].position[1]))
            if r == 0 or r < min_distance:
                continue
            energy -= g * bodies[i].mass * bodies[j].mass / r
    return energy
