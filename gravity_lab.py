#!/usr/bin/env python3
"""
Gravity Lab application entry point: a pygame viewport driving the simulation core.

What this module does
- Builds a SimulationController (two-body, three-body, figure-eight, Lagrange or
  a JSON template) or a RotationSystem, from command-line options.
- Runs a single-threaded render loop: handle input, call tick() once per frame
  with the measured frame time, draw the returned snapshots.
- Maps keys to the controller's commands. Errors raised by the core for a bad
  command are logged and the loop carries on.

Controls
- Space: pause/play, R: reset, N: randomize (three-body), C: clear trails
- Up/Down: time scale, 1-3: select body, [ and ]: selected body mass
- B: toggle boundary reflection, Esc: quit

Running
1) Install: `pip install -e .`
2) Run: `python gravity_lab.py --mode three` (or the `gravity-lab` script)
"""

import argparse
import logging
import math
import sys
from typing import List, Optional, Sequence

import pygame
from pygame import gfxdraw

from gravsim.constants import (
    BACKGROUND_COLOR,
    HUD_TEXT_COLOR,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    TIME_SCALE_MAX,
    TIME_SCALE_MIN,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from gravsim.controller import SimulationController
from gravsim.errors import SimulationError
from gravsim.logging_config import setup_logging
from gravsim.presets import PRESETS
from gravsim.presets_loader import list_templates, load_template
from gravsim.rotation import RotationSystem

logger = logging.getLogger("gravity_lab")

MODES = ("two", "three", "random", "figure8", "lagrange", "rotation")
TIME_SCALE_STEP = 1.25
MASS_STEP = 1.1
FPS = 60


def clamp(x, a, b):
    return max(a, min(b, x))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive gravity demonstrations.")
    parser.add_argument("--mode", choices=MODES, default="three",
                        help="simulation to start with (default: three)")
    parser.add_argument("--template", metavar="NAME",
                        help="load a JSON scene template instead of a built-in mode")
    parser.add_argument("--list-templates", action="store_true",
                        help="print the available templates and exit")
    parser.add_argument("--seed", type=int, default=None, help="seed for randomized scenes")
    parser.add_argument("--width", type=int, default=VIEW_WIDTH)
    parser.add_argument("--height", type=int, default=VIEW_HEIGHT)
    parser.add_argument("--log-level", default="INFO",
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser


def make_simulation(args: argparse.Namespace):
    """Create the simulation selected by the parsed options."""
    if args.template:
        preset = load_template(args.template)
        sim = SimulationController.from_preset(preset, args.width, args.height, seed=args.seed)
        if preset.time_scale is not None:
            sim.set_time_scale(preset.time_scale)
        return sim
    if args.mode == "rotation":
        return RotationSystem(args.width, args.height)
    preset = PRESETS[args.mode]()
    return SimulationController.from_preset(preset, args.width, args.height, seed=args.seed)


# ============================================================
# Drawing helpers
# ============================================================

_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    x, y = pt
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    x, y = int(x), int(y)
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def draw_trail(surf, points: Sequence, color) -> None:
    pts = [p for p in (_safe_point(pt) for pt in points) if p]
    if len(pts) > 1:
        pygame.draw.aalines(surf, color[:3], False, pts)


def draw_disc(surf, position, radius, color, outline=(0, 0, 0)) -> Optional[tuple]:
    center = _safe_point(position)
    if center is None:
        return None
    r = clamp(int(radius), 2, 120)
    gfxdraw.filled_circle(surf, center[0], center[1], r, color[:3])
    gfxdraw.aacircle(surf, center[0], center[1], r, outline)
    return center


# ============================================================
# Pygame renderer
# ============================================================

class PygameRenderer:
    """
    Pygame loop: feeds frame times to the simulation and draws what it returns.
    """
    def __init__(self, sim, width: int, height: int):
        self.sim = sim
        self.width = width
        self.height = height
        self.surface = None
        self.clock = None
        self.selected_index = 0
        self.running = True

    @property
    def is_rotation(self) -> bool:
        return isinstance(self.sim, RotationSystem)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Gravity Lab")
        self.surface = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        try:
            while self.running:
                dt_ms = self.clock.tick(FPS)
                self.handle_events()
                if not self.running:
                    break
                state = self.sim.tick(dt_ms)
                self.draw(state)
        finally:
            self.sim.destroy()
            pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._command(self._resize, event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_key(self, key):
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self._command(self.sim.toggle_pause)
        elif key == pygame.K_r:
            self._command(self.sim.reset)
        elif key == pygame.K_UP:
            self._command(self._scale_time, TIME_SCALE_STEP)
        elif key == pygame.K_DOWN:
            self._command(self._scale_time, 1.0 / TIME_SCALE_STEP)
        elif self.is_rotation:
            return
        elif key == pygame.K_n:
            self._command(self.sim.randomize)
        elif key == pygame.K_c:
            self._command(self.sim.clear_trails)
        elif key == pygame.K_b:
            self._command(self.sim.set_boundary, not self.sim.settings.boundary_enabled)
        elif key in (pygame.K_1, pygame.K_2, pygame.K_3):
            self.selected_index = key - pygame.K_1
        elif key == pygame.K_LEFTBRACKET:
            self._command(self._scale_mass, 1.0 / MASS_STEP)
        elif key == pygame.K_RIGHTBRACKET:
            self._command(self._scale_mass, MASS_STEP)

    def _command(self, fn, *args):
        try:
            fn(*args)
        except SimulationError as exc:
            logger.warning("%s", exc)

    def _resize(self, w, h):
        if self.is_rotation:
            self.sim.reset(w, h)
        else:
            self.sim.resize(w, h)

    def _scale_time(self, factor):
        self.sim.set_time_scale(clamp(self.sim.time_scale * factor, TIME_SCALE_MIN, TIME_SCALE_MAX))

    def _scale_mass(self, factor):
        bodies = self.sim.get_bodies()
        if self.selected_index >= len(bodies):
            logger.warning("no body %d to change", self.selected_index + 1)
            return
        self.sim.set_mass(self.selected_index, bodies[self.selected_index].mass * factor)

    def draw(self, state):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        if self.is_rotation:
            self.draw_rotation(surf, state)
            status = "Paused" if state.paused else "Playing"
        else:
            self.draw_bodies(surf, state)
            status = "Paused" if self.sim.paused else "Playing"
        draw_text(surf, "Space: Pause/Play | R: Reset | N: Random | Up/Down: Speed | 1-3, [ ]: Mass | B: Walls",
                  10, 10, HUD_TEXT_COLOR)
        draw_text(surf, f"Speed: {self.sim.time_scale:.2f}x  [{status}]", 10, 30, HUD_TEXT_COLOR)
        pygame.display.flip()

    def draw_bodies(self, surf, bodies):
        for b in bodies:
            draw_trail(surf, b.trail, b.trail_color)
        for i, b in enumerate(bodies):
            center = draw_disc(surf, b.position, b.radius, b.color)
            if center and i == self.selected_index:
                gfxdraw.aacircle(surf, center[0], center[1], clamp(int(b.radius), 2, 120) + 4,
                                 SELECTION_COLOR)
        lines: List[str] = [f"m{b.id}={b.mass:.1f}" for b in bodies]
        draw_text(surf, "  ".join(lines), 10, 50, HUD_TEXT_COLOR)

    def draw_rotation(self, surf, state):
        for body in (state.planet, state.moon):
            if body.display_trail:
                draw_trail(surf, body.trail, body.color)
        for body in (state.sun, state.planet, state.moon):
            center = draw_disc(surf, body.position, body.radius, body.color)
            if center:
                # Spin marker from the centre to the rim
                tip = (body.position[0] + math.cos(body.angle) * body.radius,
                       body.position[1] + math.sin(body.angle) * body.radius)
                tip_s = _safe_point(tip)
                if tip_s:
                    pygame.draw.line(surf, (255, 255, 255), center, tip_s, 2)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    setup_logging(args.log_level, name="gravity_lab")

    if args.list_templates:
        for fn, display in list_templates():
            print(f"{fn}: {display}")
        return 0

    try:
        sim = make_simulation(args)
    except SimulationError as exc:
        logger.error("cannot start simulation: %s", exc)
        return 2

    PygameRenderer(sim, args.width, args.height).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
