#!/usr/bin/env python3
"""
Shared constants for Gravity Lab (simulation units unless stated otherwise).

Simulation units are chosen so that one unit of distance is one viewport pixel
and one unit of time is one display frame at time scale 1.0. The gravitational
constant is therefore a tuning knob, not a physical constant; see
gravsim.config for the per-variant values.

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Per-variant gravitational constants (simulation units)
G_TWO_BODY = 0.3
G_THREE_BODY = 0.1
G_UNIT = 1.0

# Integration
FRAME_MS = 16.666  # nominal display frame; tick(dt_ms) is measured against it
BASE_DT = 1.0  # simulation time per nominal frame at time scale 1.0
MAX_SUBSTEPS = 1000  # cap per tick when substepping is enabled
MIN_FORCE_DISTANCE = 1.0  # pairs closer than this exert no force for the tick
TWO_BODY_MAX_VELOCITY = 10.0

# Boundary reflection
BOUNDARY_PADDING = 20.0
BOUNDARY_DAMPING = 0.8

# Trails
MAX_TRAIL_POINTS = 200
TRAIL_MIN_DISTANCE = 1.0

# Controller limits
MIN_BODIES = 2
MAX_BODIES = 3
TIME_SCALE_MIN = 0.1  # front-end slider range, not enforced by the core
TIME_SCALE_MAX = 5.0

# Radius mapping
DEFAULT_RADIUS_MAPPING = "sqrt"
SQRT_RADIUS_FACTOR = 4.0
CBRT_RADIUS_FACTOR = 6.0
LINEAR_RADIUS_FACTOR = 0.5
MIN_VISUAL_RADIUS = 2.0

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (5, 8, 22)
HUD_TEXT_COLOR = (200, 200, 200)
SELECTION_COLOR = (255, 255, 0)
DEFAULT_BODY_COLOR = (200, 200, 255)

# Palette shared by the gravity presets (body colour, trail colour with alpha)
BODY_PALETTE = (
    ((255, 77, 90), (255, 77, 90, 128)),
    ((66, 195, 247), (66, 195, 247, 128)),
    ((253, 202, 64), (253, 202, 64, 128)),
)
SUN_COLOR = (253, 184, 19)
PLANET_COLOR = (52, 152, 219)
MOON_COLOR = (189, 195, 199)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
