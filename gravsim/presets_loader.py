#!/usr/bin/env python3
"""
Scene template JSON loading.

Templates live in gravsim/templates/*.json and describe a starting scene that
can be used anywhere a built-in preset can.

Schema
======
{
  "name": "Human-friendly scene name",
  "description": "Optional description",
  "time_scale": 1.0,                  # optional
  "settings": {                       # optional SimulationSettings overrides
    "gravitational_constant": 1.0,
    "max_step": 0.5
  },
  "bodies": [
    {
      "mass": 1000.0,
      "x": 0.0,                       # offset from the viewport centre
      "y": 0.0,
      "velocity_x": 0.0,              # velocityX is accepted too
      "velocity_y": 0.0,
      "color": "#fdb813",             # or [r, g, b]
      "trail_color": [253, 184, 19, 26],
      "fixed": true
    }
  ]
}

Users can add their own JSON files into the templates folder and they'll be
picked up by list_templates().
"""
import json
import logging
import math
import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import DEFAULT_SETTINGS, SimulationSettings
from .constants import MAX_BODIES, MIN_BODIES
from .data_models import BodyConfig
from .errors import InvalidConfigError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _read_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise InvalidConfigError(f"cannot read template {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(f"template {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidConfigError(f"template {path} must contain a JSON object")
    return data


def _resolve(file_name: str, templates_dir: str) -> str:
    if os.path.isabs(file_name) or os.path.exists(file_name):
        return file_name
    if not file_name.lower().endswith(".json"):
        file_name += ".json"
    return os.path.join(templates_dir, file_name)


@dataclass(frozen=True)
class TemplatePreset:
    """
    A scene loaded from a template file, usable like the built-in presets.

    Body positions in the file are offsets from the viewport centre.
    """
    name: str
    bodies: Tuple[BodyConfig, ...]
    description: str = ""
    time_scale: Optional[float] = None
    settings_overrides: Tuple[Tuple[str, Any], ...] = ()
    kind: str = field(default="template", init=False)

    def build(self, width: float, height: float, g: float,
              rng: Optional[random.Random] = None) -> Tuple[BodyConfig, ...]:
        cx, cy = width / 2.0, height / 2.0
        return tuple(
            BodyConfig(
                mass=b.mass,
                x=cx + b.x, y=cy + b.y,
                velocity_x=b.velocity_x, velocity_y=b.velocity_y,
                color=b.color, trail_color=b.trail_color,
                radius=b.radius, fixed=b.fixed,
            )
            for b in self.bodies
        )

    def default_settings(self) -> SimulationSettings:
        return DEFAULT_SETTINGS.with_overrides(**dict(self.settings_overrides))


def parse_template(data: Dict[str, Any], source: str = "<template>") -> TemplatePreset:
    """Validate a decoded template object and build its TemplatePreset."""
    raw_bodies = data.get("bodies")
    if not isinstance(raw_bodies, list) or not MIN_BODIES <= len(raw_bodies) <= MAX_BODIES:
        raise InvalidConfigError(f"{source}: 'bodies' must be a list of {MIN_BODIES} to {MAX_BODIES} bodies")
    bodies = []
    for i, raw in enumerate(raw_bodies):
        if not isinstance(raw, dict):
            raise InvalidConfigError(f"{source}: body #{i} must be an object")
        try:
            bodies.append(BodyConfig.from_dict(raw))
        except InvalidConfigError as exc:
            raise InvalidConfigError(f"{source}: body #{i}: {exc}") from exc

    overrides = data.get("settings") or {}
    if not isinstance(overrides, dict):
        raise InvalidConfigError(f"{source}: 'settings' must be an object")
    # Fails early on unknown or out-of-range settings
    DEFAULT_SETTINGS.with_overrides(**overrides)

    time_scale = data.get("time_scale")
    if time_scale is not None:
        try:
            time_scale = float(time_scale)
        except (TypeError, ValueError):
            raise InvalidConfigError(f"{source}: time_scale must be a number") from None
        if not (math.isfinite(time_scale) and time_scale > 0):
            raise InvalidConfigError(f"{source}: time_scale must be a positive finite number")

    name = data.get("name") or os.path.splitext(os.path.basename(source))[0]
    return TemplatePreset(
        name=str(name),
        bodies=tuple(bodies),
        description=str(data.get("description", "")),
        time_scale=time_scale,
        settings_overrides=tuple(sorted(overrides.items())),
    )


def load_template(file_name: str, templates_dir: str = TEMPLATES_DIR) -> TemplatePreset:
    """
    Load a template by file name (with or without .json) or by path.

    Raises InvalidConfigError if the file is missing or malformed.
    """
    path = _resolve(file_name, templates_dir)
    return parse_template(_read_json(path), source=path)


def list_templates(templates_dir: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available templates."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(templates_dir):
        return items
    for fn in sorted(os.listdir(templates_dir)):
        if not fn.lower().endswith(".json"):
            continue
        try:
            data = _read_json(os.path.join(templates_dir, fn))
        except InvalidConfigError as exc:
            logger.warning("skipping template %s: %s", fn, exc)
            continue
        display = data.get("name") or os.path.splitext(fn)[0]
        items.append((fn, display))
    return items
