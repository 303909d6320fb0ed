"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gravsim.config import DEFAULT_SETTINGS  # noqa: E402
from gravsim.controller import SimulationController  # noqa: E402
from gravsim.data_models import BodyConfig  # noqa: E402


@pytest.fixture
def free_settings():
    """Settings with no cap, no walls and G = 1: a plain isolated system."""
    return DEFAULT_SETTINGS.with_overrides(gravitational_constant=1.0)


@pytest.fixture
def three_configs():
    """Three unequal bodies with some initial motion, zero net momentum."""
    return [
        BodyConfig(mass=50.0, x=400.0, y=300.0, velocity_x=0.0, velocity_y=0.6),
        BodyConfig(mass=70.0, x=600.0, y=320.0, velocity_x=-0.2, velocity_y=-0.3),
        BodyConfig(mass=35.0, x=500.0, y=480.0, velocity_x=0.4, velocity_y=-9.0 / 35.0),
    ]


@pytest.fixture
def controller(free_settings, three_configs):
    """An initialized (paused) three-body controller."""
    sim = SimulationController(free_settings, width=1000, height=800, seed=1234)
    sim.init(three_configs)
    return sim


@pytest.fixture
def running_controller(controller):
    controller.toggle_pause()
    return controller

