"""Tests for JSON scene templates."""

import json

import pytest

from gravsim.controller import SimulationController
from gravsim.errors import InvalidConfigError
from gravsim.physics import center_of_mass
from gravsim.presets_loader import (
    TemplatePreset,
    list_templates,
    load_template,
    parse_template,
)


def write_template(directory, name, data):
    path = directory / name
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


VALID = {
    "name": "Pair",
    "bodies": [
        {"mass": 10, "x": -50, "y": 0, "velocityY": -1},
        {"mass": 10, "x": 50, "y": 0, "velocityY": 1},
    ],
}


class TestShippedTemplates:

    def test_list_templates(self):
        names = dict(list_templates())
        assert names["binary_star.json"] == "Binary star"
        assert names["sun_planet_moon.json"] == "Sun, planet and moon"

    def test_binary_star(self):
        preset = load_template("binary_star")

        assert isinstance(preset, TemplatePreset)
        assert preset.kind == "template"
        assert preset.time_scale == 1.0
        settings = preset.default_settings()
        assert settings.gravitational_constant == 1.0
        assert settings.max_step == 0.5

        left, right = preset.build(1000, 800, settings.gravitational_constant)
        assert left.position == (400.0, 400.0)
        assert right.position == (600.0, 400.0)
        assert left.color == (255, 77, 90)

    def test_sun_planet_moon(self):
        preset = load_template("sun_planet_moon.json")
        sun, planet, moon = preset.bodies

        assert sun.fixed is True
        assert planet.fixed is False
        assert preset.default_settings().radius_mapping == "cbrt"

    def test_binary_star_centre_of_mass_stays_put(self):
        sim = SimulationController.from_preset(load_template("binary_star"), 1000, 800)
        sim.toggle_pause()
        for _ in range(300):
            sim.tick()
        assert center_of_mass(sim.get_bodies()) == pytest.approx((500.0, 400.0), abs=1e-6)

    def test_planet_keeps_orbit_around_pinned_sun(self):
        sim = SimulationController.from_preset(load_template("sun_planet_moon"), 1000, 800)
        sim.toggle_pause()
        for _ in range(200):
            bodies = sim.tick()
        sun, planet, _ = bodies
        assert sun.position == (500.0, 400.0)
        distance = ((planet.position[0] - 500.0) ** 2 + (planet.position[1] - 400.0) ** 2) ** 0.5
        assert distance == pytest.approx(220.0, rel=0.05)


class TestTemplateValidation:

    def test_load_by_path(self, tmp_path):
        path = write_template(tmp_path, "pair.json", VALID)
        preset = load_template(str(path))
        assert preset.name == "Pair"
        assert preset.bodies[1].velocity_y == 1.0
        assert preset.time_scale is None

    def test_name_defaults_to_file_name(self, tmp_path):
        write_template(tmp_path, "unnamed.json", {"bodies": VALID["bodies"]})
        assert load_template("unnamed", templates_dir=str(tmp_path)).name == "unnamed"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigError):
            load_template("nope", templates_dir=str(tmp_path))

    def test_malformed_json(self, tmp_path):
        write_template(tmp_path, "broken.json", "{not json")
        with pytest.raises(InvalidConfigError):
            load_template("broken", templates_dir=str(tmp_path))

    def test_top_level_must_be_object(self, tmp_path):
        write_template(tmp_path, "list.json", [1, 2, 3])
        with pytest.raises(InvalidConfigError):
            load_template("list", templates_dir=str(tmp_path))

    @pytest.mark.parametrize("data", [
        {"bodies": []},
        {"bodies": "two"},
        {"bodies": [1, 2]},
        {"bodies": [{"x": 0, "y": 0}, {"mass": 1}]},
        {"bodies": [{"mass": -1}, {"mass": 1}]},
        {"bodies": VALID["bodies"], "settings": {"warp_drive": True}},
        {"bodies": VALID["bodies"], "settings": {"gravitational_constant": 0}},
        {"bodies": VALID["bodies"], "settings": [1]},
        {"bodies": VALID["bodies"], "time_scale": -2},
        {"bodies": VALID["bodies"], "time_scale": "fast"},
        {"bodies": VALID["bodies"], "time_scale": "nan"},
        {"bodies": VALID["bodies"], "settings": {"min_distance": "1"}},
        {"bodies": VALID["bodies"], "settings": {"max_trail_points": 2.5}},
        {"bodies": VALID["bodies"] * 2},
    ])
    def test_rejects_invalid_content(self, data):
        with pytest.raises(InvalidConfigError):
            parse_template(data)

    def test_list_skips_bad_files(self, tmp_path, caplog):
        write_template(tmp_path, "good.json", VALID)
        write_template(tmp_path, "bad.json", "{")
        write_template(tmp_path, "notes.txt", "ignored")

        assert list_templates(str(tmp_path)) == [("good.json", "Pair")]
        assert "bad.json" in caplog.text

    def test_list_missing_directory(self, tmp_path):
        assert list_templates(str(tmp_path / "missing")) == []

    def test_string_setting_fails_as_config_error(self, tmp_path):
        data = dict(VALID, settings={"min_distance": "1"})
        write_template(tmp_path, "stringly.json", data)
        with pytest.raises(InvalidConfigError) as excinfo:
            load_template("stringly", templates_dir=str(tmp_path))
        assert "min_distance" in str(excinfo.value)
