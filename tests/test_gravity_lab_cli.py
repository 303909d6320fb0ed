"""Tests for the front-end's command-line handling (no window is opened)."""

import pytest

pytest.importorskip("pygame")

import gravity_lab  # noqa: E402
from gravsim.config import TWO_BODY_SETTINGS  # noqa: E402
from gravsim.controller import SimulationController  # noqa: E402
from gravsim.errors import InvalidConfigError  # noqa: E402
from gravsim.rotation import RotationSystem  # noqa: E402


class TestArguments:

    def test_defaults(self):
        args = gravity_lab.build_parser().parse_args([])
        assert args.mode == "three"
        assert args.template is None
        assert args.seed is None
        assert (args.width, args.height) == (1100, 800)
        assert args.log_level == "INFO"

    def test_options(self):
        args = gravity_lab.build_parser().parse_args(
            ["--mode", "figure8", "--seed", "7", "--width", "640", "--height", "480"])
        assert (args.mode, args.seed, args.width, args.height) == ("figure8", 7, 640, 480)

    def test_unknown_mode(self):
        with pytest.raises(SystemExit):
            gravity_lab.build_parser().parse_args(["--mode", "four"])


class TestMakeSimulation:

    def test_two_body(self):
        args = gravity_lab.build_parser().parse_args(["--mode", "two"])
        sim = gravity_lab.make_simulation(args)
        assert isinstance(sim, SimulationController)
        assert sim.body_count == 2
        assert sim.settings is TWO_BODY_SETTINGS
        assert sim.paused

    def test_rotation(self):
        args = gravity_lab.build_parser().parse_args(["--mode", "rotation", "--width", "600"])
        sim = gravity_lab.make_simulation(args)
        assert isinstance(sim, RotationSystem)
        assert sim.get_state().sun.position == (300.0, 400.0)

    def test_template(self):
        args = gravity_lab.build_parser().parse_args(["--template", "binary_star"])
        sim = gravity_lab.make_simulation(args)
        assert sim.body_count == 2
        assert sim.time_scale == 1.0
        assert sim.settings.max_step == 0.5

    def test_missing_template(self):
        args = gravity_lab.build_parser().parse_args(["--template", "no_such_scene"])
        with pytest.raises(InvalidConfigError):
            gravity_lab.make_simulation(args)

    def test_main_lists_templates(self, capsys, monkeypatch):
        monkeypatch.setattr(gravity_lab, "setup_logging", lambda *args, **kwargs: None)
        assert gravity_lab.main(["--list-templates"]) == 0
        out = capsys.readouterr().out
        assert "binary_star.json: Binary star" in out

    def test_main_reports_bad_template(self, monkeypatch):
        monkeypatch.setattr(gravity_lab, "setup_logging", lambda *args, **kwargs: None)
        assert gravity_lab.main(["--template", "no_such_scene"]) == 2

    def test_main_reports_string_setting(self, tmp_path, monkeypatch):
        monkeypatch.setattr(gravity_lab, "setup_logging", lambda *args, **kwargs: None)
        path = tmp_path / "stringly.json"
        path.write_text(
            '{"bodies": [{"mass": 10, "x": 0, "y": 0}, {"mass": 10, "x": 50, "y": 0}],'
            ' "settings": {"min_distance": "1"}}',
            encoding="utf-8")
        assert gravity_lab.main(["--template", str(path)]) == 2

    def test_clamp(self):
        assert gravity_lab.clamp(7.0, 0.1, 5.0) == 5.0
        assert gravity_lab.clamp(0.01, 0.1, 5.0) == 0.1
