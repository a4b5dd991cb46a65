"""End-to-end runs of the entry point with the headless backend."""

import json

import pytest

from main import main


def write_config(tmp_path, **overrides):
    config = {
        "animation": {
            "num_points": 500,
            "point_width": 2,
            "stage_width": 200,
            "stage_height": 200,
            "duration": 100,
            "seed": 1,
        },
        "run_control": {"max_frames": 30, "log_throttle_frames": 10, "profile": False},
        "visualization": {"headless": True, "fps": 30},
        "logging": {"level": "INFO", "log_file": str(tmp_path / "logs" / "run.log")},
    }
    for section, values in overrides.items():
        config[section].update(values)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config))
    return str(path)


class TestMain:
    """Test the full startup, run and shutdown sequence."""

    def test_headless_run(self, tmp_path, restore_root_logger):
        assert main(write_config(tmp_path)) == 0
        log = (tmp_path / "logs" / "run.log").read_text()
        assert "Cycle 1 complete" in log
        assert "Shutting Down" in log

    def test_headless_run_with_profile(self, tmp_path, restore_root_logger):
        path = write_config(tmp_path, run_control={"max_frames": 5, "profile": True})
        assert main(path) == 0
        assert "Performance Profile" in (tmp_path / "logs" / "run.log").read_text()

    def test_invalid_animation_config(self, tmp_path, restore_root_logger):
        path = write_config(tmp_path, animation={"num_points": 0})
        assert main(path) == 1

    def test_missing_config(self, tmp_path, capsys):
        assert main(str(tmp_path / "nope.json")) == 1
        assert "FATAL" in capsys.readouterr().out
