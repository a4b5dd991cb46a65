"""Tests for configuration loading, validation and logging setup."""

import json
import logging
import logging.handlers

import pytest

from utils import animation_params, load_config, setup_logging, validate_animation_params


class TestLoadConfig:
    """Test reading config.json."""

    def test_loads_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"animation": {"num_points": 10}}))
        assert load_config(str(path)) == {"animation": {"num_points": 10}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.json"))

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_config(str(path))


class TestAnimationParams:
    """Test defaults and validation of the animation section."""

    def test_defaults_fill_missing_keys(self):
        params = animation_params({})
        assert params["num_points"] == 100000
        assert params["point_width"] == 2
        assert params["stage_width"] == 500
        assert params["stage_height"] == 500
        assert params["duration"] == 1500
        assert params["start_spread"] == 0.05
        assert params["end_spread"] == 0.15

    def test_overrides(self):
        params = animation_params({"animation": {"num_points": 12, "duration": 0}})
        assert params["num_points"] == 12
        assert params["duration"] == 0

    @pytest.mark.parametrize(
        "override",
        [
            {"num_points": 0},
            {"point_width": 0},
            {"stage_width": -1},
            {"stage_height": 0},
            {"duration": -5},
            {"end_spread": -0.1},
        ],
    )
    def test_rejects_invalid_values(self, override):
        with pytest.raises(ValueError):
            animation_params({"animation": override})

    def test_error_lists_every_problem(self):
        params = animation_params({})
        params.update({"num_points": 0, "duration": -1})
        with pytest.raises(ValueError, match="num_points.*duration"):
            validate_animation_params(params)


class TestSetupLogging:
    """Test the root logger configuration."""

    def test_creates_console_and_rotating_file_handlers(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "animation.log"
        setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert log_file.parent.is_dir()
        kinds = {type(handler) for handler in root.handlers}
        assert logging.StreamHandler in kinds
        assert logging.handlers.RotatingFileHandler in kinds
