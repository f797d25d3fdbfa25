"""
Tests for loading and validating the engine constants YAML.
"""
import pytest
import yaml

from src.pad_engine.constants import DEFAULT_CONSTANTS_PATH, EngineConstants, load_constants
from src.pad_engine.models import Finger, Hand


def _raw_defaults():
    with open(DEFAULT_CONSTANTS_PATH, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


class TestLoadConstants:
    """The shipped configuration loads into typed tables."""

    def test_default_file_loads(self, constants):
        assert constants.max_reach[Finger.PINKY] == pytest.approx(4.5)
        assert constants.finger_strength_weights[Finger.INDEX] == pytest.approx(1.0)
        assert constants.home_positions[Hand.LEFT] == (0.0, 1.0)
        assert constants.home_positions[Hand.RIGHT] == (0.0, 5.0)

    def test_thresholds_flattened(self, constants):
        assert (constants.easy_threshold, constants.medium_threshold, constants.hard_threshold) == (3.0, 10.0, 100.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_constants(tmp_path / "nope.yaml")

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "engine.yaml"
        cfg = _raw_defaults()
        cfg["drift_weight"] = 2.0
        path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
        assert load_constants(path).drift_weight == pytest.approx(2.0)


class TestValidation:
    """Bad configuration is rejected with ValueError."""

    def test_missing_key(self):
        cfg = _raw_defaults()
        del cfg["stretch_weight"]
        with pytest.raises(ValueError, match="stretch_weight"):
            EngineConstants.from_dict(cfg)

    def test_incomplete_finger_table(self):
        cfg = _raw_defaults()
        del cfg["max_reach"]["ring"]
        with pytest.raises(ValueError, match="ring"):
            EngineConstants.from_dict(cfg)

    def test_missing_home_position(self):
        cfg = _raw_defaults()
        del cfg["home_positions"]["left"]
        with pytest.raises(ValueError, match="left"):
            EngineConstants.from_dict(cfg)

    def test_descending_thresholds(self):
        cfg = _raw_defaults()
        cfg["difficulty_thresholds"] = {"easy": 10, "medium": 3, "hard": 100}
        with pytest.raises(ValueError, match="ascending"):
            EngineConstants.from_dict(cfg)

    def test_span_limits(self):
        cfg = _raw_defaults()
        cfg["max_span"] = cfg["ideal_span"]
        with pytest.raises(ValueError, match="max_span"):
            EngineConstants.from_dict(cfg)

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            EngineConstants.from_dict(["not", "a", "mapping"])


class TestWithOverrides:
    def test_returns_modified_copy(self, constants):
        tweaked = constants.with_overrides(bounce_weight=0.0)
        assert tweaked.bounce_weight == 0.0
        assert constants.bounce_weight == pytest.approx(2.0)
