"""
Tests for Config validation.

These tests verify that invalid configurations are caught early
rather than causing cryptic errors mid-simulation.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


class TestConfigValidation:
    """Test Config.__post_init__ validation."""

    def test_valid_config_passes(self):
        """Default config should validate without errors."""
        cfg = Config()
        assert cfg is not None

    def test_invalid_learning_rate_zero(self):
        """LEARNING_RATE=0 should fail validation."""
        cfg = Config()
        cfg.LEARNING_RATE = 0
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_speed_divisor(self):
        """SPEED_DIVISOR=0 would divide by zero in every feature vector."""
        cfg = Config()
        cfg.SPEED_DIVISOR = 0
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_dead_zones_must_leave_room(self):
        """Dead zones covering the whole court should fail validation."""
        cfg = Config()
        cfg.DEAD_ZONE = 300
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_save_interval(self):
        """SAVE_EVERY_UNIQUE=0 should fail validation."""
        cfg = Config()
        cfg.SAVE_EVERY_UNIQUE = 0
        with pytest.raises(AssertionError):
            cfg.__post_init__()

    def test_invalid_bat_step(self):
        """A bat that cannot move should fail validation."""
        cfg = Config()
        cfg.BAT_MAX_STEP = 0
        with pytest.raises(AssertionError):
            cfg.__post_init__()


class TestConfigDefaults:
    """Test the values the simulation relies on."""

    def test_court_size(self):
        cfg = Config()
        assert (cfg.SCREEN_WIDTH, cfg.SCREEN_HEIGHT) == (800, 600)

    def test_dead_zone_limit(self):
        """Bat centre limit is dead zone plus half the bat."""
        cfg = Config()
        assert cfg.DEAD_ZONE_LIMIT == 8 + 16

    def test_network_topology(self):
        cfg = Config()
        assert cfg.LAYERS == [4, 4, 4, 4, 4, 1]

    def test_training_limits(self):
        cfg = Config()
        assert cfg.TRAINING_CAP == 1000
        assert cfg.CRAM_PASSES == 100
        assert cfg.SAVE_EVERY_UNIQUE == 100

    def test_layers_not_shared_between_instances(self):
        """Mutable defaults should not leak between configs."""
        a = Config()
        b = Config()
        a.LAYERS.append(1)
        assert b.LAYERS == [4, 4, 4, 4, 4, 1]

    def test_model_path_under_model_dir(self):
        cfg = Config(MODEL_DIR='somewhere')
        assert cfg.MODEL_PATH == os.path.join('somewhere', 'pong_net.pth')
