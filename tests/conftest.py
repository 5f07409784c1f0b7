"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and applies configuration
to all tests in the tests/ directory.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def config(tmp_path):
    """Configuration that keeps every file under the test's tmp_path."""
    return Config(
        TRAINING_DATA_PATH=str(tmp_path / 'data' / 'pong.txt'),
        MODEL_DIR=str(tmp_path / 'models'),
        LOG_DIR=str(tmp_path / 'logs'),
        STARTUP_TRAINING_PASSES=0,
        SEED=1234,
    )
