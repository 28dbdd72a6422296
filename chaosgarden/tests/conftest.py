"""Shared test fixtures for Chaos Garden simulation tests."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
import yaml

from chaosgarden.src.events import BufferedEventLogger
from chaosgarden.tests.factories import FIXED_NOW, RecordingApplicationLogger, build_environment


# ── Config fixtures ─────────────────────────────────────────────


@pytest.fixture
def default_config():
    """Load the real default.yaml config."""
    config_path = Path(__file__).parent.parent / "config" / "default.yaml"
    with open(config_path) as f:
        return yaml.safe_load(f)


@pytest.fixture
def test_config(default_config):
    """Small config for fast tests: 20 ticks, snapshots every 5, no disasters."""
    cfg = default_config.copy()
    cfg["simulation"] = {
        **cfg["simulation"],
        "ticks": 20,
        "snapshot_every": 5,
        "seed": 42,
        "tick_delay_ms": 0,
    }
    cfg["population"] = {
        **cfg["population"],
        "total": 16,
        "fungi": 2,
    }
    cfg["disasters"] = {
        **cfg["disasters"],
        "enabled": False,
    }
    return cfg


# ── Simulation fixtures ─────────────────────────────────────────


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def event_logger():
    """In-memory event logger with a frozen clock."""
    return BufferedEventLogger(clock=lambda: FIXED_NOW)


@pytest.fixture
def app_logger():
    return RecordingApplicationLogger()


@pytest.fixture
def environment():
    """Midday, 20°C, moisture 0.5, clear skies."""
    return build_environment()
