"""
Test fixtures for fitquest-api.

Provides the FastAPI test client and small, deterministic catalogs and
progression states so engine tests do not depend on the packaged data.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

# Repo root: .../fitquest-api
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import fitquest_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from fitquest_api.config import settings
from fitquest_api.main import app
from fitquest_api.models import Achievement
from fitquest_api.services.catalog import load_catalog
from fitquest_api.services.progression_engine import ProgressionEngine


FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
THRESHOLDS = [0, 100, 250, 450, 700, 1000, 1400, 1900, 2500, 3200]


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def api_client() -> TestClient:
    """Shared FastAPI TestClient for fitquest-api."""
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    """Per-test client that returns 500 responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)


# ---------------------------------------------------------------------------
# Catalog / Progression Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def catalog():
    """The packaged workout catalog."""
    return load_catalog()


@pytest.fixture
def engine() -> ProgressionEngine:
    """Progression engine with the standard threshold table."""
    return ProgressionEngine(thresholds=THRESHOLDS, overflow_xp_step=1000)


@pytest.fixture
def achievements():
    """The standard achievement set, all locked."""
    return [
        Achievement(id="a1", title="First Steps", type="workouts", requirement=1),
        Achievement(id="a2", title="Consistency Champion", type="streak", requirement=7),
        Achievement(id="a3", title="Challenge Accepted", type="challenge", requirement=1),
        Achievement(id="a4", title="Level 5 Fitness", type="level", requirement=5),
        Achievement(id="a5", title="Workout Warrior", type="workouts", requirement=10),
    ]


@pytest.fixture
def fresh_state(engine, achievements):
    """Progression state for a brand-new user."""
    return engine.new_state(achievements, now=FIXED_NOW)


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_request() -> Dict[str, Any]:
    """Standard workout generation request body."""
    return {
        "userId": "test-user-123",
        "fitnessLevel": "beginner",
        "goals": ["Build muscle"],
        "preferredWorkouts": ["HIIT"],
        "duration": 45,
        "equipment": ["dumbbells"],
    }


@pytest.fixture
def sample_challenges_dict() -> Dict[str, Any]:
    """Raw challenge data keyed by id."""
    return {
        "c1": {
            "id": "c1",
            "title": "7-Day Consistency",
            "type": "individual",
            "goal": {"type": "workouts", "target": 7},
            "participants": [],
            "rewards": {"xp": 200, "badge": "consistency-master"},
        },
        "c3": {
            "id": "c3",
            "title": "Team 1000",
            "type": "group",
            "goal": {"type": "minutes", "target": 1000},
            "participants": [
                {"userId": "u1", "name": "Alex Kim", "progress": 120},
                {"userId": "u2", "name": "Taylor Smith", "progress": 95},
            ],
            "rewards": {"xp": 500, "badge": "team-player"},
        },
    }


@pytest.fixture
def challenges(sample_challenges_dict):
    from fitquest_api.models import Challenge
    return {cid: Challenge(**data) for cid, data in sample_challenges_dict.items()}


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def pinned_settings(monkeypatch):
    """Pin the shared settings object so a developer's environment cannot leak in.

    ``settings`` is built once at import time, so environment variables set
    here would be ignored; patch the attributes the services read instead.
    Tests may patch further attributes on the returned object.
    """
    monkeypatch.setattr(settings, "DEFAULT_DURATION_MINUTES", 60)
    monkeypatch.setattr(settings, "MIN_EXERCISE_COUNT", 3)
    monkeypatch.setattr(settings, "XP_PER_WORKOUT", 50)
    return settings
