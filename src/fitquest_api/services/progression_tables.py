"""Level thresholds, default achievements and sample challenges.

Loaded from ``data/progression.json`` once per process.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fitquest_api.models import Achievement, Challenge
from fitquest_api.services.catalog import DATA_DIR

logger = logging.getLogger(__name__)

PROGRESSION_PATH = DATA_DIR / "progression.json"


@dataclass(frozen=True)
class ProgressionTables:
    """Immutable progression configuration."""
    level_thresholds: Tuple[int, ...]
    overflow_xp_step: int
    achievements: Tuple[Dict[str, Any], ...]
    challenges: Tuple[Dict[str, Any], ...]


def validate_thresholds(thresholds: Sequence[int]) -> Tuple[int, ...]:
    """Check a level table: starts at 0, strictly ascending, at least two levels."""
    thresholds = list(thresholds)
    if len(thresholds) < 2:
        raise ValueError("At least two level thresholds are required")
    if thresholds[0] != 0:
        raise ValueError("The first level threshold must be 0")
    if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
        raise ValueError("Level thresholds must be strictly ascending")
    return tuple(thresholds)


@lru_cache(maxsize=None)
def load_progression_tables(path: Path = PROGRESSION_PATH) -> ProgressionTables:
    """Read and validate the progression tables."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    tables = ProgressionTables(
        level_thresholds=validate_thresholds(raw["levelThresholds"]),
        overflow_xp_step=int(raw.get("overflowXpStep", 1000)),
        achievements=tuple(raw.get("achievements", [])),
        challenges=tuple(raw.get("challenges", [])),
    )
    logger.info(
        "Loaded progression tables from %s (%d levels, %d achievements, %d challenges)",
        path, len(tables.level_thresholds), len(tables.achievements), len(tables.challenges),
    )
    return tables


def default_achievements(tables: Optional[ProgressionTables] = None) -> List[Achievement]:
    """Fresh, locked copies of the configured achievements."""
    tables = tables or load_progression_tables()
    return [Achievement(**entry) for entry in tables.achievements]


def load_sample_challenges(
    tables: Optional[ProgressionTables] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Challenge]:
    """Configured challenges keyed by id, with dates anchored at ``now``."""
    tables = tables or load_progression_tables()
    now = now or datetime.now(timezone.utc)
    challenges: Dict[str, Challenge] = {}
    for entry in tables.challenges:
        data = dict(entry)
        start = now + timedelta(days=data.pop("startOffsetDays", 0))
        duration = data.pop("durationDays", None)
        data.setdefault("startDate", start)
        if duration is not None:
            data.setdefault("endDate", start + timedelta(days=duration))
        challenge = Challenge(**data)
        challenges[challenge.id] = challenge
    return challenges
