"""Derive achievement progress and unlocks from a user's stats."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from fitquest_api.models import Achievement, GameStats

logger = logging.getLogger(__name__)


def progress_for(achievement: Achievement, stats: GameStats) -> int:
    """Current progress value for an achievement type.

    ``challenge`` achievements are fed by the challenge tracker, so their
    stored progress is returned as-is.
    """
    if achievement.type == "workouts":
        return stats.total_workouts
    if achievement.type == "streak":
        return stats.streak
    if achievement.type == "level":
        return stats.level
    return achievement.progress


def recompute(
    stats: GameStats,
    achievements: Sequence[Achievement],
    now: Optional[datetime] = None,
) -> List[Achievement]:
    """
    Return the achievement list updated for ``stats``.

    Unlocked achievements are returned untouched. Every other achievement gets
    its progress refreshed and is unlocked at ``now`` once progress reaches the
    requirement. The input list is not modified.
    """
    now = now or datetime.now(timezone.utc)
    updated: List[Achievement] = []
    for achievement in achievements:
        if achievement.is_unlocked:
            updated.append(achievement)
            continue

        progress = progress_for(achievement, stats)
        unlocked_at = now if progress >= achievement.requirement else None
        if unlocked_at is not None:
            logger.info("Achievement unlocked: %s (%s)", achievement.id, achievement.title)

        if progress == achievement.progress and unlocked_at is None:
            updated.append(achievement)
        else:
            updated.append(
                achievement.model_copy(update={"progress": progress, "unlocked_at": unlocked_at})
            )
    return updated


def newly_unlocked(
    previous: Sequence[Achievement],
    current: Sequence[Achievement],
) -> List[Achievement]:
    """Achievements unlocked in ``current`` that were locked in ``previous``."""
    already = {achievement.id for achievement in previous if achievement.is_unlocked}
    return [
        achievement
        for achievement in current
        if achievement.is_unlocked and achievement.id not in already
    ]


def unlocked(achievements: Sequence[Achievement]) -> List[Achievement]:
    return [achievement for achievement in achievements if achievement.is_unlocked]
