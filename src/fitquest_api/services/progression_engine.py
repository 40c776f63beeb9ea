"""
Progression engine.

Turns completed activity into XP, levels, streaks and workout counts. Every
operation takes the user's current ProgressionState and returns the next one;
stats and achievements are always updated together so a caller never sees
one without the other.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, Union

from fitquest_api.errors import require_non_negative
from fitquest_api.models import Achievement, GameStats
from fitquest_api.services import achievement_tracker
from fitquest_api.services.progression_tables import (
    default_achievements,
    load_progression_tables,
    validate_thresholds,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressionState:
    """A user's stats and full achievement list at one point in time."""
    stats: GameStats
    achievements: Tuple[Achievement, ...]
    # Achievements unlocked by the operation that produced this state
    newly_unlocked: Tuple[Achievement, ...] = field(default_factory=tuple)


def calculate_level(xp: int, thresholds: Sequence[int]) -> int:
    """Level for a cumulative XP total.

    Levels start at 1; each threshold after the first that ``xp`` reaches adds
    one level, so with ``[0, 100, 250, ...]`` 0 XP is level 1, 100 is level 2
    and 250 is level 3.
    """
    level = 1
    while level < len(thresholds) and xp >= thresholds[level]:
        level += 1
    return level


class ProgressionEngine:
    """Applies activity to a ProgressionState using a level threshold table."""

    def __init__(
        self,
        thresholds: Optional[Sequence[int]] = None,
        overflow_xp_step: Optional[int] = None,
    ) -> None:
        if thresholds is None or overflow_xp_step is None:
            tables = load_progression_tables()
            thresholds = thresholds if thresholds is not None else tables.level_thresholds
            overflow_xp_step = overflow_xp_step if overflow_xp_step is not None else tables.overflow_xp_step
        if overflow_xp_step <= 0:
            raise ValueError("overflow_xp_step must be positive")
        self.thresholds: Tuple[int, ...] = validate_thresholds(thresholds)
        self.overflow_xp_step = overflow_xp_step

    def new_state(
        self,
        achievements: Optional[Sequence[Achievement]] = None,
        now: Optional[datetime] = None,
    ) -> ProgressionState:
        """Starting state for a new user: level 1, no XP, nothing unlocked."""
        stats = GameStats(
            level=1,
            xp=0,
            xp_to_next_level=self.xp_to_next_level(1, 0),
        )
        if achievements is None:
            achievements = default_achievements()
        return self._commit(stats, achievements, now=now)

    def xp_to_next_level(self, level: int, previous: int) -> int:
        """Threshold of the next level, or ``previous`` plus the overflow step past the table."""
        if level < len(self.thresholds):
            return self.thresholds[level]
        return previous + self.overflow_xp_step

    def add_xp(self, state: ProgressionState, amount: int, now: Optional[datetime] = None) -> ProgressionState:
        require_non_negative("amount", amount)
        stats = state.stats
        xp = stats.xp + amount
        level = calculate_level(xp, self.thresholds)
        if level > stats.level:
            logger.info("Level up: %d -> %d (xp=%d)", stats.level, level, xp)
        stats = stats.model_copy(update={
            "xp": xp,
            "level": level,
            "xp_to_next_level": self.xp_to_next_level(level, stats.xp_to_next_level),
        })
        return self._commit(stats, state.achievements, now=now)

    def increment_streak(self, state: ProgressionState, now: Optional[datetime] = None) -> ProgressionState:
        stats = state.stats.model_copy(update={"streak": state.stats.streak + 1})
        return self._commit(stats, state.achievements, now=now)

    def reset_streak(self, state: ProgressionState) -> ProgressionState:
        """Zero the streak. Streak achievements that are unlocked stay unlocked."""
        stats = state.stats.model_copy(update={"streak": 0})
        return replace(state, stats=stats, newly_unlocked=())

    def increment_workouts(
        self,
        state: ProgressionState,
        count: int = 1,
        now: Optional[datetime] = None,
    ) -> ProgressionState:
        require_non_negative("count", count)
        stats = state.stats.model_copy(update={"total_workouts": state.stats.total_workouts + count})
        return self._commit(stats, state.achievements, now=now)

    def add_minutes(self, state: ProgressionState, minutes: Union[int, float]) -> ProgressionState:
        # No achievement keys on minutes, so there is nothing to recompute
        require_non_negative("minutes", minutes)
        stats = state.stats.model_copy(update={"minutes_exercised": state.stats.minutes_exercised + minutes})
        return replace(state, stats=stats, newly_unlocked=())

    def refresh(
        self,
        state: ProgressionState,
        achievements: Optional[Sequence[Achievement]] = None,
        now: Optional[datetime] = None,
    ) -> ProgressionState:
        """Recompute achievements against the current stats without changing them.

        Pass ``achievements`` to recompute from an externally updated list, e.g.
        after the challenge tracker has set challenge progress.
        """
        if achievements is None:
            achievements = state.achievements
        return self._commit(state.stats, achievements, now=now)

    def _commit(
        self,
        stats: GameStats,
        previous: Sequence[Achievement],
        now: Optional[datetime] = None,
    ) -> ProgressionState:
        achievements = achievement_tracker.recompute(stats, previous, now=now)
        unlocked_now: List[Achievement] = achievement_tracker.newly_unlocked(previous, achievements)
        if unlocked_now:
            known = {a.id for a in stats.achievements}
            stats = stats.model_copy(update={
                "achievements": list(stats.achievements) + [a for a in unlocked_now if a.id not in known],
            })
        return ProgressionState(
            stats=stats,
            achievements=tuple(achievements),
            newly_unlocked=tuple(unlocked_now),
        )
