"""Active workout and workout history for one user session."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from fitquest_api.config import settings
from fitquest_api.errors import InvalidArgument, require_non_negative
from fitquest_api.models import WorkoutFeedback, WorkoutHistoryEntry, WorkoutTemplate
from fitquest_api.services.progression_engine import ProgressionEngine, ProgressionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkoutSession:
    """The workout in progress (if any) and completed workouts, newest first."""
    current_workout: Optional[WorkoutTemplate] = None
    history: Tuple[WorkoutHistoryEntry, ...] = field(default_factory=tuple)


def xp_for_workout(duration_minutes: Union[int, float], base_xp: Optional[int] = None) -> int:
    """XP earned for a completed workout: a flat base plus one per whole minute."""
    if base_xp is None:
        base_xp = settings.XP_PER_WORKOUT
    return base_xp + int(duration_minutes)


def start_workout(session: WorkoutSession, workout: WorkoutTemplate) -> WorkoutSession:
    logger.debug("Starting workout %s (%s)", workout.id, workout.name)
    return replace(session, current_workout=workout)


def cancel_workout(session: WorkoutSession) -> WorkoutSession:
    return replace(session, current_workout=None)


def complete_workout(
    session: WorkoutSession,
    progression: ProgressionState,
    user_id: str,
    feedback: Optional[WorkoutFeedback] = None,
    duration_minutes: Optional[Union[int, float]] = None,
    engine: Optional[ProgressionEngine] = None,
    now: Optional[datetime] = None,
) -> Tuple[WorkoutSession, ProgressionState]:
    """
    Record the active workout as completed and apply it to progression.

    The workout count, minutes and XP are applied in one step and the returned
    ProgressionState carries every achievement unlocked along the way in
    ``newly_unlocked``.

    Args:
        session: session holding the active workout
        progression: the user's current progression state
        user_id: id of the user completing the workout
        feedback: optional difficulty / enjoyment ratings
        duration_minutes: actual duration; defaults to the planned one
        engine: progression engine (default thresholds if omitted)
        now: completion time (defaults to the current UTC time)

    Returns:
        (next session, next progression state)

    Raises:
        InvalidArgument: no workout is in progress or the duration is negative
    """
    workout = session.current_workout
    if workout is None:
        raise InvalidArgument("No workout in progress")
    if duration_minutes is None:
        duration_minutes = workout.duration_minutes
    require_non_negative("duration", duration_minutes)

    now = now or datetime.now(timezone.utc)
    engine = engine or ProgressionEngine()

    entry = WorkoutHistoryEntry(
        id=f"h{uuid.uuid4().hex}",
        workout_id=workout.id,
        user_id=user_id,
        date=now,
        completed=True,
        duration_minutes=duration_minutes,
        feedback=feedback,
    )

    before = progression
    progression = engine.increment_workouts(progression, 1, now=now)
    unlocked = list(progression.newly_unlocked)
    progression = engine.add_minutes(progression, duration_minutes)
    progression = engine.add_xp(progression, xp_for_workout(duration_minutes), now=now)
    unlocked.extend(progression.newly_unlocked)
    progression = replace(progression, newly_unlocked=tuple(unlocked))

    logger.info(
        "User %s completed '%s' (%s min): workouts %d -> %d, xp %d -> %d",
        user_id, workout.name, duration_minutes,
        before.stats.total_workouts, progression.stats.total_workouts,
        before.stats.xp, progression.stats.xp,
    )
    next_session = WorkoutSession(current_workout=None, history=(entry,) + session.history)
    return next_session, progression
