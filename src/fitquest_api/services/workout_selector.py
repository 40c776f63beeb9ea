"""Pick a workout template for a fitness level and apply body-part exclusions."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from fitquest_api.config import settings
from fitquest_api.errors import require_non_negative
from fitquest_api.models import UserProfile, WorkoutTemplate
from fitquest_api.services.catalog import Catalog, load_catalog
from fitquest_api.services.exclusion_filter import filter_template

logger = logging.getLogger(__name__)


def instantiate_template(
    catalog: Catalog,
    fitness_level: str,
    duration_minutes: Union[int, float],
    now: Optional[datetime] = None,
) -> WorkoutTemplate:
    """Clone the canonical template for ``fitness_level`` into a fresh workout."""
    base = catalog.template_for(fitness_level)
    return WorkoutTemplate(
        id=str(uuid.uuid4()),
        name=base.name,
        description=base.description,
        target_muscle_groups=list(base.target_muscle_groups),
        duration_minutes=duration_minutes,
        difficulty=base.level,
        exercises=list(base.exercises),
        created_at=now or datetime.now(timezone.utc),
    )


def select_workout(
    fitness_level: Optional[str],
    excluded_body_parts: Optional[Iterable[str]] = None,
    duration_minutes: Optional[Union[int, float]] = None,
    catalog: Optional[Catalog] = None,
    now: Optional[datetime] = None,
) -> WorkoutTemplate:
    """
    Build a workout for ``fitness_level``.

    Args:
        fitness_level: beginner, intermediate or advanced
        excluded_body_parts: body parts the workout should avoid
        duration_minutes: overrides the template duration (default from settings)
        catalog: catalog to select from (defaults to the packaged one)
        now: creation timestamp (defaults to the current UTC time)

    Returns:
        A new WorkoutTemplate with a fresh id

    Raises:
        InvalidLevel: if ``fitness_level`` is not a known level
        InvalidArgument: if ``duration_minutes`` is negative
    """
    catalog = catalog or load_catalog()
    if duration_minutes is None:
        duration_minutes = settings.DEFAULT_DURATION_MINUTES
    require_non_negative("duration", duration_minutes)

    workout = instantiate_template(catalog, fitness_level, duration_minutes, now=now)

    excluded = sorted(set(excluded_body_parts or ()))
    if excluded:
        workout = filter_template(workout, excluded, catalog=catalog)

    logger.info(
        "Selected '%s' (%s, %s min, %d exercises, excluded=%s)",
        workout.name, workout.difficulty, workout.duration_minutes,
        len(workout.exercises), excluded or "none",
    )
    return workout


def select_workout_for_profile(
    profile: UserProfile,
    excluded_body_parts: Optional[Iterable[str]] = None,
    duration_minutes: Optional[Union[int, float]] = None,
    catalog: Optional[Catalog] = None,
) -> WorkoutTemplate:
    """Convenience wrapper taking the level from a user profile."""
    return select_workout(
        profile.fitness_level,
        excluded_body_parts=excluded_body_parts,
        duration_minutes=duration_minutes,
        catalog=catalog,
    )
