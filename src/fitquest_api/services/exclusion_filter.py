"""Remove exercises that stress excluded body parts from a workout template."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from fitquest_api.config import settings
from fitquest_api.models import Exercise, WorkoutTemplate
from fitquest_api.services.catalog import BodyPartMap, Catalog, load_catalog

logger = logging.getLogger(__name__)


def is_excluded(exercise_name: str, excluded_body_parts: Iterable[str], body_part_map: BodyPartMap) -> bool:
    """True if any excluded part's exercise set contains ``exercise_name``.

    Parts that are not in the map exclude nothing.
    """
    return any(
        exercise_name in body_part_map.get(part, frozenset())
        for part in excluded_body_parts
    )


def remaining_muscle_groups(
    exercise_names: Iterable[str],
    excluded_body_parts: Iterable[str],
    body_part_map: BodyPartMap,
) -> List[str]:
    """Body parts still worked by ``exercise_names``, minus the excluded ones.

    Returned in body-part map order.
    """
    names = set(exercise_names)
    excluded = set(excluded_body_parts)
    return [
        part
        for part, part_exercises in body_part_map.items()
        if part not in excluded and not names.isdisjoint(part_exercises)
    ]


def filter_template(
    template: WorkoutTemplate,
    excluded_body_parts: Iterable[str],
    catalog: Optional[Catalog] = None,
    min_exercise_count: Optional[int] = None,
) -> WorkoutTemplate:
    """
    Return a copy of ``template`` without exercises for the excluded parts.

    Steps:
    1. Drop every exercise whose name is mapped to any excluded body part,
       keeping the order of the survivors.
    2. If fewer than ``min_exercise_count`` exercises remain, append the
       catalog's fallback exercise until the floor is reached (a single
       fallback whenever at least ``min_exercise_count - 1`` survive).
    3. Recompute ``target_muscle_groups`` from the survivors; fall back to the
       catalog's fallback muscle group when nothing maps.

    An empty exclusion set returns the template unchanged. Any non-empty set
    recomputes the muscle groups, even if none of its parts are mapped.
    """
    excluded = list(excluded_body_parts)
    if not excluded:
        return template

    catalog = catalog or load_catalog()
    if min_exercise_count is None:
        min_exercise_count = settings.MIN_EXERCISE_COUNT
    body_part_map = catalog.body_part_map

    unknown = [part for part in excluded if part not in body_part_map]
    if unknown:
        logger.debug("Ignoring unmapped body parts: %s", unknown)

    exercises: List[Exercise] = []
    for exercise in template.exercises:
        if is_excluded(exercise.name, excluded, body_part_map):
            logger.debug("Excluding '%s' from '%s'", exercise.name, template.name)
            continue
        exercises.append(exercise)

    if len(exercises) < min_exercise_count:
        logger.debug(
            "Only %d exercises left after exclusions, padding with '%s'",
            len(exercises), catalog.fallback_exercise.name,
        )
        # One fallback in the usual case; repeated only when nearly everything was excluded
        while len(exercises) < min_exercise_count:
            exercises.append(catalog.fallback_exercise)

    muscle_groups = remaining_muscle_groups(
        (exercise.name for exercise in exercises), excluded, body_part_map
    )
    if not muscle_groups:
        muscle_groups = [catalog.fallback_muscle_group]

    return template.model_copy(
        update={"exercises": exercises, "target_muscle_groups": muscle_groups}
    )
