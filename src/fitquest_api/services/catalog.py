"""Static workout catalog and body-part membership map.

The catalog is configuration data shipped as ``data/catalog.json``. It is read
once per process and handed out as immutable objects.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from fitquest_api.errors import InvalidLevel
from fitquest_api.models import FITNESS_LEVELS, Exercise

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
CATALOG_PATH = DATA_DIR / "catalog.json"

BodyPartMap = Mapping[str, FrozenSet[str]]


@dataclass(frozen=True)
class BaseTemplate:
    """Canonical template for one fitness level, without per-request fields."""
    level: str
    name: str
    description: str
    target_muscle_groups: Tuple[str, ...]
    exercises: Tuple[Exercise, ...]


@dataclass(frozen=True)
class Catalog:
    """Workout templates keyed by fitness level plus the body-part map."""
    templates: Mapping[str, BaseTemplate]
    body_part_map: BodyPartMap
    fallback_exercise: Exercise
    fallback_muscle_group: str = "cardiovascular"

    def template_for(self, fitness_level: Optional[str]) -> BaseTemplate:
        """Return the base template for a level, raising InvalidLevel otherwise."""
        if fitness_level not in FITNESS_LEVELS or fitness_level not in self.templates:
            raise InvalidLevel(fitness_level)
        return self.templates[fitness_level]

    def exercises_for(self, body_part: str) -> FrozenSet[str]:
        """Exercise names stressing ``body_part``; empty for unknown parts."""
        return self.body_part_map.get(body_part, frozenset())


def _parse_template(level: str, raw: Dict[str, Any]) -> BaseTemplate:
    difficulty = raw.get("difficulty", level)
    if difficulty != level:
        raise ValueError(f"Template '{level}' declares difficulty '{difficulty}'")
    return BaseTemplate(
        level=level,
        name=raw["name"],
        description=raw.get("description", ""),
        target_muscle_groups=tuple(raw.get("targetMuscleGroups", [])),
        exercises=tuple(Exercise(**exercise) for exercise in raw.get("exercises", [])),
    )


def parse_catalog(raw: Dict[str, Any]) -> Catalog:
    """Build a Catalog from its JSON representation."""
    templates = {
        level: _parse_template(level, template)
        for level, template in raw.get("templates", {}).items()
    }
    missing = [level for level in FITNESS_LEVELS if level not in templates]
    if missing:
        raise ValueError(f"Catalog is missing templates for: {', '.join(missing)}")

    body_part_map = {
        part: frozenset(names)
        for part, names in raw.get("bodyPartExercises", {}).items()
    }

    return Catalog(
        templates=MappingProxyType(templates),
        body_part_map=MappingProxyType(body_part_map),
        fallback_exercise=Exercise(**raw["fallbackExercise"]),
        fallback_muscle_group=raw.get("fallbackMuscleGroup", "cardiovascular"),
    )


@lru_cache(maxsize=None)
def load_catalog(path: Path = CATALOG_PATH) -> Catalog:
    """Load the catalog from disk once per path."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    catalog = parse_catalog(raw)
    logger.info(
        "Loaded workout catalog from %s (%d templates, %d body parts)",
        path, len(catalog.templates), len(catalog.body_part_map),
    )
    return catalog
