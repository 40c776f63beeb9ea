"""Data models for workout generation and progression."""
from datetime import datetime
from typing import List, Optional, Literal, Union

from pydantic import BaseModel, Field

FitnessLevel = Literal['beginner', 'intermediate', 'advanced']
AchievementType = Literal['streak', 'workouts', 'challenge', 'level']
ChallengeType = Literal['individual', 'group']
ChallengeGoalType = Literal['workouts', 'minutes', 'steps']

FITNESS_LEVELS = ('beginner', 'intermediate', 'advanced')


class Exercise(BaseModel):
    """A single exercise inside a workout template."""
    name: str
    sets: int = Field(ge=0)
    reps: int = Field(ge=0)
    rest_time_seconds: int = Field(default=60, ge=0, alias="restTime")
    description: str = ""

    class Config:
        frozen = True
        populate_by_name = True


class WorkoutTemplate(BaseModel):
    """A concrete workout produced for one generation request."""
    id: str
    name: str
    description: str = ""
    # Set semantics; kept as a list so the JSON order is stable
    target_muscle_groups: List[str] = Field(default_factory=list, alias="targetMuscleGroups")
    duration_minutes: Union[int, float] = Field(default=60, ge=0, alias="duration")
    difficulty: FitnessLevel
    exercises: List[Exercise] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")

    class Config:
        populate_by_name = True

    def exercise_names(self) -> List[str]:
        return [exercise.name for exercise in self.exercises]


class UserProfile(BaseModel):
    """Read-only view of the user supplied by the identity provider."""
    id: str
    name: str = ""
    fitness_level: FitnessLevel = Field(alias="fitnessLevel")
    goals: List[str] = Field(default_factory=list)
    preferred_workouts: List[str] = Field(default_factory=list, alias="preferredWorkouts")

    class Config:
        populate_by_name = True
        extra = "ignore"


class Achievement(BaseModel):
    """
    An unlockable achievement.

    ``progress`` and ``unlocked_at`` are derived from the user's stats on every
    recompute. ``unlocked_at`` only ever goes from None to a timestamp.
    """
    id: str
    title: str
    description: str = ""
    type: AchievementType
    requirement: int = Field(ge=0)
    progress: int = 0
    unlocked_at: Optional[datetime] = Field(default=None, alias="unlockedAt")

    class Config:
        populate_by_name = True

    @property
    def is_unlocked(self) -> bool:
        return self.unlocked_at is not None


class GameStats(BaseModel):
    """Per-user progression counters."""
    level: int = 1
    xp: int = 0
    xp_to_next_level: int = Field(default=100, alias="xpToNextLevel")
    streak: int = 0
    total_workouts: int = Field(default=0, alias="totalWorkouts")
    minutes_exercised: Union[int, float] = Field(default=0, alias="minutesExercised")
    # Unlocked achievements only
    achievements: List[Achievement] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class ChallengeGoal(BaseModel):
    type: ChallengeGoalType
    target: int = Field(ge=0)


class ChallengeParticipant(BaseModel):
    user_id: str = Field(alias="userId")
    name: str = ""
    progress: float = 0

    class Config:
        populate_by_name = True


class ChallengeRewards(BaseModel):
    xp: int = 0
    badge: Optional[str] = None


class Challenge(BaseModel):
    """A time-boxed individual or group goal."""
    id: str
    title: str
    description: str = ""
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    type: ChallengeType = "individual"
    goal: ChallengeGoal
    participants: List[ChallengeParticipant] = Field(default_factory=list)
    rewards: ChallengeRewards = Field(default_factory=ChallengeRewards)

    class Config:
        populate_by_name = True

    def participant(self, user_id: str) -> Optional[ChallengeParticipant]:
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None


class WorkoutFeedback(BaseModel):
    """How the user rated a completed workout."""
    difficulty: int = Field(ge=1, le=5)
    enjoyment: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class WorkoutHistoryEntry(BaseModel):
    """One completed workout in the user's history."""
    id: str
    workout_id: str = Field(alias="workoutId")
    user_id: str = Field(alias="userId")
    date: datetime
    completed: bool = True
    duration_minutes: Union[int, float] = Field(ge=0, alias="duration")
    feedback: Optional[WorkoutFeedback] = None

    class Config:
        populate_by_name = True


class WorkoutRequest(BaseModel):
    """
    Body of a workout generation request.

    ``userId`` and ``fitnessLevel`` are required by the endpoint but declared
    optional here so a missing value is reported as a 400 with an ``error``
    message rather than a generic validation failure.
    """
    user_id: Optional[str] = Field(default=None, alias="userId")
    fitness_level: Optional[str] = Field(default=None, alias="fitnessLevel")
    goals: Optional[List[str]] = None
    preferred_workouts: Optional[List[str]] = Field(default=None, alias="preferredWorkouts")
    duration: Optional[Union[int, float]] = None  # minutes, fractions allowed
    equipment: Optional[List[str]] = None  # accepted, not used for selection yet
    exclude_body_parts: Optional[List[str]] = Field(default=None, alias="excludeBodyParts")

    class Config:
        populate_by_name = True
        extra = "ignore"


class ErrorResponse(BaseModel):
    error: str
