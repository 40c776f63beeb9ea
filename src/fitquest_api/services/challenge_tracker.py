"""Challenge membership and caller-reported progress.

Functions take a mapping of challenge id to Challenge and return a new mapping;
the input is never modified. Participant progress is whatever the caller
reports (workouts, minutes, steps from a device...) and is not derived from
the progression engine.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence

from fitquest_api.errors import (
    AlreadyJoined,
    ChallengeNotFound,
    NotJoined,
    require_non_negative,
)
from fitquest_api.models import Achievement, Challenge, ChallengeParticipant

logger = logging.getLogger(__name__)

Challenges = Mapping[str, Challenge]


def _get(challenges: Challenges, challenge_id: str) -> Challenge:
    try:
        return challenges[challenge_id]
    except KeyError:
        raise ChallengeNotFound(challenge_id) from None


def _with(challenges: Challenges, challenge: Challenge) -> Dict[str, Challenge]:
    updated = dict(challenges)
    updated[challenge.id] = challenge
    return updated


def join(challenges: Challenges, challenge_id: str, user_id: str, name: str = "") -> Dict[str, Challenge]:
    """Add ``user_id`` to a challenge with zero progress.

    Raises:
        ChallengeNotFound: unknown challenge id
        AlreadyJoined: the user is already a participant
    """
    challenge = _get(challenges, challenge_id)
    if challenge.participant(user_id) is not None:
        raise AlreadyJoined(challenge_id, user_id)

    participants = list(challenge.participants)
    participants.append(ChallengeParticipant(user_id=user_id, name=name, progress=0))
    logger.info("User %s joined challenge %s", user_id, challenge_id)
    return _with(challenges, challenge.model_copy(update={"participants": participants}))


def leave(challenges: Challenges, challenge_id: str, user_id: str) -> Dict[str, Challenge]:
    """Remove ``user_id`` from a challenge. Leaving a challenge you are not in is a no-op."""
    challenge = _get(challenges, challenge_id)
    participants = [p for p in challenge.participants if p.user_id != user_id]
    if len(participants) == len(challenge.participants):
        return dict(challenges)
    logger.info("User %s left challenge %s", user_id, challenge_id)
    return _with(challenges, challenge.model_copy(update={"participants": participants}))


def update_progress(
    challenges: Challenges,
    challenge_id: str,
    user_id: str,
    progress: float,
) -> Dict[str, Challenge]:
    """Replace the user's progress on a challenge.

    Raises:
        ChallengeNotFound: unknown challenge id
        NotJoined: the user is not a participant
        InvalidArgument: negative progress
    """
    challenge = _get(challenges, challenge_id)
    require_non_negative("progress", progress)
    if challenge.participant(user_id) is None:
        raise NotJoined(challenge_id, user_id)

    participants = [
        p.model_copy(update={"progress": progress}) if p.user_id == user_id else p
        for p in challenge.participants
    ]
    logger.debug("Challenge %s progress for %s: %s", challenge_id, user_id, progress)
    return _with(challenges, challenge.model_copy(update={"participants": participants}))


def user_challenges(challenges: Challenges, user_id: str) -> List[Challenge]:
    """Challenges ``user_id`` currently participates in."""
    return [c for c in challenges.values() if c.participant(user_id) is not None]


def is_completed(challenge: Challenge, user_id: str) -> bool:
    """Whether the goal is met for ``user_id``.

    Individual challenges look at the user's own progress; group challenges
    at the sum over all participants. Non-participants never complete.
    """
    participant = challenge.participant(user_id)
    if participant is None:
        return False
    if challenge.type == "group":
        total = sum(p.progress for p in challenge.participants)
    else:
        total = participant.progress
    return total >= challenge.goal.target


def completed_challenges(challenges: Challenges, user_id: str) -> List[Challenge]:
    return [c for c in user_challenges(challenges, user_id) if is_completed(c, user_id)]


def apply_challenge_completions(
    achievements: Sequence[Achievement],
    challenges: Challenges,
    user_id: str,
) -> List[Achievement]:
    """Set the progress of locked ``challenge`` achievements to the completed count.

    The next achievement recompute unlocks any whose requirement is now met.
    """
    completed = len(completed_challenges(challenges, user_id))
    return [
        a.model_copy(update={"progress": completed})
        if a.type == "challenge" and not a.is_unlocked
        else a
        for a in achievements
    ]
