"""Domain errors raised by the workout and progression services."""


class FitQuestError(Exception):
    """Base class for errors that are reported back to the caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(FitQuestError):
    """A required field is missing or a value is out of range."""


class InvalidLevel(InvalidArgument):
    """Fitness level is not one of beginner / intermediate / advanced."""

    def __init__(self, level):
        super().__init__(
            f"Invalid fitness level '{level}'. "
            "Expected one of: beginner, intermediate, advanced"
        )
        self.level = level


class ChallengeNotFound(FitQuestError):
    status_code = 404

    def __init__(self, challenge_id: str):
        super().__init__(f"Challenge '{challenge_id}' not found")
        self.challenge_id = challenge_id


class AlreadyJoined(FitQuestError):
    status_code = 409

    def __init__(self, challenge_id: str, user_id: str):
        super().__init__(f"User '{user_id}' already joined challenge '{challenge_id}'")
        self.challenge_id = challenge_id
        self.user_id = user_id


class NotJoined(FitQuestError):
    status_code = 409

    def __init__(self, challenge_id: str, user_id: str):
        super().__init__(f"User '{user_id}' is not a participant of challenge '{challenge_id}'")
        self.challenge_id = challenge_id
        self.user_id = user_id


def require_non_negative(name: str, value) -> None:
    """Raise InvalidArgument if ``value`` is negative."""
    if value is None or value < 0:
        raise InvalidArgument(f"{name} must be a non-negative number, got {value!r}")
