"""API routes for workout generation."""

import json
import logging
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from fitquest_api.errors import FitQuestError
from fitquest_api.models import WorkoutRequest
from fitquest_api.services.workout_selector import select_workout

logger = logging.getLogger(__name__)

SERVICE_NAME = "fitquest-api"
BUILD_TIMESTAMP = datetime.now().isoformat()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

router = APIRouter()


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid field '{location}': {first.get('msg', 'invalid value')}"


# ---------------------------------------------------------------------------
# Version / health
# ---------------------------------------------------------------------------


@router.get("/version")
async def get_version():
    """Get API version and build information."""
    return JSONResponse(
        {
            "service": SERVICE_NAME,
            "build_timestamp": BUILD_TIMESTAMP,
        }
    )


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# Workout generation
# ---------------------------------------------------------------------------


@router.options("/generate-workout")
async def generate_workout_preflight():
    """Answer CORS preflight requests with an empty success."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/generate-workout")
async def generate_workout(request: Request) -> JSONResponse:
    """
    Generate a workout for a user's fitness level.

    ## Request Body
    - **userId**: required
    - **fitnessLevel**: required, one of beginner / intermediate / advanced
    - **duration**: minutes, defaults to 60
    - **excludeBodyParts**: body parts to avoid (e.g. "chest", "lower_back")
    - **goals**, **preferredWorkouts**, **equipment**: accepted, not used for selection

    ## Response
    The generated workout with camelCase keys, or ``{"error": ...}`` with
    status 400 for bad input and 500 for unexpected failures.
    """
    try:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return error_response("Request body must be valid JSON", 400)
        if not isinstance(body, dict):
            return error_response("Request body must be a JSON object", 400)

        try:
            payload = WorkoutRequest.model_validate(body)
        except ValidationError as e:
            return error_response(_validation_message(e), 400)

        if not payload.user_id or not payload.fitness_level:
            return error_response("userId and fitnessLevel are required", 400)

        workout = select_workout(
            payload.fitness_level,
            excluded_body_parts=payload.exclude_body_parts,
            duration_minutes=payload.duration,
        )
        logger.info("Generated workout %s for user %s", workout.id, payload.user_id)
        return JSONResponse(
            workout.model_dump(mode="json", by_alias=True),
            headers=CORS_HEADERS,
        )
    except FitQuestError as e:
        logger.warning("Rejected workout request: %s", e.message)
        return error_response(e.message, e.status_code)
    except Exception:
        logger.exception("Error generating workout")
        return error_response("Failed to generate workout", 500)
