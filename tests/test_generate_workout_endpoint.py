"""Tests for the /generate-workout endpoint."""
from datetime import datetime
from unittest.mock import patch

import pytest


class TestGenerateWorkout:
    """Successful generation."""

    def test_generate_beginner(self, api_client, sample_request):
        response = api_client.post("/generate-workout", json=sample_request)
        assert response.status_code == 200
        data = response.json()

        assert data["name"] == "Beginner Full Body Workout"
        assert data["difficulty"] == "beginner"
        assert data["duration"] == 45
        assert data["targetMuscleGroups"] == ["chest", "back", "legs", "core"]
        assert len(data["exercises"]) == 4
        assert data["exercises"][0] == {
            "name": "Push-ups",
            "sets": 3,
            "reps": 10,
            "restTime": 60,
            "description": "Keep your body straight and lower until your chest nearly touches the floor.",
        }
        datetime.fromisoformat(data["createdAt"].replace("Z", "+00:00"))
        assert data["id"]

    def test_default_duration(self, api_client):
        response = api_client.post(
            "/generate-workout", json={"userId": "u1", "fitnessLevel": "advanced"},
        )
        assert response.status_code == 200
        assert response.json()["duration"] == 60

    def test_exclusions(self, api_client):
        response = api_client.post(
            "/generate-workout",
            json={
                "userId": "u1",
                "fitnessLevel": "advanced",
                "excludeBodyParts": ["legs", "lower_back"],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert [e["name"] for e in data["exercises"]] == ["Burpees", "Mountain Climbers", "Jumping Jacks"]
        assert data["targetMuscleGroups"] == ["cardiovascular"]

    def test_fractional_duration(self, api_client, sample_request):
        response = api_client.post("/generate-workout", json={**sample_request, "duration": 30.5})
        assert response.status_code == 200
        assert response.json()["duration"] == 30.5

    def test_null_optional_fields(self, api_client):
        response = api_client.post(
            "/generate-workout",
            json={"userId": "u1", "fitnessLevel": "intermediate", "goals": None, "excludeBodyParts": None},
        )
        assert response.status_code == 200
        assert response.json()["difficulty"] == "intermediate"

    def test_fresh_id_per_request(self, api_client, sample_request):
        first = api_client.post("/generate-workout", json=sample_request).json()
        second = api_client.post("/generate-workout", json=sample_request).json()
        assert first["id"] != second["id"]

    def test_cors_header_on_success(self, api_client, sample_request):
        response = api_client.post("/generate-workout", json=sample_request)
        assert response.headers["access-control-allow-origin"] == "*"


class TestGenerateWorkoutErrors:
    """Bad input and internal failures."""

    @pytest.mark.parametrize("body", [
        {"fitnessLevel": "beginner"},
        {"userId": "u1"},
        {"userId": "", "fitnessLevel": "beginner"},
        {},
    ])
    def test_missing_required_fields(self, api_client, body):
        response = api_client.post("/generate-workout", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "userId and fitnessLevel are required"}

    def test_unknown_level(self, api_client):
        response = api_client.post(
            "/generate-workout", json={"userId": "u1", "fitnessLevel": "expert"},
        )
        assert response.status_code == 400
        assert "Invalid fitness level" in response.json()["error"]

    def test_negative_duration(self, api_client):
        response = api_client.post(
            "/generate-workout", json={"userId": "u1", "fitnessLevel": "beginner", "duration": -10},
        )
        assert response.status_code == 400
        assert "duration" in response.json()["error"]

    def test_malformed_json(self, api_client):
        response = api_client.post(
            "/generate-workout",
            content='{"userId": "u1", ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_wrong_field_type(self, api_client):
        response = api_client.post(
            "/generate-workout",
            json={"userId": "u1", "fitnessLevel": "beginner", "excludeBodyParts": "chest"},
        )
        assert response.status_code == 400
        assert "excludeBodyParts" in response.json()["error"]

    def test_unexpected_failure_is_generic_500(self, client, sample_request):
        with patch(
            "fitquest_api.api.routes.select_workout",
            side_effect=RuntimeError("catalog exploded"),
        ):
            response = client.post("/generate-workout", json=sample_request)
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate workout"}


class TestPreflightAndHealth:

    def test_options_preflight(self, api_client):
        response = api_client.options(
            "/generate-workout",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_preflight_with_extra_request_header(self, api_client):
        response = api_client.options(
            "/generate-workout",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type, x-request-id",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "x-request-id" in response.headers["access-control-allow-headers"].lower()

    def test_plain_options(self, api_client):
        response = api_client.options("/generate-workout")
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"

    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_version(self, api_client):
        response = api_client.get("/version")
        assert response.json()["service"] == "fitquest-api"
