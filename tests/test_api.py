"""Tests for the HTTP layer: routes, error shapes, CORS and rate limiting."""

from conftest import OSCE_ANSWER, scenario_text
from scenario_generation.errors import UpstreamError

GENERATE_URL = "/api/scenarios/generate"

VALID_BODY = {"topic": "Chest pain", "count": 1, "difficulty": "basic", "format": "long"}


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "API is running..."


def test_health(client):
    data = client.get("/api/health").json()

    assert data["status"] == "healthy"
    assert data["project"] == "MedScena Scenario API"


def test_generate_success(client, fake_generator):
    response = client.post(GENERATE_URL, json={**VALID_BODY, "language": "Spanish"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert len(data["scenarios"]) == 1
    scenario = data["scenarios"][0]
    assert scenario["id"] == "1"
    assert scenario["options"] == []
    assert scenario["markingCriteria"] == []
    assert data["metadata"]["language"] == "Spanish"
    assert data["metadata"]["generated_count"] == 1
    assert "Language: Spanish" in fake_generator.prompts[0]


def test_generate_defaults_format_and_language(client):
    body = {"topic": "Chest pain", "count": 1, "difficulty": "basic"}

    data = client.post(GENERATE_URL, json=body).json()

    assert data["metadata"]["format"] == "long"
    assert data["metadata"]["language"] == "English"


def test_generate_osce(client, fake_generator):
    fake_generator.text = scenario_text(1, answer=OSCE_ANSWER)

    data = client.post(GENERATE_URL, json={**VALID_BODY, "format": "osce"}).json()

    assert data["scenarios"][0]["markingCriteria"][0] == "Checks airway"


def test_missing_fields(client, fake_generator):
    for missing in ("topic", "count", "difficulty"):
        body = {k: v for k, v in VALID_BODY.items() if k != missing}
        response = client.post(GENERATE_URL, json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields", "kind": "input_error"}

    assert fake_generator.prompts == []


def test_zero_count_and_blank_topic_are_missing(client):
    assert client.post(GENERATE_URL, json={**VALID_BODY, "count": 0}).status_code == 400
    assert client.post(GENERATE_URL, json={**VALID_BODY, "topic": "  "}).status_code == 400


def test_unknown_difficulty(client):
    response = client.post(GENERATE_URL, json={**VALID_BODY, "difficulty": "expert"})

    assert response.status_code == 400
    data = response.json()
    assert data["kind"] == "input_error"
    assert data["error"] == "Unsupported difficulty: expert"
    assert "basic, intermediate, advanced" in data["details"]


def test_unknown_format(client):
    response = client.post(GENERATE_URL, json={**VALID_BODY, "format": "essay"})

    assert response.status_code == 400
    assert response.json()["error"] == "Unsupported format: essay"


def test_count_limits(client):
    assert client.post(GENERATE_URL, json={**VALID_BODY, "count": -2}).status_code == 400
    assert client.post(GENERATE_URL, json={**VALID_BODY, "count": 6}).status_code == 400


def test_non_integer_count(client):
    response = client.post(GENERATE_URL, json={**VALID_BODY, "count": "three"})

    assert response.status_code == 400
    assert response.json()["kind"] == "input_error"


def test_invalid_json(client):
    response = client.post(
        GENERATE_URL,
        content='{"topic": "Chest pain",',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON syntax"


def test_upstream_error(client, fake_generator):
    fake_generator.error = UpstreamError("model overloaded")

    response = client.post(GENERATE_URL, json=VALID_BODY)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to generate scenarios",
        "kind": "upstream_error",
        "details": "model overloaded",
    }


def test_all_invalid(client, fake_generator):
    fake_generator.text = scenario_text(1, answer="Too short.")

    response = client.post(GENERATE_URL, json=VALID_BODY)

    assert response.status_code == 500
    data = response.json()
    assert data["kind"] == "all_invalid"
    assert data["error"] == "No valid scenarios could be generated or parsed from the AI response."
    assert "Missing or too short answer section" in data["details"]
    assert "scenarios" not in data


def test_extraction_empty(client, fake_generator):
    fake_generator.text = "Nothing useful here."

    response = client.post(GENERATE_URL, json=VALID_BODY)

    assert response.status_code == 500
    assert response.json()["kind"] == "extraction_empty"


def test_unexpected_error_is_reported(client):
    class BrokenPipeline:
        async def run(self, request):
            raise RuntimeError("unexpected")

    client.app.state.scenario_pipeline = BrokenPipeline()

    response = client.post(GENERATE_URL, json=VALID_BODY)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to generate scenarios",
        "kind": "internal_error",
        "details": "unexpected",
    }


def test_allowed_origin_gets_cors_headers(client):
    for origin in ("http://localhost:5173", "https://medscena.example.com"):
        response = client.get("/", headers={"Origin": origin})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == origin


def test_unknown_origin_is_blocked(client):
    response = client.post(GENERATE_URL, json=VALID_BODY, headers={"Origin": "https://evil.example.com"})

    assert response.status_code == 403
    assert response.json() == {
        "error": "CORS policy violation",
        "kind": "cors_violation",
        "origin": "https://evil.example.com",
    }


def test_rate_limit(client):
    for _ in range(3):
        assert client.post(GENERATE_URL, json=VALID_BODY).status_code == 200

    response = client.post(GENERATE_URL, json=VALID_BODY)

    assert response.status_code == 429
    assert response.json()["kind"] == "rate_limited"


def test_rate_limit_only_applies_to_generate(client):
    for _ in range(5):
        assert client.get("/api/health").status_code == 200
