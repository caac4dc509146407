from fastapi.testclient import TestClient

from evalservice.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_db():
    response = client.get("/health/db")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "db": "ok"}


def test_openapi_contract_basics():
    spec = app.openapi()

    assert spec["openapi"].startswith("3.")
    assert spec["info"]["title"] == "Evaluation Service API"

    paths = spec.get("paths", {})
    required = [
        "/health",
        "/api/v1/evaluation-policies",
        "/api/v1/evaluation-policies/by-subject/{subject_id}",
        "/api/v1/evaluation-systems/by-course/{course_id}",
        "/api/v1/evaluation-items/sync/{group_id}",
        "/api/v1/evaluation-items/by-group/{group_id}",
        "/api/v1/subjects/{subject_id}/evaluation-policy",
        "/api/v1/courses/{course_id}/evaluation-system",
    ]

    missing = [path for path in required if path not in paths]
    assert not missing, f"Missing OpenAPI paths: {missing}"


def test_unknown_route_is_404():
    response = client.get("/api/v1/nope")
    assert response.status_code == 404
