"""Integration tests for the health endpoint."""

from flask.testing import FlaskClient

from vnpit.backend.version import get_project_version


def test_health_endpoint_reports_status(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload == {
        "status": "ok",
        "version": get_project_version(),
        "supported_regimes": ["2025", "2026"],
        "default_regime": "2026",
    }
