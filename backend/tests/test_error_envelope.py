from unittest.mock import patch

from sqlalchemy.exc import OperationalError


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    error = response.get_json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["requestId"] == response.headers["X-Request-ID"]


def test_wrong_method_uses_envelope(client):
    response = client.delete("/api/transactions?month=3")

    assert response.status_code == 405
    assert response.get_json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_request_id_echoed(client):
    response = client.get("/api/health", headers={"X-Request-ID": "dash-123"})

    assert response.headers["X-Request-ID"] == "dash-123"


def test_request_id_generated_when_missing(client):
    response = client.get("/api/health")

    assert len(response.headers["X-Request-ID"]) == 36


def test_oversized_request_id_replaced(client):
    response = client.get("/api/health", headers={"X-Request-ID": "x" * 500})

    assert response.headers["X-Request-ID"] != "x" * 500


def test_validation_error_details(client):
    response = client.get("/api/statistics?month=13")

    error = response.get_json()["error"]
    assert error["field"] == "month"
    assert error["details"] == {"receivedValue": "13"}


def test_cors_headers_present(client):
    response = client.get("/api/health", headers={"Origin": "https://dashboard.example.com"})

    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "X-Request-ID" in response.headers["Access-Control-Expose-Headers"]


def test_health(client, seeded):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "healthy", "records": len(seeded)}


def test_health_unavailable(app, client):
    from models.database import db

    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with app.app_context():
        with patch.object(db.session, "execute", side_effect=error):
            response = client.get("/api/health")

    assert response.status_code == 503
    assert response.get_json()["error"]["code"] == "SERVICE_UNAVAILABLE"
