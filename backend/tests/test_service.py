def test_root_reports_status(client):
    body = client.get("/").json()
    assert body["status"] == "healthy"
    assert body["app"] == "VideoHub API"


def test_health_without_redis(client):
    # Startup never runs under the test client, so Redis is not connected
    body = client.get("/health").json()

    assert body["database"] == "connected"
    assert body["redis"] == "disconnected"
    assert body["status"] == "healthy"


def test_unknown_route_uses_failure_envelope(client):
    response = client.get("/api/v1/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False
