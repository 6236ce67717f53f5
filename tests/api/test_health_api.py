async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Correlation-ID" in response.headers
    assert "X-Response-Time" in response.headers


async def test_correlation_id_is_echoed(client):
    response = await client.get("/", headers={"X-Correlation-ID": "trace-me"})

    assert response.headers["X-Correlation-ID"] == "trace-me"
    assert response.json()["service"] == "AI Ticket Assistant"


async def test_error_payload_shape(client):
    response = await client.get("/tickets", headers={"X-Correlation-ID": "err-1"})

    assert response.status_code == 401
    assert response.json() == {
        "error": "AuthenticationException",
        "message": "Authentication required",
        "details": {},
        "correlation_id": "err-1"
    }
