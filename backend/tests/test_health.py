"""Tests for health and root endpoints."""


def test_health_check(client):
    """Test basic health check."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "unimarket-backend"}


def test_health_check_head(client):
    """Test that load balancers can probe with HEAD."""
    assert client.head("/health").status_code == 200


def test_detailed_health_checks_database(client):
    """Test detailed health with rate limiting (and Redis) disabled."""
    response = client.get("/health/detailed")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"] == {"api": "healthy", "database": "healthy"}


def test_trace_id_header(client):
    """Test that responses carry a trace id, reusing the caller's if given."""
    generated = client.get("/health")
    echoed = client.get("/health", headers={"X-Trace-ID": "trace-abc"})

    assert generated.headers["X-Trace-ID"]
    assert echoed.headers["X-Trace-ID"] == "trace-abc"


def test_root_lists_endpoints(client):
    """Test the service banner."""
    body = client.get("/").json()

    assert body["service"] == "UniMarket"
    assert "conversations" in body["endpoints"]
