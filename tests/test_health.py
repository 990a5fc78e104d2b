from storefront.core.health import HealthStatus, ServiceHealth

def test_root_and_info(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/info").json()["endpoints"]["health"] == "/health"

def test_health_endpoints(client):
    for endpoint in ["/health", "/health/live", "/health/ready", "/health/startup"]:
        resp = client.get(endpoint)
        assert resp.status_code in [200, 503]
        assert "status" in resp.json()

def test_readiness_reports_database(client):
    checks = client.get("/health/ready").json()["checks"]
    assert checks["database:connectivity"]["status"] == "pass"

def test_startup_warns_without_migrations(client):
    checks = client.get("/health/startup").json()["checks"]
    assert checks["database:migrations"]["status"] == "warn"

def test_metrics_endpoint(client):
    data = client.get("/metrics").json()
    assert data["service"] == "storefront"
    assert "uptime_seconds" in data

def test_overall_status():
    calc = ServiceHealth.calculate_overall_status
    assert calc({}) == HealthStatus.PASS
    assert calc({"a": {"status": "pass"}, "b": {"status": "warn"}}) == HealthStatus.WARN
    assert calc({"a": {"status": "warn"}, "b": {"status": "fail"}}) == HealthStatus.FAIL

def test_production_requires_jwt_secret():
    from storefront.infrastructure.db import engine
    health = ServiceHealth("svc", engine, jwt_secret="change-me", environment="production")
    assert health.perform_startup_checks()["config:environment"]["status"] == "fail"
