"""Health probes: liveness always up, readiness follows the database."""

import studyhub.infrastructure.database as db_module


async def test_liveness(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503


async def test_readiness_when_database_fails(client, db_manager, monkeypatch):
    async def unhealthy():
        return False

    monkeypatch.setattr(db_manager, "health_check", unhealthy)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["checks"]["database"] == "unavailable"
