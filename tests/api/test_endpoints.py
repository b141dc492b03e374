"""
API endpoint tests
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_db, get_sync_service
from enrichment.service import SyncAlreadyRunning
from schemas.keywords import RunSummary
from core.exceptions import StoreUnavailableError


@pytest.fixture
def sync_service():
    service = MagicMock()
    service.last_summary = None
    service.run_once = AsyncMock()
    return service


@pytest.fixture
def db_session():
    session = AsyncMock()
    session.execute = AsyncMock(side_effect=[
        MagicMock(),
        MagicMock(scalar=MagicMock(return_value=3)),
        MagicMock(scalar=MagicMock(return_value=10)),
    ])
    return session


@pytest.fixture
def client(sync_service, db_session):
    """Create test client with service and database overrides"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sync_service] = lambda: sync_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def finished_summary(**counters) -> RunSummary:
    summary = RunSummary(**counters)
    return summary.finish()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["sync"] == "/sync/keywords"
    assert "X-Request-ID" in response.headers
    assert "X-API-Latency-ms" in response.headers


def test_sync_returns_run_summary(client, sync_service):
    sync_service.run_once.return_value = finished_summary(
        candidates_found=450, batches_processed=3, records_updated=440, records_skipped=10
    )

    response = client.post("/sync/keywords")

    assert response.status_code == 200
    data = response.json()
    assert data["candidates_found"] == 450
    assert data["batches_processed"] == 3
    assert data["records_updated"] == 440
    assert data["records_skipped"] == 10
    assert data["status"] == "partial_success"


def test_sync_store_unavailable_returns_503(client, sync_service):
    sync_service.run_once.side_effect = StoreUnavailableError(
        "Failed to select keyword candidates", context={"operation": "SELECT"}
    )

    response = client.post("/sync/keywords", headers={"X-Request-ID": "req_test"})

    assert response.status_code == 503
    detail = response.json()["detail"]
    assert detail["error_type"] == "StoreUnavailableError"
    assert detail["request_id"] == "req_test"


def test_sync_already_running_returns_409(client, sync_service):
    sync_service.run_once.side_effect = SyncAlreadyRunning("A keyword sync is already running")

    response = client.post("/sync/keywords")

    assert response.status_code == 409


def test_last_sync(client, sync_service):
    assert client.get("/sync/keywords/last").status_code == 404

    sync_service.last_summary = finished_summary()
    response = client.get("/sync/keywords/last")

    assert response.status_code == 200
    assert response.json()["status"] == "no_candidates"


def test_health_reports_counts(client, sync_service):
    sync_service.last_summary = finished_summary(
        candidates_found=5, batches_processed=1, batches_failed=1, records_skipped=5
    )

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["database_connected"] is True
    assert data["pending_publications"] == 3
    assert data["enriched_publications"] == 10
    assert data["status"] == "degraded"
    assert data["last_run"]["batches_failed"] == 1


def test_health_database_down(client, db_session):
    db_session.execute = AsyncMock(side_effect=ConnectionRefusedError("refused"))

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["database_connected"] is False
    assert data["status"] == "unhealthy"
    assert data["pending_publications"] is None
