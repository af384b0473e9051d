# tests/conftest.py
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

import scanner.api.dependencies as _deps
from scanner.api.dependencies import get_catalog, get_log_sink
from scanner.core.config import Settings, get_settings
from scanner.core.rate_limit import limiter
from scanner.domain.models import ProductDetails
from scanner.main import app
from scanner.repositories.memory import InMemoryCatalogRepository, InMemoryLogRepository


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        api_keys={"test-key-alice": "operator_alice", "test-key-bob": "operator_bob"},
        catalog_backend="memory",
        log_sink_backend="memory",
        catalog_timeout_seconds=1.0,
    )


@pytest.fixture
def widget() -> ProductDetails:
    return ProductDetails(name="Widget", category="Tools", code="ABC123", price=500, quantity=10)


@pytest.fixture
def catalog(widget: ProductDetails) -> InMemoryCatalogRepository:
    repo = InMemoryCatalogRepository()
    repo.save(widget)
    return repo


@pytest.fixture
def log_sink() -> InMemoryLogRepository:
    return InMemoryLogRepository()


@pytest.fixture
def client(
    test_settings: Settings,
    catalog: InMemoryCatalogRepository,
    log_sink: InMemoryLogRepository,
) -> Generator[TestClient, None, None]:
    # Jeder Test startet mit frischen Sessions und eigener Log-Senke
    _deps.reset_singletons()
    limiter.reset()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_log_sink] = lambda: log_sink
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        _deps.reset_singletons()


@pytest.fixture
def alice_headers() -> dict:
    return {"X-API-Key": "test-key-alice"}


@pytest.fixture
def bob_headers() -> dict:
    return {"X-API-Key": "test-key-bob"}
