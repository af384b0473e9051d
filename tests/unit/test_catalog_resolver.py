import asyncio
from unittest.mock import AsyncMock

import pytest
from prometheus_client import REGISTRY

from scanner.domain.models import ProductDetails
from scanner.domain.ports import CatalogPort, CatalogQueryError
from scanner.services.catalog_resolver import CatalogResolver

_WIDGET_RECORD = {
    "codigo": "ABC123",
    "nombre": "Widget",
    "categoria": "Tools",
    "precio": 500,
    "cantidad": 10,
}


def _lookups(outcome: str) -> float:
    return REGISTRY.get_sample_value("catalog_lookups_total", {"outcome": outcome}) or 0.0


@pytest.fixture
def catalog() -> AsyncMock:
    return AsyncMock(spec=CatalogPort)


@pytest.mark.asyncio  # type: ignore[misc]
async def test_resolve_maps_first_record(catalog: AsyncMock) -> None:
    catalog.find_by_code.return_value = [_WIDGET_RECORD, {**_WIDGET_RECORD, "nombre": "Second"}]

    details = await CatalogResolver(catalog).resolve("ABC123")

    assert details == ProductDetails(
        name="Widget", category="Tools", code="ABC123", price=500, quantity=10
    )
    catalog.find_by_code.assert_awaited_once_with("ABC123", limit=1)


@pytest.mark.asyncio  # type: ignore[misc]
async def test_resolve_no_records_returns_none(catalog: AsyncMock) -> None:
    catalog.find_by_code.return_value = []
    not_found_before = _lookups("not_found")

    assert await CatalogResolver(catalog).resolve("ZZZ") is None
    assert _lookups("not_found") == not_found_before + 1


@pytest.mark.asyncio  # type: ignore[misc]
async def test_query_failure_returns_none(
    catalog: AsyncMock, caplog: pytest.LogCaptureFixture
) -> None:
    catalog.find_by_code.side_effect = CatalogQueryError("firestore", "503 Service Unavailable")
    errors_before = _lookups("error")

    assert await CatalogResolver(catalog).resolve("ABC123") is None
    assert "503 Service Unavailable" in caplog.text
    assert _lookups("error") == errors_before + 1


@pytest.mark.asyncio  # type: ignore[misc]
async def test_timeout_returns_none(catalog: AsyncMock) -> None:
    async def _hang(code: str, limit: int = 1) -> list:
        await asyncio.sleep(10)
        return []

    catalog.find_by_code.side_effect = _hang

    assert await CatalogResolver(catalog, timeout_seconds=0.01).resolve("ABC123") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_malformed_record_returns_none(catalog: AsyncMock) -> None:
    catalog.find_by_code.return_value = [{"codigo": "ABC123", "precio": "not-a-number"}]

    assert await CatalogResolver(catalog).resolve("ABC123") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_fractional_price_still_resolves(catalog: AsyncMock) -> None:
    catalog.find_by_code.return_value = [{**_WIDGET_RECORD, "precio": 499.5}]

    details = await CatalogResolver(catalog).resolve("ABC123")

    assert details is not None
    assert details.price == 499


@pytest.mark.asyncio  # type: ignore[misc]
async def test_malformed_record_logs_rejected_field(
    catalog: AsyncMock, caplog: pytest.LogCaptureFixture
) -> None:
    catalog.find_by_code.return_value = [{**_WIDGET_RECORD, "cantidad": -3}]

    assert await CatalogResolver(catalog).resolve("ABC123") is None
    assert "rejected fields" in caplog.text
    assert "cantidad" in caplog.text or "quantity" in caplog.text


@pytest.mark.asyncio  # type: ignore[misc]
async def test_unexpected_adapter_error_returns_none(catalog: AsyncMock) -> None:
    catalog.find_by_code.side_effect = RuntimeError("boom")

    assert await CatalogResolver(catalog).resolve("ABC123") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_not_found_and_failure_are_indistinguishable(catalog: AsyncMock) -> None:
    resolver = CatalogResolver(catalog)

    catalog.find_by_code.return_value = []
    empty = await resolver.resolve("ABC123")

    catalog.find_by_code.side_effect = CatalogQueryError("firestore", "timeout")
    failed = await resolver.resolve("ABC123")

    assert empty is None and failed is None
