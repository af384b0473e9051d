import pytest
from prometheus_client import REGISTRY

from scanner.domain.models import IdleState, NotFoundState
from scanner.repositories.memory import InMemoryCatalogRepository, InMemoryLogRepository
from scanner.services.catalog_resolver import CatalogResolver
from scanner.services.log_sink_client import LogSinkClient
from scanner.services.session_registry import SessionRegistry


def _transitions(state: str) -> float:
    return REGISTRY.get_sample_value("session_transitions_total", {"state": state}) or 0.0


@pytest.fixture
def registry(catalog: InMemoryCatalogRepository) -> SessionRegistry:
    return SessionRegistry(
        resolver=CatalogResolver(catalog),
        log_sink=LogSinkClient(InMemoryLogRepository()),
    )


def test_same_operator_gets_same_session(registry: SessionRegistry) -> None:
    assert registry.get("operator_alice") is registry.get("operator_alice")


@pytest.mark.asyncio  # type: ignore[misc]
async def test_sessions_are_isolated_per_operator(registry: SessionRegistry) -> None:
    await registry.get("operator_alice").submit("ZZZ")

    assert registry.get("operator_alice").snapshot == NotFoundState(code="ZZZ")
    assert registry.get("operator_bob").snapshot == IdleState()


@pytest.mark.asyncio  # type: ignore[misc]
async def test_transitions_are_counted(registry: SessionRegistry) -> None:
    loading_before = _transitions("loading")
    not_found_before = _transitions("not_found")

    await registry.get("operator_alice").submit("ZZZ")

    assert _transitions("loading") == loading_before + 1
    assert _transitions("not_found") == not_found_before + 1
