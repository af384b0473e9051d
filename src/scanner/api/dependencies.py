# src/scanner/api/dependencies.py
from functools import lru_cache
from typing import Annotated

import httpx
from fastapi import Depends, Security

from scanner.adapters.firestore_catalog import FirestoreCatalogAdapter
from scanner.adapters.realtime_database_sink import RealtimeDatabaseLogSink
from scanner.core.config import Settings, get_settings
from scanner.core.security import get_operator_id
from scanner.domain.ports import CatalogPort, LogSinkPort
from scanner.repositories.memory import InMemoryCatalogRepository, InMemoryLogRepository
from scanner.repositories.sql_catalog_repository import SQLCatalogRepository
from scanner.repositories.sql_log_repository import SQLLogRepository
from scanner.services.catalog_resolver import CatalogResolver
from scanner.services.log_sink_client import LogSinkClient
from scanner.services.session_controller import ScanSessionController
from scanner.services.session_registry import SessionRegistry


# Shared HTTP Client (Connection Pooling)
@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": "ScannerSession/1.0"},
        follow_redirects=True,
    )


# Singleton Catalog (Initialisiert beim ersten Zugriff)
_catalog: CatalogPort | None = None


async def get_catalog(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> CatalogPort:
    global _catalog
    if _catalog is None:
        if settings.catalog_backend == "sql":
            repo = SQLCatalogRepository(database_url=settings.database_url)
            await repo.initialize()
            _catalog = repo
        elif settings.catalog_backend == "memory":
            _catalog = InMemoryCatalogRepository()
        else:
            _catalog = FirestoreCatalogAdapter(
                http_client=client,
                project_id=settings.firestore_project_id,
                database=settings.firestore_database,
                collection=settings.catalog_collection,
                timeout=settings.http_timeout_seconds,
            )
    return _catalog


# Singleton Log Sink
_log_sink: LogSinkPort | None = None


async def get_log_sink(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> LogSinkPort:
    global _log_sink
    if _log_sink is None:
        if settings.log_sink_backend == "sql":
            repo = SQLLogRepository(database_url=settings.database_url, key=settings.log_sink_key)
            await repo.initialize()
            _log_sink = repo
        elif settings.log_sink_backend == "memory":
            _log_sink = InMemoryLogRepository()
        else:
            _log_sink = RealtimeDatabaseLogSink(
                http_client=client,
                database_url=settings.realtime_database_url,
                key=settings.log_sink_key,
                timeout=settings.http_timeout_seconds,
            )
    return _log_sink


def get_catalog_resolver(
    catalog: CatalogPort = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> CatalogResolver:
    return CatalogResolver(catalog=catalog, timeout_seconds=settings.catalog_timeout_seconds)


# Singleton Log Sink Client (hält die laufenden Fire-and-forget Tasks)
_log_sink_client: LogSinkClient | None = None


def get_log_sink_client(
    sink: LogSinkPort = Depends(get_log_sink),
) -> LogSinkClient:
    global _log_sink_client
    if _log_sink_client is None:
        _log_sink_client = LogSinkClient(sink=sink)
    return _log_sink_client


# Singleton Session Registry
_session_registry: SessionRegistry | None = None


def get_session_registry(
    resolver: CatalogResolver = Depends(get_catalog_resolver),
    log_sink: LogSinkClient = Depends(get_log_sink_client),
) -> SessionRegistry:
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry(resolver=resolver, log_sink=log_sink)
    return _session_registry


def get_session_controller(
    operator_id: str = Security(get_operator_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> ScanSessionController:
    return registry.get(operator_id)


def reset_singletons() -> None:
    """Setzt alle Singletons zurück (Tests, Neustart)."""
    global _catalog, _log_sink, _log_sink_client, _session_registry
    _catalog = None
    _log_sink = None
    _log_sink_client = None
    _session_registry = None


async def shutdown() -> None:
    if _log_sink_client is not None:
        await _log_sink_client.drain()
    await get_http_client().aclose()
    get_http_client.cache_clear()


SessionControllerDep = Annotated[ScanSessionController, Depends(get_session_controller)]
