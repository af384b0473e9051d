# src/scanner/adapters/realtime_database_sink.py
from __future__ import annotations

import logging

import httpx

from scanner.core.metrics import EXTERNAL_API_COUNT, EXTERNAL_API_DURATION
from scanner.domain.models import LogEntry
from scanner.domain.ports import LogSinkPort, LogWriteError

logger = logging.getLogger(__name__)

_SOURCE = "realtime_database"


class RealtimeDatabaseLogSink(LogSinkPort):
    """
    Schreibt den zuletzt eingereichten Code unter einen festen Schlüssel
    der Realtime Database (REST: PUT {url}/{key}.json).
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        database_url: str,
        key: str = "codigo",
        timeout: float = 10.0,
    ) -> None:
        self._client = http_client
        self._url = f"{database_url.rstrip('/')}/{key}.json"
        self._timeout = timeout

    async def write(self, entry: LogEntry) -> None:
        try:
            with EXTERNAL_API_DURATION.labels(source=_SOURCE).time():
                response = await self._client.put(
                    self._url, json=entry.model_dump(), timeout=self._timeout
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise LogWriteError(_SOURCE, str(e)) from e
        except httpx.RequestError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise LogWriteError(_SOURCE, f"Connection error: {e}") from e

        EXTERNAL_API_COUNT.labels(source=_SOURCE, status="ok").inc()
        logger.debug("Wrote log entry to %s", self._url)
