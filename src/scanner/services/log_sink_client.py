from __future__ import annotations

import asyncio
import logging

from scanner.core.metrics import LOG_WRITES
from scanner.domain.models import LogEntry
from scanner.domain.ports import LogSinkPort

logger = logging.getLogger(__name__)


class LogSinkClient:
    def __init__(self, sink: LogSinkPort) -> None:
        self._sink = sink
        self._pending: set[asyncio.Task[None]] = set()

    async def record(self, value: str) -> None:
        """Writes `value` with the current timestamp to the log sink (fire-and-forget)."""
        entry = LogEntry(value=value)

        # Fire and forget
        task = asyncio.create_task(self._perform_write(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wartet auf alle noch laufenden Schreibvorgänge."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _perform_write(self, entry: LogEntry) -> None:
        try:
            await self._sink.write(entry)
        except Exception:
            LOG_WRITES.labels(status="failed").inc()
            logger.exception("Failed to write log entry %r", entry.value)
            return
        LOG_WRITES.labels(status="ok").inc()
