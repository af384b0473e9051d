# src/scanner/repositories/memory.py
from __future__ import annotations

from typing import Any

from scanner.domain.models import LogEntry, ProductDetails
from scanner.domain.ports import CatalogPort, LogSinkPort


class InMemoryCatalogRepository(CatalogPort):
    """
    In-Memory Katalog für lokale Entwicklung und Tests.
    Interface kann gegen Firestore/SQL-Implementierung ausgetauscht werden.
    """

    def __init__(self) -> None:
        self._records: list[dict[str, Any]] = []

    def save(self, details: ProductDetails) -> None:
        self._records.append(
            {
                "codigo": details.code,
                "nombre": details.name,
                "categoria": details.category,
                "precio": details.price,
                "cantidad": details.quantity,
            }
        )

    def save_record(self, record: dict[str, Any]) -> None:
        self._records.append(dict(record))

    async def find_by_code(self, code: str, limit: int = 1) -> list[dict[str, Any]]:
        return [dict(r) for r in self._records if r.get("codigo") == code][:limit]


class InMemoryLogRepository(LogSinkPort):
    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    async def write(self, entry: LogEntry) -> None:
        self.entries.append(entry)
