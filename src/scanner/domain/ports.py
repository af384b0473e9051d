# src/scanner/domain/ports.py
from abc import ABC, abstractmethod
from typing import Any

from scanner.domain.models import LogEntry


class CatalogPort(ABC):
    """
    Abstrakte Schnittstelle für den Remote-Produktkatalog.
    Jeder Katalog-Adapter MUSS dieses Interface implementieren.
    """

    @abstractmethod
    async def find_by_code(self, code: str, limit: int = 1) -> list[dict[str, Any]]:
        """
        Liefert die Rohdatensätze, deren Feld `codigo` exakt `code` entspricht.

        Raises:
            CatalogQueryError: Bei Kommunikationsproblemen mit dem Katalog.
        """
        ...


class LogSinkPort(ABC):
    """Write-only Senke für eingereichte Codes."""

    @abstractmethod
    async def write(self, entry: LogEntry) -> None:
        """
        Raises:
            LogWriteError: Wenn der Schreibvorgang fehlschlägt.
        """
        ...


class BarcodeScannerPort(ABC):
    """Kamera/Barcode-Decoder als Black Box."""

    @abstractmethod
    async def scan(self) -> str | None:
        """Returns the decoded contents, or None if the scan was cancelled."""
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class InvalidCodeError(Exception):
    def __init__(self, raw_input: str):
        super().__init__("invalid code")
        self.raw_input = raw_input


class CatalogQueryError(Exception):
    def __init__(self, source: str, detail: str):
        super().__init__(f"Catalog query failed in '{source}': {detail}")
        self.source = source
        self.detail = detail


class LogWriteError(Exception):
    def __init__(self, sink: str, detail: str):
        super().__init__(f"Log write to '{sink}' failed: {detail}")
        self.sink = sink
        self.detail = detail


class InvalidTransitionError(Exception):
    def __init__(self, action: str, status: str):
        super().__init__(f"Cannot {action} while session is '{status}'")
        self.action = action
        self.status = status
