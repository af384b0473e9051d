from __future__ import annotations

from collections.abc import Awaitable, Callable

from scanner.domain.ports import BarcodeScannerPort, InvalidCodeError

CodeCallback = Callable[[str], Awaitable[object]]


class CodeSource:
    """
    Normalisiert die beiden Quellen eines Produktcodes (Kamera, manuelle Eingabe)
    auf ein einziges Ereignis: `on_acquired(code)`.
    """

    def __init__(self, scanner: BarcodeScannerPort | None = None) -> None:
        self._scanner = scanner

    async def acquire_from_camera(self, on_acquired: CodeCallback) -> bool:
        """Startet einen Scan; ein Abbruch löst keinen Callback aus."""
        if self._scanner is None:
            return False
        contents = await self._scanner.scan()
        return await self.accept_scan_result(contents, on_acquired)

    async def accept_scan_result(self, contents: str | None, on_acquired: CodeCallback) -> bool:
        # Scanned codes are used verbatim
        if not contents:
            return False
        await on_acquired(contents)
        return True

    async def acquire_manual(self, text: str, on_acquired: CodeCallback) -> None:
        """
        Raises:
            InvalidCodeError: Wenn die Eingabe nach dem Trimmen leer ist.
        """
        code = text.strip()
        if not code:
            raise InvalidCodeError(text)
        await on_acquired(code)
