from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable

from scanner.domain.models import (
    ErrorState,
    FoundState,
    IdleState,
    LoadingState,
    NotFoundState,
    SessionState,
    SessionStatus,
)
from scanner.domain.ports import InvalidCodeError, InvalidTransitionError
from scanner.services.catalog_resolver import CatalogResolver
from scanner.services.code_source import CodeSource
from scanner.services.log_sink_client import LogSinkClient

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]

_DISMISSIBLE = (SessionStatus.FOUND, SessionStatus.NOT_FOUND)


class ScanSessionController:
    """
    Zustandsautomat einer Scan-Session (Idle/Loading/Found/NotFound/Error).

    Der Controller ist der einzige, der den Zustand ändert. Jede Einreichung
    erhält ein fortlaufendes Ticket; ein Lookup-Ergebnis wird nur übernommen,
    wenn sein Ticket noch das neueste ist (last-submission-wins). Ältere
    Ergebnisse werden verworfen, auch wenn sie später eintreffen.
    """

    def __init__(
        self,
        resolver: CatalogResolver,
        log_sink: LogSinkClient,
        code_source: CodeSource | None = None,
    ) -> None:
        self._resolver = resolver
        self._log_sink = log_sink
        self._code_source = code_source or CodeSource()
        # Never held across an await
        self._lock = threading.Lock()
        self._state: SessionState = IdleState()
        # Validierungsfehler liegt über dem Zustand, bis er bestätigt wird
        self._error: ErrorState | None = None
        self._ticket = 0
        self._listeners: list[SessionListener] = []

    @property
    def snapshot(self) -> SessionState:
        with self._lock:
            return self._error or self._state

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Registriert einen Listener; gibt eine Funktion zum Abmelden zurück."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def submit(self, code: str) -> SessionState:
        """
        Reicht einen Code ein: Loading, Log-Write (fire-and-forget), Katalog-Lookup.
        Gibt den Zustand nach Abschluss zurück; wurde die Einreichung inzwischen
        überholt, ist das der Zustand der neueren Einreichung.

        Wird der Aufruf abgebrochen, endet die Einreichung in NotFound, sofern
        sie noch die neueste ist.

        Raises:
            InvalidCodeError: Wenn `code` leer ist.
        """
        if not code:
            raise InvalidCodeError(code)

        loading = LoadingState(code=code)
        with self._lock:
            self._ticket += 1
            ticket = self._ticket
            self._error = None
            self._state = loading
        self._notify(loading)

        try:
            await self._log_sink.record(code)
            details = await self._resolver.resolve(code)
        except asyncio.CancelledError:
            logger.warning("Lookup for '%s' was cancelled", code)
            self._apply(ticket, NotFoundState(code=code))
            raise

        result: SessionState
        if details is not None:
            result = FoundState(code=code, details=details)
        else:
            result = NotFoundState(code=code)
        self._apply(ticket, result)
        return self.snapshot

    async def submit_manual(self, text: str) -> SessionState:
        """
        Manueller Pfad. Eine leere Eingabe legt nur den Error-Zustand über den
        aktuellen Zustand; ein laufender Lookup wird weiterhin übernommen.
        """
        try:
            await self._code_source.acquire_manual(text, self.submit)
        except InvalidCodeError as e:
            error = ErrorState(message=str(e))
            with self._lock:
                self._error = error
            self._notify(error)
        return self.snapshot

    async def scan(self) -> SessionState:
        """Kamera-Pfad. Ein abgebrochener Scan ändert den Zustand nicht."""
        await self._code_source.acquire_from_camera(self.submit)
        return self.snapshot

    async def accept_scan_result(self, contents: str | None) -> SessionState:
        await self._code_source.accept_scan_result(contents, self.submit)
        return self.snapshot

    async def dismiss(self) -> SessionState:
        """
        Found/NotFound -> Idle, gefolgt von einem leeren Log-Write.

        Raises:
            InvalidTransitionError: In jedem anderen Zustand.
        """
        idle = IdleState()
        with self._lock:
            current = self._error or self._state
            if current.status not in _DISMISSIBLE:
                raise InvalidTransitionError("dismiss", current.status)
            self._state = idle
        self._notify(idle)

        await self._log_sink.record("")
        return self.snapshot

    def acknowledge_error(self) -> SessionState:
        """Schließt den Error-Zustand; der Zustand darunter ist wieder aktiv."""
        with self._lock:
            if self._error is None:
                raise InvalidTransitionError("acknowledge error", self._state.status)
            self._error = None
            restored = self._state
        self._notify(restored)
        return restored

    def _apply(self, ticket: int, result: SessionState) -> None:
        with self._lock:
            applied = ticket == self._ticket
            if applied:
                self._state = result
            visible = applied and self._error is None
        if visible:
            self._notify(result)
        elif not applied:
            logger.debug("Discarding stale result for ticket %d", ticket)

    def _notify(self, state: SessionState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener %r failed", listener)
