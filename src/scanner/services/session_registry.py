from __future__ import annotations

import logging
import threading

from scanner.core.metrics import SESSION_TRANSITIONS
from scanner.domain.models import SessionState
from scanner.services.catalog_resolver import CatalogResolver
from scanner.services.code_source import CodeSource
from scanner.services.log_sink_client import LogSinkClient
from scanner.services.session_controller import ScanSessionController, SessionListener

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Eine Scan-Session pro Operator. Resolver und Log-Senke werden geteilt,
    da sie pro Aufruf zustandslos sind.
    """

    def __init__(
        self,
        resolver: CatalogResolver,
        log_sink: LogSinkClient,
        code_source: CodeSource | None = None,
    ) -> None:
        self._resolver = resolver
        self._log_sink = log_sink
        self._code_source = code_source
        self._sessions: dict[str, ScanSessionController] = {}
        self._lock = threading.Lock()

    def get(self, operator_id: str) -> ScanSessionController:
        with self._lock:
            controller = self._sessions.get(operator_id)
            if controller is None:
                controller = ScanSessionController(
                    resolver=self._resolver,
                    log_sink=self._log_sink,
                    code_source=self._code_source,
                )
                controller.subscribe(self._make_listener(operator_id))
                self._sessions[operator_id] = controller
        return controller

    @staticmethod
    def _make_listener(operator_id: str) -> SessionListener:
        def _on_transition(state: SessionState) -> None:
            SESSION_TRANSITIONS.labels(state=state.status).inc()
            logger.debug("Session of %s is now %s", operator_id, state.status)

        return _on_transition
