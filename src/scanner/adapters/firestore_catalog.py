# src/scanner/adapters/firestore_catalog.py
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from scanner.core.metrics import EXTERNAL_API_COUNT, EXTERNAL_API_DURATION
from scanner.domain.ports import CatalogPort, CatalogQueryError

logger = logging.getLogger(__name__)

_BASE_URL = "https://firestore.googleapis.com/v1"
_SOURCE = "firestore"

# ---------------------------------------------------------------------------
# Interne Rohdaten-Schemas (für typisiertes Parsing der runQuery-Response)
# ---------------------------------------------------------------------------


class _FirestoreDocument(BaseModel):
    name: str = ""
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)


class _RunQueryItem(BaseModel):
    """Ein Element des runQuery-Arrays. Leere Treffermenge = nur readTime, kein document."""

    document: _FirestoreDocument | None = None
    read_time: str | None = Field(default=None, alias="readTime")

    model_config = {"populate_by_name": True}


def _decode_value(value: dict[str, Any]) -> Any:
    """Wandelt einen typisierten Firestore-Wert in einen Python-Wert um."""
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        # int64 wird als String übertragen
        return int(value["integerValue"])
    if "doubleValue" in value:
        return value["doubleValue"]
    if "booleanValue" in value:
        return value["booleanValue"]
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        return value["timestampValue"]
    if "mapValue" in value:
        fields = value["mapValue"].get("fields", {})
        return {k: _decode_value(v) for k, v in fields.items()}
    if "arrayValue" in value:
        return [_decode_value(v) for v in value["arrayValue"].get("values", [])]
    return None


class FirestoreCatalogAdapter(CatalogPort):
    """
    Adapter für eine Firestore-Collection über die REST-API (documents:runQuery).
    One-shot Query, keine Live-Subscription.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        project_id: str,
        database: str = "(default)",
        collection: str = "inventario",
        timeout: float = 10.0,
    ) -> None:
        self._client = http_client
        self._collection = collection
        self._timeout = timeout
        self._url = f"{_BASE_URL}/projects/{project_id}/databases/{database}/documents:runQuery"

    async def find_by_code(self, code: str, limit: int = 1) -> list[dict[str, Any]]:
        body = {
            "structuredQuery": {
                "from": [{"collectionId": self._collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "codigo"},
                        "op": "EQUAL",
                        "value": {"stringValue": code},
                    }
                },
                "limit": limit,
            }
        }
        try:
            with EXTERNAL_API_DURATION.labels(source=_SOURCE).time():
                response = await self._client.post(self._url, json=body, timeout=self._timeout)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise CatalogQueryError(_SOURCE, str(e)) from e
        except httpx.RequestError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise CatalogQueryError(_SOURCE, f"Connection error: {e}") from e

        EXTERNAL_API_COUNT.labels(source=_SOURCE, status="ok").inc()

        payload = response.json()
        if not isinstance(payload, list):
            raise CatalogQueryError(_SOURCE, "Unexpected runQuery response shape")

        records = []
        for raw_item in payload:
            item = _RunQueryItem.model_validate(raw_item)
            if item.document is None:
                continue
            records.append({k: _decode_value(v) for k, v in item.document.fields.items()})

        logger.debug("runQuery for codigo '%s' returned %d document(s)", code, len(records))
        return records[:limit]
