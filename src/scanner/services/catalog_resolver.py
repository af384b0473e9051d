from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from scanner.core.metrics import CATALOG_LOOKUPS
from scanner.domain.models import ProductDetails
from scanner.domain.ports import CatalogPort, CatalogQueryError

logger = logging.getLogger(__name__)


class CatalogResolver:
    """
    Löst einen Code über den Katalog in ProductDetails auf.

    Ein fehlender Datensatz und ein fehlgeschlagener Query liefern beide `None`;
    der Aufrufer kann beides nicht unterscheiden. Fehler werden nur geloggt und
    in `catalog_lookups_total{outcome="error"}` gezählt.
    """

    def __init__(self, catalog: CatalogPort, timeout_seconds: float = 15.0) -> None:
        self._catalog = catalog
        self._timeout = timeout_seconds

    async def resolve(self, code: str) -> ProductDetails | None:
        try:
            async with asyncio.timeout(self._timeout):
                records = await self._catalog.find_by_code(code, limit=1)
            details = ProductDetails.from_record(records[0]) if records else None
        except CatalogQueryError as e:
            return self._failed(code, str(e))
        except TimeoutError:
            return self._failed(code, f"no answer within {self._timeout}s")
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            return self._failed(code, f"malformed catalog record, rejected fields: {fields}")
        except Exception:
            logger.exception("Unexpected error resolving code '%s'", code)
            CATALOG_LOOKUPS.labels(outcome="error").inc()
            return None

        CATALOG_LOOKUPS.labels(outcome="found" if details else "not_found").inc()
        return details

    @staticmethod
    def _failed(code: str, reason: str) -> None:
        logger.warning("Catalog lookup for '%s' failed: %s", code, reason)
        CATALOG_LOOKUPS.labels(outcome="error").inc()
        return None
