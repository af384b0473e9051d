# src/scanner/domain/models.py
from __future__ import annotations

import math
import time
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_serializer, field_validator

# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------

ProductCode = Annotated[str, Field(min_length=1, description="Gescannter oder getippter Code")]


class ProductDetails(BaseModel):
    """
    Produktdetails aus dem Remote-Katalog.
    Die Katalogfelder (nombre, categoria, ...) werden über Aliase gemappt.
    """

    name: str = Field(default="", validation_alias=AliasChoices("nombre", "name"))
    category: str = Field(default="", validation_alias=AliasChoices("categoria", "category"))
    code: str = Field(default="", validation_alias=AliasChoices("codigo", "code"))
    # Preis in der kleinsten Währungseinheit
    price: int = Field(default=0, ge=0, validation_alias=AliasChoices("precio", "price"))
    quantity: int = Field(default=0, ge=0, validation_alias=AliasChoices("cantidad", "quantity"))

    model_config = {"frozen": True}

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def _truncate_fractional(cls, value: Any) -> Any:
        # doubleValue aus dem Katalog wird wie ein Long abgeschnitten
        if isinstance(value, float) and math.isfinite(value):
            return int(value)
        return value

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> ProductDetails:
        """Fehlende oder null-Felder fallen auf "" bzw. 0 zurück."""
        return cls.model_validate({k: v for k, v in record.items() if v is not None})


# ---------------------------------------------------------------------------
# Aggregate: SessionState
# Genau ein Zustand ist aktiv; nur der ScanSessionController wechselt ihn.
# ---------------------------------------------------------------------------


class SessionStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class IdleState(BaseModel):
    status: Literal["idle"] = "idle"

    model_config = {"frozen": True}


class LoadingState(BaseModel):
    status: Literal["loading"] = "loading"
    code: ProductCode

    model_config = {"frozen": True}


class FoundState(BaseModel):
    status: Literal["found"] = "found"
    code: ProductCode
    details: ProductDetails

    model_config = {"frozen": True}


class NotFoundState(BaseModel):
    status: Literal["not_found"] = "not_found"
    code: ProductCode

    model_config = {"frozen": True}


class ErrorState(BaseModel):
    status: Literal["error"] = "error"
    message: str

    model_config = {"frozen": True}


SessionState = Annotated[
    IdleState | LoadingState | FoundState | NotFoundState | ErrorState,
    Field(discriminator="status"),
]


# ---------------------------------------------------------------------------
# LogEntry (wird nie zurückgelesen)
# ---------------------------------------------------------------------------


def _now_millis() -> int:
    return int(time.time() * 1000)


class LogEntry(BaseModel):
    value: str
    timestamp: int = Field(default_factory=_now_millis, description="Epoch-Millis")

    model_config = {"frozen": True}

    @field_serializer("timestamp")
    def _timestamp_as_string(self, timestamp: int) -> str:
        # Wire format: the sink stores the timestamp as a string
        return str(timestamp)


# ---------------------------------------------------------------------------
# API Request/Response Schemas
# ---------------------------------------------------------------------------


class ManualCodeSubmit(BaseModel):
    code: str = Field(default="", max_length=256)


class ScanResultSubmit(BaseModel):
    contents: str | None = Field(
        default=None, max_length=256, description="Dekodierter Barcode, null = abgebrochen"
    )


class DetailRow(BaseModel):
    label: str
    value: str


class DetailsDialog(BaseModel):
    title: str
    rows: list[DetailRow]
    confirm_label: str


class ErrorDialog(BaseModel):
    title: str
    message: str
    confirm_label: str


class SessionView(BaseModel):
    """Snapshot des Session-Zustands plus das, was die Anzeige daraus rendert."""

    state: SessionState
    loading: bool = False
    scanned_code_label: str | None = None
    inline_message: str | None = None
    details_dialog: DetailsDialog | None = None
    error_dialog: ErrorDialog | None = None
