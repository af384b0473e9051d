# tests/unit/test_models.py
from unittest.mock import patch

import pytest
from pydantic import TypeAdapter, ValidationError

from scanner.domain.models import (
    FoundState,
    IdleState,
    LoadingState,
    LogEntry,
    NotFoundState,
    ProductDetails,
    SessionState,
)

# ---------------------------------------------------------------------------
# ProductDetails
# ---------------------------------------------------------------------------


def test_product_details_from_catalog_record():
    details = ProductDetails.from_record(
        {"codigo": "ABC123", "nombre": "Widget", "categoria": "Tools", "precio": 500, "cantidad": 10}
    )

    assert details.name == "Widget"
    assert details.category == "Tools"
    assert details.code == "ABC123"
    assert details.price == 500
    assert details.quantity == 10


def test_product_details_missing_fields_default():
    details = ProductDetails.from_record({"codigo": "ABC123"})

    assert details.name == ""
    assert details.category == ""
    assert details.price == 0
    assert details.quantity == 0


def test_product_details_null_fields_default():
    details = ProductDetails.from_record({"codigo": "ABC123", "nombre": None, "precio": None})

    assert details.name == ""
    assert details.price == 0


def test_product_details_ignores_unknown_fields():
    details = ProductDetails.from_record({"codigo": "X", "proveedor": "ACME"})
    assert details.code == "X"


def test_product_details_truncates_fractional_numbers():
    details = ProductDetails.from_record({"codigo": "X", "precio": 499.5, "cantidad": 3.0})

    assert details.price == 499
    assert details.quantity == 3


def test_product_details_rejects_negative_price():
    with pytest.raises(ValidationError):
        ProductDetails.from_record({"codigo": "X", "precio": -1})


def test_product_details_is_frozen():
    details = ProductDetails(name="Widget")
    with pytest.raises(ValidationError):
        details.name = "Other"  # type: ignore[misc]


def test_product_details_serializes_with_field_names():
    data = ProductDetails(name="Widget", code="ABC123").model_dump()
    assert data["name"] == "Widget"
    assert "nombre" not in data


# ---------------------------------------------------------------------------
# SessionState
# ---------------------------------------------------------------------------


def test_session_state_discriminates_on_status():
    adapter = TypeAdapter(SessionState)

    assert isinstance(adapter.validate_python({"status": "idle"}), IdleState)
    assert isinstance(adapter.validate_python({"status": "loading", "code": "A"}), LoadingState)
    assert isinstance(adapter.validate_python({"status": "not_found", "code": "A"}), NotFoundState)
    found = adapter.validate_python(
        {"status": "found", "code": "A", "details": {"name": "Widget", "code": "A"}}
    )
    assert isinstance(found, FoundState)
    assert found.details.name == "Widget"


def test_loading_state_requires_code():
    with pytest.raises(ValidationError):
        LoadingState(code="")


# ---------------------------------------------------------------------------
# LogEntry
# ---------------------------------------------------------------------------


def test_log_entry_uses_current_time_in_millis():
    with patch("time.time", return_value=1_700_000_000.5):
        entry = LogEntry(value="ABC123")

    assert entry.timestamp == 1_700_000_000_500


def test_log_entry_timestamp_serialized_as_string():
    entry = LogEntry(value="", timestamp=1_700_000_000_000)
    assert entry.model_dump() == {"value": "", "timestamp": "1700000000000"}
