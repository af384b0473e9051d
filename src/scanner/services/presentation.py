from __future__ import annotations

from scanner.domain.models import (
    DetailRow,
    DetailsDialog,
    ErrorDialog,
    ErrorState,
    FoundState,
    LoadingState,
    NotFoundState,
    ProductDetails,
    SessionState,
    SessionView,
)

NOT_FOUND_MESSAGE = "No product details found for this code."


def _detail_rows(details: ProductDetails) -> list[DetailRow]:
    return [
        DetailRow(label="Name:", value=details.name),
        DetailRow(label="Category:", value=details.category),
        DetailRow(label="Code:", value=details.code),
        DetailRow(label="Price:", value=str(details.price)),
        DetailRow(label="Quantity:", value=str(details.quantity)),
    ]


def render_session(state: SessionState) -> SessionView:
    """Leitet aus dem Session-Zustand ab, was die Anzeige darstellt."""
    if isinstance(state, LoadingState):
        return SessionView(state=state, loading=True)

    if isinstance(state, FoundState):
        return SessionView(
            state=state,
            scanned_code_label=f"Scanned code: {state.code}",
            details_dialog=DetailsDialog(
                title="Product Details", rows=_detail_rows(state.details), confirm_label="Done"
            ),
        )

    if isinstance(state, NotFoundState):
        return SessionView(
            state=state,
            scanned_code_label=f"Scanned code: {state.code}",
            inline_message=NOT_FOUND_MESSAGE,
        )

    if isinstance(state, ErrorState):
        return SessionView(
            state=state,
            error_dialog=ErrorDialog(title="Error", message=state.message, confirm_label="OK"),
        )

    return SessionView(state=state)
