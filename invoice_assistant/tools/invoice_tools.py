"""Invoice CRUD tools exposed to the model."""

from __future__ import annotations

import dataclasses
from datetime import date
from typing import Any, Callable

from invoice_assistant.models import Invoice, InvoiceStatus
from invoice_assistant.store import InvoiceStore
from invoice_assistant.tools.base import Operation, Tool

_STATUS_VALUES = [status.value for status in InvoiceStatus]

# Model-facing argument names mapped onto Invoice attributes.
_UPDATABLE_FIELDS = {
    "clientName": "client_name",
    "amount": "amount",
    "dueDate": "due_date",
    "status": "status",
    "observations": "observations",
}


def _find(store: InvoiceStore, invoice_id: str) -> Invoice | None:
    wanted = invoice_id.lower()
    return next((inv for inv in store.list() if inv.id.lower() == wanted), None)


def _not_found(invoice_id: str) -> dict[str, str]:
    return {"error": f"Invoice with ID {invoice_id} not found."}


def _parse_iso_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class CreateInvoiceTool(Tool):
    """Create an invoice issued today."""

    name = "createInvoice"
    operation = Operation.CREATE
    description = "Create a new invoice. The issue date is always today."
    parameters_schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "clientName": {"type": "string", "description": "The client's name."},
            "amount": {"type": "number", "description": "The invoice total.", "minimum": 0},
            "dueDate": {"type": "string", "description": "The due date in YYYY-MM-DD format."},
            "observations": {"type": "string", "description": "Optional notes for the invoice."},
        },
        "required": ["clientName", "amount", "dueDate"],
    }

    def __init__(self, store: InvoiceStore, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today

    async def run(self, **kwargs: Any) -> dict[str, Any]:
        due = _parse_iso_date(kwargs["dueDate"])
        if due is None:
            return {"error": f"Invalid due date {kwargs['dueDate']!r}; expected YYYY-MM-DD."}

        today = self._today()
        invoice = Invoice(
            id="",
            client_name=kwargs["clientName"],
            amount=kwargs["amount"],
            issue_date=today.isoformat(),
            due_date=due.isoformat(),
            status=InvoiceStatus.OVERDUE if due < today else InvoiceStatus.PENDING,
            observations=kwargs.get("observations") or "",
        )
        self._store.add(invoice)
        return {"success": True, "clientName": invoice.client_name, "amount": invoice.amount}


class GetInvoiceDetailsTool(Tool):
    """Look up one invoice by id."""

    name = "getInvoiceDetails"
    operation = Operation.READ
    description = "Retrieve the full details of a specific invoice by its ID."
    parameters_schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "The ID of the invoice to retrieve."},
        },
        "required": ["id"],
    }

    def __init__(self, store: InvoiceStore) -> None:
        self._store = store

    async def run(self, **kwargs: Any) -> dict[str, Any]:
        invoice = _find(self._store, kwargs["id"])
        if invoice is None:
            return _not_found(kwargs["id"])
        return invoice.to_payload()


class UpdateInvoiceTool(Tool):
    """Merge new field values onto an existing invoice."""

    name = "updateInvoice"
    operation = Operation.UPDATE
    description = "Update one or more fields of an existing invoice identified by its ID."
    parameters_schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "The ID of the invoice to update."},
            "clientName": {"type": "string", "description": "The new client name."},
            "amount": {"type": "number", "description": "The new invoice total.", "minimum": 0},
            "dueDate": {"type": "string", "description": "The new due date in YYYY-MM-DD format."},
            "status": {"type": "string", "description": "The new status.", "enum": _STATUS_VALUES},
            "observations": {"type": "string", "description": "The new notes for the invoice."},
        },
        "required": ["id"],
    }

    def __init__(self, store: InvoiceStore) -> None:
        self._store = store

    async def run(self, **kwargs: Any) -> dict[str, Any]:
        original = _find(self._store, kwargs["id"])
        if original is None:
            return _not_found(kwargs["id"])

        if "dueDate" in kwargs and _parse_iso_date(kwargs["dueDate"]) is None:
            return {"error": f"Invalid due date {kwargs['dueDate']!r}; expected YYYY-MM-DD."}

        changes = {attr: kwargs[arg] for arg, attr in _UPDATABLE_FIELDS.items() if arg in kwargs}
        if "status" in changes:
            changes["status"] = InvoiceStatus(changes["status"])
        self._store.update(dataclasses.replace(original, **changes))
        return {"success": True, "id": original.id}


class DeleteInvoiceTool(Tool):
    """Permanently remove an invoice."""

    name = "deleteInvoice"
    operation = Operation.DELETE
    description = (
        "Permanently delete an invoice by its ID. "
        "Only call this after the user has explicitly confirmed the deletion."
    )
    parameters_schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "The ID of the invoice to delete."},
        },
        "required": ["id"],
    }

    def __init__(self, store: InvoiceStore) -> None:
        self._store = store

    async def run(self, **kwargs: Any) -> dict[str, Any]:
        invoice = _find(self._store, kwargs["id"])
        if invoice is None:
            return _not_found(kwargs["id"])
        self._store.delete(invoice.id)
        return {"success": True, "id": invoice.id}


class ListInvoicesTool(Tool):
    """List invoice summaries, optionally filtered by status."""

    name = "listInvoices"
    operation = Operation.LIST
    description = "List invoices, optionally filtered by status (Pending, Paid, Overdue)."
    parameters_schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "status": {"type": "string", "description": "Status to filter by.", "enum": _STATUS_VALUES},
        },
    }

    def __init__(self, store: InvoiceStore) -> None:
        self._store = store

    async def run(self, **kwargs: Any) -> list[dict[str, Any]] | dict[str, str]:
        status = kwargs.get("status")
        invoices = self._store.list()
        if status:
            invoices = [inv for inv in invoices if inv.status.value == status]
        if invoices:
            # Summaries only, full records would bloat the model context.
            return [inv.summary() for inv in invoices]
        return {"message": f"No invoices found with status '{status or 'any'}'."}


def invoice_tools(store: InvoiceStore, today: Callable[[], date] = date.today) -> list[Tool]:
    """Return one instance of every invoice tool bound to ``store``."""

    return [
        CreateInvoiceTool(store, today=today),
        GetInvoiceDetailsTool(store),
        UpdateInvoiceTool(store),
        DeleteInvoiceTool(store),
        ListInvoicesTool(store),
    ]
