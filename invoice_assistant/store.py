"""Invoice persistence layer."""

from __future__ import annotations

import dataclasses
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from invoice_assistant.models import Invoice, InvoiceStatus

SCHEMA_VERSION = 1


class InvoiceStore(ABC):
    """Collection of invoices the assistant reads and mutates."""

    @abstractmethod
    def add(self, invoice: Invoice) -> Invoice:
        """Persist a new invoice and return a copy carrying its assigned id."""

    @abstractmethod
    def update(self, invoice: Invoice) -> None:
        """Overwrite the stored invoice that has the same id."""

    @abstractmethod
    def delete(self, invoice_id: str) -> None:
        """Remove an invoice by id."""

    @abstractmethod
    def list(self) -> list[Invoice]:
        """Return a snapshot of all invoices in insertion order."""


class SqliteInvoiceStore(InvoiceStore):
    """Small SQLite wrapper with explicit schema management."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create or migrate schema."""

        with self._connect() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if row is None:
                self._create_schema(conn)
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
            elif row["version"] != SCHEMA_VERSION:
                raise RuntimeError(
                    f"Unsupported schema version {row['version']} (expected {SCHEMA_VERSION})"
                )

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS invoices (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                client_name TEXT NOT NULL,
                amount REAL NOT NULL,
                issue_date TEXT NOT NULL,
                due_date TEXT NOT NULL,
                status TEXT NOT NULL,
                observations TEXT NOT NULL DEFAULT ''
            );
            """
        )

    def add(self, invoice: Invoice) -> Invoice:
        if not invoice.id:
            invoice = dataclasses.replace(invoice, id=str(uuid.uuid4()))
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO invoices(id, client_name, amount, issue_date, due_date, status, observations)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.id,
                    invoice.client_name,
                    invoice.amount,
                    invoice.issue_date,
                    invoice.due_date,
                    invoice.status.value,
                    invoice.observations,
                ),
            )
        return invoice

    def update(self, invoice: Invoice) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE invoices
                SET client_name = ?, amount = ?, issue_date = ?, due_date = ?, status = ?, observations = ?
                WHERE id = ?
                """,
                (
                    invoice.client_name,
                    invoice.amount,
                    invoice.issue_date,
                    invoice.due_date,
                    invoice.status.value,
                    invoice.observations,
                    invoice.id,
                ),
            )

    def delete(self, invoice_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))

    def list(self) -> list[Invoice]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, client_name, amount, issue_date, due_date, status, observations
                FROM invoices
                ORDER BY seq ASC
                """
            ).fetchall()
        return [_row_to_invoice(row) for row in rows]


def _row_to_invoice(row: sqlite3.Row) -> Invoice:
    return Invoice(
        id=row["id"],
        client_name=row["client_name"],
        amount=float(row["amount"]),
        issue_date=row["issue_date"],
        due_date=row["due_date"],
        status=InvoiceStatus(row["status"]),
        observations=row["observations"],
    )
