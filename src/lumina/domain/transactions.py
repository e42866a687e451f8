from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from lumina.errors import IngestionError
from lumina.logger import get_logger
from lumina.models import Category, Transaction, TransactionType

logger = get_logger(__name__)

MANUAL_ENTRY_DESCRIPTION = "Cash Entry"


def new_transaction_id() -> str:
    return uuid.uuid4().hex[:12]


def parse_date(value: str | date | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` value, ignoring any ``T`` time part; ``None`` when it is not a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    day = value.strip().split("T", 1)[0]
    if len(day) != 10:
        return None
    try:
        return datetime.strptime(day, "%Y-%m-%d").date()
    except ValueError:
        return None


def month_key(transaction: Transaction) -> str:
    return transaction.date[:7]


def normalize_description(description: str | None) -> str:
    return (description or "").strip().casefold()


def build_manual_transaction(
    date_value: str | date,
    amount: float,
    description: str | None,
    tx_type: TransactionType | str,
) -> Transaction:
    return Transaction(
        id=new_transaction_id(),
        date=date_value,
        amount=abs(amount),
        description=(description or "").strip() or MANUAL_ENTRY_DESCRIPTION,
        type=tx_type,
        category=Category.OTHER,
        is_manual_entry=True,
    )


def parse_raw_transactions(records: Iterable[Any]) -> list[Transaction]:
    """
    Convert collaborator records into transactions.

    The batch is all-or-nothing: one unusable record fails the whole batch so
    the store never sees a partial statement.
    """
    transactions: list[Transaction] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise IngestionError(f"Record {index} is not an object")
        try:
            tx = Transaction.model_validate(
                {
                    "date": record.get("date"),
                    "description": str(record.get("description") or ""),
                    "amount": record.get("amount"),
                    "type": record.get("type"),
                    "category": record.get("category"),
                }
            )
        except ValidationError as exc:
            logger.warning("[INGEST] Rejecting record %d: %s", index, exc.errors()[0].get("msg"))
            raise IngestionError(f"Record {index} is not a valid transaction") from exc
        if parse_date(tx.date) is None:
            logger.debug("[INGEST] Record %d has unparseable date '%s'.", index, tx.date)
        transactions.append(tx)
    return transactions


def categories_present(transactions: Iterable[Transaction]) -> list[Category]:
    seen: list[Category] = []
    for tx in transactions:
        if tx.category not in seen:
            seen.append(tx.category)
    return sorted(seen, key=lambda category: category.value)
