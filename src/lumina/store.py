from collections.abc import Iterable
from datetime import date

from lumina.domain.transactions import build_manual_transaction, new_transaction_id
from lumina.logger import get_logger
from lumina.models import Transaction, TransactionType

logger = get_logger(__name__)


class TransactionStore:
    """
    In-memory collection of every known transaction.

    Insertion order is preserved. Content duplicates are allowed so that the
    anomaly scan can see them.
    """

    def __init__(self) -> None:
        self._transactions: list[Transaction] = []

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self):
        return iter(self._transactions)

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def get(self, tx_id: str) -> Transaction | None:
        for tx in self._transactions:
            if tx.id == tx_id:
                return tx
        return None

    def merge(self, new_transactions: Iterable[Transaction]) -> list[Transaction]:
        """Append transactions; missing or already-used ids are replaced with fresh ones."""
        taken = {tx.id for tx in self._transactions}
        merged: list[Transaction] = []
        for tx in new_transactions:
            if not tx.id or tx.id in taken:
                if tx.id:
                    logger.debug("[STORE] Id '%s' already in use; assigning a new one.", tx.id)
                tx.id = new_transaction_id()
                while tx.id in taken:
                    tx.id = new_transaction_id()
            taken.add(tx.id)
            merged.append(tx)
        self._transactions.extend(merged)
        logger.debug("[STORE] Merged %d transaction(s); %d total.", len(merged), len(self._transactions))
        return merged

    def add_manual(
        self,
        date_value: str | date,
        amount: float,
        description: str | None,
        tx_type: TransactionType | str,
    ) -> Transaction:
        tx = build_manual_transaction(date_value, amount, description, tx_type)
        self.merge([tx])
        return tx

    def reset(self) -> int:
        cleared = len(self._transactions)
        self._transactions = []
        logger.info("[STORE] Cleared %d transaction(s).", cleared)
        return cleared

    def mark_suspicious(self, ids: Iterable[str]) -> list[Transaction]:
        """Flag the given ids; returns only the transactions that changed."""
        wanted = set(ids)
        changed: list[Transaction] = []
        for tx in self._transactions:
            if tx.id in wanted and not tx.is_flagged_suspicious:
                tx.is_flagged_suspicious = True
                changed.append(tx)
        return changed
