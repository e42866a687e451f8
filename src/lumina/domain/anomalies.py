"""Duplicate large-transaction detection.

A transaction is suspicious when its description (case-folded, trimmed) is
shared with at least one other transaction and its amount is above the
threshold. Dates and amount proximity play no part in grouping.
"""

from collections.abc import Collection, Iterable

from lumina.core.settings import DEFAULT_ANOMALY_THRESHOLD
from lumina.domain.transactions import normalize_description
from lumina.models import Transaction


def group_by_description(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    groups: dict[str, list[Transaction]] = {}
    for tx in transactions:
        groups.setdefault(normalize_description(tx.description), []).append(tx)
    return groups


def find_suspicious(
    transactions: Iterable[Transaction],
    threshold: float = DEFAULT_ANOMALY_THRESHOLD,
) -> list[Transaction]:
    """Every large member of a duplicate-description group, flagged or not."""
    txs = list(transactions)
    groups = group_by_description(txs)
    duplicated = {key for key, members in groups.items() if len(members) > 1}
    return [
        tx for tx in txs
        if tx.amount > threshold and normalize_description(tx.description) in duplicated
    ]


def find_new_suspicious(
    transactions: Iterable[Transaction],
    flagged_ids: Collection[str] = (),
    threshold: float = DEFAULT_ANOMALY_THRESHOLD,
) -> list[Transaction]:
    """
    Suspicious transactions that have not been reported yet.

    A transaction counts as reported when it already carries the suspicious
    flag or its id is in ``flagged_ids``. Result order follows the input.
    """
    return [
        tx for tx in find_suspicious(transactions, threshold)
        if not tx.is_flagged_suspicious and tx.id not in flagged_ids
    ]
