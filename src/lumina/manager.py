from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date

from lumina.core import settings
from lumina.domain.advice import build_advice_context
from lumina.domain.aggregation import aggregate
from lumina.domain.anomalies import find_new_suspicious
from lumina.domain.filters import ALL_DATES, DateSelection, filter_transactions
from lumina.domain.transactions import categories_present
from lumina.logger import get_logger
from lumina.models import (
    AdviceContext,
    AdviceResponse,
    Category,
    FinancialStats,
    SavingsTarget,
    Transaction,
    TransactionType,
)
from lumina.store import TransactionStore

logger = get_logger(__name__)

SuspiciousListener = Callable[[list[Transaction]], None]


@dataclass
class WorkspaceView:
    transactions: list[Transaction] = field(default_factory=list)
    stats: FinancialStats = field(default_factory=FinancialStats)


class FinanceWorkspace:
    """
    State container for one working set of transactions.

    Every mutation runs the anomaly scan and then rebuilds the filtered view
    and its aggregates before returning, so readers always see settled state.
    """

    def __init__(
        self,
        anomaly_threshold: float | None = None,
        advice_top_n: int | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = TransactionStore()
        self.anomaly_threshold = (
            anomaly_threshold if anomaly_threshold is not None else settings.get_anomaly_threshold()
        )
        self.advice_top_n = advice_top_n or settings.get_advice_top_categories()
        self._today = today

        self.date_selection: DateSelection = ALL_DATES
        self.selected_categories: list[Category] = []
        self.pending_alerts: deque[list[Transaction]] = deque()
        self.savings_target: SavingsTarget | None = None
        self.advice: AdviceResponse | None = None

        self._listeners: list[SuspiciousListener] = []
        self._view = WorkspaceView()

    # -- store mutations -------------------------------------------------

    def merge(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        merged = self.store.merge(transactions)
        self._after_mutation()
        return merged

    def ingest(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Merge a parsed statement and select every category now present."""
        merged = self.store.merge(transactions)
        self.selected_categories = categories_present(self.store)
        logger.info(
            "[STORE] Ingested %d statement transaction(s); categories: %s",
            len(merged),
            ", ".join(category.value for category in self.selected_categories) or "(none)",
        )
        self._after_mutation()
        return merged

    def add_manual(
        self,
        date_value: str | date,
        amount: float,
        description: str | None,
        tx_type: TransactionType | str,
    ) -> Transaction:
        tx = self.store.add_manual(date_value, amount, description, tx_type)
        logger.info("[STORE] Manual %s entry of %.2f on %s.", tx.type.value, tx.amount, tx.date)
        self._after_mutation()
        return tx

    def mark_suspicious(self, ids: Iterable[str]) -> list[Transaction]:
        changed = self.store.mark_suspicious(ids)
        self._after_mutation()
        return changed

    def reset(self) -> None:
        self.store.reset()
        self.date_selection = ALL_DATES
        self.selected_categories = []
        self.pending_alerts.clear()
        self.savings_target = None
        self.advice = None
        self._after_mutation()

    # -- filters ---------------------------------------------------------

    def set_filters(
        self,
        selection: DateSelection | None = None,
        categories: Iterable[Category | str] | None = None,
    ) -> None:
        if selection is not None:
            self.date_selection = selection
        if categories is not None:
            self.selected_categories = list(dict.fromkeys(Category.coerce(c) for c in categories))
        self._refresh_view()

    # -- derived state ---------------------------------------------------

    @property
    def filtered_transactions(self) -> list[Transaction]:
        return list(self._view.transactions)

    @property
    def stats(self) -> FinancialStats:
        return self._view.stats

    def refresh(self) -> None:
        self._refresh_view()

    def _refresh_view(self) -> None:
        filtered = filter_transactions(
            self.store,
            self.date_selection,
            self.selected_categories,
            today=self._today(),
        )
        self._view = WorkspaceView(transactions=filtered, stats=aggregate(filtered))

    def _after_mutation(self) -> None:
        self._scan_anomalies()
        self._refresh_view()

    # -- anomalies -------------------------------------------------------

    def subscribe(self, listener: SuspiciousListener) -> None:
        self._listeners.append(listener)

    def _scan_anomalies(self) -> list[Transaction]:
        fresh = find_new_suspicious(self.store, threshold=self.anomaly_threshold)
        if not fresh:
            return []

        # Mark before emitting so a re-entrant scan sees the latch already set.
        self.store.mark_suspicious(tx.id for tx in fresh if tx.id)
        batch = list(fresh)
        self.pending_alerts.append(batch)
        logger.warning(
            "[ANOMALY] %d duplicate large transaction(s) flagged: %s",
            len(batch),
            ", ".join(f"'{tx.description}' {tx.amount:.2f} on {tx.date}" for tx in batch),
        )
        for listener in list(self._listeners):
            listener(batch)
        return batch

    def acknowledge_alert(self) -> list[Transaction]:
        if not self.pending_alerts:
            return []
        return self.pending_alerts.popleft()

    # -- advice ----------------------------------------------------------

    def advice_context(self, target: SavingsTarget) -> AdviceContext:
        return build_advice_context(self.stats, target, top_n=self.advice_top_n)

    def set_advice(self, advice: AdviceResponse, target: SavingsTarget) -> None:
        self.advice = advice
        self.savings_target = target
