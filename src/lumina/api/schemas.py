from pydantic import Field

from lumina.domain.filters import DateRangeMode
from lumina.models import CamelModel, Transaction, TransactionType


class MergeRequest(CamelModel):
    transactions: list[Transaction]


class ManualEntryRequest(CamelModel):
    date: str
    amount: float
    description: str = ""
    type: TransactionType


class MarkSuspiciousRequest(CamelModel):
    ids: list[str] = Field(default_factory=list)


class FilterRequest(CamelModel):
    mode: DateRangeMode = DateRangeMode.ALL
    start: str | None = None
    end: str | None = None
    categories: list[str] | None = None
