from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from lumina.domain.transactions import parse_date
from lumina.models import Category, Transaction


class DateRangeMode(str, Enum):
    ALL = "ALL"
    THIS_MONTH = "THIS_MONTH"
    LAST_MONTH = "LAST_MONTH"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class DateSelection:
    mode: DateRangeMode = DateRangeMode.ALL
    start: str | None = None
    end: str | None = None

    def has_custom_bounds(self) -> bool:
        return bool((self.start or "").strip() and (self.end or "").strip())

    def custom_bounds(self) -> tuple[date, date] | None:
        """Parsed bounds; ``None`` when either supplied bound is not a date."""
        start = parse_date(self.start)
        end = parse_date(self.end)
        if start is None or end is None:
            return None
        return start, end


ALL_DATES = DateSelection()


def previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def _never(_value: date) -> bool:
    return False


def _date_matcher(selection: DateSelection, today: date):
    if selection.mode is DateRangeMode.THIS_MONTH:
        target = (today.year, today.month)
    elif selection.mode is DateRangeMode.LAST_MONTH:
        target = previous_month(today)
    elif selection.mode is DateRangeMode.CUSTOM:
        if not selection.has_custom_bounds():
            return None
        bounds = selection.custom_bounds()
        if bounds is None:
            return _never
        start, end = bounds

        def in_range(value: date) -> bool:
            return start <= value <= end

        return in_range
    else:
        return None

    def in_month(value: date) -> bool:
        return (value.year, value.month) == target

    return in_month


def _normalize_categories(categories: Iterable[Category | str] | None) -> set[Category]:
    return {Category.coerce(category) for category in categories or ()}


def filter_transactions(
    transactions: Iterable[Transaction],
    selection: DateSelection = ALL_DATES,
    categories: Collection[Category | str] | None = None,
    *,
    today: date | None = None,
) -> list[Transaction]:
    """
    Restrict transactions to a date selection and a category selection.

    An empty category selection means no category restriction. A ``CUSTOM``
    selection without both bounds behaves like ``ALL``; one whose bound does not
    parse matches nothing. Transactions whose date does not parse never match a
    date restriction. Input order is preserved.
    """
    matcher = _date_matcher(selection, today or date.today())
    allowed = _normalize_categories(categories)

    filtered: list[Transaction] = []
    for tx in transactions:
        if matcher is not None:
            tx_date = parse_date(tx.date)
            if tx_date is None or not matcher(tx_date):
                continue
        if allowed and tx.category not in allowed:
            continue
        filtered.append(tx)
    return filtered
