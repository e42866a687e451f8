from collections.abc import Iterable

from lumina.domain.transactions import month_key
from lumina.models import (
    Category,
    CategoryTotal,
    FinancialStats,
    MonthlySummary,
    Transaction,
    TransactionType,
)


def aggregate(transactions: Iterable[Transaction]) -> FinancialStats:
    """
    Summarize transactions per month and per expense category.

    Amounts are summed as plain floats; rounding is left to the presentation
    layer. Income never contributes to category totals.
    """
    months: dict[str, dict[str, float]] = {}
    category_totals: dict[Category, float] = {}
    total_income = 0.0
    total_expense = 0.0

    for tx in transactions:
        bucket = months.setdefault(month_key(tx), {"income": 0.0, "expense": 0.0})
        if tx.type is TransactionType.INCOME:
            bucket["income"] += tx.amount
            total_income += tx.amount
        else:
            bucket["expense"] += tx.amount
            total_expense += tx.amount
            category_totals[tx.category] = category_totals.get(tx.category, 0.0) + tx.amount

    monthly_summary = [
        MonthlySummary(
            month=month,
            total_income=bucket["income"],
            total_expense=bucket["expense"],
            savings=bucket["income"] - bucket["expense"],
        )
        for month, bucket in sorted(months.items())
    ]

    # sorted() is stable, so equal totals keep first-seen order.
    top_categories = [
        CategoryTotal(category=category, amount=amount)
        for category, amount in sorted(category_totals.items(), key=lambda item: item[1], reverse=True)
    ]

    return FinancialStats(
        monthly_summary=monthly_summary,
        top_categories=top_categories,
        total_income=total_income,
        total_expense=total_expense,
        savings=total_income - total_expense,
    )
