from lumina.core.settings import DEFAULT_ADVICE_TOP_CATEGORIES
from lumina.models import AdviceContext, FinancialStats, SavingsFrequency, SavingsTarget


def monthly_equivalent(target: SavingsTarget) -> float:
    if target.frequency is SavingsFrequency.WEEKLY:
        return target.amount * 4
    if target.frequency is SavingsFrequency.QUARTERLY:
        return target.amount / 3
    return target.amount


def build_advice_context(
    stats: FinancialStats,
    target: SavingsTarget,
    top_n: int = DEFAULT_ADVICE_TOP_CATEGORIES,
) -> AdviceContext:
    return AdviceContext(
        current_savings=stats.savings,
        target_savings_monthly=monthly_equivalent(target),
        total_income=stats.total_income,
        total_expense=stats.total_expense,
        top_expenses=[total.model_copy() for total in stats.top_categories[:top_n]],
    )
