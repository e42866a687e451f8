import pytest

from lumina.domain.aggregation import aggregate
from lumina.models import Category


def test_empty_input():
    stats = aggregate([])
    assert stats.monthly_summary == []
    assert stats.top_categories == []
    assert stats.total_income == 0
    assert stats.total_expense == 0
    assert stats.savings == 0


def test_negative_rent_scenario(make_tx):
    # Sign in the input is dropped; direction comes from the type.
    tx = make_tx(date="2024-01-05", amount=-50, description="Rent", category="Utilities")
    stats = aggregate([tx])

    assert tx.amount == 50
    assert [m.model_dump() for m in stats.monthly_summary] == [
        {"month": "2024-01", "total_income": 0.0, "total_expense": 50.0, "savings": -50.0}
    ]
    assert [(c.category, c.amount) for c in stats.top_categories] == [(Category.UTILITIES, 50.0)]


def test_months_sorted_and_totals_consistent(make_tx):
    txs = [
        make_tx(date="2024-03-02", amount=100, type="INCOME", category="Salary"),
        make_tx(date="2023-12-30", amount=20, category="Shopping"),
        make_tx(date="2024-03-10", amount=30, category="Health"),
        make_tx(date="2024-01-01", amount=500, type="INCOME", category="Salary"),
    ]
    stats = aggregate(txs)

    assert [m.month for m in stats.monthly_summary] == ["2023-12", "2024-01", "2024-03"]
    assert sum(m.total_income for m in stats.monthly_summary) == pytest.approx(stats.total_income)
    assert sum(m.total_expense for m in stats.monthly_summary) == pytest.approx(stats.total_expense)
    for month in stats.monthly_summary:
        assert month.savings == month.total_income - month.total_expense
    assert stats.savings == stats.total_income - stats.total_expense


def test_income_only_month_has_zero_expense(make_tx):
    stats = aggregate([make_tx(date="2024-05-01", amount=10, type="INCOME", category="Salary")])
    assert stats.monthly_summary[0].total_expense == 0
    assert stats.top_categories == []


def test_categories_descending_with_stable_ties(make_tx):
    txs = [
        make_tx(amount=10, category="Health"),
        make_tx(amount=40, category="Shopping"),
        make_tx(amount=10, category="Transportation"),
        make_tx(amount=5, category="Health"),
        make_tx(amount=1000, type="INCOME", category="Entertainment"),
    ]
    stats = aggregate(txs)

    assert [(c.category.value, c.amount) for c in stats.top_categories] == [
        ("Shopping", 40.0),
        ("Health", 15.0),
        ("Transportation", 10.0),
    ]


def test_ties_keep_first_seen_order(make_tx):
    stats = aggregate([make_tx(amount=5, category="Utilities"), make_tx(amount=5, category="Food & Dining")])
    assert [c.category for c in stats.top_categories] == [Category.UTILITIES, Category.FOOD]
