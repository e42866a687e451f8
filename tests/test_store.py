import pytest

from lumina.models import Category, Transaction, TransactionType
from lumina.store import TransactionStore


@pytest.fixture
def store() -> TransactionStore:
    return TransactionStore()


def test_merge_assigns_missing_ids_and_keeps_order(store, make_tx):
    first = make_tx(description="A")
    second = make_tx(description="B", id="given-id")

    store.merge([first, second])

    assert [tx.description for tx in store] == ["A", "B"]
    assert first.id
    assert second.id == "given-id"


def test_merge_does_not_deduplicate(store, make_tx):
    store.merge([make_tx(description="Rent", amount=900), make_tx(description="Rent", amount=900)])
    assert len(store) == 2


def test_add_manual_normalizes_entry(store):
    tx = store.add_manual("2024-02-01", -42.5, "Market", TransactionType.EXPENSE)

    assert tx.amount == 42.5
    assert tx.category is Category.OTHER
    assert tx.is_manual_entry is True
    assert tx.id
    assert store.get(tx.id) is tx


def test_add_manual_defaults_description(store):
    tx = store.add_manual("2024-02-01", 5, "   ", "INCOME")
    assert tx.description == "Cash Entry"
    assert tx.type is TransactionType.INCOME


def test_mark_suspicious_is_idempotent(store, make_tx):
    tx = make_tx()
    store.merge([tx])

    assert store.mark_suspicious([tx.id]) == [tx]
    assert store.mark_suspicious([tx.id]) == []
    assert tx.is_flagged_suspicious is True


def test_mark_suspicious_ignores_unknown_ids(store, make_tx):
    store.merge([make_tx()])
    assert store.mark_suspicious(["missing"]) == []


def test_reset_clears_everything(store, make_tx):
    store.merge([make_tx(), make_tx()])
    assert store.reset() == 2
    assert len(store) == 0
    assert store.transactions == []


def test_ingested_amounts_are_never_negative():
    for raw in (-50, "-12.30", 0, 7.25, "1,250.00"):
        tx = Transaction(date="2024-01-01", amount=raw, type="EXPENSE")
        assert tx.amount >= 0


def test_unknown_category_falls_back_to_other():
    tx = Transaction(date="2024-01-01", amount=1, type="EXPENSE", category="Crypto")
    assert tx.category is Category.OTHER

    tx = Transaction(date="2024-01-01", amount=1, type="EXPENSE", category="food & dining")
    assert tx.category is Category.FOOD


def test_merge_replaces_ids_already_in_use(store, make_tx):
    store.merge([make_tx(description="A", id="x")])
    store.merge([make_tx(description="B", id="x"), make_tx(description="C", id="x")])

    ids = [tx.id for tx in store]
    assert ids[0] == "x"
    assert len(set(ids)) == 3

    flagged = store.mark_suspicious(["x"])
    assert [tx.description for tx in flagged] == ["A"]
    assert store.get("x").description == "A"
