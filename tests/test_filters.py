from datetime import date

from lumina.domain.filters import DateRangeMode, DateSelection, filter_transactions

TODAY = date(2024, 3, 15)


def _descriptions(txs):
    return [tx.description for tx in txs]


def test_all_returns_everything_in_order(make_tx):
    txs = [make_tx(description="b"), make_tx(description="a"), make_tx(description="c", date="garbage")]
    result = filter_transactions(txs, DateSelection(), [], today=TODAY)
    assert _descriptions(result) == ["b", "a", "c"]


def test_this_month(make_tx):
    txs = [
        make_tx(date="2024-03-01", description="in"),
        make_tx(date="2024-02-29", description="out"),
        make_tx(date="2023-03-10", description="last year"),
    ]
    result = filter_transactions(txs, DateSelection(DateRangeMode.THIS_MONTH), today=TODAY)
    assert _descriptions(result) == ["in"]


def test_last_month_rolls_over_year(make_tx):
    txs = [
        make_tx(date="2023-12-31", description="december"),
        make_tx(date="2024-01-02", description="january"),
    ]
    result = filter_transactions(
        txs, DateSelection(DateRangeMode.LAST_MONTH), today=date(2024, 1, 20)
    )
    assert _descriptions(result) == ["december"]


def test_custom_range_is_inclusive(make_tx):
    txs = [
        make_tx(date="2024-01-01", description="start"),
        make_tx(date="2024-01-15", description="middle"),
        make_tx(date="2024-01-31", description="end"),
        make_tx(date="2024-02-01", description="after"),
    ]
    selection = DateSelection(DateRangeMode.CUSTOM, start="2024-01-01", end="2024-01-31")
    result = filter_transactions(txs, selection, today=TODAY)
    assert _descriptions(result) == ["start", "middle", "end"]


def test_custom_without_end_behaves_as_all(make_tx):
    txs = [make_tx(date="2020-01-01"), make_tx(date="2024-01-01")]
    selection = DateSelection(DateRangeMode.CUSTOM, start="2024-01-01", end=None)
    assert len(filter_transactions(txs, selection, today=TODAY)) == 2


def test_malformed_dates_fail_date_restrictions(make_tx):
    txs = [make_tx(date="not-a-date"), make_tx(date="2024-03-02")]
    selection = DateSelection(DateRangeMode.CUSTOM, start="2024-01-01", end="2024-12-31")
    assert len(filter_transactions(txs, selection, today=TODAY)) == 1
    assert len(filter_transactions(txs, DateSelection(DateRangeMode.THIS_MONTH), today=TODAY)) == 1


def test_empty_category_selection_passes_everything(make_tx):
    txs = [make_tx(category="Shopping"), make_tx(category="Health")]
    assert len(filter_transactions(txs, categories=[], today=TODAY)) == 2
    assert len(filter_transactions(txs, categories=None, today=TODAY)) == 2


def test_category_selection_restricts(make_tx):
    txs = [
        make_tx(category="Shopping", description="s"),
        make_tx(category="Health", description="h"),
        make_tx(category="Salary", type="INCOME", description="pay"),
    ]
    result = filter_transactions(txs, categories=["Health", "Salary"], today=TODAY)
    assert _descriptions(result) == ["h", "pay"]


def test_date_and_category_combine(make_tx):
    txs = [
        make_tx(date="2024-03-02", category="Health", description="keep"),
        make_tx(date="2024-02-02", category="Health", description="old"),
        make_tx(date="2024-03-03", category="Shopping", description="other"),
    ]
    result = filter_transactions(
        txs, DateSelection(DateRangeMode.THIS_MONTH), ["Health"], today=TODAY
    )
    assert _descriptions(result) == ["keep"]


def test_custom_with_unparseable_bound_matches_nothing(make_tx):
    txs = [make_tx(date="2024-01-01"), make_tx(date="2024-06-01")]
    selection = DateSelection(DateRangeMode.CUSTOM, start="garbage", end="2024-12-31")
    assert filter_transactions(txs, selection, today=TODAY) == []


def test_custom_with_blank_bound_behaves_as_all(make_tx):
    txs = [make_tx(date="2020-01-01"), make_tx(date="2024-01-01")]
    selection = DateSelection(DateRangeMode.CUSTOM, start="  ", end="2024-12-31")
    assert len(filter_transactions(txs, selection, today=TODAY)) == 2


def test_dates_with_trailing_text_do_not_match(make_tx):
    txs = [
        make_tx(date="2024-01-05xyz", description="junk"),
        make_tx(date="2024-01-05T09:30:00", description="timestamp"),
    ]
    selection = DateSelection(DateRangeMode.CUSTOM, start="2024-01-01", end="2024-12-31")
    assert _descriptions(filter_transactions(txs, selection, today=TODAY)) == ["timestamp"]
