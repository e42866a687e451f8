from collections.abc import Callable

import pytest

from lumina.models import Transaction


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    def _make(
        date: str = "2024-01-05",
        amount: float = 10.0,
        type: str = "EXPENSE",
        category: str = "Other",
        description: str = "Coffee",
        **extra,
    ) -> Transaction:
        return Transaction(
            date=date,
            amount=amount,
            type=type,
            category=category,
            description=description,
            **extra,
        )

    return _make
