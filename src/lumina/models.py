from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Category(str, Enum):
    FOOD = "Food & Dining"
    TRANSPORT = "Transportation"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    SALARY = "Salary"
    TRANSFER = "Transfer"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value: Any) -> "Category":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().casefold()
        for member in cls:
            if member.value.casefold() == text:
                return member
        return cls.OTHER


class SavingsFrequency(str, Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"


class CamelModel(BaseModel):
    # Python attributes stay snake_case; the wire format is camelCase.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Transaction(CamelModel):
    id: str | None = None
    date: str
    description: str = ""
    amount: float = Field(ge=0)
    type: TransactionType
    category: Category = Category.OTHER
    is_manual_entry: bool = False
    is_flagged_suspicious: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_iso(cls, value: Any) -> Any:
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _absolute_amount(cls, value: Any) -> Any:
        # Direction lives in ``type``; the sign of the number is never trusted.
        if isinstance(value, str):
            value = value.strip().replace(",", "")
        try:
            return abs(float(value))
        except (TypeError, ValueError):
            return value

    @field_validator("type", mode="before")
    @classmethod
    def _upper_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value: Any) -> Category:
        return Category.coerce(value)


class MonthlySummary(CamelModel):
    month: str
    total_income: float = 0.0
    total_expense: float = 0.0
    savings: float = 0.0


class CategoryTotal(CamelModel):
    category: Category
    amount: float


class FinancialStats(CamelModel):
    monthly_summary: list[MonthlySummary] = Field(default_factory=list)
    top_categories: list[CategoryTotal] = Field(default_factory=list)
    total_income: float = 0.0
    total_expense: float = 0.0
    savings: float = 0.0


class SavingsTarget(CamelModel):
    amount: float = Field(gt=0)
    frequency: SavingsFrequency = SavingsFrequency.MONTHLY


class AdviceContext(CamelModel):
    current_savings: float
    target_savings_monthly: float
    total_income: float
    total_expense: float
    top_expenses: list[CategoryTotal] = Field(default_factory=list)


class SuggestedCut(CamelModel):
    category: str
    suggested_reduction: float
    reason: str = ""


class AdviceResponse(CamelModel):
    advice: str
    suggested_cuts: list[SuggestedCut] = Field(default_factory=list)
