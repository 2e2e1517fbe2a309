"""Pydantic schemas: domain values consumed by the engine and request/response bodies.

All currency values are integer minor units (e.g. cents).
"""
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class ShareType(str, Enum):
    EQUAL = "EQUAL"
    EXACT = "EXACT"
    PERCENTAGE = "PERCENTAGE"


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


# ----- Expense -----
class ShareEntry(BaseModel):
    """One custom share: minor units for EXACT, a percentage for PERCENTAGE."""

    person: str
    value: Decimal

    class Config:
        frozen = True


class ExpenseBase(BaseModel):
    amount: int = Field(ge=0)
    description: str = ""
    paid_by: str = Field(min_length=1)
    participants: tuple[str, ...] = ()
    share_type: ShareType = ShareType.EQUAL
    custom_shares: tuple[ShareEntry, ...] = ()
    category: str = "other"

    @field_validator("participants")
    @classmethod
    def participants_unique(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(v)) != len(v):
            raise ValueError("Participants must be unique")
        return v

    @model_validator(mode="after")
    def shares_match_participants(self):
        seen = set()
        for entry in self.custom_shares:
            if entry.person not in self.participants:
                raise ValueError(f"Custom share given for non-participant {entry.person!r}")
            if entry.person in seen:
                raise ValueError(f"Duplicate custom share for {entry.person!r}")
            seen.add(entry.person)
        return self


class ExpenseCreate(ExpenseBase):
    date: Optional[dt.date] = None


class Expense(ExpenseBase):
    """Immutable expense fact as read by the engine."""

    id: int
    date: dt.date

    class Config:
        frozen = True


class SplitResponse(BaseModel):
    expense_id: int
    shares: dict[str, int]


# ----- Balance / Settlement -----
class Balance(BaseModel):
    person: str
    paid: int = 0
    owed: int = 0

    @computed_field
    @property
    def net(self) -> int:
        return self.paid - self.owed


class Settlement(BaseModel):
    """`from_person` must pay `to_person`."""

    from_person: str = Field(alias="from")
    to_person: str = Field(alias="to")
    amount: int = Field(gt=0)

    class Config:
        populate_by_name = True


class SettlementSummary(BaseModel):
    balances: list[Balance]
    settlements: list[Settlement]


class MinimizeRequest(BaseModel):
    balances: dict[str, int]


# ----- Analytics -----
class MonthlySummary(BaseModel):
    year: int
    month: int
    total_amount: int = 0
    total_expenses: int = 0
    average_expense: int = 0


class CategorySummaryItem(BaseModel):
    category: str
    total_amount: int = 0
    expense_count: int = 0


class PersonSpending(BaseModel):
    total_paid: int = 0
    category_breakdown: dict[str, int] = {}
    category_percentages: dict[str, int] = {}


class SpendingPatterns(BaseModel):
    total_amount: int = 0
    total_expenses: int = 0
    average_expense: int = 0
    individual_spending: dict[str, PersonSpending] = {}


class IndividualStats(BaseModel):
    total_amount: int = 0
    count: int = 0
    percentage: Decimal = Decimal("0.00")


class GroupStats(IndividualStats):
    average_participants: Decimal = Decimal("0.00")
    categories: dict[str, int] = {}


class TotalStats(BaseModel):
    amount: int = 0
    expenses: int = 0


class IndividualVsGroup(BaseModel):
    individual: IndividualStats
    group: GroupStats
    total: TotalStats


# ----- Recurring -----
class RecurringRuleCreate(ExpenseBase):
    frequency: Frequency = Frequency.MONTHLY
    start_date: dt.date
    end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RecurringRule(RecurringRuleCreate):
    id: int
    last_materialized: Optional[dt.date] = None


class MaterializeResult(BaseModel):
    until: dt.date
    created: list[Expense]
