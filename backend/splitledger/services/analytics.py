"""Reporting aggregations over a filtered expense sequence.

Every function is pure: the same expenses and parameters always give the same
result, and an empty input gives zero-valued results rather than an error.
Parameters are validated before anything is aggregated.
"""
import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Union

from splitledger.errors import InvalidQuery
from splitledger.schemas import (
    CategorySummaryItem, Expense, GroupStats, IndividualStats, IndividualVsGroup,
    MonthlySummary, PersonSpending, SpendingPatterns, Timeframe, TotalStats,
)
from splitledger.config import TOP_EXPENSES_DEFAULT_LIMIT
from splitledger.services.dates import add_months, check_range, in_range
from splitledger.services.ordering import expense_key, sorted_people

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def _within(expenses: Sequence[Expense], start_date, end_date) -> list[Expense]:
    return [e for e in expenses if in_range(e.date, start_date, end_date)]


def _average(total: int, count: int) -> int:
    if not count:
        return 0
    return int((Decimal(total) / count).quantize(Decimal(1), rounding=ROUND_HALF_EVEN))


def _percentage(part: int, whole: int) -> Decimal:
    if not whole:
        return Decimal("0.00")
    return (Decimal(part) * 100 / whole).quantize(_CENTS, rounding=ROUND_HALF_EVEN)


def monthly_summary(expenses: Sequence[Expense], year: int, month: int) -> MonthlySummary:
    if not 1 <= month <= 12:
        raise InvalidQuery(f"month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidQuery(f"year must be between 1 and 9999, got {year}")

    selected = [e for e in expenses if e.date.year == year and e.date.month == month]
    total = sum(e.amount for e in selected)
    return MonthlySummary(
        year=year,
        month=month,
        total_amount=total,
        total_expenses=len(selected),
        average_expense=_average(total, len(selected)),
    )


def monthly_totals(
    expenses: Sequence[Expense],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict[str, int]:
    """Maps "YYYY-MM" to the total spent that month, oldest first. Empty months are left out."""
    check_range(start_date, end_date)

    totals: dict[str, int] = {}
    for e in sorted(_within(expenses, start_date, end_date), key=lambda e: e.date):
        key = f"{e.date.year:04d}-{e.date.month:02d}"
        totals[key] = totals.get(key, 0) + e.amount
    return totals


def category_summary(
    expenses: Sequence[Expense],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ranked: bool = False,
) -> list[CategorySummaryItem]:
    """Per-category totals in first-seen order, or largest total first when `ranked`."""
    check_range(start_date, end_date)

    items: dict[str, CategorySummaryItem] = {}
    for e in _within(expenses, start_date, end_date):
        item = items.setdefault(e.category, CategorySummaryItem(category=e.category))
        item.total_amount += e.amount
        item.expense_count += 1

    out = list(items.values())
    if ranked:
        out.sort(key=lambda i: (-i.total_amount, i.category))
    return out


def spending_patterns(
    expenses: Sequence[Expense],
    person: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> SpendingPatterns:
    """
    What each payer personally paid, broken down by category.

    With `person`, only expenses they paid are counted and they always appear
    in `individual_spending`, even with nothing paid.
    """
    check_range(start_date, end_date)

    selected = _within(expenses, start_date, end_date)
    if person is not None:
        selected = [e for e in selected if e.paid_by == person]

    paid: dict[str, int] = {}
    breakdowns: dict[str, dict[str, int]] = {}
    if person is not None:
        paid[person] = 0
        breakdowns[person] = {}
    for e in selected:
        paid[e.paid_by] = paid.get(e.paid_by, 0) + e.amount
        breakdown = breakdowns.setdefault(e.paid_by, {})
        breakdown[e.category] = breakdown.get(e.category, 0) + e.amount

    individual = {}
    for p in sorted_people(paid):
        total_paid = paid[p]
        breakdown = breakdowns[p]
        individual[p] = PersonSpending(
            total_paid=total_paid,
            category_breakdown=breakdown,
            category_percentages={
                category: _whole_percent(amount, total_paid) for category, amount in breakdown.items()
            },
        )

    total = sum(e.amount for e in selected)
    return SpendingPatterns(
        total_amount=total,
        total_expenses=len(selected),
        average_expense=_average(total, len(selected)),
        individual_spending=individual,
    )


def _whole_percent(amount: int, total: int) -> int:
    if not total:
        return 0
    return int((Decimal(amount) * 100 / total).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_timeframe(timeframe: Union[Timeframe, str, None]) -> Optional[Timeframe]:
    if timeframe is None or isinstance(timeframe, Timeframe):
        return timeframe
    try:
        return Timeframe(timeframe.lower())
    except ValueError:
        allowed = ", ".join(t.value for t in Timeframe)
        raise InvalidQuery(f"Invalid timeframe {timeframe!r}. Must be one of: {allowed}") from None


def timeframe_start(timeframe: Timeframe, today: date) -> date:
    """First day of the inclusive window ending at `today`: 7 calendar days for a week, whole months otherwise."""
    if timeframe == Timeframe.WEEK:
        return today - timedelta(days=6)
    months = {Timeframe.MONTH: 1, Timeframe.QUARTER: 3, Timeframe.YEAR: 12}[timeframe]
    return add_months(today, -months)


def top_expenses(
    expenses: Sequence[Expense],
    limit: int = TOP_EXPENSES_DEFAULT_LIMIT,
    category: Optional[str] = None,
    timeframe: Union[Timeframe, str, None] = None,
    today: Optional[date] = None,
) -> list[Expense]:
    """
    Largest expenses first; ties go to the more recent, then the lower id.
    `timeframe` keeps the window ending at `today` (default: the current date).
    """
    if limit < 1:
        raise InvalidQuery(f"limit must be at least 1, got {limit}")
    window = parse_timeframe(timeframe)

    selected = list(expenses)
    if category:
        selected = [e for e in selected if e.category == category]
    if window is not None:
        today = today or date.today()
        selected = _within(selected, timeframe_start(window, today), today)

    selected.sort(key=lambda e: (-e.amount, -e.date.toordinal(), expense_key(e)))
    logger.debug("Top %d of %d expenses (category=%s, timeframe=%s)", limit, len(selected), category, window)
    return selected[:limit]


def individual_vs_group(
    expenses: Sequence[Expense],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> IndividualVsGroup:
    """Compare single-participant expenses with shared ones."""
    check_range(start_date, end_date)

    selected = _within(expenses, start_date, end_date)
    individual = [e for e in selected if len(e.participants) == 1]
    group = [e for e in selected if len(e.participants) > 1]

    grand_total = sum(e.amount for e in selected)
    individual_total = sum(e.amount for e in individual)
    group_total = sum(e.amount for e in group)

    categories: dict[str, int] = {}
    for e in group:
        categories[e.category] = categories.get(e.category, 0) + e.amount

    if group:
        participants = Decimal(sum(len(e.participants) for e in group))
        average_participants = (participants / len(group)).quantize(_CENTS, rounding=ROUND_HALF_EVEN)
    else:
        average_participants = Decimal("0.00")

    return IndividualVsGroup(
        individual=IndividualStats(
            total_amount=individual_total,
            count=len(individual),
            percentage=_percentage(individual_total, grand_total),
        ),
        group=GroupStats(
            total_amount=group_total,
            count=len(group),
            percentage=_percentage(group_total, grand_total),
            average_participants=average_participants,
            categories=categories,
        ),
        total=TotalStats(amount=grand_total, expenses=len(selected)),
    )
