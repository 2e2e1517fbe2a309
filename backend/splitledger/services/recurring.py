"""Expand recurring rules into concrete expenses.

Materialized expenses have exactly the shape of manually entered ones; the
engine never sees the rule itself.
"""
from datetime import date, timedelta
from typing import Iterator, Optional

from splitledger.schemas import ExpenseCreate, Frequency, RecurringRuleCreate
from splitledger.services.dates import add_months


def nth_occurrence(rule: RecurringRuleCreate, n: int) -> date:
    """Occurrences are anchored on start_date so month-end rules do not drift."""
    if rule.frequency == Frequency.DAILY:
        return rule.start_date + timedelta(days=n)
    if rule.frequency == Frequency.WEEKLY:
        return rule.start_date + timedelta(weeks=n)
    if rule.frequency == Frequency.MONTHLY:
        return add_months(rule.start_date, n)
    return add_months(rule.start_date, 12 * n)


def occurrences(rule: RecurringRuleCreate, until: date, after: Optional[date] = None) -> Iterator[date]:
    """Dates from start_date through min(end_date, until), skipping any on or before `after`."""
    last = until if rule.end_date is None else min(until, rule.end_date)
    n = 0
    current = rule.start_date
    while current <= last:
        if after is None or current > after:
            yield current
        n += 1
        current = nth_occurrence(rule, n)


def materialize(rule: RecurringRuleCreate, until: date, after: Optional[date] = None) -> list[ExpenseCreate]:
    fields = rule.model_dump(include=set(ExpenseCreate.model_fields) - {"date"})
    return [ExpenseCreate(**fields, date=day) for day in occurrences(rule, until, after)]
