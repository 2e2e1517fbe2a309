"""Canonical ordering used wherever results must be reproducible.

Remainder distribution, percentage correction, settlement tie breaks, top
expense tie breaks and every person-keyed output go through these keys.
"""
from typing import Iterable


def person_key(person: str) -> str:
    return person


def expense_key(expense) -> int:
    return expense.id


def sorted_people(people: Iterable[str]) -> list[str]:
    return sorted(people, key=person_key)
