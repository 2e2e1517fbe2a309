"""Fold expenses into a net balance per person."""
import logging
from collections import defaultdict
from typing import Iterable

from splitledger.schemas import Balance, Expense
from splitledger.services.ordering import sorted_people
from splitledger.services.splits import compute_split

logger = logging.getLogger(__name__)


def compute_balances(expenses: Iterable[Expense]) -> dict[str, Balance]:
    """
    person -> Balance (paid, owed, net = paid - owed), keyed in canonical order.
    The first expense whose split does not reconcile aborts the whole call.
    """
    paid: dict[str, int] = defaultdict(int)
    owed: dict[str, int] = defaultdict(int)
    count = 0
    for expense in expenses:
        split = compute_split(expense)
        paid[expense.paid_by] += expense.amount
        for person, share in split.items():
            owed[person] += share
        count += 1

    people = sorted_people(set(paid) | set(owed))
    logger.debug("Computed balances for %d people over %d expenses", len(people), count)
    return {p: Balance(person=p, paid=paid.get(p, 0), owed=owed.get(p, 0)) for p in people}
