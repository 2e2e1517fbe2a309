"""Share calculator: turn one expense into participant -> owed minor units.

Every policy reconciles exactly to the expense amount in integer arithmetic,
so balances built from these splits always net to zero.
"""
import logging
from decimal import ROUND_HALF_EVEN, Decimal

from splitledger.errors import InvalidSplit
from splitledger.schemas import Expense, ShareType
from splitledger.services.ordering import person_key, sorted_people

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = Decimal("0.01")
HUNDRED = Decimal(100)


def compute_split(expense: Expense) -> dict[str, int]:
    """
    Returns participant -> share in canonical person order.
    Raises InvalidSplit when the expense cannot reconcile to its amount.
    """
    if not expense.participants:
        raise InvalidSplit("At least one participant required", expense.id)

    if expense.share_type == ShareType.EQUAL:
        split = _equal_split(expense.amount, expense.participants)
    elif expense.share_type == ShareType.EXACT:
        split = _exact_split(expense)
    else:
        split = _percentage_split(expense)

    logger.debug("Expense %s (%s, %d) split as %s", expense.id, expense.share_type.value, expense.amount, split)
    return split


def _equal_split(amount: int, participants) -> dict[str, int]:
    people = sorted_people(participants)
    share, remainder = divmod(amount, len(people))
    return {p: share + (1 if i < remainder else 0) for i, p in enumerate(people)}


def _custom_values(expense: Expense) -> dict[str, Decimal]:
    values = {entry.person: entry.value for entry in expense.custom_shares}
    missing = [p for p in sorted_people(expense.participants) if p not in values]
    if missing:
        raise InvalidSplit(f"Missing custom share for: {', '.join(missing)}", expense.id)
    return values


def _exact_split(expense: Expense) -> dict[str, int]:
    values = _custom_values(expense)
    split: dict[str, int] = {}
    for person in sorted_people(expense.participants):
        value = values[person]
        if value < 0 or value != value.to_integral_value():
            raise InvalidSplit(f"Share for {person} must be a whole non-negative amount, got {value}", expense.id)
        split[person] = int(value)

    total = sum(split.values())
    if total != expense.amount:
        raise InvalidSplit(f"Shares total ({total}) must equal expense amount ({expense.amount})", expense.id)
    return split


def _percentage_split(expense: Expense) -> dict[str, int]:
    values = _custom_values(expense)
    people = sorted_people(expense.participants)
    negative = [p for p in people if values[p] < 0]
    if negative:
        raise InvalidSplit(f"Negative percentage for: {', '.join(negative)}", expense.id)
    total_pct = sum(values[p] for p in people)
    if abs(total_pct - HUNDRED) > PERCENTAGE_TOLERANCE:
        raise InvalidSplit(f"Percentages total ({total_pct}) must equal 100", expense.id)

    amount = Decimal(expense.amount)
    split = {
        p: int((amount * values[p] / HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_EVEN))
        for p in people
    }

    remainder = expense.amount - sum(split.values())
    if remainder:
        # Correct one minor unit at a time, largest shares first.
        step = 1 if remainder > 0 else -1
        order = sorted(people, key=lambda p: (-split[p], person_key(p)))
        if step < 0:
            order = [p for p in order if split[p] > 0]
        for i in range(abs(remainder)):
            split[order[i % len(order)]] += step
        if any(share < 0 for share in split.values()):
            raise InvalidSplit("Percentages cannot be reconciled to the amount", expense.id)
    return split
