"""Minimize number of transfers so everyone is settled (who owes whom)."""
import heapq
import logging
from typing import Mapping, Union

from splitledger.errors import UnbalancedLedger
from splitledger.schemas import Balance, Settlement
from splitledger.services.ordering import person_key

logger = logging.getLogger(__name__)

# One minor unit of drift is tolerated; anything larger is an upstream defect.
BALANCE_TOLERANCE = 1


def _net(value: Union[Balance, int]) -> int:
    return value.net if isinstance(value, Balance) else int(value)


def minimize_settlements(balances: Mapping[str, Union[Balance, int]]) -> list[Settlement]:
    """
    balances: person -> Balance or bare net (positive = is owed money, negative = owes money).
    Greedily matches the largest creditor with the largest debtor until one side
    runs out. Returns the transfers ordered by (payer, payee).
    """
    nets = {person: _net(value) for person, value in balances.items()}
    total = sum(nets.values())
    if abs(total) > BALANCE_TOLERANCE:
        raise UnbalancedLedger(total)

    # Heaps of (-outstanding, key, person) so the largest amount pops first.
    creditors = [(-net, person_key(p), p) for p, net in nets.items() if net > 0]
    debtors = [(net, person_key(p), p) for p, net in nets.items() if net < 0]
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    out: list[Settlement] = []
    while creditors and debtors:
        c_neg, c_key, cp = heapq.heappop(creditors)
        d_neg, d_key, dp = heapq.heappop(debtors)
        credit, debt = -c_neg, -d_neg
        transfer = min(credit, debt)
        out.append(Settlement(from_person=dp, to_person=cp, amount=transfer))
        logger.debug("%s pays %s %d", dp, cp, transfer)
        if credit > transfer:
            heapq.heappush(creditors, (transfer - credit, c_key, cp))
        if debt > transfer:
            heapq.heappush(debtors, (transfer - debt, d_key, dp))

    out.sort(key=lambda s: (person_key(s.from_person), person_key(s.to_person)))
    return out
