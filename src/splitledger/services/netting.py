"""Pairwise netting of the group debt graph.

The raw graph is replayed from history: every split entry of a non-payer
adds to what that member owes the payer, and every settlement subtracts
from what the sender owes the receiver. Entries can go negative or point
both ways between the same pair. Netting collapses each pair into at most
one positive edge.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from itertools import combinations
from typing import Iterable

from splitledger.models import Expense, MemberId, Settlement

DebtGraph = dict[MemberId, dict[MemberId, Decimal]]

ZERO = Decimal(0)


def build_raw_graph(expenses: Iterable[Expense], settlements: Iterable[Settlement]) -> DebtGraph:
    owed: defaultdict[MemberId, defaultdict[MemberId, Decimal]] = defaultdict(lambda: defaultdict(Decimal))

    for expense in expenses:
        for member, amount in expense.splits.items():
            if member == expense.payer_id:
                continue
            owed[member][expense.payer_id] += amount

    for settlement in settlements:
        owed[settlement.from_id][settlement.to_id] -= settlement.amount

    return {debtor: dict(row) for debtor, row in owed.items()}


def net_graph(raw: DebtGraph) -> DebtGraph:
    members: dict[MemberId, None] = {}
    for debtor, row in raw.items():
        members.setdefault(debtor)
        for creditor in row:
            members.setdefault(creditor)

    simplified: DebtGraph = {}
    for a, b in combinations(members, 2):
        net = raw.get(a, {}).get(b, ZERO) - raw.get(b, {}).get(a, ZERO)
        if net > 0:
            simplified.setdefault(a, {})[b] = net
        elif net < 0:
            simplified.setdefault(b, {})[a] = -net

    return simplified


def simplify(expenses: Iterable[Expense], settlements: Iterable[Settlement]) -> DebtGraph:
    return net_graph(build_raw_graph(expenses, settlements))


def copy_graph(graph: DebtGraph) -> DebtGraph:
    return {debtor: dict(row) for debtor, row in graph.items()}
