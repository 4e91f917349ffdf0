from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import List

from splitledger.ledger import Ledger
from splitledger.models import MemberId
from splitledger.services.netting import DebtGraph
from splitledger.services.settlement import Transfer, settle


class BalanceService:
    """Read-side views over a ledger's netted graph."""

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    def group_balances(self, group_id: str) -> DebtGraph:
        return self._ledger.simplified_graph(group_id)

    def member_balance(self, user_id: MemberId, group_id: str) -> dict[MemberId, Decimal]:
        """Signed balances from ``user_id``'s side.

        Positive: the counterparty owes ``user_id``. Negative: ``user_id`` owes
        the counterparty. An empty result means settled up.
        """
        graph = self._ledger.simplified_graph(group_id)
        balance: dict[MemberId, Decimal] = {}
        for creditor, amount in graph.get(user_id, {}).items():
            balance[creditor] = -amount
        for debtor, row in graph.items():
            if debtor != user_id and user_id in row:
                balance[debtor] = row[user_id]
        return balance

    def net_positions(self, group_id: str) -> dict[MemberId, Decimal]:
        positions: defaultdict[MemberId, Decimal] = defaultdict(Decimal)
        for debtor, row in self._ledger.simplified_graph(group_id).items():
            for creditor, amount in row.items():
                positions[debtor] -= amount
                positions[creditor] += amount
        return {member: amount for member, amount in positions.items() if amount != 0}

    def settle_up_plan(self, group_id: str) -> List[Transfer]:
        positions = self.net_positions(group_id)
        ordered = {member: positions[member] for member in sorted(positions, key=str)}
        return settle(ordered)
