from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping

from splitledger.models import MemberId
from splitledger.utils.money import AmountLike, parse_amount


class InvalidAmountError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Transfer:
    from_user: MemberId
    to_user: MemberId
    amount: Decimal


def validate_settlement(from_id: MemberId, to_id: MemberId, amount: AmountLike, minor_unit: Decimal) -> Decimal:
    if from_id == to_id:
        raise InvalidAmountError("A member cannot settle with themselves")
    try:
        parsed = parse_amount(amount, minor_unit)
    except ValueError as exc:
        raise InvalidAmountError(str(exc)) from exc
    if parsed <= 0:
        raise InvalidAmountError(f"Settlement amount must be positive, got {parsed}")
    return parsed


def settle(balances: Mapping[MemberId, Decimal]) -> List[Transfer]:
    """Greedy settle-up: largest debtor pays largest creditor until both run out.

    ``balances`` holds net positions, positive for members who are owed money.
    """
    creditors: list[tuple[MemberId, Decimal]] = []
    debtors: list[tuple[MemberId, Decimal]] = []

    for user_id, balance in balances.items():
        if balance > 0:
            creditors.append((user_id, balance))
        elif balance < 0:
            debtors.append((user_id, -balance))

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers: list[Transfer] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        cred_id, cred_amount = creditors[i]
        debt_id, debt_amount = debtors[j]

        transfer_amount = min(cred_amount, debt_amount)
        transfers.append(Transfer(from_user=debt_id, to_user=cred_id, amount=transfer_amount))

        cred_amount -= transfer_amount
        debt_amount -= transfer_amount

        if cred_amount == 0:
            i += 1
        else:
            creditors[i] = (cred_id, cred_amount)

        if debt_amount == 0:
            j += 1
        else:
            debtors[j] = (debt_id, debt_amount)

    return transfers
