from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Hashable, Mapping

MemberId = Hashable


class SplitKind(str, Enum):
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Expense:
    id: str
    group_id: str
    payer_id: MemberId
    total_amount: Decimal
    split_kind: SplitKind
    splits: Mapping[MemberId, Decimal] = field(hash=False)
    description: str = ""
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    def __post_init__(self) -> None:
        # callers get a read-only view; the ledger's copy cannot be edited through it
        object.__setattr__(self, "splits", MappingProxyType(dict(self.splits)))


@dataclass(frozen=True, slots=True)
class Settlement:
    id: str
    group_id: str
    from_id: MemberId
    to_id: MemberId
    amount: Decimal
    settled_at: datetime = field(default_factory=_utcnow, compare=False)
