from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional, Protocol, Sequence

from splitledger.models import MemberId, SplitKind
from splitledger.utils.money import HUNDRED, parse_amount, parse_percentage

SplitParams = Optional[Mapping[MemberId, object]]


class InvalidSplitError(ValueError):
    pass


class SplitPolicy(Protocol):
    kind: SplitKind

    def validate(
        self,
        total: Decimal,
        participants: Sequence[MemberId],
        params: SplitParams,
        minor_unit: Decimal,
    ) -> bool: ...

    def compute(
        self,
        total: Decimal,
        participants: Sequence[MemberId],
        params: SplitParams,
        minor_unit: Decimal,
    ) -> dict[MemberId, Decimal]: ...


def _base_valid(total: Decimal, participants: Sequence[MemberId]) -> bool:
    return total > 0 and len(participants) > 0 and len(set(participants)) == len(participants)


def _covers_exactly(participants: Sequence[MemberId], params: SplitParams) -> bool:
    return params is not None and set(params) == set(participants)


def split_amount(total: Decimal, participants: Sequence[MemberId], minor_unit: Decimal) -> dict[MemberId, Decimal]:
    """Equal shares rounded half-up; the last participant absorbs the remainder."""
    if not participants:
        raise InvalidSplitError("Cannot split among zero participants")

    n = len(participants)
    share = (total / Decimal(n)).quantize(minor_unit, rounding=ROUND_HALF_UP)

    shares = {participant: share for participant in participants[:-1]}
    shares[participants[-1]] = total - share * (n - 1)
    return shares


class EqualSplit:
    kind = SplitKind.EQUAL

    def validate(self, total, participants, params, minor_unit) -> bool:
        return _base_valid(total, participants)

    def compute(self, total, participants, params, minor_unit) -> dict[MemberId, Decimal]:
        if not self.validate(total, participants, params, minor_unit):
            raise InvalidSplitError("Equal split needs a positive total and at least one participant")
        return split_amount(total, participants, minor_unit)


class ExactSplit:
    kind = SplitKind.EXACT

    def _amounts(self, params: Mapping[MemberId, object], minor_unit: Decimal) -> dict[MemberId, Decimal] | None:
        amounts: dict[MemberId, Decimal] = {}
        for member, value in params.items():
            try:
                amount = parse_amount(value, minor_unit)  # type: ignore[arg-type]
            except ValueError:
                return None
            if amount < 0:
                return None
            amounts[member] = amount
        return amounts

    def validate(self, total, participants, params, minor_unit) -> bool:
        if not _base_valid(total, participants) or not _covers_exactly(participants, params):
            return False
        amounts = self._amounts(params, minor_unit)
        if amounts is None:
            return False
        return sum(amounts.values(), Decimal(0)) == total

    def compute(self, total, participants, params, minor_unit) -> dict[MemberId, Decimal]:
        if not self.validate(total, participants, params, minor_unit):
            raise InvalidSplitError(f"Exact amounts must cover every participant and add up to {total}")
        amounts = self._amounts(params, minor_unit)
        assert amounts is not None
        return {participant: amounts[participant] for participant in participants}


class PercentageSplit:
    kind = SplitKind.PERCENTAGE

    def _percentages(self, params: Mapping[MemberId, object]) -> dict[MemberId, Decimal] | None:
        percentages: dict[MemberId, Decimal] = {}
        for member, value in params.items():
            try:
                pct = parse_percentage(value)  # type: ignore[arg-type]
            except ValueError:
                return None
            if pct < 0:
                return None
            percentages[member] = pct
        return percentages

    def validate(self, total, participants, params, minor_unit) -> bool:
        if not _base_valid(total, participants) or not _covers_exactly(participants, params):
            return False
        percentages = self._percentages(params)
        if percentages is None:
            return False
        return sum(percentages.values(), Decimal(0)) == HUNDRED

    def compute(self, total, participants, params, minor_unit) -> dict[MemberId, Decimal]:
        if not self.validate(total, participants, params, minor_unit):
            raise InvalidSplitError("Percentages must cover every participant and add up to 100")
        percentages = self._percentages(params)
        assert percentages is not None

        shares: dict[MemberId, Decimal] = {}
        for participant in participants[:-1]:
            amount = total * percentages[participant] / HUNDRED
            shares[participant] = amount.quantize(minor_unit, rounding=ROUND_HALF_UP)
        shares[participants[-1]] = total - sum(shares.values(), Decimal(0))
        return shares


POLICIES: dict[SplitKind, SplitPolicy] = {
    SplitKind.EQUAL: EqualSplit(),
    SplitKind.EXACT: ExactSplit(),
    SplitKind.PERCENTAGE: PercentageSplit(),
}


def parse_split_kind(kind: SplitKind | str) -> SplitKind:
    if isinstance(kind, SplitKind):
        return kind
    try:
        return SplitKind(str(kind).strip().lower())
    except ValueError as exc:
        raise InvalidSplitError(f"Unknown split kind {kind!r}") from exc


def get_policy(kind: SplitKind | str) -> SplitPolicy:
    return POLICIES[parse_split_kind(kind)]
