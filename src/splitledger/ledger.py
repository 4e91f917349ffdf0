"""Append-only expense and settlement history per group.

The ledger is the single source the netting pass reads from. Each group
gets its own book guarded by a readers/writer lock; writes append and drop
the cached netted graph, reads replay the history only when the cache is
empty.

Usage:
    directory = InMemoryDirectory()
    directory.add_group("trip", ["ann", "bob"])
    ledger = Ledger(directory)
    ledger.record_expense("trip", "ann", "90.00", SplitKind.EQUAL)
    ledger.simplified_graph("trip")  # {"bob": {"ann": Decimal("45.00")}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from itertools import count
from threading import Lock
from typing import Iterator, Optional, Sequence

from splitledger.config import Settings, get_settings
from splitledger.locks import ReadWriteLock
from splitledger.logging import get_logger
from splitledger.models import Expense, MemberId, Settlement, SplitKind
from splitledger.services.directory import MemberDirectory, NonMemberError, assert_group_member, ensure_group
from splitledger.services.netting import DebtGraph, copy_graph, simplify
from splitledger.services.settlement import InvalidAmountError, validate_settlement
from splitledger.services.split import InvalidSplitError, SplitParams, get_policy, parse_split_kind
from splitledger.utils.money import AmountLike, parse_amount


@dataclass
class _GroupBook:
    expenses: list[Expense] = field(default_factory=list)
    settlements: list[Settlement] = field(default_factory=list)
    cached: Optional[DebtGraph] = None
    lock: ReadWriteLock = field(default_factory=ReadWriteLock)
    cache_lock: Lock = field(default_factory=Lock)


class Ledger:
    def __init__(self, directory: MemberDirectory, settings: Settings | None = None) -> None:
        self._directory = directory
        self._settings = settings or get_settings()
        self._books: dict[str, _GroupBook] = {}
        self._books_lock = Lock()
        self._ids_lock = Lock()
        self._expense_ids = count(1)
        self._settlement_ids = count(1)
        self._log = get_logger(__name__)

    @property
    def minor_unit(self) -> Decimal:
        return self._settings.minor_unit

    def _book(self, group_id: str) -> _GroupBook:
        ensure_group(self._directory, group_id)
        with self._books_lock:
            book = self._books.get(group_id)
            if book is None:
                book = self._books[group_id] = _GroupBook()
            return book

    def _next_id(self, prefix: str, counter: Iterator[int]) -> str:
        with self._ids_lock:
            return f"{prefix}{next(counter)}"

    def _default_participants(self, group_id: str, kind: SplitKind, params: SplitParams) -> list[MemberId]:
        if kind is SplitKind.EQUAL:
            return sorted(self._directory.members_of(group_id), key=str)
        return list(params or ())

    def record_expense(
        self,
        group_id: str,
        payer_id: MemberId,
        total_amount: AmountLike,
        split_kind: SplitKind | str,
        split_params: SplitParams = None,
        participants: Optional[Sequence[MemberId]] = None,
        description: str = "",
    ) -> Expense:
        book = self._book(group_id)
        try:
            try:
                total = parse_amount(total_amount, self.minor_unit)
            except ValueError as exc:
                raise InvalidSplitError(str(exc)) from exc
            kind = parse_split_kind(split_kind)
            policy = get_policy(kind)

            assert_group_member(self._directory, group_id, payer_id)
            if participants is None:
                ordered = self._default_participants(group_id, kind, split_params)
            else:
                ordered = list(participants)
            for participant in ordered:
                assert_group_member(self._directory, group_id, participant)

            if not policy.validate(total, ordered, split_params, self.minor_unit):
                raise InvalidSplitError(f"Invalid {kind.value} split of {total} among {len(ordered)} participants")
            splits = policy.compute(total, ordered, split_params, self.minor_unit)
        except (InvalidSplitError, NonMemberError) as exc:
            self._log.warning("expense.rejected", group_id=group_id, payer_id=payer_id, reason=str(exc))
            raise

        expense = Expense(
            id=self._next_id("E", self._expense_ids),
            group_id=group_id,
            payer_id=payer_id,
            total_amount=total,
            split_kind=kind,
            splits=splits,
            description=description,
        )
        with book.lock.write():
            book.expenses.append(expense)
            book.cached = None

        self._log.info(
            "expense.recorded",
            expense_id=expense.id,
            group_id=group_id,
            payer_id=payer_id,
            total=str(total),
            split_kind=kind.value,
        )
        return expense

    def record_settlement(
        self,
        group_id: str,
        from_id: MemberId,
        to_id: MemberId,
        amount: AmountLike,
    ) -> Settlement:
        book = self._book(group_id)
        try:
            assert_group_member(self._directory, group_id, from_id)
            assert_group_member(self._directory, group_id, to_id)
            parsed = validate_settlement(from_id, to_id, amount, self.minor_unit)
        except (InvalidAmountError, NonMemberError) as exc:
            self._log.warning("settlement.rejected", group_id=group_id, from_id=from_id, to_id=to_id, reason=str(exc))
            raise

        settlement = Settlement(
            id=self._next_id("S", self._settlement_ids),
            group_id=group_id,
            from_id=from_id,
            to_id=to_id,
            amount=parsed,
        )
        with book.lock.write():
            book.settlements.append(settlement)
            book.cached = None

        self._log.info(
            "settlement.recorded",
            settlement_id=settlement.id,
            group_id=group_id,
            from_id=from_id,
            to_id=to_id,
            amount=str(parsed),
        )
        return settlement

    def get_history(self, group_id: str) -> tuple[tuple[Expense, ...], tuple[Settlement, ...]]:
        book = self._book(group_id)
        with book.lock.read():
            return tuple(book.expenses), tuple(book.settlements)

    def simplified_graph(self, group_id: str) -> DebtGraph:
        book = self._book(group_id)
        with book.lock.read():
            cached = book.cached
            if cached is None:
                # writers are excluded while the read lock is held, so the lists are a consistent snapshot
                cached = simplify(book.expenses, book.settlements)
                with book.cache_lock:
                    book.cached = cached
                self._log.debug(
                    "balances.recomputed",
                    group_id=group_id,
                    expenses=len(book.expenses),
                    settlements=len(book.settlements),
                )
            return copy_graph(cached)
