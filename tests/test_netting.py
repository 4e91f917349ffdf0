from decimal import Decimal

from splitledger.models import Expense, Settlement, SplitKind
from splitledger.services.netting import build_raw_graph, net_graph, simplify


def _expense(expense_id, payer, splits):
    total = sum(splits.values(), Decimal(0))
    return Expense(
        id=expense_id,
        group_id="g",
        payer_id=payer,
        total_amount=total,
        split_kind=SplitKind.EXACT,
        splits=splits,
    )


def _settlement(settlement_id, from_id, to_id, amount):
    return Settlement(id=settlement_id, group_id="g", from_id=from_id, to_id=to_id, amount=Decimal(amount))


def test_raw_graph_skips_payer_share_and_subtracts_settlements():
    expenses = [_expense("E1", "A", {"A": Decimal("10.00"), "B": Decimal("40.00")})]
    settlements = [_settlement("S1", "B", "A", "15.00")]

    raw = build_raw_graph(expenses, settlements)

    assert raw == {"B": {"A": Decimal("25.00")}}


def test_bidirectional_debts_cancel():
    expenses = [
        _expense("E1", "B", {"A": Decimal("50.00")}),
        _expense("E2", "A", {"B": Decimal("20.00")}),
    ]

    raw = build_raw_graph(expenses, [])
    assert raw == {"A": {"B": Decimal("50.00")}, "B": {"A": Decimal("20.00")}}

    assert net_graph(raw) == {"A": {"B": Decimal("30.00")}}


def test_settlement_counts_as_reverse_debt():
    expenses = [_expense("E1", "B", {"A": Decimal("50.00")})]
    settlements = [_settlement("S1", "A", "B", "20.00")]

    assert simplify(expenses, settlements) == {"A": {"B": Decimal("30.00")}}


def test_zero_net_produces_no_edge():
    expenses = [
        _expense("E1", "B", {"A": Decimal("12.00")}),
        _expense("E2", "A", {"B": Decimal("12.00")}),
    ]

    assert simplify(expenses, []) == {}


def test_negative_residual_reverses_direction():
    expenses = [_expense("E1", "B", {"A": Decimal("40.00")})]
    settlements = [_settlement("S1", "A", "B", "60.00")]

    assert simplify(expenses, settlements) == {"B": {"A": Decimal("20.00")}}


def test_simplify_is_idempotent():
    expenses = [
        _expense("E1", "A", {"A": Decimal("30.00"), "B": Decimal("30.00"), "C": Decimal("30.00")}),
        _expense("E2", "B", {"A": Decimal("10.00"), "B": Decimal("10.00"), "C": Decimal("10.00")}),
    ]
    settlements = [_settlement("S1", "C", "B", "5.00")]

    first = simplify(expenses, settlements)
    second = simplify(expenses, settlements)

    assert first == second
    for debtor, row in first.items():
        for creditor in row:
            assert debtor not in first.get(creditor, {})
