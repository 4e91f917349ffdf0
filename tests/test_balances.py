from decimal import Decimal

from splitledger.models import SplitKind
from splitledger.services.settlement import Transfer


def test_end_to_end_dinner_and_cab(ledger, balances):
    ledger.record_expense("trip", "A", "90.00", SplitKind.EQUAL, description="dinner")
    ledger.record_expense("trip", "B", "30.00", SplitKind.EQUAL, description="cab")

    assert balances.group_balances("trip") == {
        "B": {"A": Decimal("20.00")},
        "C": {"A": Decimal("30.00"), "B": Decimal("10.00")},
    }
    assert balances.member_balance("A", "trip") == {"B": Decimal("20.00"), "C": Decimal("30.00")}
    assert balances.member_balance("C", "trip") == {"A": Decimal("-30.00"), "B": Decimal("-10.00")}


def test_bidirectional_cancellation(ledger, balances):
    ledger.record_expense("trip", "B", "50.00", SplitKind.EXACT, {"A": "50.00"})
    ledger.record_expense("trip", "A", "20.00", SplitKind.EXACT, {"B": "20.00"})

    graph = balances.group_balances("trip")
    assert graph == {"A": {"B": Decimal("30.00")}}
    assert "A" not in graph.get("B", {})


def test_full_settlement_clears_balance(ledger, balances):
    ledger.record_expense("trip", "B", "40.00", SplitKind.EXACT, {"A": "40.00"})
    assert balances.member_balance("A", "trip") == {"B": Decimal("-40.00")}

    ledger.record_settlement("trip", "A", "B", "40.00")

    assert "B" not in balances.member_balance("A", "trip")
    assert balances.member_balance("A", "trip") == {}
    assert balances.group_balances("trip") == {}


def test_over_settlement_reverses_direction(ledger, balances):
    ledger.record_expense("trip", "B", "40.00", SplitKind.EXACT, {"A": "40.00"})
    ledger.record_settlement("trip", "A", "B", "60.00")

    assert balances.group_balances("trip") == {"B": {"A": Decimal("20.00")}}
    assert balances.member_balance("A", "trip") == {"B": Decimal("20.00")}


def test_repeated_queries_are_identical(ledger, balances):
    ledger.record_expense("trip", "A", "100.00", SplitKind.PERCENTAGE, {"A": 20, "B": "30", "C": "50"})
    ledger.record_settlement("trip", "C", "A", "10.00")

    assert balances.group_balances("trip") == balances.group_balances("trip")


def test_net_positions_and_settle_up_plan(ledger, balances):
    ledger.record_expense("trip", "A", "90.00", SplitKind.EQUAL)
    ledger.record_expense("trip", "B", "30.00", SplitKind.EQUAL)

    positions = balances.net_positions("trip")
    assert positions == {"A": Decimal("50.00"), "B": Decimal("-10.00"), "C": Decimal("-40.00")}
    assert sum(positions.values()) == 0

    assert balances.settle_up_plan("trip") == [
        Transfer(from_user="C", to_user="A", amount=Decimal("40.00")),
        Transfer(from_user="B", to_user="A", amount=Decimal("10.00")),
    ]


def test_settled_group_has_no_plan(ledger, balances):
    assert balances.net_positions("trip") == {}
    assert balances.settle_up_plan("trip") == []
