"""Shared-expense ledger and debt-settlement engine."""

from splitledger.config import Settings, get_settings
from splitledger.ledger import Ledger
from splitledger.logging import configure_logging, get_logger
from splitledger.models import Expense, Settlement, SplitKind
from splitledger.services.balances import BalanceService
from splitledger.services.directory import InMemoryDirectory, MemberDirectory, NonMemberError, UnknownGroupError
from splitledger.services.settlement import InvalidAmountError, Transfer
from splitledger.services.split import InvalidSplitError

__all__ = [
    "BalanceService",
    "Expense",
    "InMemoryDirectory",
    "InvalidAmountError",
    "InvalidSplitError",
    "Ledger",
    "MemberDirectory",
    "NonMemberError",
    "Settings",
    "Settlement",
    "SplitKind",
    "Transfer",
    "UnknownGroupError",
    "configure_logging",
    "get_logger",
    "get_settings",
]
