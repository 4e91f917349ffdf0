import pytest

from splitledger.config import Settings
from splitledger.ledger import Ledger
from splitledger.services.balances import BalanceService
from splitledger.services.directory import InMemoryDirectory


@pytest.fixture
def directory() -> InMemoryDirectory:
    directory = InMemoryDirectory()
    directory.add_group("trip", ["A", "B", "C"])
    directory.add_group("flat", ["A", "D"])
    return directory


@pytest.fixture
def ledger(directory: InMemoryDirectory) -> Ledger:
    return Ledger(directory, Settings(CURRENCY_DECIMALS=2, LOG_LEVEL="INFO", LOG_JSON=True))


@pytest.fixture
def balances(ledger: Ledger) -> BalanceService:
    return BalanceService(ledger)
