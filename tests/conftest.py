import pytest

from database.db_manager import DatabaseManager
from database.card_dao import CardDAO
from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from database.budget_dao import BudgetDAO
from database.net_worth_dao import NetWorthDAO
from services.card_service import CardService
from services.category_service import CategoryService
from services.currency_service import CurrencyConversionError, CurrencyService, RateCache
from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.report_service import ReportService
from services.net_worth_service import NetWorthService


class FakeRateClient:
    """Stands in for ExchangeRateClient; serves fixed rate tables and counts calls."""

    def __init__(self, tables=None, fail=False):
        self.tables = tables if tables is not None else {"USD": {"VND": 25000.0}}
        self.fail = fail
        self.calls = []

    def fetch_rates(self, base):
        self.calls.append(base)
        if self.fail or base not in self.tables:
            raise CurrencyConversionError(f"Failed to fetch exchange rates for {base}")
        return self.tables[base]

    def close(self):
        pass


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def card_dao(db):
    return CardDAO(db)


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def make_rate_client():
    return FakeRateClient


@pytest.fixture
def rate_client():
    return FakeRateClient()


@pytest.fixture
def currency_service(rate_client):
    return CurrencyService(rate_client, RateCache(ttl_seconds=3600))


@pytest.fixture
def card_service(card_dao, tx_dao):
    return CardService(card_dao, tx_dao)


@pytest.fixture
def category_service(category_dao):
    return CategoryService(category_dao)


@pytest.fixture
def tx_service(tx_dao, card_dao, category_dao, currency_service):
    return TransactionService(tx_dao, card_dao, category_dao, currency_service)


@pytest.fixture
def budget_service(db, card_dao, tx_dao):
    return BudgetService(BudgetDAO(db), card_dao, tx_dao)


@pytest.fixture
def report_service(tx_dao, card_dao, category_dao):
    return ReportService(tx_dao, card_dao, category_dao)


@pytest.fixture
def net_worth_service(db, card_service, currency_service):
    return NetWorthService(NetWorthDAO(db), card_service, currency_service)


@pytest.fixture
def card(card_service):
    return card_service.create("Visa", 15, 5)
