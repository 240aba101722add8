import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.card_dao import CardDAO
from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from database.budget_dao import BudgetDAO
from database.net_worth_dao import NetWorthDAO

from services.card_service import CardService
from services.category_service import CategoryService
from services.currency_service import CurrencyService, ExchangeRateClient, RateCache
from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.report_service import ReportService
from services.net_worth_service import NetWorthService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_exchange_rate_settings
from utils.constants import (
    EXCHANGE_RATE_TTL_SECONDS, EXCHANGE_RATE_URL, FALLBACK_VND_RATES,
)

logger = logging.getLogger(__name__)


def configure_logging():
    level = os.environ.get("CARDBUDGET_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_currency_service() -> tuple[CurrencyService, ExchangeRateClient]:
    settings = get_exchange_rate_settings({
        "exchange_rate_url": EXCHANGE_RATE_URL,
        "exchange_rate_ttl": EXCHANGE_RATE_TTL_SECONDS,
    })
    client = ExchangeRateClient(base_url=settings["exchange_rate_url"])
    cache = RateCache(ttl_seconds=float(settings["exchange_rate_ttl"]))
    return CurrencyService(client, cache, FALLBACK_VND_RATES), client


def main():
    configure_logging()

    # ── Bootstrap: read DB folder from pre-DB config ──────────────────────────
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open_default(db_folder=db_folder)
    logger.info("Opened database %s", db.db_path)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    card_dao = CardDAO(db)
    category_dao = CategoryDAO(db)
    tx_dao = TransactionDAO(db)
    budget_dao = BudgetDAO(db)
    net_worth_dao = NetWorthDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    currency_svc, rate_client = build_currency_service()
    card_svc = CardService(card_dao, tx_dao)
    category_svc = CategoryService(category_dao)
    tx_svc = TransactionService(tx_dao, card_dao, category_dao, currency_svc)
    budget_svc = BudgetService(budget_dao, card_dao, tx_dao)
    report_svc = ReportService(tx_dao, card_dao, category_dao)
    net_worth_svc = NetWorthService(net_worth_dao, card_svc, currency_svc)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        card_service=card_svc,
        category_service=category_svc,
        tx_service=tx_svc,
        budget_service=budget_svc,
        report_service=report_svc,
        net_worth_service=net_worth_svc,
        currency_service=currency_svc,
        db=db,
        date_format=db.get_setting("date_format", "DD/MM/YYYY"),
    )

    def on_close():
        rate_client.close()
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
