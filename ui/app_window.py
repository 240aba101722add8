import customtkinter as ctk
from services.card_service import CardService
from services.category_service import CategoryService
from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.report_service import ReportService
from services.net_worth_service import NetWorthService
from services.currency_service import CurrencyService
from database.db_manager import DatabaseManager
from ui.components.alert_banner import AlertBanner
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.transactions_tab import TransactionsTab
from ui.tabs.cards_tab import CardsTab
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.budget_tab import BudgetTab
from ui.tabs.analytics_tab import AnalyticsTab
from ui.tabs.net_worth_tab import NetWorthTab
from ui.tabs.settings_tab import SettingsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT, REFERENCE_CURRENCY


_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"dashboard", "transactions", "cards", "budget", "analytics", "net_worth"},
    "budget":      {"dashboard", "budget"},
    "card":        {"dashboard", "transactions", "cards", "budget", "analytics", "net_worth"},
    "category":    {"dashboard", "transactions", "analytics", "categories"},
    "net_worth":   {"net_worth"},
    "full":        {"dashboard", "transactions", "cards", "categories", "budget",
                    "analytics", "net_worth", "settings"},
}

_TAB_NAMES = [
    "Dashboard", "Transactions", "Cards", "Categories",
    "Budget", "Analytics", "Net Worth", "Settings",
]


class AppWindow(ctk.CTk):
    def __init__(
        self,
        card_service: CardService,
        category_service: CategoryService,
        tx_service: TransactionService,
        budget_service: BudgetService,
        report_service: ReportService,
        net_worth_service: NetWorthService,
        currency_service: CurrencyService,
        db: DatabaseManager,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._card_svc = card_service
        self._cat_svc = category_service
        self._tx_svc = tx_service
        self._budget_svc = budget_service
        self._report_svc = report_service
        self._net_worth_svc = net_worth_service
        self._currency_svc = currency_service
        self._db = db
        self._date_format = date_format

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        self.after(300, self._show_budget_banner)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in _TAB_NAMES:
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._tabs = {
            "dashboard": DashboardTab(
                self._tabview.tab("Dashboard"),
                tx_service=self._tx_svc,
                budget_service=self._budget_svc,
                card_service=self._card_svc,
                report_service=self._report_svc,
                date_format=self._date_format,
            ),
            "transactions": TransactionsTab(
                self._tabview.tab("Transactions"),
                tx_service=self._tx_svc,
                card_service=self._card_svc,
                category_service=self._cat_svc,
                budget_service=self._budget_svc,
                notify_refresh=self.notify_tabs_refresh,
                get_default_currency=self._default_currency,
                date_format=self._date_format,
            ),
            "cards": CardsTab(
                self._tabview.tab("Cards"),
                card_service=self._card_svc,
                notify_refresh=self.notify_tabs_refresh,
            ),
            "categories": CategoriesTab(
                self._tabview.tab("Categories"),
                category_service=self._cat_svc,
                notify_refresh=self.notify_tabs_refresh,
            ),
            "budget": BudgetTab(
                self._tabview.tab("Budget"),
                budget_service=self._budget_svc,
                card_service=self._card_svc,
                notify_refresh=self.notify_tabs_refresh,
            ),
            "analytics": AnalyticsTab(
                self._tabview.tab("Analytics"),
                report_service=self._report_svc,
                card_service=self._card_svc,
            ),
            "net_worth": NetWorthTab(
                self._tabview.tab("Net Worth"),
                net_worth_service=self._net_worth_svc,
                card_service=self._card_svc,
                notify_refresh=self.notify_tabs_refresh,
            ),
            "settings": SettingsTab(
                self._tabview.tab("Settings"),
                db=self._db,
                currency_service=self._currency_svc,
            ),
        }
        for tab in self._tabs.values():
            tab.grid(row=0, column=0, sticky="nsew")

    def _default_currency(self) -> str:
        return self._db.get_setting("default_currency", REFERENCE_CURRENCY)

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        names = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        for name in names:
            self._tabs[name].refresh()
        if "budget" in names:
            self._show_budget_banner()

    # ── Banners ──────────────────────────────────────────────────────────────
    def _show_budget_banner(self):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        status = self._budget_svc.get_budget_status()
        if status is None:
            return
        banner = AlertBanner.for_budget(
            self._banner_frame, status, action_cmd=lambda: self._tabview.set("Budget"),
        )
        if banner is not None:
            banner.pack(fill="x", pady=2)
