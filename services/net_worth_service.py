import logging
import math
from models.net_worth import Asset, Liability, NetWorthSnapshot, RecurringIncome
from database.net_worth_dao import NetWorthDAO
from services.card_service import CardService
from services.currency_service import CurrencyService, is_supported_currency
from utils.constants import ASSET_TYPES, LIABILITY_TYPES
from utils.date_helpers import format_date, parse_date, today

logger = logging.getLogger(__name__)


class NetWorthService:
    def __init__(
        self,
        net_worth_dao: NetWorthDAO,
        card_service: CardService,
        currency_service: CurrencyService,
    ):
        self._dao = net_worth_dao
        self._card_svc = card_service
        self._currency = currency_service

    # ── Assets ───────────────────────────────────────────────────────────────

    def get_assets(self) -> list[Asset]:
        return self._dao.get_assets()

    def create_asset(self, name: str, type_: str, amount: float, currency: str = "VND", **extra) -> Asset:
        values = self._asset_values(name, type_, amount, currency, extra)
        return self._dao.create_asset(values)

    def update_asset(
        self, asset_id: int, name: str, type_: str, amount: float, currency: str = "VND", **extra
    ) -> Asset:
        values = self._asset_values(name, type_, amount, currency, extra)
        return self._dao.update_asset(asset_id, values)

    def delete_asset(self, asset_id: int):
        self._dao.delete_asset(asset_id)

    # ── Liabilities ──────────────────────────────────────────────────────────

    def get_liabilities(self) -> list[Liability]:
        return self._dao.get_liabilities()

    def create_liability(
        self, name: str, type_: str, amount: float, currency: str = "VND", **extra
    ) -> Liability:
        values = self._liability_values(name, type_, amount, currency, extra)
        return self._dao.create_liability(values)

    def update_liability(
        self, liability_id: int, name: str, type_: str, amount: float, currency: str = "VND", **extra
    ) -> Liability:
        values = self._liability_values(name, type_, amount, currency, extra)
        return self._dao.update_liability(liability_id, values)

    def delete_liability(self, liability_id: int):
        self._dao.delete_liability(liability_id)

    def liability_total(self, liability: Liability, card_balances: dict[int, float] | None = None) -> float:
        """Liability amount plus the linked card's balance when it is included."""
        total = liability.vnd_amount
        if liability.include_credit_card and liability.credit_card_id:
            if card_balances is None:
                total += self._card_svc.get_balance(liability.credit_card_id)
            else:
                total += card_balances.get(liability.credit_card_id, 0.0)
        return total

    # ── Totals ───────────────────────────────────────────────────────────────

    def calculate_net_worth(self) -> dict:
        assets = self._dao.get_assets()
        liabilities = self._dao.get_liabilities()
        balances = self._card_svc.get_balances()

        total_assets = sum(a.vnd_amount for a in assets)
        total_liabilities = sum(self.liability_total(l, balances) for l in liabilities)
        return {
            "total_assets": total_assets,
            "total_liabilities": total_liabilities,
            "net_worth": total_assets - total_liabilities,
        }

    def get_asset_allocation(self) -> list[dict]:
        """Return [{type, amount}, ...] grouped by custom type or type, largest first."""
        allocation: dict[str, float] = {}
        for asset in self._dao.get_assets():
            key = asset.display_type
            allocation[key] = allocation.get(key, 0.0) + asset.vnd_amount
        return sorted(
            ({"type": k, "amount": v} for k, v in allocation.items()),
            key=lambda item: item["amount"],
            reverse=True,
        )

    # ── Snapshots ────────────────────────────────────────────────────────────

    def get_snapshots(self, limit: int | None = None) -> list[NetWorthSnapshot]:
        return self._dao.get_snapshots(limit)

    def add_snapshot(self, date: str, total_assets: float, total_liabilities: float) -> NetWorthSnapshot:
        self._validate_snapshot(date, total_assets, total_liabilities)
        return self._dao.create_snapshot(
            date, total_assets, total_liabilities, total_assets - total_liabilities
        )

    def update_snapshot(
        self, snapshot_id: int, date: str, total_assets: float, total_liabilities: float
    ) -> NetWorthSnapshot:
        self._validate_snapshot(date, total_assets, total_liabilities)
        return self._dao.update_snapshot(
            snapshot_id, date, total_assets, total_liabilities, total_assets - total_liabilities
        )

    def delete_snapshot(self, snapshot_id: int):
        self._dao.delete_snapshot(snapshot_id)

    def take_snapshot(self, date: str | None = None) -> NetWorthSnapshot:
        """Record today's (or the given date's) totals as a snapshot."""
        totals = self.calculate_net_worth()
        snapshot = self.add_snapshot(
            date or format_date(today()), totals["total_assets"], totals["total_liabilities"]
        )
        logger.info("Recorded net worth snapshot for %s: %s", snapshot.date, snapshot.net_worth)
        return snapshot

    # ── Recurring income ─────────────────────────────────────────────────────

    def get_recurring_income(self) -> RecurringIncome | None:
        return self._dao.get_recurring_income()

    def set_recurring_income(
        self, amount: float, currency: str, day_of_month: int, is_enabled: bool = True
    ) -> RecurringIncome:
        if not math.isfinite(amount) or amount < 0:
            raise ValueError("Income amount must be 0 or greater.")
        if not is_supported_currency(currency):
            raise ValueError(f"Unsupported currency: {currency}")
        if isinstance(day_of_month, bool) or not isinstance(day_of_month, int) or not 1 <= day_of_month <= 31:
            raise ValueError("Day of month must be between 1 and 31.")
        vnd_amount = self._currency.convert_to_vnd(amount, currency)
        return self._dao.replace_recurring_income(
            amount, currency, vnd_amount, day_of_month, is_enabled
        )

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _common_values(self, name: str, type_: str, amount: float, currency: str,
                       allowed_types: tuple, extra: dict) -> dict:
        name = name.strip()
        if not name:
            raise ValueError("Name cannot be empty.")
        if type_ not in allowed_types:
            raise ValueError(
                f"Invalid type '{type_}'. Must be one of: {', '.join(allowed_types)}."
            )
        custom_type = (extra.get("custom_type") or "").strip() or None
        if type_ == "custom" and not custom_type:
            raise ValueError("Please enter a name for the custom type.")
        if not math.isfinite(amount) or amount < 0:
            raise ValueError("Amount must be 0 or greater.")
        if not is_supported_currency(currency):
            raise ValueError(f"Unsupported currency: {currency}")
        return {
            "name": name,
            "type": type_,
            "custom_type": custom_type if type_ == "custom" else None,
            "amount": amount,
            "original_currency": currency,
            "vnd_amount": self._currency.convert_to_vnd(amount, currency),
            "bank": extra.get("bank") or None,
            "interest_rate": extra.get("interest_rate"),
        }

    def _asset_values(self, name, type_, amount, currency, extra: dict) -> dict:
        values = self._common_values(name, type_, amount, currency, ASSET_TYPES, extra)
        values["term_months"] = extra.get("term_months")
        values["symbol"] = extra.get("symbol") or None
        return values

    def _liability_values(self, name, type_, amount, currency, extra: dict) -> dict:
        values = self._common_values(name, type_, amount, currency, LIABILITY_TYPES, extra)
        include_card = bool(extra.get("include_credit_card"))
        card_id = extra.get("credit_card_id") if include_card else None
        if include_card and (card_id is None or self._card_svc.get_by_id(card_id) is None):
            raise ValueError("Please select the credit card to include.")
        values["include_credit_card"] = include_card
        values["credit_card_id"] = card_id
        return values

    @staticmethod
    def _validate_snapshot(date: str, total_assets: float, total_liabilities: float):
        if parse_date(date) is None:
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
        if not all(math.isfinite(v) and v >= 0 for v in (total_assets, total_liabilities)):
            raise ValueError("Totals must be 0 or greater.")
