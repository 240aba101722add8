import logging
import math
from datetime import date, datetime
from models.budget import Budget, BudgetStatus
from database.budget_dao import BudgetDAO
from database.card_dao import CardDAO
from database.transaction_dao import TransactionDAO
from services import statement_cycle
from utils.date_helpers import now_iso, today

logger = logging.getLogger(__name__)


def _vnd(tx) -> float:
    return tx.vnd_amount


class BudgetService:
    def __init__(
        self,
        budget_dao: BudgetDAO,
        card_dao: CardDAO,
        tx_dao: TransactionDAO,
    ):
        self._budget_dao = budget_dao
        self._card_dao = card_dao
        self._tx_dao = tx_dao

    def get_budget(self) -> Budget | None:
        return self._budget_dao.get_current()

    def save_budget(
        self, enabled: bool, monthly_amount: float, statement_card_id: int | None
    ) -> Budget:
        """Update the existing budget row, or create it the first time."""
        if not math.isfinite(monthly_amount) or monthly_amount < 0:
            raise ValueError("Monthly budget must be a non-negative number.")
        if enabled:
            if statement_card_id is None:
                raise ValueError("Choose the card whose statement cycle the budget follows.")
            if self._card_dao.get_by_id(statement_card_id) is None:
                raise ValueError("The selected card no longer exists.")

        now = now_iso()
        current = self._budget_dao.get_current()
        if current:
            budget = self._budget_dao.update(
                current.id, enabled, monthly_amount, statement_card_id, now
            )
        else:
            budget = self._budget_dao.insert(enabled, monthly_amount, statement_card_id, now)
        logger.info(
            "Saved budget: enabled=%s amount=%s card=%s", enabled, monthly_amount, statement_card_id
        )
        return budget

    def clear_budget(self):
        self._budget_dao.delete_all()

    def get_budget_status(self, reference: date | datetime | None = None) -> BudgetStatus | None:
        """Recompute the budget status from scratch; None when budgeting is off."""
        budget = self._budget_dao.get_current()
        if not budget or not budget.enabled or budget.monthly_amount == 0:
            return None
        if budget.statement_card_id is None:
            return None
        card = self._card_dao.get_by_id(budget.statement_card_id)
        if card is None:
            return None
        return statement_cycle.compute_budget_status(
            reference or today(),
            card.statement_day,
            budget.monthly_amount,
            self._tx_dao.get_all(),
            amount=_vnd,
        )

    def get_transaction_budget_progress(self, tx_date: str | date) -> int:
        """Percentage of the monthly budget used by everything up to tx_date."""
        budget = self._budget_dao.get_current()
        if not budget or not budget.enabled or budget.monthly_amount == 0:
            return 0
        return statement_cycle.cumulative_progress(
            tx_date, budget.monthly_amount, self._tx_dao.get_all(), amount=_vnd
        )
