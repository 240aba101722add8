from datetime import date
from models.card import Card, MIN_CYCLE_DAY, MAX_CYCLE_DAY
from models.budget import StatementPeriod
from database.card_dao import CardDAO
from database.transaction_dao import TransactionDAO
from services import statement_cycle
from utils.date_helpers import today


class CardService:
    def __init__(self, card_dao: CardDAO, tx_dao: TransactionDAO):
        self._dao = card_dao
        self._tx_dao = tx_dao

    def get_all(self) -> list[Card]:
        return self._dao.get_all()

    def get_by_id(self, card_id: int) -> Card | None:
        return self._dao.get_by_id(card_id)

    def create(self, name: str, statement_day: int, due_day: int) -> Card:
        name = name.strip()
        if not name:
            raise ValueError("Card name cannot be empty.")
        if self._dao.get_by_name(name):
            raise ValueError(f"A card named '{name}' already exists.")
        self._validate_day("Statement day", statement_day)
        self._validate_day("Due day", due_day)
        return self._dao.create(name, statement_day, due_day)

    def update(self, card_id: int, name: str, statement_day: int, due_day: int) -> Card:
        name = name.strip()
        if not name:
            raise ValueError("Card name cannot be empty.")
        existing = self._dao.get_by_name(name)
        if existing and existing.id != card_id:
            raise ValueError(f"A card named '{name}' already exists.")
        self._validate_day("Statement day", statement_day)
        self._validate_day("Due day", due_day)
        return self._dao.update(card_id, name, statement_day, due_day)

    def delete(self, card_id: int):
        if self._dao.has_transactions(card_id):
            raise ValueError(
                "Cannot delete a card with existing transactions. "
                "Remove its transactions first."
            )
        self._dao.delete(card_id)

    def get_balance(self, card_id: int) -> float:
        return self._tx_dao.get_card_balance(card_id)

    def get_balances(self) -> dict[int, float]:
        balances = self._tx_dao.get_card_balances()
        return {c.id: balances.get(c.id, 0.0) for c in self._dao.get_all()}

    def get_current_cycle(
        self, card_id: int, reference: date | None = None
    ) -> tuple[StatementPeriod, float]:
        """Return the card's active statement period and its spend so far."""
        card = self._dao.get_by_id(card_id)
        if card is None:
            raise ValueError("Card not found.")
        period = statement_cycle.statement_period(reference or today(), card.statement_day)
        transactions = self._tx_dao.get_all(card_id=card_id)
        spent = statement_cycle.spend_in_period(
            period, transactions, amount=lambda t: t.vnd_amount
        )
        return period, spent

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _validate_day(label: str, day):
        if isinstance(day, bool) or not isinstance(day, int):
            raise ValueError(f"{label} must be a whole number.")
        if not MIN_CYCLE_DAY <= day <= MAX_CYCLE_DAY:
            raise ValueError(f"{label} must be between {MIN_CYCLE_DAY} and {MAX_CYCLE_DAY}.")
