from typing import Optional
from database.db_manager import DatabaseManager
from models.budget import Budget


class BudgetDAO:
    """Access to the single personal budget row."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Budget:
        return Budget(
            id=row["id"],
            enabled=bool(row["enabled"]),
            monthly_amount=row["monthly_amount"],
            statement_card_id=row["statement_card_id"],
            last_updated=row["updated_at"],
        )

    def get_current(self) -> Optional[Budget]:
        # Newest row wins even if duplicates exist
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM budgets ORDER BY updated_at DESC, id DESC LIMIT 1"
        ).fetchone()
        return self._row_to_model(row) if row else None

    def insert(
        self, enabled: bool, monthly_amount: float, statement_card_id: int | None, now: str
    ) -> Budget:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budgets(enabled, monthly_amount, statement_card_id, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (1 if enabled else 0, monthly_amount, statement_card_id, now, now),
        )
        conn.commit()
        return self.get_current()

    def update(
        self,
        budget_id: int,
        enabled: bool,
        monthly_amount: float,
        statement_card_id: int | None,
        now: str,
    ) -> Budget:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE budgets
               SET enabled = ?, monthly_amount = ?, statement_card_id = ?, updated_at = ?
               WHERE id = ?""",
            (1 if enabled else 0, monthly_amount, statement_card_id, now, budget_id),
        )
        conn.commit()
        return self.get_current()

    def delete_all(self):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM budgets")
        conn.commit()
