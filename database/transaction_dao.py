from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            date=row["date"],
            description=row["description"],
            amount=row["amount"],
            currency=row["currency"],
            vnd_amount=row["vnd_amount"],
            card_id=row["card_id"],
            category_id=row["category_id"],
            card_name=row["card_name"] if "card_name" in row.keys() else "",
            category_name=row["category_name"] if "category_name" in row.keys() else "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _select(self) -> str:
        return """
            SELECT t.*,
                   COALESCE(k.name, '') AS card_name,
                   COALESCE(c.name, '') AS category_name
            FROM transactions t
            LEFT JOIN cards k      ON t.card_id = k.id
            LEFT JOIN categories c ON t.category_id = c.id
        """

    def get_all(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        card_id: int | None = None,
        category_id: int | None = None,
        search: str | None = None,
    ) -> list[Transaction]:
        """Newest first. date_from/date_to are inclusive YYYY-MM-DD bounds."""
        conn = self._db.get_connection()
        sql = self._select() + " WHERE 1=1"
        params: list = []

        # Stored dates may carry a time part; compare on the day only
        if date_from:
            sql += " AND substr(t.date, 1, 10) >= ?"
            params.append(date_from)
        if date_to:
            sql += " AND substr(t.date, 1, 10) <= ?"
            params.append(date_to)
        if card_id:
            sql += " AND t.card_id = ?"
            params.append(card_id)
        if category_id:
            sql += " AND t.category_id = ?"
            params.append(category_id)
        if search:
            sql += " AND (t.description LIKE ? OR COALESCE(c.name,'') LIKE ?)"
            params.extend([f"%{search}%", f"%{search}%"])

        sql += " ORDER BY t.date DESC, t.id DESC"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE t.id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_card_balance(self, card_id: int) -> float:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COALESCE(SUM(vnd_amount), 0) AS total FROM transactions WHERE card_id = ?",
            (card_id,),
        ).fetchone()
        return row["total"]

    def get_card_balances(self) -> dict[int, float]:
        """Return {card_id: sum of vnd_amount} for every card with transactions."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT card_id, SUM(vnd_amount) AS total
               FROM transactions
               GROUP BY card_id"""
        ).fetchall()
        return {r["card_id"]: r["total"] for r in rows}

    def create(
        self,
        card_id: int,
        category_id: int | None,
        amount: float,
        currency: str,
        vnd_amount: float,
        date: str,
        description: str = "",
    ) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (card_id, category_id, amount, currency, vnd_amount, date, description)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (card_id, category_id, amount, currency, vnd_amount, date, description),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        tx_id: int,
        card_id: int,
        category_id: int | None,
        amount: float,
        currency: str,
        vnd_amount: float,
        date: str,
        description: str = "",
    ) -> Transaction:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE transactions
               SET card_id=?, category_id=?, amount=?, currency=?, vnd_amount=?,
                   date=?, description=?, updated_at=datetime('now')
               WHERE id=?""",
            (card_id, category_id, amount, currency, vnd_amount, date, description, tx_id),
        )
        conn.commit()
        return self.get_by_id(tx_id)

    def delete(self, tx_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()
