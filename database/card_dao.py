from typing import Optional
from database.db_manager import DatabaseManager
from models.card import Card


class CardDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _row_to_model(self, row) -> Card:
        return Card(
            id=row["id"],
            name=row["name"],
            statement_day=row["statement_day"],
            due_day=row["due_day"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_all(self) -> list[Card]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT * FROM cards ORDER BY created_at ASC, id ASC"
            ).fetchall()
            self._all_cache = [self._row_to_model(r) for r in rows]
        return self._all_cache

    def get_by_id(self, card_id: int) -> Optional[Card]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM cards WHERE id = ?", (card_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Card]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM cards WHERE name = ?", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, name: str, statement_day: int, due_day: int) -> Card:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO cards(name, statement_day, due_day) VALUES (?, ?, ?)",
            (name, statement_day, due_day),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(cursor.lastrowid)

    def update(self, card_id: int, name: str, statement_day: int, due_day: int) -> Card:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE cards
               SET name = ?, statement_day = ?, due_day = ?, updated_at = datetime('now')
               WHERE id = ?""",
            (name, statement_day, due_day, card_id),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(card_id)

    def delete(self, card_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
        conn.commit()
        self._invalidate_cache()

    def has_transactions(self, card_id: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) as cnt FROM transactions WHERE card_id = ?",
            (card_id,),
        ).fetchone()
        return row["cnt"] > 0
