from typing import Optional
from database.db_manager import DatabaseManager
from models.net_worth import Asset, Liability, NetWorthSnapshot, RecurringIncome

_ASSET_FIELDS = (
    "name", "type", "custom_type", "amount", "original_currency", "vnd_amount",
    "bank", "interest_rate", "term_months", "symbol",
)
_LIABILITY_FIELDS = (
    "name", "type", "custom_type", "amount", "original_currency", "vnd_amount",
    "bank", "interest_rate", "include_credit_card", "credit_card_id",
)


class NetWorthDAO:
    """Assets, liabilities, snapshots and the single recurring income row."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    # ── Row mapping ──────────────────────────────────────────────────────────

    @staticmethod
    def _row_to_asset(row) -> Asset:
        return Asset(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            amount=row["amount"],
            original_currency=row["original_currency"],
            vnd_amount=row["vnd_amount"],
            custom_type=row["custom_type"],
            bank=row["bank"],
            interest_rate=row["interest_rate"],
            term_months=row["term_months"],
            symbol=row["symbol"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_liability(row) -> Liability:
        return Liability(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            amount=row["amount"],
            original_currency=row["original_currency"],
            vnd_amount=row["vnd_amount"],
            custom_type=row["custom_type"],
            bank=row["bank"],
            interest_rate=row["interest_rate"],
            include_credit_card=bool(row["include_credit_card"]),
            credit_card_id=row["credit_card_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_snapshot(row) -> NetWorthSnapshot:
        return NetWorthSnapshot(
            id=row["id"],
            date=row["date"],
            total_assets=row["total_assets"],
            total_liabilities=row["total_liabilities"],
            net_worth=row["net_worth"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _row_to_income(row) -> RecurringIncome:
        return RecurringIncome(
            id=row["id"],
            amount=row["amount"],
            original_currency=row["original_currency"],
            vnd_amount=row["vnd_amount"],
            day_of_month=row["day_of_month"],
            is_enabled=bool(row["is_enabled"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    # ── Generic helpers ──────────────────────────────────────────────────────

    def _insert(self, table: str, fields: tuple, values: dict) -> int:
        conn = self._db.get_connection()
        placeholders = ", ".join("?" * len(fields))
        cursor = conn.execute(
            f"INSERT INTO {table}({', '.join(fields)}) VALUES ({placeholders})",
            [values[f] for f in fields],
        )
        conn.commit()
        return cursor.lastrowid

    def _update(self, table: str, row_id: int, fields: tuple, values: dict):
        conn = self._db.get_connection()
        assignments = ", ".join(f"{f} = ?" for f in fields)
        conn.execute(
            f"UPDATE {table} SET {assignments}, updated_at = datetime('now') WHERE id = ?",
            [values[f] for f in fields] + [row_id],
        )
        conn.commit()

    def _delete(self, table: str, row_id: int):
        conn = self._db.get_connection()
        conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
        conn.commit()

    # ── Assets ───────────────────────────────────────────────────────────────

    def get_assets(self) -> list[Asset]:
        rows = self._db.get_connection().execute(
            "SELECT * FROM assets ORDER BY created_at ASC, id ASC"
        ).fetchall()
        return [self._row_to_asset(r) for r in rows]

    def get_asset(self, asset_id: int) -> Optional[Asset]:
        row = self._db.get_connection().execute(
            "SELECT * FROM assets WHERE id = ?", (asset_id,)
        ).fetchone()
        return self._row_to_asset(row) if row else None

    def create_asset(self, values: dict) -> Asset:
        return self.get_asset(self._insert("assets", _ASSET_FIELDS, values))

    def update_asset(self, asset_id: int, values: dict) -> Asset:
        self._update("assets", asset_id, _ASSET_FIELDS, values)
        return self.get_asset(asset_id)

    def delete_asset(self, asset_id: int):
        self._delete("assets", asset_id)

    # ── Liabilities ──────────────────────────────────────────────────────────

    def get_liabilities(self) -> list[Liability]:
        rows = self._db.get_connection().execute(
            "SELECT * FROM liabilities ORDER BY created_at ASC, id ASC"
        ).fetchall()
        return [self._row_to_liability(r) for r in rows]

    def get_liability(self, liability_id: int) -> Optional[Liability]:
        row = self._db.get_connection().execute(
            "SELECT * FROM liabilities WHERE id = ?", (liability_id,)
        ).fetchone()
        return self._row_to_liability(row) if row else None

    def create_liability(self, values: dict) -> Liability:
        values = dict(values, include_credit_card=1 if values["include_credit_card"] else 0)
        return self.get_liability(self._insert("liabilities", _LIABILITY_FIELDS, values))

    def update_liability(self, liability_id: int, values: dict) -> Liability:
        values = dict(values, include_credit_card=1 if values["include_credit_card"] else 0)
        self._update("liabilities", liability_id, _LIABILITY_FIELDS, values)
        return self.get_liability(liability_id)

    def delete_liability(self, liability_id: int):
        self._delete("liabilities", liability_id)

    # ── Snapshots ────────────────────────────────────────────────────────────

    def get_snapshots(self, limit: int | None = None) -> list[NetWorthSnapshot]:
        sql = "SELECT * FROM net_worth_snapshots ORDER BY date DESC, id DESC"
        params: list = []
        if limit:
            sql += " LIMIT ?"
            params.append(limit)
        rows = self._db.get_connection().execute(sql, params).fetchall()
        return [self._row_to_snapshot(r) for r in rows]

    def get_snapshot(self, snapshot_id: int) -> Optional[NetWorthSnapshot]:
        row = self._db.get_connection().execute(
            "SELECT * FROM net_worth_snapshots WHERE id = ?", (snapshot_id,)
        ).fetchone()
        return self._row_to_snapshot(row) if row else None

    def create_snapshot(
        self, date: str, total_assets: float, total_liabilities: float, net_worth: float
    ) -> NetWorthSnapshot:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO net_worth_snapshots(date, total_assets, total_liabilities, net_worth)
               VALUES (?, ?, ?, ?)""",
            (date, total_assets, total_liabilities, net_worth),
        )
        conn.commit()
        return self.get_snapshot(cursor.lastrowid)

    def update_snapshot(
        self,
        snapshot_id: int,
        date: str,
        total_assets: float,
        total_liabilities: float,
        net_worth: float,
    ) -> NetWorthSnapshot:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE net_worth_snapshots
               SET date = ?, total_assets = ?, total_liabilities = ?, net_worth = ?
               WHERE id = ?""",
            (date, total_assets, total_liabilities, net_worth, snapshot_id),
        )
        conn.commit()
        return self.get_snapshot(snapshot_id)

    def delete_snapshot(self, snapshot_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM net_worth_snapshots WHERE id = ?", (snapshot_id,))
        conn.commit()

    # ── Recurring income ─────────────────────────────────────────────────────

    def get_recurring_income(self) -> Optional[RecurringIncome]:
        row = self._db.get_connection().execute(
            "SELECT * FROM recurring_income ORDER BY id DESC LIMIT 1"
        ).fetchone()
        return self._row_to_income(row) if row else None

    def replace_recurring_income(
        self,
        amount: float,
        original_currency: str,
        vnd_amount: float,
        day_of_month: int,
        is_enabled: bool,
    ) -> RecurringIncome:
        """Delete any existing row and insert the new one in a single transaction."""
        conn = self._db.get_connection()
        try:
            conn.execute("DELETE FROM recurring_income")
            conn.execute(
                """INSERT INTO recurring_income
                   (amount, original_currency, vnd_amount, day_of_month, is_enabled)
                   VALUES (?, ?, ?, ?, ?)""",
                (amount, original_currency, vnd_amount, day_of_month, 1 if is_enabled else 0),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        return self.get_recurring_income()
