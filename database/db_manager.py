import logging
import os
import sqlite3
from utils.constants import DB_FILE, DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()
        logger.info("Database ready at %s", self.db_path)

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Stamp the schema version; later releases add their ALTER TABLE steps here."""
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS cards (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                name           TEXT    NOT NULL UNIQUE,
                statement_day  INTEGER NOT NULL CHECK(statement_day BETWEEN 1 AND 31),
                due_day        INTEGER NOT NULL CHECK(due_day BETWEEN 1 AND 31),
                created_at     TEXT    NOT NULL DEFAULT (datetime('now')),
                updated_at     TEXT    NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL UNIQUE,
                color_hex  TEXT NOT NULL DEFAULT '#888888',
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                date         TEXT NOT NULL,
                description  TEXT NOT NULL DEFAULT '',
                amount       REAL NOT NULL CHECK(amount > 0),
                currency     TEXT NOT NULL DEFAULT 'VND',
                vnd_amount   REAL NOT NULL,
                card_id      INTEGER NOT NULL REFERENCES cards(id) ON DELETE RESTRICT,
                category_id  INTEGER REFERENCES categories(id) ON DELETE RESTRICT,
                created_at   TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at   TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date        ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_card_id     ON transactions(card_id);
            CREATE INDEX IF NOT EXISTS idx_transactions_category_id ON transactions(category_id);

            CREATE TABLE IF NOT EXISTS budgets (
                id                 INTEGER PRIMARY KEY AUTOINCREMENT,
                enabled            INTEGER NOT NULL DEFAULT 0,
                monthly_amount     REAL NOT NULL DEFAULT 0 CHECK(monthly_amount >= 0),
                statement_card_id  INTEGER REFERENCES cards(id) ON DELETE SET NULL,
                created_at         TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at         TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS assets (
                id                 INTEGER PRIMARY KEY AUTOINCREMENT,
                name               TEXT NOT NULL,
                type               TEXT NOT NULL CHECK(type IN ('cash','savings','etf','stock','custom')),
                custom_type        TEXT,
                amount             REAL NOT NULL CHECK(amount >= 0),
                original_currency  TEXT NOT NULL DEFAULT 'VND',
                vnd_amount         REAL NOT NULL,
                bank               TEXT,
                interest_rate      REAL,
                term_months        INTEGER,
                symbol             TEXT,
                created_at         TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at         TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS liabilities (
                id                   INTEGER PRIMARY KEY AUTOINCREMENT,
                name                 TEXT NOT NULL,
                type                 TEXT NOT NULL CHECK(type IN ('credit_card','loan','custom')),
                custom_type          TEXT,
                amount               REAL NOT NULL CHECK(amount >= 0),
                original_currency    TEXT NOT NULL DEFAULT 'VND',
                vnd_amount           REAL NOT NULL,
                bank                 TEXT,
                interest_rate        REAL,
                include_credit_card  INTEGER NOT NULL DEFAULT 0,
                credit_card_id       INTEGER REFERENCES cards(id) ON DELETE SET NULL,
                created_at           TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at           TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS net_worth_snapshots (
                id                 INTEGER PRIMARY KEY AUTOINCREMENT,
                date               TEXT NOT NULL,
                total_assets       REAL NOT NULL,
                total_liabilities  REAL NOT NULL,
                net_worth          REAL NOT NULL,
                created_at         TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_snapshots_date ON net_worth_snapshots(date);

            CREATE TABLE IF NOT EXISTS recurring_income (
                id                 INTEGER PRIMARY KEY AUTOINCREMENT,
                amount             REAL NOT NULL CHECK(amount >= 0),
                original_currency  TEXT NOT NULL DEFAULT 'VND',
                vnd_amount         REAL NOT NULL,
                day_of_month       INTEGER NOT NULL CHECK(day_of_month BETWEEN 1 AND 31),
                is_enabled         INTEGER NOT NULL DEFAULT 1,
                created_at         TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at         TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        # Default settings
        defaults = [
            ("appearance_mode", "system"),
            ("date_format", "DD/MM/YYYY"),
            ("default_currency", "VND"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        # Default categories
        for cat in DEFAULT_CATEGORIES:
            conn.execute(
                "INSERT OR IGNORE INTO categories(name, color_hex) VALUES (?, ?)",
                (cat["name"], cat["color_hex"]),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open_default(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (and initialises) the DB file in db_folder or CWD."""
        db_path = os.path.join(db_folder, DB_FILE) if db_folder else DB_FILE
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
