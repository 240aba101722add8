from database.db_manager import SCHEMA_VERSION


def _columns(db, table):
    return {row[1] for row in db.get_connection().execute(f"PRAGMA table_info({table})")}


def _category_count(db):
    return db.get_connection().execute("SELECT COUNT(*) FROM categories").fetchone()[0]


def test_fresh_schema_has_every_column(db):
    assert "color_hex" in _columns(db, "categories")
    assert {"include_credit_card", "credit_card_id"} <= _columns(db, "liabilities")
    version = db.get_connection().execute("PRAGMA user_version").fetchone()[0]
    assert version == SCHEMA_VERSION


def test_initialize_is_idempotent(db):
    before = _category_count(db)
    db.set_setting("default_currency", "USD")
    db.initialize()
    assert _category_count(db) == before
    assert db.get_setting("default_currency") == "USD"
