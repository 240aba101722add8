import json

from utils import app_config


def test_missing_config_is_empty(tmp_path):
    assert app_config.load_config(tmp_path / "config.json") == {}


def test_corrupt_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert app_config.load_config(path) == {}


def test_save_creates_folder(tmp_path):
    path = tmp_path / "nested" / "config.json"
    app_config.save_config({"db_folder": "/data"}, path)
    assert json.loads(path.read_text(encoding="utf-8")) == {"db_folder": "/data"}
    assert not path.with_suffix(".tmp").exists()


def test_db_folder_round_trip(tmp_path, monkeypatch):
    monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "config.json")
    assert app_config.get_db_folder() is None
    app_config.set_db_folder("/data")
    assert app_config.get_db_folder() == "/data"
    app_config.set_db_folder(None)
    assert app_config.get_db_folder() is None


def test_exchange_rate_settings_override_defaults(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(app_config, "CONFIG_FILE", path)
    defaults = {"exchange_rate_url": "https://a", "exchange_rate_ttl": 3600}
    assert app_config.get_exchange_rate_settings(defaults) == defaults

    app_config.save_config({"exchange_rate_ttl": 60}, path)
    assert app_config.get_exchange_rate_settings(defaults) == {
        "exchange_rate_url": "https://a",
        "exchange_rate_ttl": 60,
    }
