from warboard.config import Config


def test_sqlite_url_rewritten_for_async_driver():
    assert Config.get_async_database_url("sqlite:///warboard.db") == "sqlite+aiosqlite:///warboard.db"


def test_async_url_left_unchanged():
    url = "sqlite+aiosqlite:///data/warboard.db"
    assert Config.get_async_database_url(url) == url


def test_configured_url_used_by_default(monkeypatch):
    monkeypatch.setattr(Config, "DATABASE_URL", "sqlite:///configured.db")
    assert Config.get_async_database_url() == "sqlite+aiosqlite:///configured.db"
