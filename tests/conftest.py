import pytest
from fastapi.testclient import TestClient

from core import config
from core.dbutils import ensure_expenses_table, get_conn


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Points the app at a throwaway SQLite file."""
    path = tmp_path / "expenses.sqlite"
    monkeypatch.setattr(config, "DB_ENGINE", "sqlite")
    monkeypatch.setattr(config, "SQLITE_PATH", str(path))
    monkeypatch.setattr(config, "APP_ENV", "production")
    return path


@pytest.fixture
def conn(db_path):
    c = get_conn()
    ensure_expenses_table(c)
    yield c
    c.close()


@pytest.fixture
def client(db_path):
    from app import app

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def expense_payload():
    return {
        "amount": 12.50,
        "category": "Food",
        "description": "Lunch",
        "date": "2024-03-15",
    }
