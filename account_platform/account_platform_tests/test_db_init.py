"""Tests for database initialization."""
from sqlalchemy import create_engine, inspect

import account_platform.account_platform.account_service.db as db_module


def test_init_db_creates_users_table(tmp_path, monkeypatch):
    test_engine = create_engine(f"sqlite:///{tmp_path / 'init.db'}", connect_args={"check_same_thread": False})
    monkeypatch.setattr(db_module, "engine", test_engine)

    db_module.init_db()

    inspector = inspect(test_engine)
    assert "users" in inspector.get_table_names()

    columns = {col["name"]: col for col in inspector.get_columns("users")}
    for name in ["id", "username", "password", "email", "oauth_id", "extra", "created_at", "modified_at"]:
        assert name in columns, f"Column {name} should exist in users table"

    assert columns["username"]["nullable"] is False
    assert columns["password"]["nullable"] is False
    assert columns["email"]["nullable"] is True

    test_engine.dispose()


def test_username_index_is_unique(tmp_path, monkeypatch):
    test_engine = create_engine(f"sqlite:///{tmp_path / 'init.db'}", connect_args={"check_same_thread": False})
    monkeypatch.setattr(db_module, "engine", test_engine)

    db_module.init_db()

    indexes = inspect(test_engine).get_indexes("users")
    username_index = next(idx for idx in indexes if idx["column_names"] == ["username"])
    assert username_index["unique"]

    test_engine.dispose()


def test_check_db_connection():
    assert db_module.check_db_connection() is True
