from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from user_service.database import Database, resolve_database_path
from user_service.models import User


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db_path = tmp_path / "users.sqlite3"
    db = Database(db_path)
    db.initialize()
    return db


def test_save_assigns_id_and_created_at(database: Database) -> None:
    with database.unit_of_work() as users:
        saved = users.save(User(name="Alice", email="alice@x.com", age=30))

    assert saved.id is not None
    assert saved.created_at is not None
    assert saved.created_at.tzinfo is not None

    with database.unit_of_work() as users:
        loaded = users.find_by_id(saved.id)
    assert loaded == saved


def test_ids_are_unique(database: Database) -> None:
    with database.unit_of_work() as users:
        first = users.save(User(name="A", email="a@x.com", age=1))
        second = users.save(User(name="B", email="b@x.com", age=2))

    assert first.id != second.id


def test_update_keeps_id_and_created_at(database: Database) -> None:
    with database.unit_of_work() as users:
        saved = users.save(User(name="Alice", email="alice@x.com", age=30))

    with database.unit_of_work() as users:
        user = users.find_by_id(saved.id)
        user.name, user.email, user.age = "Bob", "bob@x.com", 40
        updated = users.save(user)

    assert updated.id == saved.id
    assert updated.created_at == saved.created_at
    assert (updated.name, updated.email, updated.age) == ("Bob", "bob@x.com", 40)


def test_find_all_returns_rows_in_id_order(database: Database) -> None:
    with database.unit_of_work() as users:
        for name in ("C", "A", "B"):
            users.save(User(name=name, email=f"{name.lower()}@x.com", age=20))

    with database.unit_of_work() as users:
        found = users.find_all()

    assert [user.name for user in found] == ["C", "A", "B"]
    assert [user.id for user in found] == sorted(user.id for user in found)


def test_delete_removes_row_and_is_safe_for_missing_ids(database: Database) -> None:
    with database.unit_of_work() as users:
        saved = users.save(User(name="Alice", email="alice@x.com", age=30))

    with database.unit_of_work() as users:
        users.delete_by_id(saved.id)
        users.delete_by_id(9999)

    with database.unit_of_work() as users:
        assert users.find_by_id(saved.id) is None


def test_unit_of_work_rolls_back_on_error(database: Database) -> None:
    with pytest.raises(RuntimeError):
        with database.unit_of_work() as users:
            users.save(User(name="Alice", email="alice@x.com", age=30))
            raise RuntimeError("boom")

    with database.unit_of_work() as users:
        assert users.find_all() == []


def test_schema_rejects_non_positive_age(database: Database) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        with database.unit_of_work() as users:
            users.save(User(name="Alice", email="alice@x.com", age=0))


def test_initialize_is_idempotent(database: Database) -> None:
    with database.unit_of_work() as users:
        users.save(User(name="Alice", email="alice@x.com", age=30))

    database.initialize()

    with database.unit_of_work() as users:
        assert len(users.find_all()) == 1


def test_resolve_database_path_prefers_env_value(tmp_path: Path) -> None:
    target = tmp_path / "custom.sqlite3"
    assert resolve_database_path(str(target)) == target.resolve()
    assert resolve_database_path(None).name == "users.sqlite3"


def test_ids_outside_sqlite_integer_range_are_absent(database: Database) -> None:
    with database.unit_of_work() as users:
        users.save(User(name="Alice", email="alice@x.com", age=30))

    with database.unit_of_work() as users:
        assert users.find_by_id(2**63) is None
        assert users.find_by_id(-(2**63) - 1) is None
        users.delete_by_id(10**20)
        assert len(users.find_all()) == 1
