from __future__ import annotations

from datetime import datetime, timezone

from main import _list_users, _parse_args
from user_service.schemas import UserResponse


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "9000"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 9000


def test_other_subcommands_still_available() -> None:
    assert _parse_args(["init-db"]).command == "init-db"
    assert _parse_args(["list-users"]).command == "list-users"


class _StubService:
    def __init__(self, users) -> None:
        self._users = users

    def find_all_users(self):
        return self._users


def test_list_users_prints_table(capsys) -> None:
    created = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    _list_users(_StubService([UserResponse(id=1, name="Alice", email="alice@x.com", age=30, created_at=created)]))

    output = capsys.readouterr().out
    assert "1 user(s) found:" in output
    assert "alice@x.com" in output
    assert "2024-05-01 09:30:00 UTC" in output


def test_list_users_handles_empty_store(capsys) -> None:
    _list_users(_StubService([]))
    assert "No users are currently registered." in capsys.readouterr().out
