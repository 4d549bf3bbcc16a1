"""Command-line interface for the user management service."""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Sequence

from user_service.api import build_service
from user_service.config import Settings, load_settings
from user_service.database import Database
from user_service.service import UserService

logger = logging.getLogger("userservice.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="User management service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the user database")
    subparsers.add_parser("list-users", help="Print every stored user")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for the HTTP API (default: 8080)",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "init-db", "list-users"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _initialise_database(settings: Settings) -> Database:
    database = Database(settings.database_path)
    database.initialize()
    logger.info("Database initialised at %s", settings.database_path)
    return database


def _serve(*, service: UserService, host: str, port: int) -> None:
    from user_service.api import create_app
    import uvicorn

    logger.info("Starting user service API on http://%s:%s", host, port)
    app = create_app(service=service)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _list_users(service: UserService) -> None:
    users = service.find_all_users()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':>4}  {'Name':<24}  {'Email':<32}  {'Age':>3}  Created")
    print("-" * 88)
    for user in users:
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        print(f"{user.id:>4}  {user.name:<24}  {user.email:<32}  {user.age:>3}  {created}")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    settings = load_settings()

    if args.command == "init-db":
        _initialise_database(settings)
        print("Database initialisation complete.")
        return

    service = build_service(settings)
    if args.command == "serve":
        _serve(service=service, host=args.host, port=args.port)
    elif args.command == "list-users":
        _list_users(service)


if __name__ == "__main__":
    main()
