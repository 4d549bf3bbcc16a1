import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from user_service.api import build_service
from user_service.config import load_settings
from user_service.database import resolve_database_path
from user_service.errors import ValidationError
from user_service.schemas import CreateUserRequest


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user through the user service")
    parser.add_argument("name", help="Display name for the user")
    parser.add_argument("email", help="Email address for the user")
    parser.add_argument("--age", type=int, required=True, help="Age of the user in years")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to USER_SERVICE_DB_PATH or data/users.sqlite3)",
    )
    return parser.parse_args()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    args = parse_args()

    settings = load_settings()
    if args.db_path:
        settings = replace(settings, database_path=resolve_database_path(args.db_path))

    service = build_service(settings)
    request = CreateUserRequest(name=args.name, email=args.email, age=args.age)

    try:
        user = service.create_user(request)
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created user #{user.id}: {user.name} <{user.email}>, age {user.age}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
