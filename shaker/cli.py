"""``shaker`` command-line entry point."""

import argparse
import sys
from typing import List, Optional

from shaker.core.config import settings
from shaker.core.errors import RegistryError
from shaker.core.logging import configure_logging
from shaker.db import migrate
from shaker.db.session import SessionLocal
from shaker.schemas.user import UserRecord
from shaker.services.legacy_import import import_display_names_file
from shaker.services.registry import UserRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shaker", description=f"{settings.PROJECT_NAME} user identity registry")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("migrate", help="Apply pending schema migrations")

    register = sub.add_parser("register", help="Register a new user")
    register.add_argument("display_name", help="Display name for the user")
    register.add_argument("--external-id", default=None, help="Platform-assigned identity")

    lookup = sub.add_parser("lookup", help="Look up a single user")
    target = lookup.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", type=int, dest="user_id")
    target.add_argument("--external-id", dest="external_id")

    sub.add_parser("count", help="Print the number of registered users")

    importer = sub.add_parser("import", help="Register line-separated legacy display names from a file")
    importer.add_argument("path", nargs="?", default=settings.IMPORT_PATH)

    return parser


def format_record(user: UserRecord) -> str:
    external_id = user.external_id if user.external_id is not None else "-"
    return f"#{user.id}\t{external_id}\t{user.display_name}\t{user.created_at.isoformat()}"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "migrate":
        migrate.upgrade()
        return 0

    if args.command == "import" and not args.path:
        parser.error("import requires PATH or SHAKER_IMPORT_PATH")

    db = SessionLocal()
    try:
        registry = UserRegistry(db)
        if args.command == "register":
            print(format_record(registry.register(args.external_id, args.display_name)))
        elif args.command == "lookup":
            if args.user_id is not None:
                user = registry.find_by_id(args.user_id)
            else:
                user = registry.find_by_external_id(args.external_id)
            print(format_record(user))
        elif args.command == "count":
            print(registry.count())
        elif args.command == "import":
            summary = import_display_names_file(registry, args.path)
            print(f"Imported {summary.imported} users ({summary.failed} failed)")
    except (RegistryError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
