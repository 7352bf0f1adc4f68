"""Offline user management for the planner database.

Usage:
    basis-planner-users add <username> <password> [admin|user]
    basis-planner-users list
    basis-planner-users delete <username>

Roles: admin (read + write), user (read only).
"""

import argparse
import asyncio
import logging
import sys

from basis_planner.core.config import Settings, settings
from basis_planner.core.database import create_engine, create_schema, create_sessionmaker
from basis_planner.core.errors import PlannerError
from basis_planner.services.users import UserService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="basis-planner-users",
        description="Benutzer-Verwaltung für den SAP Basis Jahresplaner",
    )
    parser.add_argument("--database", help="path to the SQLite database (default: DATABASE_PATH)")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Benutzer erstellen")
    add.add_argument("username")
    add.add_argument("password")
    add.add_argument("role", nargs="?", default="user", choices=["admin", "user"])

    commands.add_parser("list", help="Alle Benutzer anzeigen")

    delete = commands.add_parser("delete", help="Benutzer löschen")
    delete.add_argument("username")
    return parser


async def run_command(args: argparse.Namespace, app_settings: Settings) -> int:
    engine = create_engine(app_settings.database_url)
    try:
        await create_schema(engine)
        sessionmaker = create_sessionmaker(engine)
        async with sessionmaker.begin() as session:
            users = UserService(session, protected_username=app_settings.ADMIN_USERNAME)
            try:
                if args.command == "add":
                    await users.create_user(args.username, args.password, args.role)
                    print(f'Benutzer "{args.username}" mit Rolle "{args.role}" erstellt')
                elif args.command == "list":
                    print("Benutzer:")
                    print("-" * 50)
                    for user in await users.list_users(order_by_id=True):
                        print(f"  {user.id}. {user.username} ({user.role}) - erstellt: {user.created_at}")
                elif args.command == "delete":
                    await users.delete_user_by_username(args.username)
                    print(f'Benutzer "{args.username}" gelöscht')
            except PlannerError as e:
                print(f"Fehler: {e.message}", file=sys.stderr)
                return 1
    finally:
        await engine.dispose()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    app_settings = settings
    if args.database:
        app_settings = settings.model_copy(update={"DATABASE_PATH": args.database})
    return asyncio.run(run_command(args, app_settings))


if __name__ == "__main__":
    sys.exit(main())
