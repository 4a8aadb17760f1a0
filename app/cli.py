"""
Maintenance commands.

Usage:
    python -m app.cli resync [--user-id N]
    python -m app.cli create-test-user [--email E] [--password P]
"""

import argparse
import asyncio
import sys

from app.core.app_logging import configure_logging
from app.core.config import settings
from app.core.database import init_database
from app.core.db import AsyncSessionLocal
from app.core.test_data import TEST_USER_EMAIL, TEST_USER_PASSWORD, create_test_user
from app.services.progress_service import ProgressService


async def resync(user_id=None) -> int:
    async with AsyncSessionLocal() as session:
        return await ProgressService(session).recompute_all(user_id)


async def seed_user(email: str, password: str):
    await init_database()
    async with AsyncSessionLocal() as session:
        return await create_test_user(session, email, password)


def cmd_resync(args: argparse.Namespace) -> int:
    """Rebuild daily progress totals from the meals table."""
    count = asyncio.run(resync(args.user_id))
    scope = f"user {args.user_id}" if args.user_id is not None else "all users"
    print(f"Recomputed {count} daily aggregates for {scope}")
    return 0


def cmd_create_test_user(args: argparse.Namespace) -> int:
    """Create a demo account if it does not exist yet."""
    user = asyncio.run(seed_user(args.email, args.password))
    if user is None:
        print(f"User {args.email} already exists")
    else:
        print(f"Created user {user.email} (id {user.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.cli", description="NutriTrack maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resync_parser = subparsers.add_parser("resync", help="recompute daily progress from meals")
    resync_parser.add_argument("--user-id", type=int, default=None, help="only this user")
    resync_parser.set_defaults(func=cmd_resync)

    seed_parser = subparsers.add_parser("create-test-user", help="create a demo account")
    seed_parser.add_argument("--email", default=TEST_USER_EMAIL)
    seed_parser.add_argument("--password", default=TEST_USER_PASSWORD)
    seed_parser.set_defaults(func=cmd_create_test_user)

    return parser


def main(argv=None) -> int:
    configure_logging(settings.LOG_LEVEL)
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
