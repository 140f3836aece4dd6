"""
Store Rating maintenance CLI.

Usage
-----
python -m storerate.cli create-admin --email admin@example.com --password 'Admin@123'
python -m storerate.cli recalculate-ratings
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from fastapi import HTTPException

from storerate.db.session import get_db, ensure_indexes, close_mongo_connection
from storerate.models.user import validate_address, validate_email, validate_name, validate_password
from storerate.services.rating import recalculate_store_rating
from storerate.services.user import create_user

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "Admin@123"
DEFAULT_ADMIN_NAME = "Administrator Account For Testing System"
DEFAULT_ADMIN_ADDRESS = "123 Admin Street, Admin City, Admin State 12345 - Administrative Office Building"


async def create_admin(db, email: str, password: str, name: str, address: str) -> bool:
    """Seed an admin account. Returns False when the email is already taken."""
    email = validate_email(email)
    if await db.users.find_one({"email": email}):
        logger.info(f"Admin user {email} already exists")
        return False

    await create_user(
        db,
        name=validate_name(name),
        email=email,
        password=validate_password(password),
        address=validate_address(address),
        role="admin",
    )
    logger.info(f"Admin user {email} created")
    return True


async def recalculate_all_ratings(db) -> int:
    """Rebuild every store's aggregate counters from the ratings collection."""
    stores = await db.stores.find({}, {"id": 1}).to_list(None)
    for store in stores:
        await recalculate_store_rating(db, store["id"])
    logger.info(f"Recalculated ratings for {len(stores)} stores")
    return len(stores)


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    finally:
        close_mongo_connection()


def cmd_create_admin(args: argparse.Namespace) -> None:
    async def run():
        db = get_db()
        await ensure_indexes(db)
        created = await create_admin(db, args.email, args.password, args.name, args.address)
        print("Admin user created successfully!" if created else "Admin user already exists!")
        if created:
            print(f"Email: {args.email}")

    try:
        _run(run())
    except (ValueError, HTTPException) as exc:
        raise SystemExit(f"Error creating admin: {exc}") from exc


def cmd_recalculate(args: argparse.Namespace) -> None:
    async def run():
        count = await recalculate_all_ratings(get_db())
        print(f"Recalculated ratings for {count} stores")

    _run(run())


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="storerate", description="Store Rating maintenance CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("create-admin", help="Create the initial admin account.")
    sp.add_argument("--email", default=DEFAULT_ADMIN_EMAIL, help=f"Default: {DEFAULT_ADMIN_EMAIL}")
    sp.add_argument("--password", default=DEFAULT_ADMIN_PASSWORD, help="8-16 chars, one uppercase, one special.")
    sp.add_argument("--name", default=DEFAULT_ADMIN_NAME, help="20-60 characters.")
    sp.add_argument("--address", default=DEFAULT_ADMIN_ADDRESS, help="Up to 400 characters.")
    sp.set_defaults(func=cmd_create_admin)

    sp = sub.add_parser("recalculate-ratings", help="Rebuild store rating aggregates from the ratings collection.")
    sp.set_defaults(func=cmd_recalculate)

    return p


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
