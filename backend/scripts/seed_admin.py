"""
Seed the admin account for dashboard authentication.

Creates the admin if the email is unknown, otherwise resets its password
(which also ends any active session). Safe to run repeatedly.

Usage:
    python scripts/seed_admin.py --email admin@example.com --password '...'
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD='...' python scripts/seed_admin.py
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add backend directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from portfolio.core.config import Settings, load_settings
from portfolio.core.database import close_db, get_async_engine, get_session_maker, init_db
from portfolio.core.security import get_password_hash
from portfolio.repositories.admin import AdminRepository, normalize_email
from portfolio.schemas.auth import MIN_PASSWORD_LENGTH


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or reset the admin account")
    parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD"))
    args = parser.parse_args(argv)

    if not args.email or not args.password:
        parser.error("email and password are required (flags or ADMIN_EMAIL/ADMIN_PASSWORD)")
    if len(args.password) < MIN_PASSWORD_LENGTH:
        parser.error(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    return args


async def seed_admin(email: str, password: str, settings: Settings) -> str:
    """
    Create the admin or reset its password.

    Args:
        email: Admin email (normalised to lower case)
        password: Plain text password to hash
        settings: Application settings (database URL, bcrypt cost)

    Returns:
        "created" or "updated"
    """
    engine = get_async_engine(settings.database_url)
    session_maker = get_session_maker(engine)
    password_hash = get_password_hash(password, settings.bcrypt_rounds)

    try:
        await init_db(engine, create_all=settings.enable_db_create_all)
        async with session_maker() as session:
            repository = AdminRepository(session)
            existing = await repository.get_by_email(email)

            if existing is not None:
                await repository.set_password_hash(existing.id, password_hash)
                return "updated"

            await repository.create(email, password_hash)
            await session.commit()
            return "created"
    finally:
        await close_db(engine)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings()

    outcome = asyncio.run(seed_admin(args.email, args.password, settings))
    print(f"Admin {normalize_email(args.email)} {outcome}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
