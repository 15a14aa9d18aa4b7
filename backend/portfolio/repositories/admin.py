"""
Admin repository: credential lookup and the refresh-token store.

The refresh-token store keeps exactly one hash per admin. Validation is by
equality with the current stored value, so writing a new hash implicitly
revokes every previously issued refresh token.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.admin import Admin


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AdminRepository:
    """
    Repository for Admin data access.

    Writes to refresh_token_hash are committed immediately: each one is a
    single-row update and the session-level invariant must hold for any
    request that starts afterwards. Those updates skip identity-map
    synchronisation; every read re-populates from the database instead.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[Admin]:
        """
        Look up an admin by email (case-insensitive).

        Args:
            email: Submitted email address

        Returns:
            Admin if found, None otherwise
        """
        stmt = (
            select(Admin)
            .where(Admin.email == normalize_email(email))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, admin_id: str) -> Optional[Admin]:
        # Always re-read: another request may have rotated the stored hash
        stmt = (
            select(Admin)
            .where(Admin.id == admin_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, email: str, password_hash: str) -> Admin:
        """
        Insert a new admin. Used by provisioning, not by the auth flow.
        """
        admin = Admin(email=normalize_email(email), password_hash=password_hash)
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def set_password_hash(self, admin_id: str, password_hash: str) -> None:
        """
        Replace the password hash and end any active session.
        """
        await self.session.execute(
            update(Admin)
            .where(Admin.id == admin_id)
            .values(password_hash=password_hash, refresh_token_hash=None)
        )
        await self.session.commit()

    async def set_refresh_token_hash(
        self,
        admin_id: str,
        token_hash: Optional[str],
    ) -> bool:
        """
        Persist or clear the active refresh token hash.

        Overwrites whatever was stored, which ends any prior session.

        Args:
            admin_id: Admin to update
            token_hash: New hash, or None to clear (logout)

        Returns:
            True if the admin row existed and was updated
        """
        result = await self.session.execute(
            update(Admin)
            .where(Admin.id == admin_id)
            .values(refresh_token_hash=token_hash)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1

    async def rotate_refresh_token_hash(
        self,
        admin_id: str,
        expected_hash: str,
        new_hash: str,
    ) -> bool:
        """
        Atomically replace the stored hash if it still equals expected_hash.

        This is the compare-and-swap that serializes concurrent refreshes
        of the same token: only the first writer sees its expected value;
        later writers update zero rows.

        Args:
            admin_id: Admin whose session is being rotated
            expected_hash: Hash the caller validated the presented token against
            new_hash: Hash of the newly minted refresh token

        Returns:
            True if this call performed the rotation, False if it lost the race
        """
        result = await self.session.execute(
            update(Admin)
            .where(
                Admin.id == admin_id,
                Admin.refresh_token_hash == expected_hash,
            )
            .values(refresh_token_hash=new_hash)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1
