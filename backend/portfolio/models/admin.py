"""
Admin model for authentication.

The admin is the only authenticatable identity. Besides the password hash
it holds the hash of the single refresh token that is currently valid.
"""

from sqlalchemy import Column, String

from portfolio.models.base import Base, UUIDMixin, TimestampMixin


class Admin(Base, UUIDMixin, TimestampMixin):
    """
    Admin account for the content-management surface.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        email: Unique, lower-cased login email
        password_hash: bcrypt hash of the password (never store plaintext)
        refresh_token_hash: Hash of the active refresh token, NULL when no
            session is active. Replacing it revokes the previous token.
        created_at / updated_at: From TimestampMixin

    Security considerations:
        - Never log or expose password_hash or refresh_token_hash
        - Provisioned out of band (scripts/seed_admin.py)
    """

    __tablename__ = "admins"

    email = Column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        doc="Lower-cased unique login email"
    )

    password_hash = Column(
        String(255),
        nullable=False,
        doc="bcrypt password hash"
    )

    refresh_token_hash = Column(
        String(255),
        nullable=True,
        doc="Hash of the currently valid refresh token"
    )

    def __repr__(self) -> str:
        # No hashes in repr
        return f"Admin(id={self.id!r}, email={self.email!r})"
