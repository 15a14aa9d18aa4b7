"""
Contact message repository.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.contact import ContactMessage


class ContactRepository:
    """Repository for ContactMessage data access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, email: str, message: str) -> ContactMessage:
        contact = ContactMessage(name=name, email=email, message=message)
        self.session.add(contact)
        await self.session.flush()
        await self.session.refresh(contact)
        return contact

    async def list_messages(self) -> List[ContactMessage]:
        """All messages, newest first."""
        stmt = select(ContactMessage).order_by(ContactMessage.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_as_read(self, message_id: str) -> Optional[ContactMessage]:
        result = await self.session.execute(
            select(ContactMessage).where(ContactMessage.id == message_id)
        )
        contact = result.scalar_one_or_none()
        if contact is None:
            return None

        contact.is_read = True
        await self.session.flush()
        await self.session.refresh(contact)
        return contact
