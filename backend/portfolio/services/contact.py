"""
Contact service: stores form submissions for the admin inbox.
"""

from typing import List

from portfolio.core.errors import NotFoundError
from portfolio.core.logging_config import get_logger
from portfolio.models.contact import ContactMessage
from portfolio.repositories.contact import ContactRepository
from portfolio.schemas.contact import ContactCreate


logger = get_logger(__name__)


class ContactService:
    def __init__(self, repository: ContactRepository):
        self.repository = repository

    async def submit(self, data: ContactCreate) -> ContactMessage:
        contact = await self.repository.create(data.name, data.email, data.message)
        # Notification hook; the message body is not logged
        logger.info(
            "Contact message received",
            extra={"contact_id": contact.id, "sender": contact.email},
        )
        return contact

    async def list_messages(self) -> List[ContactMessage]:
        return await self.repository.list_messages()

    async def mark_as_read(self, message_id: str) -> ContactMessage:
        contact = await self.repository.mark_as_read(message_id)
        if contact is None:
            raise NotFoundError("Contact message not found")
        return contact
