"""
Contact form endpoints.

Submitting is public (and rate limited); the inbox is admin only.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from portfolio.api.dependencies import CurrentAdmin, DatabaseSession
from portfolio.repositories.contact import ContactRepository
from portfolio.schemas.contact import ContactCreate, ContactResponse, ContactSubmitResponse
from portfolio.services.contact import ContactService


router = APIRouter()


def get_contact_service(db: DatabaseSession) -> ContactService:
    return ContactService(ContactRepository(db))


ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]


@router.post("", response_model=ContactSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(body: ContactCreate, service: ContactServiceDep):
    contact = await service.submit(body)
    return ContactSubmitResponse(
        message="Message submitted successfully",
        contact=ContactResponse.model_validate(contact),
    )


@router.get("", response_model=List[ContactResponse])
async def list_messages(admin: CurrentAdmin, service: ContactServiceDep):
    return await service.list_messages()


@router.patch("/{message_id}", response_model=ContactResponse)
async def mark_as_read(message_id: str, admin: CurrentAdmin, service: ContactServiceDep):
    return await service.mark_as_read(message_id)
