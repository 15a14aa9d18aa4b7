"""
Resume endpoints.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status

from portfolio.api.dependencies import CurrentAdmin, DatabaseSession
from portfolio.repositories.resume import ResumeRepository
from portfolio.schemas.auth import MessageResponse
from portfolio.schemas.resume import ResumeResponse, ResumeUpload
from portfolio.services.resume import ResumeService


router = APIRouter()


def get_resume_service(db: DatabaseSession) -> ResumeService:
    return ResumeService(ResumeRepository(db))


ResumeServiceDep = Annotated[ResumeService, Depends(get_resume_service)]


@router.get("", response_model=Optional[ResumeResponse])
async def get_latest_resume(service: ResumeServiceDep):
    """The active resume, or null when none has been uploaded."""
    return await service.get_latest()


@router.post("", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(body: ResumeUpload, admin: CurrentAdmin, service: ResumeServiceDep):
    return await service.upload(body.base64_data)


@router.delete("/{resume_id}", response_model=MessageResponse)
async def delete_resume(resume_id: str, admin: CurrentAdmin, service: ResumeServiceDep):
    await service.delete(resume_id)
    return MessageResponse(message="Resume deleted")
