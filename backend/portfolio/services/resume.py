"""
Resume service. Exactly one resume is active at a time.
"""

from typing import Optional

from portfolio.core.errors import NotFoundError
from portfolio.core.logging_config import get_logger
from portfolio.models.resume import Resume
from portfolio.repositories.resume import ResumeRepository


logger = get_logger(__name__)


class ResumeService:
    def __init__(self, repository: ResumeRepository):
        self.repository = repository

    async def get_latest(self) -> Optional[Resume]:
        return await self.repository.get_latest()

    async def upload(self, file_url: str) -> Resume:
        resume = await self.repository.replace(file_url)
        logger.info("Resume uploaded", extra={"resume_id": resume.id})
        return resume

    async def delete(self, resume_id: str) -> None:
        if not await self.repository.delete(resume_id):
            raise NotFoundError("Resume not found")
