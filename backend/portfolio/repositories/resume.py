"""
Resume repository.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.resume import Resume


class ResumeRepository:
    """Repository for Resume data access."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest(self) -> Optional[Resume]:
        stmt = select(Resume).order_by(Resume.uploaded_at.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def replace(self, file_url: str) -> Resume:
        """
        Delete every stored resume and insert the new one.

        Both statements run in the request's transaction, so readers never
        observe zero or two resumes.
        """
        await self.session.execute(delete(Resume))
        resume = Resume(file_url=file_url)
        self.session.add(resume)
        await self.session.flush()
        await self.session.refresh(resume)
        return resume

    async def delete(self, resume_id: str) -> bool:
        result = await self.session.execute(delete(Resume).where(Resume.id == resume_id))
        await self.session.flush()
        return result.rowcount > 0
