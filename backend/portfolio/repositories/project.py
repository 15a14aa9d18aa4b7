"""
Project repository for showcase CRUD operations.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.models.project import Project


class ProjectRepository:
    """
    Repository for Project data access.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_projects(self, status: Optional[str] = None) -> List[Project]:
        """
        List projects, featured first, then newest first.

        Args:
            status: Only return projects with this status (None for all)
        """
        stmt = select(Project).order_by(Project.featured.desc(), Project.created_at.desc())
        if status is not None:
            stmt = stmt.where(Project.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str, status: Optional[str] = None) -> Optional[Project]:
        stmt = select(Project).where(Project.slug == slug.lower())
        if status is not None:
            stmt = stmt.where(Project.status == status)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, project_id: str) -> Optional[Project]:
        result = await self.session.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        """
        Check whether a slug is taken, optionally ignoring one project.

        Used before insert/update to return 409 instead of an integrity error.
        """
        stmt = select(Project.id).where(Project.slug == slug.lower())
        if exclude_id is not None:
            stmt = stmt.where(Project.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def create(self, data: Dict[str, Any]) -> Project:
        project = Project(**data)
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def update(self, project: Project, data: Dict[str, Any]) -> Project:
        for field, value in data.items():
            setattr(project, field, value)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def delete(self, project_id: str) -> bool:
        result = await self.session.execute(delete(Project).where(Project.id == project_id))
        await self.session.flush()
        return result.rowcount > 0
