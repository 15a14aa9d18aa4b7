"""
Project service: showcase rules on top of the repository.

Visitors only ever see published projects; the admin manages all of them.
"""

from typing import List

from portfolio.core.errors import ConflictError, NotFoundError
from portfolio.core.logging_config import get_logger
from portfolio.models.project import Project
from portfolio.repositories.project import ProjectRepository
from portfolio.schemas.project import ProjectCreate, ProjectUpdate


logger = get_logger(__name__)

# Columns that are NOT NULL; an explicit null in an update leaves them unchanged
_REQUIRED_FIELDS = frozenset({
    "title", "slug", "short_description", "project_type", "overview",
    "tech_stack", "images", "featured", "status",
})


class ProjectService:
    def __init__(self, repository: ProjectRepository):
        self.repository = repository

    async def list_published(self) -> List[Project]:
        return await self.repository.list_projects(status="published")

    async def get_published(self, slug: str) -> Project:
        project = await self.repository.get_by_slug(slug, status="published")
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def create(self, data: ProjectCreate) -> Project:
        if await self.repository.slug_exists(data.slug):
            raise ConflictError("Project slug already exists")

        project = await self.repository.create(data.model_dump())
        logger.info("Project created", extra={"project_id": project.id, "slug": project.slug})
        return project

    async def update(self, project_id: str, data: ProjectUpdate) -> Project:
        changes = data.model_dump(exclude_unset=True)

        if changes.get("slug") and await self.repository.slug_exists(changes["slug"], exclude_id=project_id):
            raise ConflictError("Project slug already exists")

        project = await self.repository.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")

        changes = {
            field: value for field, value in changes.items()
            if value is not None or field not in _REQUIRED_FIELDS
        }
        return await self.repository.update(project, changes)

    async def delete(self, project_id: str) -> None:
        if not await self.repository.delete(project_id):
            raise NotFoundError("Project not found")
        logger.info("Project deleted", extra={"project_id": project_id})

    async def toggle_featured(self, project_id: str) -> Project:
        project = await self.repository.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return await self.repository.update(project, {"featured": not project.featured})

    async def upload_images(self, images: List[str]) -> List[str]:
        """
        Accept images for a project and return their stored references.

        Images are kept inline as base64 data URIs, so the references are
        the submitted strings themselves.
        """
        return list(images)
