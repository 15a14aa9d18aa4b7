"""
Project endpoints.

Reads are public and only return published projects; writes require an
authenticated admin.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from portfolio.api.dependencies import CurrentAdmin, DatabaseSession
from portfolio.repositories.project import ProjectRepository
from portfolio.schemas.auth import MessageResponse
from portfolio.schemas.project import (
    ImageUploadRequest,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from portfolio.services.projects import ProjectService


router = APIRouter()


def get_project_service(db: DatabaseSession) -> ProjectService:
    return ProjectService(ProjectRepository(db))


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]


@router.get("", response_model=List[ProjectResponse])
async def list_projects(service: ProjectServiceDep):
    """Published projects, featured first, newest first."""
    return await service.list_published()


@router.post("/upload-images", response_model=List[str])
async def upload_images(
    body: ImageUploadRequest,
    admin: CurrentAdmin,
    service: ProjectServiceDep,
):
    return await service.upload_images(body.images)


@router.get("/{slug}", response_model=ProjectResponse)
async def get_project(slug: str, service: ProjectServiceDep):
    return await service.get_published(slug)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    admin: CurrentAdmin,
    service: ProjectServiceDep,
):
    return await service.create(body)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    admin: CurrentAdmin,
    service: ProjectServiceDep,
):
    return await service.update(project_id, body)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    admin: CurrentAdmin,
    service: ProjectServiceDep,
):
    await service.delete(project_id)
    return MessageResponse(message="Project deleted")


@router.patch("/{project_id}/toggle-featured", response_model=ProjectResponse)
async def toggle_featured(
    project_id: str,
    admin: CurrentAdmin,
    service: ProjectServiceDep,
):
    return await service.toggle_featured(project_id)
