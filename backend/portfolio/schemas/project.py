"""
Pydantic schemas for project endpoints.

JSON field names are camelCase (shortDescription, techStack, ...) to match
the frontend; Python attributes stay snake_case and map 1:1 to columns.
"""

import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

ProjectType = Literal["case-study", "basic"]
ProjectStatus = Literal["published", "draft"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TechStackItem(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field(..., min_length=1, max_length=2048)


def _normalize_slug(v: str) -> str:
    v = v.strip().lower()
    if not SLUG_PATTERN.match(v):
        raise ValueError("slug may only contain lowercase letters, digits and single hyphens")
    return v


class ProjectBase(CamelModel):
    problem_statement: Optional[str] = None
    solution_approach: Optional[str] = None
    architecture_details: Optional[str] = None
    challenges: Optional[str] = None
    results: Optional[str] = None
    role: Optional[str] = None
    category: Optional[str] = None
    timeline: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None


class ProjectCreate(ProjectBase):
    """
    Request body for creating a project.

    Example:
        {
            "title": "Realtime Chat",
            "slug": "realtime-chat",
            "shortDescription": "WebSocket chat",
            "overview": "...",
            "techStack": [{"name": "FastAPI", "icon": "fastapi"}]
        }
    """
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    short_description: str = Field(..., min_length=1)
    project_type: ProjectType = "basic"
    overview: str = Field(..., min_length=1)
    tech_stack: List[TechStackItem] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    featured: bool = False
    status: ProjectStatus = "published"

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        return _normalize_slug(v)


class ProjectUpdate(ProjectBase):
    """Partial update; only fields present in the body are changed."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    short_description: Optional[str] = Field(default=None, min_length=1)
    project_type: Optional[ProjectType] = None
    overview: Optional[str] = Field(default=None, min_length=1)
    tech_stack: Optional[List[TechStackItem]] = None
    images: Optional[List[str]] = None
    featured: Optional[bool] = None
    status: Optional[ProjectStatus] = None

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_slug(v) if v is not None else v


class ProjectResponse(ProjectBase):
    id: str
    title: str
    slug: str
    short_description: str
    project_type: ProjectType
    overview: str
    tech_stack: List[TechStackItem]
    images: List[str]
    featured: bool
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime


class ImageUploadRequest(BaseModel):
    images: List[str] = Field(..., description="Base64 data URIs")
