"""
Project model for the portfolio showcase.
"""

from sqlalchemy import Boolean, Column, Index, JSON, String, Text

from portfolio.models.base import Base, UUIDMixin, TimestampMixin


class Project(Base, UUIDMixin, TimestampMixin):
    """
    Showcased project, either a short "basic" entry or a full case study.

    tech_stack is a list of {"name", "icon"} objects and images a list of
    image references (URLs or base64 data URIs), both stored as JSON.
    """

    __tablename__ = "projects"

    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    short_description = Column(Text, nullable=False)
    project_type = Column(String(20), nullable=False, default="basic")

    overview = Column(Text, nullable=False)
    problem_statement = Column(Text, nullable=True)
    solution_approach = Column(Text, nullable=True)
    architecture_details = Column(Text, nullable=True)
    challenges = Column(Text, nullable=True)
    results = Column(Text, nullable=True)

    role = Column(String(255), nullable=True)
    category = Column(String(255), nullable=True)
    timeline = Column(String(255), nullable=True)

    tech_stack = Column(JSON, nullable=False, default=list)
    github_url = Column(String(2048), nullable=True)
    live_url = Column(String(2048), nullable=True)
    images = Column(JSON, nullable=False, default=list)

    featured = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="published")

    __table_args__ = (
        Index("idx_projects_status_featured", "status", "featured"),
    )

    def __repr__(self) -> str:
        return f"Project(id={self.id!r}, slug={self.slug!r})"
