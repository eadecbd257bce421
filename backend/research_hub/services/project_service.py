"""Project rules: ownership, linked-id sets and the progress/status rule."""

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.errors import NotFoundError
from research_hub.models.project import Project
from research_hub.schemas.project import ProjectRead

LINK_FIELDS = ("linked_jobs", "linked_papers", "linked_resources")


def dedupe(values: list[str]) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen = []
    for value in values:
        value = str(value).strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def apply_progress(project: Project, progress: int) -> None:
    project.progress = progress
    if progress >= 100:
        project.status = "completed"


def apply_changes(project: Project, changes: dict) -> None:
    """Partial update. Linked sets are replaced wholesale."""
    progress = changes.pop("progress", None)
    for field, value in changes.items():
        if field in LINK_FIELDS or field == "tags":
            value = dedupe(value or [])
        setattr(project, field, value)
    if progress is not None:
        apply_progress(project, progress)


def serialize(project: Project, user_id: UUID | None) -> dict:
    data = ProjectRead.model_validate(project).model_dump()
    is_owner = user_id is not None and project.user_id == user_id
    data["canEdit"] = is_owner
    data["canDelete"] = is_owner
    return data


async def get_visible(db: AsyncSession, project_id: UUID, user_id: UUID | None) -> Project:
    project = await db.get(Project, project_id)
    if project is None or not (project.is_public or project.user_id == user_id):
        raise NotFoundError("Project not found")
    return project


async def get_owned(db: AsyncSession, project_id: UUID, user_id: UUID) -> Project | None:
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.user_id == user_id)
    )
    return result.scalar_one_or_none()


def visible_query(user_id: UUID):
    return select(Project).where(or_(Project.user_id == user_id, Project.is_public.is_(True)))
