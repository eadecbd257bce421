"""Project endpoints: personal plans linking jobs, papers and resources."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import get_current_user, require_user
from research_hub.errors import NotFoundError, require_fields
from research_hub.models.base import get_db
from research_hub.models.project import Project
from research_hub.schemas.project import (
    ProgressUpdate,
    ProjectCategory,
    ProjectCreate,
    ProjectStatus,
    ProjectUpdate,
)
from research_hub.services import project_service
from research_hub.services.auth_service import AuthUser

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
async def list_projects(
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    status: ProjectStatus | None = Query(None),
    category: ProjectCategory | None = Query(None),
    mine_only: bool = Query(False),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """The caller's projects plus everyone's public ones."""
    if mine_only:
        query = select(Project).where(Project.user_id == user.user_id)
    else:
        query = project_service.visible_query(user.user_id)
    if status:
        query = query.where(Project.status == status)
    if category:
        query = query.where(Project.category == category)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    query = query.order_by(Project.updated_at.desc(), Project.id).offset(offset).limit(limit)
    projects = (await db.execute(query)).scalars().all()
    return {
        "success": True,
        "projects": [project_service.serialize(p, user.user_id) for p in projects],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.get("/{project_id}")
async def get_project(
    project_id: UUID,
    user: AuthUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user_id = user.user_id if user else None
    project = await project_service.get_visible(db, project_id, user_id)
    return {"success": True, "project": project_service.serialize(project, user_id)}


@router.post("", status_code=201)
async def create_project(
    body: ProjectCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    require_fields(title=body.title)
    fields = body.model_dump()
    fields["title"] = fields["title"].strip()
    project = Project(user_id=user.user_id)
    project_service.apply_changes(project, fields)
    db.add(project)
    await db.flush()
    return {"success": True, "project": project_service.serialize(project, user.user_id)}


@router.put("/{project_id}")
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Owner-only partial update. Linked lists are replaced, not merged."""
    project = await project_service.get_owned(db, project_id, user.user_id)
    if project is None:
        raise NotFoundError("Project not found")

    changes = body.model_dump(exclude_unset=True)
    if "title" in changes:
        require_fields(title=changes["title"])
        changes["title"] = changes["title"].strip()
    # Explicit nulls on required columns leave the stored value alone
    for field in ("status", "priority", "category", "is_public", "description", "notes"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    project_service.apply_changes(project, changes)
    await db.flush()
    return {"success": True, "project": project_service.serialize(project, user.user_id)}


@router.put("/{project_id}/progress")
async def update_progress(
    project_id: UUID,
    body: ProgressUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Set progress; reaching 100 marks the project completed."""
    project = await project_service.get_owned(db, project_id, user.user_id)
    if project is None:
        raise NotFoundError("Project not found")
    project_service.apply_progress(project, body.progress)
    await db.flush()
    return {"success": True, "project": project_service.serialize(project, user.user_id)}


@router.delete("/{project_id}")
async def delete_project(
    project_id: UUID,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        delete(Project).where(Project.id == project_id, Project.user_id == user.user_id)
    )
    return {"success": True, "deleted": bool(result.rowcount)}
