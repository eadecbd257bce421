"""Resource endpoints: user resources plus shared job and interview resources."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import get_current_user, require_user
from research_hub.errors import NotFoundError, require_fields
from research_hub.models.base import get_db
from research_hub.models.job import Job
from research_hub.models.resource import InterviewResource, JobResource, UserResource
from research_hub.schemas.resource import (
    InterviewResourceCreate,
    JobResourceCreate,
    ResourceRead,
    ResourceUpdate,
    UserResourceCreate,
)
from research_hub.services.auth_service import AuthUser

# Columns that may not be blanked by an update
REQUIRED_COLUMNS = {
    UserResource: ("title", "description"),
    JobResource: ("title",),
    InterviewResource: ("title", "content"),
}


def _resource_dict(resource) -> dict:
    return ResourceRead.model_validate(resource).model_dump()


async def _paginate(db: AsyncSession, query, order_by, offset: int, limit: int) -> tuple[int, list]:
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    rows = (await db.execute(query.order_by(order_by).offset(offset).limit(limit))).scalars().all()
    return total, rows


def _apply_filters(query, model, resource_type: str | None, tag: str | None, search: str | None):
    if resource_type:
        query = query.where(func.lower(model.resource_type) == resource_type.strip().lower())
    if tag:
        query = query.where(cast(model.tags, String).ilike(f"%{tag.strip()}%"))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(model.title.ilike(pattern), cast(model.tags, String).ilike(pattern)))
    return query


async def _check_job(db: AsyncSession, job_id: str | None) -> None:
    if job_id and await db.get(Job, job_id) is None:
        raise NotFoundError("Job not found", f"No job with id {job_id}")


async def _update_owned(db: AsyncSession, model, resource_id: UUID, user_id: UUID, body: ResourceUpdate):
    result = await db.execute(select(model).where(model.id == resource_id, model.user_id == user_id))
    resource = result.scalar_one_or_none()
    if resource is None:
        raise NotFoundError("Resource not found")

    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if hasattr(model, field)
    }
    required = REQUIRED_COLUMNS[model]
    require_fields(**{field: changes[field] for field in required if field in changes})
    if "tags" in changes and changes["tags"] is None:
        changes["tags"] = []
    if changes.get("resource_type", "") is None:
        changes.pop("resource_type")
    if changes.get("visibility", "") is None:
        changes.pop("visibility")
    if "job_id" in changes:
        await _check_job(db, changes["job_id"])
    for field, value in changes.items():
        setattr(resource, field, value)
    await db.flush()
    return resource


async def _delete_owned(db: AsyncSession, model, resource_id: UUID, user_id: UUID) -> bool:
    result = await db.execute(delete(model).where(model.id == resource_id, model.user_id == user_id))
    return bool(result.rowcount)


# --- User resources ---

user_router = APIRouter(prefix="/user/resources", tags=["resources"])


@user_router.get("")
async def list_my_resources(
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    resource_type: str | None = Query(None),
    tag: str | None = Query(None),
    search: str | None = Query(None),
    visibility: str | None = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    query = select(UserResource).where(UserResource.user_id == user.user_id)
    if visibility:
        query = query.where(UserResource.visibility == visibility)
    query = _apply_filters(query, UserResource, resource_type, tag, search)
    total, rows = await _paginate(db, query, UserResource.created_at.desc(), offset, limit)
    return {"success": True, "resources": [_resource_dict(r) for r in rows], "total": total}


@user_router.get("/public")
async def list_public_resources(
    db: AsyncSession = Depends(get_db),
    resource_type: str | None = Query(None),
    tag: str | None = Query(None),
    search: str | None = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    query = select(UserResource).where(UserResource.visibility == "public")
    query = _apply_filters(query, UserResource, resource_type, tag, search)
    total, rows = await _paginate(db, query, UserResource.created_at.desc(), offset, limit)
    return {"success": True, "resources": [_resource_dict(r) for r in rows], "total": total}


@user_router.get("/{resource_id}")
async def get_user_resource(
    resource_id: UUID,
    user: AuthUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    resource = await db.get(UserResource, resource_id)
    is_owner = resource is not None and user is not None and resource.user_id == user.user_id
    if resource is None or (resource.visibility != "public" and not is_owner):
        raise NotFoundError("Resource not found")
    return {"success": True, "resource": _resource_dict(resource)}


@user_router.post("", status_code=201)
async def create_user_resource(
    body: UserResourceCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    require_fields(title=body.title, description=body.description)
    resource = UserResource(user_id=user.user_id, **body.model_dump())
    db.add(resource)
    await db.flush()
    return {"success": True, "resource": _resource_dict(resource)}


@user_router.put("/{resource_id}")
async def update_user_resource(
    resource_id: UUID,
    body: ResourceUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    resource = await _update_owned(db, UserResource, resource_id, user.user_id, body)
    return {"success": True, "resource": _resource_dict(resource)}


@user_router.delete("/{resource_id}")
async def delete_user_resource(
    resource_id: UUID,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await _delete_owned(db, UserResource, resource_id, user.user_id)
    return {"success": True, "deleted": deleted}


# --- Job and interview resources (shared, publicly readable) ---

def build_shared_router(prefix: str, model, create_schema, openapi_tag: str) -> APIRouter:
    """CRUD router for a publicly readable, owner-mutable resource table."""
    router = APIRouter(prefix=prefix, tags=[openapi_tag])

    @router.get("")
    async def list_resources(
        db: AsyncSession = Depends(get_db),
        job_id: str | None = Query(None),
        resource_type: str | None = Query(None),
        tag: str | None = Query(None),
        search: str | None = Query(None),
        offset: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=200),
    ):
        query = select(model)
        if job_id:
            query = query.where(model.job_id == job_id)
        query = _apply_filters(query, model, resource_type, tag, search)
        total, rows = await _paginate(db, query, model.created_at.desc(), offset, limit)
        return {"success": True, "resources": [_resource_dict(r) for r in rows], "total": total}

    @router.get("/{resource_id}")
    async def get_resource(resource_id: UUID, db: AsyncSession = Depends(get_db)):
        resource = await db.get(model, resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        return {"success": True, "resource": _resource_dict(resource)}

    @router.post("", status_code=201)
    async def create_resource(
        body: create_schema,
        user: AuthUser = Depends(require_user),
        db: AsyncSession = Depends(get_db),
    ):
        fields = body.model_dump()
        require_fields(**{field: fields.get(field) for field in REQUIRED_COLUMNS[model]})
        await _check_job(db, fields.get("job_id"))
        resource = model(user_id=user.user_id, **fields)
        db.add(resource)
        await db.flush()
        return {"success": True, "resource": _resource_dict(resource)}

    @router.put("/{resource_id}")
    async def update_resource(
        resource_id: UUID,
        body: ResourceUpdate,
        user: AuthUser = Depends(require_user),
        db: AsyncSession = Depends(get_db),
    ):
        resource = await _update_owned(db, model, resource_id, user.user_id, body)
        return {"success": True, "resource": _resource_dict(resource)}

    @router.delete("/{resource_id}")
    async def delete_resource(
        resource_id: UUID,
        user: AuthUser = Depends(require_user),
        db: AsyncSession = Depends(get_db),
    ):
        deleted = await _delete_owned(db, model, resource_id, user.user_id)
        return {"success": True, "deleted": deleted}

    return router


job_router = build_shared_router("/job-resources", JobResource, JobResourceCreate, "job-resources")
interview_router = build_shared_router(
    "/interview-resources", InterviewResource, InterviewResourceCreate, "interview-resources"
)
