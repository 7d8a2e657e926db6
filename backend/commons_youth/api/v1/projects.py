"""Community project API endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commons_youth.auth.jwt import (
    can_view,
    ensure_can_manage,
    get_current_active_admin,
    get_current_user,
    get_optional_user,
    is_admin_role,
)
from commons_youth.database import get_db
from commons_youth.models import CommunityProject, Group, User
from commons_youth.schemas.common import VisibilityUpdate
from commons_youth.schemas.project import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from commons_youth.utils.audit import log_audit_event

router = APIRouter(prefix="/projects", tags=["projects"])

NON_NULLABLE_FIELDS = ("title", "location", "date", "category", "project_status", "description", "volunteers")


async def _get_project_or_404(project_id: UUID, db: AsyncSession) -> CommunityProject:
    result = await db.execute(
        select(CommunityProject).where(CommunityProject.id == project_id)
    )
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return project


async def _check_group(group_id: Optional[UUID], current_user: User, db: AsyncSession) -> None:
    """A project may only be linked to a group its author manages."""
    if group_id is None:
        return
    result = await db.execute(select(Group).where(Group.id == group_id))
    group = result.scalar_one_or_none()
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    ensure_can_manage(group, current_user)


def _dump(data) -> dict:
    # activity ids are kept as strings in the JSONB column
    values = data.model_dump(exclude_unset=True)
    if values.get("activity_ids") is not None:
        values["activity_ids"] = [str(a) for a in values["activity_ids"]]
    return values


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    category: Optional[str] = Query(None),
    project_status: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List community projects, newest first."""
    query = select(CommunityProject).order_by(CommunityProject.created_at.desc())
    if category:
        query = query.where(CommunityProject.category == category)
    if project_status:
        query = query.where(CommunityProject.project_status == project_status)
    if current_user is None or not is_admin_role(current_user.role):
        query = query.where(CommunityProject.is_hidden.is_(False))

    result = await db.execute(query)
    projects = list(result.scalars().all())
    return ProjectListResponse(
        items=[ProjectResponse.model_validate(p) for p in projects],
        total=len(projects),
    )


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await _check_group(project_data.group_id, current_user, db)

    values = _dump(project_data)
    project = CommunityProject(owner_id=current_user.id, **values)
    db.add(project)
    await db.commit()
    await db.refresh(project)

    log_audit_event(
        "project_created",
        actor=current_user,
        resource="project",
        resource_id=project.id,
        details={"title": project.title, "category": project.category},
    )
    return project


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    project = await _get_project_or_404(project_id, db)
    if not can_view(project, current_user):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return project


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a project (owner or admin)."""
    project = await _get_project_or_404(project_id, db)
    ensure_can_manage(project, current_user)

    update_data = _dump(project_data)
    if update_data.get("group_id") is not None:
        await _check_group(update_data["group_id"], current_user, db)

    for field, value in update_data.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(project, field, value)

    await db.commit()
    await db.refresh(project)

    log_audit_event(
        "project_updated",
        actor=current_user,
        resource="project",
        resource_id=project.id,
        details={"fields": sorted(update_data)},
    )
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = await _get_project_or_404(project_id, db)
    ensure_can_manage(project, current_user)

    title = project.title
    await db.delete(project)
    await db.commit()

    log_audit_event(
        "project_deleted",
        actor=current_user,
        resource="project",
        resource_id=project_id,
        details={"title": title},
    )


@router.put("/{project_id}/visibility", response_model=ProjectResponse)
async def set_project_visibility(
    project_id: UUID,
    visibility: VisibilityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Hide or show a project (admin only)."""
    project = await _get_project_or_404(project_id, db)
    project.is_hidden = visibility.is_hidden
    await db.commit()
    await db.refresh(project)

    log_audit_event(
        "project_visibility_changed",
        actor=current_user,
        resource="project",
        resource_id=project.id,
        details={"is_hidden": project.is_hidden},
    )
    return project
