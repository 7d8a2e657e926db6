"""Activity API endpoints."""
from datetime import datetime
from typing import Literal, Optional
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
from commons_youth.models import Activity, Group, User
from commons_youth.schemas.activity import (
    ActivityCreate,
    ActivityListResponse,
    ActivityResponse,
    ActivityUpdate,
)
from commons_youth.schemas.common import VisibilityUpdate
from commons_youth.utils.audit import log_audit_event

router = APIRouter(prefix="/activities", tags=["activities"])


async def _get_activity_or_404(activity_id: UUID, db: AsyncSession) -> Activity:
    result = await db.execute(select(Activity).where(Activity.id == activity_id))
    activity = result.scalar_one_or_none()
    if not activity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found",
        )
    return activity


@router.get("", response_model=ActivityListResponse)
async def list_activities(
    mode: Literal["upcoming", "past"] = Query("upcoming"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List upcoming activities (soonest first) or past ones (latest first)."""
    now = datetime.utcnow()
    query = select(Activity)
    if mode == "upcoming":
        query = query.where(Activity.date >= now).order_by(Activity.date.asc())
    else:
        query = query.where(Activity.date < now).order_by(Activity.date.desc())
    if current_user is None or not is_admin_role(current_user.role):
        query = query.where(Activity.is_hidden.is_(False))

    result = await db.execute(query)
    activities = list(result.scalars().all())
    return ActivityListResponse(
        items=[ActivityResponse.model_validate(a) for a in activities],
        total=len(activities),
    )


@router.get("/mine", response_model=ActivityListResponse)
async def list_my_activities(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(Activity)
        .where(Activity.owner_id == current_user.id)
        .order_by(Activity.date.desc())
    )
    activities = list(result.scalars().all())
    return ActivityListResponse(
        items=[ActivityResponse.model_validate(a) for a in activities],
        total=len(activities),
    )


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    activity_data: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create an activity for a group the current user manages."""
    result = await db.execute(select(Group).where(Group.id == activity_data.group_id))
    group = result.scalar_one_or_none()
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    ensure_can_manage(group, current_user)

    activity = Activity(
        owner_id=current_user.id,
        group_name=group.name,
        **activity_data.model_dump(),
    )
    db.add(activity)
    await db.commit()
    await db.refresh(activity)

    log_audit_event(
        "activity_created",
        actor=current_user,
        resource="activity",
        resource_id=activity.id,
        details={"title": activity.title, "group_id": str(group.id)},
    )
    return activity


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity(
    activity_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    activity = await _get_activity_or_404(activity_id, db)
    if not can_view(activity, current_user):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found",
        )
    return activity


@router.patch("/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: UUID,
    activity_data: ActivityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update an activity (owner or admin)."""
    activity = await _get_activity_or_404(activity_id, db)
    ensure_can_manage(activity, current_user)

    update_data = activity_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("title", "date", "location", "status"):
            continue
        setattr(activity, field, value)

    await db.commit()
    await db.refresh(activity)

    log_audit_event(
        "activity_updated",
        actor=current_user,
        resource="activity",
        resource_id=activity.id,
        details={"fields": sorted(update_data)},
    )
    return activity


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    activity_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    activity = await _get_activity_or_404(activity_id, db)
    ensure_can_manage(activity, current_user)

    title = activity.title
    await db.delete(activity)
    await db.commit()

    log_audit_event(
        "activity_deleted",
        actor=current_user,
        resource="activity",
        resource_id=activity_id,
        details={"title": title},
    )


@router.put("/{activity_id}/visibility", response_model=ActivityResponse)
async def set_activity_visibility(
    activity_id: UUID,
    visibility: VisibilityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Hide or show an activity (admin only)."""
    activity = await _get_activity_or_404(activity_id, db)
    activity.is_hidden = visibility.is_hidden
    await db.commit()
    await db.refresh(activity)

    log_audit_event(
        "activity_visibility_changed",
        actor=current_user,
        resource="activity",
        resource_id=activity.id,
        details={"is_hidden": activity.is_hidden},
    )
    return activity
