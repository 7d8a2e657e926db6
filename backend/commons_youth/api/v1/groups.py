"""Community group API endpoints."""
import logging
import uuid
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
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
from commons_youth.config import get_settings
from commons_youth.database import get_db
from commons_youth.models import Activity, Group, User
from commons_youth.schemas.activity import ActivityListResponse, ActivityResponse
from commons_youth.schemas.common import VisibilityUpdate
from commons_youth.schemas.group import (
    GroupCreate,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
)
from commons_youth.services.group_directory import filter_groups
from commons_youth.services.storage import get_storage
from commons_youth.services.thai_locations import (
    ThaiLocationCache,
    get_coordinates,
    get_location_cache,
)
from commons_youth.utils.audit import log_audit_event
from commons_youth.utils.sanitize import (
    file_extension,
    sanitize_file_name,
    validate_file_size,
    validate_image_file,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])
settings = get_settings()

LOCATION_FIELDS = ("province", "amphoe", "tambon")
REQUIRED_FIELDS = ("name", "province", "issues", "description", "contact", "latitude", "longitude")

IMAGE_CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


async def _get_group_or_404(group_id: UUID, db: AsyncSession) -> Group:
    result = await db.execute(select(Group).where(Group.id == group_id))
    group = result.scalar_one_or_none()
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    return group


async def _resolve_coordinates(
    locations: ThaiLocationCache,
    province: str,
    amphoe: Optional[str],
    tambon: Optional[str],
) -> tuple[float, float]:
    coordinates = get_coordinates(await locations.get(), province, amphoe, tambon)
    return coordinates.lat, coordinates.lng


@router.get("", response_model=GroupListResponse)
async def list_groups(
    issue: Optional[str] = Query(None, description="Issue tag, or 'All'"),
    q: Optional[str] = Query(None, description="Search in name and province"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List groups shown in the directory. Admins also see hidden groups."""
    query = select(Group).order_by(Group.created_at.desc())
    if current_user is None or not is_admin_role(current_user.role):
        query = query.where(Group.is_hidden.is_(False))

    result = await db.execute(query)
    groups = filter_groups(result.scalars().all(), issue=issue, search=q)
    return GroupListResponse(
        items=[GroupResponse.model_validate(g) for g in groups],
        total=len(groups),
    )


@router.get("/mine", response_model=GroupListResponse)
async def list_my_groups(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the groups owned by the current user, hidden ones included."""
    result = await db.execute(
        select(Group)
        .where(Group.owner_id == current_user.id)
        .order_by(Group.created_at.desc())
    )
    groups = list(result.scalars().all())
    return GroupListResponse(
        items=[GroupResponse.model_validate(g) for g in groups],
        total=len(groups),
    )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    locations: ThaiLocationCache = Depends(get_location_cache),
):
    """Create a group owned by the current user."""
    values = group_data.model_dump()
    if values["latitude"] is None or values["longitude"] is None:
        values["latitude"], values["longitude"] = await _resolve_coordinates(
            locations, group_data.province, group_data.amphoe, group_data.tambon
        )

    group = Group(owner_id=current_user.id, **values)
    db.add(group)
    await db.commit()
    await db.refresh(group)

    log_audit_event(
        "group_created",
        actor=current_user,
        resource="group",
        resource_id=group.id,
        details={"group_name": group.name, "province": group.province},
    )
    return group


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Get a group. Hidden groups are only visible to their owner and admins."""
    group = await _get_group_or_404(group_id, db)
    if not can_view(group, current_user):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )
    return group


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: UUID,
    group_data: GroupUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    locations: ThaiLocationCache = Depends(get_location_cache),
):
    """Update a group (owner or admin)."""
    group = await _get_group_or_404(group_id, db)
    ensure_can_manage(group, current_user)

    update_data = {
        field: value
        for field, value in group_data.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_FIELDS
    }
    for field, value in update_data.items():
        setattr(group, field, value)

    # Moving a group without explicit coordinates re-resolves them
    location_changed = any(field in update_data for field in LOCATION_FIELDS)
    coordinates_given = "latitude" in update_data and "longitude" in update_data
    if location_changed and not coordinates_given:
        group.latitude, group.longitude = await _resolve_coordinates(
            locations, group.province, group.amphoe, group.tambon
        )

    await db.commit()
    await db.refresh(group)

    log_audit_event(
        "group_updated",
        actor=current_user,
        resource="group",
        resource_id=group.id,
        details={"fields": sorted(update_data)},
    )
    return group


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a group (owner or admin)."""
    group = await _get_group_or_404(group_id, db)
    ensure_can_manage(group, current_user)

    group_name = group.name
    await db.delete(group)
    await db.commit()

    log_audit_event(
        "group_deleted",
        actor=current_user,
        resource="group",
        resource_id=group_id,
        details={"group_name": group_name},
    )


@router.put("/{group_id}/visibility", response_model=GroupResponse)
async def set_group_visibility(
    group_id: UUID,
    visibility: VisibilityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_admin),
):
    """Hide or show a group (admin only)."""
    group = await _get_group_or_404(group_id, db)
    group.is_hidden = visibility.is_hidden
    await db.commit()
    await db.refresh(group)

    log_audit_event(
        "group_visibility_changed",
        actor=current_user,
        resource="group",
        resource_id=group.id,
        details={"is_hidden": group.is_hidden},
    )
    return group


@router.post("/{group_id}/cover", response_model=GroupResponse)
async def upload_group_cover(
    group_id: UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Upload a cover image for a group (owner or admin)."""
    group = await _get_group_or_404(group_id, db)
    ensure_can_manage(group, current_user)

    file_name = sanitize_file_name(file.filename or "")
    if not validate_image_file(file_name):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only jpg, jpeg, png, gif and webp images are accepted",
        )

    data = await file.read()
    if not validate_file_size(len(data), settings.MAX_COVER_IMAGE_MB):
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Cover image must be at most {settings.MAX_COVER_IMAGE_MB} MB",
        )

    storage = get_storage()
    object_name = f"covers/groups/{group.id}/{uuid.uuid4().hex}_{file_name}"
    storage.upload_bytes(
        data,
        object_name,
        content_type=IMAGE_CONTENT_TYPES.get(file_extension(file_name)),
    )
    group.image_url = storage.get_public_url(object_name)
    await db.commit()
    await db.refresh(group)

    logger.info(f"Stored cover image for group {group.id} at {object_name}")
    log_audit_event(
        "group_cover_uploaded",
        actor=current_user,
        resource="group",
        resource_id=group.id,
        details={"object_name": object_name, "size": len(data)},
    )
    return group


@router.get("/{group_id}/activities", response_model=ActivityListResponse)
async def list_group_activities(
    group_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List the activities of a group, soonest first."""
    group = await _get_group_or_404(group_id, db)
    if not can_view(group, current_user):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )

    result = await db.execute(
        select(Activity)
        .where(Activity.group_id == group.id)
        .order_by(Activity.date.asc())
    )
    activities = [a for a in result.scalars().all() if can_view(a, current_user)]
    return ActivityListResponse(
        items=[ActivityResponse.model_validate(a) for a in activities],
        total=len(activities),
    )
