"""Pydantic schemas for Activity."""
from datetime import datetime, timezone
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from commons_youth.schemas.common import check_image_url, require_text

ACTIVITY_STATUSES = ("Open", "Closing Soon", "Closed")
ActivityStatus = Literal["Open", "Closing Soon", "Closed"]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Activity dates are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ActivityCreate(BaseModel):
    """Activity creation schema."""
    group_id: UUID
    title: str = Field(..., max_length=255)
    date: datetime
    location: str = Field(..., max_length=255)
    status: ActivityStatus = "Open"
    image_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return require_text(v, "Activity title is required")

    @field_validator("location")
    @classmethod
    def location_required(cls, v):
        return require_text(v, "Location is required")

    @field_validator("image_url")
    @classmethod
    def image_url_scheme(cls, v):
        return check_image_url(v)

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, v):
        return to_naive_utc(v)


class ActivityUpdate(BaseModel):
    """Activity update schema."""
    title: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    status: Optional[ActivityStatus] = None
    image_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return require_text(v, "Activity title is required")

    @field_validator("location")
    @classmethod
    def location_required(cls, v):
        return require_text(v, "Location is required")

    @field_validator("image_url")
    @classmethod
    def image_url_scheme(cls, v):
        return check_image_url(v)

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, v):
        return to_naive_utc(v)


class ActivityResponse(BaseModel):
    """Activity response schema."""
    id: UUID
    owner_id: UUID
    group_id: Optional[UUID] = None
    group_name: str
    title: str
    date: datetime
    location: str
    status: str
    image_url: Optional[str] = None
    description: Optional[str] = None
    is_hidden: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    """Activity list response."""
    items: List[ActivityResponse]
    total: int
