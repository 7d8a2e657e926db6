"""Pydantic schemas for Group."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from commons_youth.schemas.common import check_image_url, require_text

MIN_DESCRIPTION_LENGTH = 10


def clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = require_text(value, "Description is required")
    if len(value) < MIN_DESCRIPTION_LENGTH:
        raise ValueError(
            f"Description is too short (at least {MIN_DESCRIPTION_LENGTH} characters)"
        )
    return value


def clean_issues(value: Optional[List[str]]) -> Optional[List[str]]:
    """Strip tags, dropping blanks and duplicates while keeping order."""
    if value is None:
        return None
    cleaned = list(dict.fromkeys(tag.strip() for tag in value if tag and tag.strip()))
    if not cleaned:
        raise ValueError("Select at least one issue")
    return cleaned


class GroupBase(BaseModel):
    """Base group schema."""
    name: str = Field(..., max_length=200)
    province: str = Field(..., max_length=100)
    amphoe: Optional[str] = Field(None, max_length=100)
    tambon: Optional[str] = Field(None, max_length=100)
    issues: List[str] = Field(..., min_length=1)
    description: str
    contact: EmailStr
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        return require_text(v, "Group name is required")

    @field_validator("province")
    @classmethod
    def province_required(cls, v):
        return require_text(v, "Province is required")

    @field_validator("description")
    @classmethod
    def description_length(cls, v):
        return clean_description(v)

    @field_validator("issues")
    @classmethod
    def issues_not_blank(cls, v):
        return clean_issues(v)

    @field_validator("image_url")
    @classmethod
    def image_url_scheme(cls, v):
        return check_image_url(v)


class GroupCreate(GroupBase):
    """Group creation schema. Missing coordinates are looked up from the location fields."""
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class GroupUpdate(BaseModel):
    """Group update schema."""
    name: Optional[str] = Field(None, max_length=200)
    province: Optional[str] = Field(None, max_length=100)
    amphoe: Optional[str] = Field(None, max_length=100)
    tambon: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    issues: Optional[List[str]] = None
    description: Optional[str] = None
    contact: Optional[EmailStr] = None
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        return require_text(v, "Group name is required")

    @field_validator("province")
    @classmethod
    def province_required(cls, v):
        return require_text(v, "Province is required")

    @field_validator("description")
    @classmethod
    def description_length(cls, v):
        return clean_description(v)

    @field_validator("issues")
    @classmethod
    def issues_not_blank(cls, v):
        return clean_issues(v)

    @field_validator("image_url")
    @classmethod
    def image_url_scheme(cls, v):
        return check_image_url(v)


class GroupResponse(BaseModel):
    """Group response schema."""
    id: UUID
    owner_id: UUID
    name: str
    province: str
    amphoe: Optional[str] = None
    tambon: Optional[str] = None
    latitude: float
    longitude: float
    issues: List[str] = []
    description: str
    contact: str
    image_url: Optional[str] = None
    is_hidden: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GroupListResponse(BaseModel):
    """Group list response."""
    items: List[GroupResponse]
    total: int
