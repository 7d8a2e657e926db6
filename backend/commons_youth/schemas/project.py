"""Pydantic schemas for CommunityProject."""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from commons_youth.schemas.common import check_image_url, require_text

PROJECT_CATEGORIES = (
    "สิ่งแวดล้อม",
    "วัฒนธรรม",
    "การศึกษา",
    "สิทธิมนุษยชน",
    "ชุมชนและสังคม",
    "ศิลปะและสร้างสรรค์",
    "เทคโนโลยี",
    "อื่นๆ",
)

# value -> Thai display label
PROJECT_STATUSES = {
    "ongoing": "กำลังดำเนินการ",
    "completed": "เสร็จสิ้นแล้ว",
}
ProjectStatus = Literal["ongoing", "completed"]


def check_category(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value not in PROJECT_CATEGORIES:
        raise ValueError(f"Unknown project category: {value}")
    return value


class ProjectBase(BaseModel):
    """Base project schema."""
    group_id: Optional[UUID] = None
    activity_ids: List[UUID] = []
    title: str = Field(..., max_length=255)
    location: str = Field(..., max_length=255)
    date: str = Field(..., max_length=100)
    category: str
    project_status: ProjectStatus = "ongoing"
    description: str
    full_content: Optional[str] = None
    image: Optional[str] = None
    volunteers: int = Field(0, ge=0)
    beneficiaries: Optional[str] = Field(None, max_length=50)


class ProjectCreate(ProjectBase):
    """Project creation schema."""

    @field_validator("title", "location", "description")
    @classmethod
    def text_required(cls, v, info):
        return require_text(v, f"{info.field_name} is required")

    @field_validator("category")
    @classmethod
    def category_known(cls, v):
        return check_category(v)

    @field_validator("image")
    @classmethod
    def image_scheme(cls, v):
        return check_image_url(v)


class ProjectUpdate(BaseModel):
    """Project update schema."""
    group_id: Optional[UUID] = None
    activity_ids: Optional[List[UUID]] = None
    title: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    date: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = None
    project_status: Optional[ProjectStatus] = None
    description: Optional[str] = None
    full_content: Optional[str] = None
    image: Optional[str] = None
    volunteers: Optional[int] = Field(None, ge=0)
    beneficiaries: Optional[str] = Field(None, max_length=50)

    @field_validator("title", "location", "description")
    @classmethod
    def text_required(cls, v, info):
        return require_text(v, f"{info.field_name} is required")

    @field_validator("category")
    @classmethod
    def category_known(cls, v):
        return check_category(v)

    @field_validator("image")
    @classmethod
    def image_scheme(cls, v):
        return check_image_url(v)


class ProjectResponse(BaseModel):
    """Project response schema."""
    id: UUID
    owner_id: UUID
    group_id: Optional[UUID] = None
    activity_ids: List[str] = []
    title: str
    location: str
    date: str
    category: str
    project_status: str
    description: str
    full_content: Optional[str] = None
    image: Optional[str] = None
    volunteers: int = 0
    beneficiaries: Optional[str] = None
    is_hidden: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    """Project list response."""
    items: List[ProjectResponse]
    total: int
