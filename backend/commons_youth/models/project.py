"""Community project (case study) model."""
import uuid
from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from commons_youth.database import Base


class CommunityProject(Base):
    """A project run by a group, shown on the projects page."""

    __tablename__ = "community_projects"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    activity_ids: Mapped[list[str]] = mapped_column(JSONB, default=list)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[str] = mapped_column(String(100), nullable=False)  # display label, e.g. "มกราคม 2024"
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    project_status: Mapped[str] = mapped_column(String(20), default="ongoing")  # ongoing, completed
    description: Mapped[str] = mapped_column(Text, nullable=False)
    full_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Stats
    volunteers: Mapped[int] = mapped_column(Integer, default=0)
    beneficiaries: Mapped[str | None] = mapped_column(String(50), nullable=True)  # "5,000+"

    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
