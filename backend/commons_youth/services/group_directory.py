"""Read side of the group directory used by the map."""
from abc import ABC, abstractmethod
from typing import Iterable, Optional, TypeVar

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commons_youth.database import get_db
from commons_youth.geo.models import GroupRecord
from commons_youth.models.group import Group

ALL_ISSUES = "All"

T = TypeVar("T")


class GroupDirectory(ABC):
    """Source of group records for the map and list views."""

    @abstractmethod
    async def list_visible_groups(self, include_hidden: bool = False) -> list[GroupRecord]:
        """List groups shown to visitors; admins also see hidden ones."""
        ...


class SqlGroupDirectory(GroupDirectory):
    """Group directory backed by the groups table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_visible_groups(self, include_hidden: bool = False) -> list[GroupRecord]:
        query = select(Group).order_by(Group.created_at.desc())
        if not include_hidden:
            query = query.where(Group.is_hidden.is_(False))
        result = await self.db.execute(query)
        return [to_group_record(group) for group in result.scalars().all()]


def to_group_record(group: Group) -> GroupRecord:
    return GroupRecord(
        id=str(group.id),
        name=group.name,
        province=group.province,
        issues=tuple(group.issues or ()),
    )


def filter_groups(
    groups: Iterable[T],
    issue: Optional[str] = None,
    search: Optional[str] = None,
) -> list[T]:
    """Apply the list/map page filters.

    ``issue`` keeps groups tagged with it (``"All"`` or empty disables the
    filter); ``search`` is a case-insensitive substring of name or province.
    """
    term = (search or "").strip().lower()
    filtered = []
    for group in groups:
        if issue and issue != ALL_ISSUES and issue not in (group.issues or ()):
            continue
        if term and term not in group.name.lower() and term not in group.province.lower():
            continue
        filtered.append(group)
    return filtered


def get_group_directory(db: AsyncSession = Depends(get_db)) -> GroupDirectory:
    """FastAPI dependency returning the SQL-backed directory."""
    return SqlGroupDirectory(db)
