"""Pydantic schemas for the fixed option lists."""
from typing import List
from pydantic import BaseModel


class IssueOption(BaseModel):
    name: str
    icon: str


class StatusOption(BaseModel):
    value: str
    label: str


class CatalogResponse(BaseModel):
    """Option lists used by the dashboard forms and the map filter."""
    issues: List[IssueOption]
    project_categories: List[str]
    project_statuses: List[StatusOption]
    activity_statuses: List[str]
