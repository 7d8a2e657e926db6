"""Pydantic schemas for the province map."""
from typing import List, Optional
from pydantic import BaseModel


class RegionPaintResponse(BaseModel):
    """One painted province path."""
    name: str
    label: Optional[str] = None
    state: str
    fill: str
    fill_opacity: float
    stroke_width: float
    path: str
    group_count: int
    hovered: bool = False
    href: Optional[str] = None

    class Config:
        from_attributes = True


class IconPlacementResponse(BaseModel):
    """Issue icon drawn at a province centroid."""
    label: str
    issue: Optional[str] = None
    icon: str
    x: float
    y: float
    size: float
    href: Optional[str] = None

    class Config:
        from_attributes = True


class ChoroplethResponse(BaseModel):
    """Full render result, for clients that draw the map themselves."""
    width: int
    height: int
    selected: Optional[str] = None
    regions: List[RegionPaintResponse]
    icons: List[IconPlacementResponse]

    class Config:
        from_attributes = True
