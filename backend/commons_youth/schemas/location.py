"""Pydantic schemas for the Thai location lookup."""
from typing import List
from pydantic import BaseModel


class LocationNameList(BaseModel):
    """Names of provinces, amphoes or tambons, in dataset order."""
    items: List[str]
    total: int


class CoordinatesResponse(BaseModel):
    latitude: float
    longitude: float
