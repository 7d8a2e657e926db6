"""Thai province / amphoe / tambon lookup endpoints used by the group form."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from commons_youth.schemas.location import CoordinatesResponse, LocationNameList
from commons_youth.services.thai_locations import (
    ThaiLocationCache,
    find_amphoe,
    find_province,
    get_coordinates,
    get_location_cache,
)

router = APIRouter(prefix="/locations", tags=["locations"])


def _names(items) -> LocationNameList:
    names = [item.name for item in items]
    return LocationNameList(items=names, total=len(names))


@router.get("/provinces", response_model=LocationNameList)
async def list_provinces(
    locations: ThaiLocationCache = Depends(get_location_cache),
):
    return _names(await locations.get())


@router.get("/provinces/{province}/amphoes", response_model=LocationNameList)
async def list_amphoes(
    province: str,
    locations: ThaiLocationCache = Depends(get_location_cache),
):
    found = find_province(await locations.get(), province)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Province not found",
        )
    return _names(found.amphoes)


@router.get("/provinces/{province}/amphoes/{amphoe}/tambons", response_model=LocationNameList)
async def list_tambons(
    province: str,
    amphoe: str,
    locations: ThaiLocationCache = Depends(get_location_cache),
):
    found = find_province(await locations.get(), province)
    found_amphoe = find_amphoe(found, amphoe) if found else None
    if found_amphoe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Amphoe not found",
        )
    return _names(found_amphoe.tambons)


@router.get("/coordinates", response_model=CoordinatesResponse)
async def lookup_coordinates(
    province: str = Query(..., min_length=1),
    amphoe: Optional[str] = Query(None),
    tambon: Optional[str] = Query(None),
    locations: ThaiLocationCache = Depends(get_location_cache),
):
    """Best known coordinates for a location; unknown provinces fall back to Bangkok."""
    coordinates = get_coordinates(await locations.get(), province, amphoe, tambon)
    return CoordinatesResponse(latitude=coordinates.lat, longitude=coordinates.lng)
