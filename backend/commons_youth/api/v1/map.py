"""Province map endpoints: choropleth SVG, its JSON paint data and raw boundaries."""
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Response

from commons_youth.auth.jwt import get_optional_user, is_admin_role
from commons_youth.config import get_settings
from commons_youth.geo.choropleth import ChoroplethMap, ChoroplethRenderer
from commons_youth.models import User
from commons_youth.schemas.map import ChoroplethResponse
from commons_youth.services.boundaries import BoundaryCache, get_boundary_cache
from commons_youth.services.group_directory import (
    GroupDirectory,
    filter_groups,
    get_group_directory,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/map", tags=["map"])
settings = get_settings()

SVG_MEDIA_TYPE = "image/svg+xml"


def _selection_url(issue: Optional[str], q: Optional[str]):
    """Region links reselect a province while keeping the active filters."""
    def build(label: str) -> str:
        params = {"province": label}
        if issue:
            params["issue"] = issue
        if q:
            params["q"] = q
        return "?" + urlencode(params)
    return build


async def _render(
    boundaries: BoundaryCache,
    directory: GroupDirectory,
    current_user: Optional[User],
    province: Optional[str],
    hovered: Optional[str],
    issue: Optional[str],
    q: Optional[str],
) -> ChoroplethMap:
    include_hidden = current_user is not None and is_admin_role(current_user.role)
    features = await boundaries.get_features()
    groups = filter_groups(
        await directory.list_visible_groups(include_hidden=include_hidden),
        issue=issue,
        search=q,
    )
    renderer = ChoroplethRenderer(
        width=settings.MAP_WIDTH,
        height=settings.MAP_HEIGHT,
        icon_base_url=settings.ICON_BASE_URL,
        selection_url=_selection_url(issue, q),
    )
    rendered = renderer.render(features, groups, selected=province, hovered=hovered)
    logger.debug(
        f"Rendered {len(rendered.regions)} regions and {len(rendered.icons)} icons "
        f"for {len(groups)} groups"
    )
    return rendered


@router.get("/choropleth.svg")
async def get_choropleth_svg(
    province: Optional[str] = Query(None, description="Selected province label"),
    hovered: Optional[str] = Query(None, description="Hovered province label"),
    issue: Optional[str] = Query(None, description="Issue tag filter, or 'All'"),
    q: Optional[str] = Query(None, description="Search in group name and province"),
    boundaries: BoundaryCache = Depends(get_boundary_cache),
    directory: GroupDirectory = Depends(get_group_directory),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Render the province map as an SVG document.

    Provinces with groups link back to this endpoint with ``province`` set,
    which zooms the map onto that province.
    """
    rendered = await _render(boundaries, directory, current_user, province, hovered, issue, q)
    return Response(
        content=rendered.to_svg(),
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/choropleth", response_model=ChoroplethResponse)
async def get_choropleth(
    province: Optional[str] = Query(None),
    hovered: Optional[str] = Query(None),
    issue: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    boundaries: BoundaryCache = Depends(get_boundary_cache),
    directory: GroupDirectory = Depends(get_group_directory),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Paint data for clients that draw the map themselves."""
    rendered = await _render(boundaries, directory, current_user, province, hovered, issue, q)
    return ChoroplethResponse.model_validate(rendered)


@router.get("/boundaries")
async def get_boundaries(
    boundaries: BoundaryCache = Depends(get_boundary_cache),
):
    """Raw province boundary FeatureCollection (empty when loading failed)."""
    return await boundaries.get_collection()
