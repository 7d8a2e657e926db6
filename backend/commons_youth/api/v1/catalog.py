"""Fixed option lists shared by the forms and the map filter."""
from fastapi import APIRouter

from commons_youth.config import get_settings
from commons_youth.geo.icons import Issue, icon_for_issue
from commons_youth.schemas.activity import ACTIVITY_STATUSES
from commons_youth.schemas.catalog import CatalogResponse, IssueOption, StatusOption
from commons_youth.schemas.project import PROJECT_CATEGORIES, PROJECT_STATUSES

router = APIRouter(prefix="/catalog", tags=["catalog"])
settings = get_settings()


@router.get("", response_model=CatalogResponse)
async def get_catalog():
    return CatalogResponse(
        issues=[
            IssueOption(name=issue.value, icon=icon_for_issue(issue.value, settings.ICON_BASE_URL))
            for issue in Issue
        ],
        project_categories=list(PROJECT_CATEGORIES),
        project_statuses=[
            StatusOption(value=value, label=label) for value, label in PROJECT_STATUSES.items()
        ],
        activity_statuses=list(ACTIVITY_STATUSES),
    )
