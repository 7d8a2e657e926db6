"""Province matching and choropleth rendering."""
from commons_youth.geo.choropleth import ChoroplethMap, ChoroplethRenderer, majority_issue
from commons_youth.geo.icons import Issue, icon_for_issue
from commons_youth.geo.matcher import (
    build_province_index,
    match_features,
    match_province_name,
    normalize_name,
    resolve_display_name,
)
from commons_youth.geo.models import BoundaryFeature, GroupRecord, features_from_collection

__all__ = [
    "BoundaryFeature",
    "ChoroplethMap",
    "ChoroplethRenderer",
    "GroupRecord",
    "Issue",
    "build_province_index",
    "features_from_collection",
    "icon_for_issue",
    "majority_issue",
    "match_features",
    "match_province_name",
    "normalize_name",
    "resolve_display_name",
]
