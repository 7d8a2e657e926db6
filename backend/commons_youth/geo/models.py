"""Value types shared by the matcher and the choropleth renderer."""
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryFeature:
    """One administrative region polygon from a boundary dataset."""

    properties: Mapping[str, Any]
    geometry: BaseGeometry
    feature_id: Optional[str] = None

    @classmethod
    def from_geojson(cls, feature: Mapping[str, Any]) -> "BoundaryFeature":
        """Build a feature from a GeoJSON ``Feature`` mapping.

        Raises ValueError when the feature carries no usable geometry.
        """
        geometry_data = feature.get("geometry")
        if not geometry_data:
            raise ValueError("Feature has no geometry")
        try:
            geometry = shape(geometry_data)
        except (ShapelyError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid feature geometry: {e}") from e

        properties = feature.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise ValueError(f"Feature properties must be an object, got {type(properties).__name__}")

        feature_id = feature.get("id")
        return cls(
            properties=dict(properties),
            geometry=geometry,
            feature_id=str(feature_id) if feature_id is not None else None,
        )


@dataclass(frozen=True)
class GroupRecord:
    """Read-only snapshot of the group fields the map needs."""

    id: str
    name: str
    province: str
    issues: tuple[str, ...] = field(default_factory=tuple)


def features_from_collection(collection: Mapping[str, Any]) -> list[BoundaryFeature]:
    """Parse a GeoJSON FeatureCollection into boundary features.

    Features whose geometry or properties cannot be parsed are skipped with a warning; a
    document that is not a FeatureCollection raises ValueError.
    """
    if not isinstance(collection, Mapping) or collection.get("type") != "FeatureCollection":
        raise ValueError("Boundary document is not a GeoJSON FeatureCollection")

    raw_features = collection.get("features")
    if not isinstance(raw_features, list):
        raise ValueError("Boundary document has no 'features' list")

    features = []
    for position, raw in enumerate(raw_features):
        try:
            features.append(BoundaryFeature.from_geojson(raw))
        except (ValueError, AttributeError) as e:
            logger.warning("Skipping boundary feature #%d: %s", position, e)
    return features


def records_from_dicts(items: Iterable[Mapping[str, Any]]) -> list[GroupRecord]:
    """Build group records from plain dicts (JSON exports, fixtures)."""
    return [
        GroupRecord(
            id=str(item.get("id", "")),
            name=item.get("name", ""),
            province=item.get("province", ""),
            issues=tuple(item.get("issues") or ()),
        )
        for item in items
    ]
