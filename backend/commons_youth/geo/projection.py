"""Web Mercator projection fitted to an SVG viewport."""
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from pyproj import Transformer
from shapely.geometry import GeometryCollection, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

_TO_MERCATOR = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)

# Approximate geographic center of Thailand (lon, lat)
COUNTRY_CENTER = (100.9925, 13.0390)

# Pixels per projected meter used when bounds cannot be fitted
# (roughly 1 px per 500 m, a district-level view)
DEGENERATE_SCALE = 0.002


def project_geometry(geometry: BaseGeometry) -> BaseGeometry:
    """Project a lon/lat geometry to EPSG:3857 meters."""
    return transform(_TO_MERCATOR.transform, geometry)


def _is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


@dataclass(frozen=True)
class ScreenProjection:
    """Affine mapping from projected meters to SVG pixels (y axis flipped)."""

    scale: float
    center_x: float
    center_y: float
    width: int
    height: int

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.width / 2 + (x - self.center_x) * self.scale,
            self.height / 2 - (y - self.center_y) * self.scale,
        )

    def centroid(self, projected: BaseGeometry) -> Optional[tuple[float, float]]:
        """Screen centroid of a projected geometry, or None if it is degenerate."""
        if projected.is_empty:
            return None
        centroid = projected.centroid
        if centroid.is_empty or not _is_finite(centroid.x, centroid.y):
            return None
        sx, sy = self.to_screen(centroid.x, centroid.y)
        if not _is_finite(sx, sy):
            return None
        return sx, sy


def _centered(center: Point, width: int, height: int) -> ScreenProjection:
    return ScreenProjection(DEGENERATE_SCALE, center.x, center.y, width, height)


def country_center() -> Point:
    return Point(*_TO_MERCATOR.transform(*COUNTRY_CENTER))


def fit_projection(
    geometries: Iterable[BaseGeometry],
    width: int,
    height: int,
    padding: float,
) -> ScreenProjection:
    """Fit projected geometries into a ``width`` x ``height`` box inset by ``padding``.

    Zero-size or non-finite bounds fall back to centering on the centroid at
    DEGENERATE_SCALE; with nothing to fit, the view centers on the country.
    """
    usable = [g for g in geometries if g is not None and not g.is_empty]
    if not usable:
        return _centered(country_center(), width, height)

    bounds = [g.bounds for g in usable]
    minx = min(b[0] for b in bounds)
    miny = min(b[1] for b in bounds)
    maxx = max(b[2] for b in bounds)
    maxy = max(b[3] for b in bounds)
    dx, dy = maxx - minx, maxy - miny

    if not _is_finite(minx, miny, maxx, maxy) or dx <= 0 or dy <= 0:
        centroid = GeometryCollection(usable).centroid
        if centroid.is_empty or not _is_finite(centroid.x, centroid.y):
            centroid = country_center()
        return _centered(centroid, width, height)

    available_w = max(width - 2 * padding, 1)
    available_h = max(height - 2 * padding, 1)
    scale = min(available_w / dx, available_h / dy)
    return ScreenProjection(scale, (minx + maxx) / 2, (miny + maxy) / 2, width, height)


def _polygons(geometry: BaseGeometry) -> list[Polygon]:
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, MultiPolygon):
        return list(geometry.geoms)
    if isinstance(geometry, GeometryCollection):
        polygons = []
        for part in geometry.geoms:
            polygons.extend(_polygons(part))
        return polygons
    return []


def to_svg_path(projected: BaseGeometry, projection: ScreenProjection) -> str:
    """SVG path data for the polygonal parts of a projected geometry."""
    commands = []
    for polygon in _polygons(projected):
        if polygon.is_empty:
            continue
        for ring in (polygon.exterior, *polygon.interiors):
            points = [projection.to_screen(x, y) for x, y, *_ in ring.coords]
            if len(points) < 3 or not all(_is_finite(x, y) for x, y in points):
                continue
            head, *tail = points
            segment = f"M{head[0]:.2f},{head[1]:.2f}" + "".join(
                f"L{x:.2f},{y:.2f}" for x, y in tail
            )
            commands.append(segment + "Z")
    return "".join(commands)
