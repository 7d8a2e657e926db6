"""Choropleth rendering of province boundaries shaded by group presence.

A render pass is self-contained: it indexes the groups by province, matches
every boundary feature, fits a projection (to the selected province when
there is one, otherwise to the whole country), assigns paint per feature and,
when nothing is selected, places one issue icon per province with groups.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence
from urllib.parse import quote
from xml.etree import ElementTree as ET

from commons_youth.geo.icons import icon_for_issue
from commons_youth.geo.matcher import (
    build_province_index,
    match_features,
    normalize_name,
    resolve_display_name,
)
from commons_youth.geo.models import BoundaryFeature
from commons_youth.geo.projection import fit_projection, project_geometry, to_svg_path

logger = logging.getLogger(__name__)

SELECTED = "selected"
HAS_GROUPS = "has-groups"
EMPTY = "empty"

FILL_COLORS = {
    SELECTED: "#EC6839",
    HAS_GROUPS: "#B5D340",
    EMPTY: "#E5E5E5",
}
# Must stay strictly ordered: selected > has-groups > empty
FILL_OPACITY = {
    SELECTED: 0.9,
    HAS_GROUPS: 0.7,
    EMPTY: 0.35,
}
HOVER_OPACITY_BOOST = 0.1

STROKE_COLOR = "#161716"
STROKE_WIDTH = 0.5
SELECTED_STROKE_WIDTH = 2.0
HOVER_STROKE_WIDTH = 1.5

SELECTED_PADDING = 40
OVERVIEW_PADDING = 10

ICON_SIZE = 22
ICON_HOVER_SCALE = 1.25


def default_selection_url(label: str) -> str:
    """Query string that selects the province ``label``."""
    return f"?province={quote(label)}"


def majority_issue(groups: Iterable[Any]) -> Optional[str]:
    """Most frequent issue tag across groups; ties go to the first one seen."""
    counts: dict[str, int] = {}
    for group in groups:
        for issue in getattr(group, "issues", None) or ():
            counts[issue] = counts.get(issue, 0) + 1
    if not counts:
        return None
    # max() keeps the first maximal key in insertion order
    return max(counts, key=counts.get)


@dataclass
class RegionPaint:
    """Paint assignment for one boundary feature."""

    name: str
    label: Optional[str]
    state: str
    fill: str
    fill_opacity: float
    stroke_width: float
    path: str
    group_count: int = 0
    hovered: bool = False
    href: Optional[str] = None


@dataclass
class IconPlacement:
    label: str
    issue: Optional[str]
    icon: str
    x: float
    y: float
    size: float = ICON_SIZE
    href: Optional[str] = None


@dataclass
class ChoroplethMap:
    """Result of a render pass."""

    width: int
    height: int
    selected: Optional[str] = None
    regions: list[RegionPaint] = field(default_factory=list)
    icons: list[IconPlacement] = field(default_factory=list)

    def to_svg(self) -> str:
        root = ET.Element(
            "svg",
            {
                "xmlns": "http://www.w3.org/2000/svg",
                "viewBox": f"0 0 {self.width} {self.height}",
                "width": str(self.width),
                "height": str(self.height),
                "class": "choropleth",
            },
        )
        style = ET.SubElement(root, "style")
        style.text = _hover_css()

        regions_group = ET.SubElement(root, "g", {"class": "regions"})
        for region in self.regions:
            parent = regions_group
            if region.href:
                parent = ET.SubElement(regions_group, "a", {"href": region.href})
            classes = f"region {region.state}" + (" hovered" if region.hovered else "")
            path = ET.SubElement(
                parent,
                "path",
                {
                    "class": classes,
                    "d": region.path,
                    "fill": region.fill,
                    "fill-opacity": f"{region.fill_opacity:g}",
                    "stroke": STROKE_COLOR,
                    "stroke-width": f"{region.stroke_width:g}",
                    "data-name": region.name,
                },
            )
            if region.label:
                path.set("data-province", region.label)
            title = ET.SubElement(path, "title")
            title.text = (
                f"{region.name} ({region.group_count} กลุ่ม)" if region.group_count else region.name
            )

        icons_group = ET.SubElement(root, "g", {"class": "icons"})
        for icon in self.icons:
            parent = icons_group
            if icon.href:
                parent = ET.SubElement(icons_group, "a", {"href": icon.href})
            attrs = {
                "class": "province-icon",
                "href": icon.icon,
                "x": f"{icon.x - icon.size / 2:.2f}",
                "y": f"{icon.y - icon.size / 2:.2f}",
                "width": f"{icon.size:g}",
                "height": f"{icon.size:g}",
                "data-province": icon.label,
            }
            if icon.issue:
                attrs["data-issue"] = icon.issue
            ET.SubElement(parent, "image", attrs)

        return ET.tostring(root, encoding="unicode")


def _hover_css() -> str:
    rules = [".region { cursor: default; }", "a .region { cursor: pointer; }"]
    for state, opacity in FILL_OPACITY.items():
        rules.append(
            f".region.{state}:hover {{ fill-opacity: {min(opacity + HOVER_OPACITY_BOOST, 1.0):g}; "
            f"stroke-width: {max(HOVER_STROKE_WIDTH, _base_stroke(state)):g}; }}"
        )
    rules.append(
        ".province-icon { transform-box: fill-box; transform-origin: center; cursor: pointer; }"
    )
    rules.append(f".province-icon:hover {{ transform: scale({ICON_HOVER_SCALE:g}); }}")
    return " ".join(rules)


def _base_stroke(state: str) -> float:
    return SELECTED_STROKE_WIDTH if state == SELECTED else STROKE_WIDTH


class ChoroplethRenderer:
    """Renders province boundaries shaded by group presence."""

    def __init__(
        self,
        width: int = 600,
        height: int = 800,
        icon_base_url: str = "",
        selection_url: Callable[[str], str] = default_selection_url,
    ):
        self.width = width
        self.height = height
        self.icon_base_url = icon_base_url
        self.selection_url = selection_url

    def render(
        self,
        features: Sequence[BoundaryFeature],
        groups: Iterable[Any],
        selected: Optional[str] = None,
        hovered: Optional[str] = None,
    ) -> ChoroplethMap:
        selected_label = normalize_name(selected) or None
        hovered_label = normalize_name(hovered) or None
        result = ChoroplethMap(self.width, self.height, selected=selected_label)
        if not features:
            return result

        index = build_province_index(groups)
        matches = match_features(features, index)
        projected = [project_geometry(feature.geometry) for feature in features]

        # Projecting
        focus = []
        if selected_label:
            focus = [geom for geom, label in zip(projected, matches) if label == selected_label]
        if focus:
            projection = fit_projection(focus, self.width, self.height, SELECTED_PADDING)
        else:
            projection = fit_projection(projected, self.width, self.height, OVERVIEW_PADDING)

        # Painting
        for feature, geom, label in zip(features, projected, matches):
            if label is None:
                state = EMPTY
            elif label == selected_label:
                state = SELECTED
            else:
                state = HAS_GROUPS

            is_hovered = label is not None and label == hovered_label
            opacity = FILL_OPACITY[state]
            stroke = _base_stroke(state)
            if is_hovered:
                opacity = min(opacity + HOVER_OPACITY_BOOST, 1.0)
                stroke = max(stroke, HOVER_STROKE_WIDTH)

            result.regions.append(
                RegionPaint(
                    name=resolve_display_name(feature.properties),
                    label=label,
                    state=state,
                    fill=FILL_COLORS[state],
                    fill_opacity=opacity,
                    stroke_width=stroke,
                    path=to_svg_path(geom, projection),
                    group_count=len(index[label]) if label else 0,
                    hovered=is_hovered,
                    # Unmatched regions are not selectable
                    href=self.selection_url(label) if label else None,
                )
            )

        # Icon overlay
        if selected_label is None:
            placed: set[str] = set()
            for geom, label in zip(projected, matches):
                if label is None or label in placed:
                    continue
                point = projection.centroid(geom)
                if point is None:
                    logger.debug("Degenerate centroid for %s, icon skipped", label)
                    continue
                issue = majority_issue(index[label])
                result.icons.append(
                    IconPlacement(
                        label=label,
                        issue=issue,
                        icon=icon_for_issue(issue, self.icon_base_url),
                        x=point[0],
                        y=point[1],
                        size=ICON_SIZE * (ICON_HOVER_SCALE if label == hovered_label else 1),
                        href=self.selection_url(label),
                    )
                )
                placed.add(label)

        return result
