import re
from urllib.parse import parse_qs, urlparse
from xml.etree import ElementTree as ET

import pytest
from shapely.geometry import Point, Polygon

from commons_youth.geo.choropleth import (
    EMPTY,
    FILL_COLORS,
    FILL_OPACITY,
    HAS_GROUPS,
    HOVER_OPACITY_BOOST,
    ICON_HOVER_SCALE,
    ICON_SIZE,
    SELECTED,
    SELECTED_PADDING,
    SELECTED_STROKE_WIDTH,
    STROKE_WIDTH,
    ChoroplethRenderer,
    majority_issue,
)
from commons_youth.geo.models import features_from_collection
from commons_youth.geo.projection import (
    DEGENERATE_SCALE,
    country_center,
    fit_projection,
    project_geometry,
)

SVG = "{http://www.w3.org/2000/svg}"
NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


@pytest.fixture
def groups(group):
    return [
        group("Young Mappers", "เชียงใหม่", ["การพัฒนาเมือง", "ความยุติธรรมทางสภาพอากาศ"]),
        group("Doi Climate", "เชียงใหม่", ["ความยุติธรรมทางสภาพอากาศ"]),
        group("KK Readers", "ขอนแก่น", ["ปฏิรูปการศึกษา"]),
    ]


@pytest.fixture
def features(thailand):
    return features_from_collection(thailand)


def by_name(rendered):
    return {region.name.strip(): region for region in rendered.regions}


def path_points(path):
    values = [float(v) for v in NUMBER.findall(path)]
    return list(zip(values[0::2], values[1::2]))


def test_chiang_mai_end_to_end(features, groups):
    rendered = ChoroplethRenderer().render(features, groups)
    regions = by_name(rendered)

    chiang_mai = regions["เชียงใหม่"]
    assert chiang_mai.label == "เชียงใหม่"
    assert chiang_mai.state == HAS_GROUPS
    assert chiang_mai.fill == FILL_COLORS[HAS_GROUPS]
    assert chiang_mai.group_count == 2

    icons = {icon.label: icon for icon in rendered.icons}
    assert icons["เชียงใหม่"].issue == "ความยุติธรรมทางสภาพอากาศ"
    assert icons["เชียงใหม่"].icon == "climate-justice.svg"
    assert icons["ขอนแก่น"].icon == "education-reform.svg"


def test_province_without_groups_is_empty_and_not_selectable(features, groups):
    rendered = ChoroplethRenderer().render(features, groups)
    phuket = by_name(rendered)["ภูเก็ต"]
    assert phuket.label is None
    assert phuket.state == EMPTY
    assert phuket.href is None
    assert phuket.group_count == 0
    assert "ภูเก็ต" not in {icon.label for icon in rendered.icons}


def test_opacity_order_is_strict():
    assert FILL_OPACITY[SELECTED] > FILL_OPACITY[HAS_GROUPS] > FILL_OPACITY[EMPTY]


def test_render_is_idempotent(features, groups):
    renderer = ChoroplethRenderer()
    first = renderer.render(features, groups, selected="ขอนแก่น")
    second = renderer.render(features, groups, selected="ขอนแก่น")
    assert first.regions == second.regions
    assert first.icons == second.icons


def test_selecting_a_province_marks_exactly_that_feature(features, groups):
    overview = ChoroplethRenderer().render(features, groups)
    # follow the link of the clicked region
    href = by_name(overview)["ขอนแก่น"].href
    label = parse_qs(urlparse(href).query)["province"][0]

    rendered = ChoroplethRenderer().render(features, groups, selected=label)
    selected = [r for r in rendered.regions if r.state == SELECTED]
    assert len(selected) == 1
    assert selected[0].label == "ขอนแก่น"
    assert selected[0].stroke_width == SELECTED_STROKE_WIDTH
    assert by_name(rendered)["เชียงใหม่"].state == HAS_GROUPS
    assert by_name(rendered)["เชียงใหม่"].stroke_width == STROKE_WIDTH


def test_no_icons_while_a_province_is_selected(features, groups):
    rendered = ChoroplethRenderer().render(features, groups, selected="เชียงใหม่")
    assert rendered.icons == []
    assert "<image" not in rendered.to_svg()


def test_no_icons_when_selection_matches_nothing(features, groups):
    rendered = ChoroplethRenderer().render(features, groups, selected="Atlantis")
    assert rendered.icons == []
    assert not any(r.state == SELECTED for r in rendered.regions)


def test_selected_province_fills_the_viewport(features, groups):
    renderer = ChoroplethRenderer(width=600, height=800)
    rendered = renderer.render(features, groups, selected="ขอนแก่น")
    points = path_points(by_name(rendered)["ขอนแก่น"].path)

    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    assert min(xs) >= SELECTED_PADDING - 0.01
    assert max(xs) <= 600 - SELECTED_PADDING + 0.01
    assert min(ys) >= SELECTED_PADDING - 0.01
    assert max(ys) <= 800 - SELECTED_PADDING + 0.01
    # fitted on the limiting axis
    assert max(xs) - min(xs) == pytest.approx(600 - 2 * SELECTED_PADDING, abs=0.05) or (
        max(ys) - min(ys) == pytest.approx(800 - 2 * SELECTED_PADDING, abs=0.05)
    )


def test_hover_raises_opacity_and_stroke(features, groups):
    renderer = ChoroplethRenderer()
    plain = by_name(renderer.render(features, groups))["ขอนแก่น"]
    hovered_map = renderer.render(features, groups, hovered="ขอนแก่น")
    hovered = by_name(hovered_map)["ขอนแก่น"]

    assert hovered.hovered
    assert hovered.state == plain.state
    assert hovered.fill_opacity == pytest.approx(plain.fill_opacity + HOVER_OPACITY_BOOST)
    assert hovered.stroke_width > plain.stroke_width

    icon = next(i for i in hovered_map.icons if i.label == "ขอนแก่น")
    assert icon.size == pytest.approx(ICON_SIZE * ICON_HOVER_SCALE)


def test_links_use_selection_url(features, groups):
    renderer = ChoroplethRenderer(selection_url=lambda label: f"/map/{label}")
    rendered = renderer.render(features, groups)
    assert by_name(rendered)["เชียงใหม่"].href == "/map/เชียงใหม่"
    assert {icon.href for icon in rendered.icons} == {"/map/เชียงใหม่", "/map/ขอนแก่น"}


def test_icon_base_url_is_prefixed(features, groups):
    rendered = ChoroplethRenderer(icon_base_url="/static/icons/").render(features, groups)
    assert all(icon.icon.startswith("/static/icons/") for icon in rendered.icons)


def test_no_features_renders_empty_map(groups):
    rendered = ChoroplethRenderer().render([], groups)
    assert rendered.regions == []
    assert rendered.icons == []
    root = ET.fromstring(rendered.to_svg())
    assert root.findall(f".//{SVG}path") == []


def test_no_groups_paints_everything_empty(features):
    rendered = ChoroplethRenderer().render(features, [])
    assert {r.state for r in rendered.regions} == {EMPTY}
    assert rendered.icons == []


def test_degenerate_geometry_is_painted_but_gets_no_icon(feature_dict, group):
    collection = {
        "type": "FeatureCollection",
        "features": [
            feature_dict("น่าน", geometry={"type": "Polygon", "coordinates": []}),
            feature_dict("ขอนแก่น", lon=102.0, lat=16.0),
        ],
    }
    features = features_from_collection(collection)
    groups = [group("A", "น่าน", ["สิทธิดิจิทัล"]), group("B", "ขอนแก่น")]

    rendered = ChoroplethRenderer().render(features, groups)
    nan = by_name(rendered)["น่าน"]
    assert nan.state == HAS_GROUPS
    assert nan.path == ""
    assert [icon.label for icon in rendered.icons] == ["ขอนแก่น"]
    assert rendered.icons[0].icon == "issue-default.svg"


def test_svg_document_structure(features, groups):
    rendered = ChoroplethRenderer().render(features, groups)
    root = ET.fromstring(rendered.to_svg())

    assert root.tag == f"{SVG}svg"
    paths = root.findall(f".//{SVG}path")
    assert len(paths) == 3
    links = root.findall(f"./{SVG}g/{SVG}a")
    # two matched regions plus two icons
    assert len(links) == 4
    images = root.findall(f".//{SVG}image")
    assert {img.get("data-province") for img in images} == {"เชียงใหม่", "ขอนแก่น"}
    empty = [p for p in paths if "empty" in p.get("class")]
    assert len(empty) == 1
    assert empty[0].get("data-province") is None


def test_majority_issue_ties_go_to_first_seen(group):
    groups = [group("A", "x", ["b", "a"]), group("B", "x", ["a", "b"])]
    assert majority_issue(groups) == "b"
    assert majority_issue([group("C", "x", ["a"]), group("D", "x", ["b", "b"])]) == "b"
    assert majority_issue([group("E", "x")]) is None


def test_fit_projection_with_nothing_centers_on_country():
    projection = fit_projection([], 600, 800, 10)
    center = country_center()
    assert projection.scale == DEGENERATE_SCALE
    assert (projection.center_x, projection.center_y) == pytest.approx((center.x, center.y))


def test_fit_projection_degenerate_bounds_use_centroid():
    point = project_geometry(Point(100.5, 13.75))
    projection = fit_projection([point], 600, 800, 40)
    assert projection.scale == DEGENERATE_SCALE
    assert projection.to_screen(point.x, point.y) == pytest.approx((300, 400))


def test_projection_centroid_of_empty_geometry_is_none():
    projection = fit_projection([], 600, 800, 10)
    assert projection.centroid(Polygon()) is None
