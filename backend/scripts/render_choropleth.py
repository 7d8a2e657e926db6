"""Render the province choropleth to an SVG file without running the API.

Usage:
    python scripts/render_choropleth.py provinces.geojson groups.json -o map.svg
    python scripts/render_choropleth.py provinces.geojson groups.json --province เชียงใหม่

groups.json is a list of objects with at least ``name``, ``province`` and
``issues`` (e.g. an export of GET /api/v1/groups ``items``).
"""
import argparse
import json
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from commons_youth.config import get_settings
from commons_youth.geo.choropleth import ChoroplethRenderer
from commons_youth.geo.models import features_from_collection, records_from_dicts
from commons_youth.services.group_directory import filter_groups


def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Render the province choropleth as SVG")
    parser.add_argument("boundaries", help="GeoJSON FeatureCollection of provinces")
    parser.add_argument("groups", help="JSON list of groups (or an object with 'items')")
    parser.add_argument("--output", "-o", default="choropleth.svg")
    parser.add_argument("--province", "-p", default=None, help="Selected province label")
    parser.add_argument("--issue", default=None, help="Only count groups with this issue tag")
    parser.add_argument("--width", type=int, default=settings.MAP_WIDTH)
    parser.add_argument("--height", type=int, default=settings.MAP_HEIGHT)
    parser.add_argument("--icon-base-url", default=settings.ICON_BASE_URL)
    args = parser.parse_args(argv)

    features = features_from_collection(load_json(args.boundaries))
    raw_groups = load_json(args.groups)
    if isinstance(raw_groups, dict):
        raw_groups = raw_groups.get("items", [])
    groups = filter_groups(records_from_dicts(raw_groups), issue=args.issue)

    renderer = ChoroplethRenderer(args.width, args.height, icon_base_url=args.icon_base_url)
    rendered = renderer.render(features, groups, selected=args.province)

    with open(args.output, "w", encoding="utf-8") as f:
        f.write(rendered.to_svg())

    print(f"Rendered {len(rendered.regions)} provinces and {len(rendered.icons)} icons -> {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
