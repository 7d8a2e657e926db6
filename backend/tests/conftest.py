"""
Pytest configuration and shared fixtures.

Puts backend/ on sys.path so ``commons_youth`` imports work when the suite
is started from the repository root or from an IDE, and provides small
factories for boundary features and group records.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _add_backend_to_sys_path() -> None:
    # tests/ -> backend/
    root = Path(__file__).resolve().parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_add_backend_to_sys_path()

from commons_youth.geo.models import BoundaryFeature, GroupRecord  # noqa: E402


def square(lon: float, lat: float, size: float = 1.0) -> dict:
    """GeoJSON polygon: a lon/lat square with its south-west corner at (lon, lat)."""
    return {
        "type": "Polygon",
        "coordinates": [[
            [lon, lat],
            [lon + size, lat],
            [lon + size, lat + size],
            [lon, lat + size],
            [lon, lat],
        ]],
    }


@pytest.fixture
def feature_dict():
    def make(name, lon=100.0, lat=15.0, size=1.0, key="name_th", geometry=None):
        return {
            "type": "Feature",
            "properties": {key: name},
            "geometry": geometry if geometry is not None else square(lon, lat, size),
        }
    return make


@pytest.fixture
def feature(feature_dict):
    def make(*args, **kwargs):
        return BoundaryFeature.from_geojson(feature_dict(*args, **kwargs))
    return make


@pytest.fixture
def group():
    counter = iter(range(1, 10_000))

    def make(name, province, issues=()):
        return GroupRecord(id=str(next(counter)), name=name, province=province, issues=tuple(issues))
    return make


@pytest.fixture
def thailand(feature_dict):
    """Three non-overlapping provinces, as a FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": [
            feature_dict("เชียงใหม่ ", lon=98.0, lat=18.0),
            feature_dict("ขอนแก่น", lon=102.0, lat=16.0),
            feature_dict("ภูเก็ต", lon=98.0, lat=7.5, size=0.5),
        ],
    }


@pytest.fixture
def location_data():
    """Excerpt in the province_with_amphure_tambon.json layout."""
    return [
        {
            "name_th": "เชียงใหม่",
            "amphure": [
                {
                    "name_th": "เมืองเชียงใหม่",
                    "tambon": [
                        {"name_th": "ศรีภูมิ", "lat": 18.79, "long": 98.98},
                        {"name_th": "ช้างม่อย", "lat": 18.80, "long": 99.00},
                    ],
                },
                {
                    "name_th": "แม่ริม",
                    "tambon": [{"name_th": "ริมใต้", "lat": None, "long": None}],
                },
            ],
        },
        {
            "name_th": "น่าน",
            "amphure": [
                {
                    "name_th": "เมืองน่าน",
                    "tambon": [
                        {"name_th": "ในเวียง", "lat": 18.78, "long": 100.77},
                        {"name_th": "ดู่ใต้", "lat": 18.74, "long": 100.75},
                    ],
                },
            ],
        },
        {"name_th": "บึงกาฬ", "amphure": []},
    ]
