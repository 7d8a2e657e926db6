"""Thai province / amphoe / tambon lookup with coordinate fallback.

Source data is the ``province_with_amphure_tambon.json`` dataset
(see scripts/download_thai_locations.py). Only tambons carry coordinates
there; provinces and amphoes borrow theirs as described in get_coordinates().
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from fastapi import Request

from commons_youth.geo.matcher import normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    @property
    def is_unset(self) -> bool:
        return self.lat == 0 and self.lng == 0


UNSET = Coordinates(0.0, 0.0)
BANGKOK = Coordinates(13.7563, 100.5018)

# Used when a province has no coordinates of its own
PROVINCE_FALLBACK_COORDINATES: dict[str, Coordinates] = {
    "กรุงเทพมหานคร": BANGKOK,
    "เชียงใหม่": Coordinates(18.7883, 98.9853),
    "ขอนแก่น": Coordinates(16.4322, 102.8236),
    "ภูเก็ต": Coordinates(7.8804, 98.3923),
}


@dataclass
class Tambon:
    name: str
    coordinates: Coordinates = UNSET


@dataclass
class Amphoe:
    name: str
    coordinates: Coordinates = UNSET
    tambons: list[Tambon] = field(default_factory=list)


@dataclass
class Province:
    name: str
    coordinates: Coordinates = UNSET
    amphoes: list[Amphoe] = field(default_factory=list)


def parse_locations(raw: list[dict[str, Any]]) -> list[Province]:
    """Convert the raw dataset into the Province tree."""
    provinces = []
    for raw_province in raw:
        amphoes = []
        for raw_amphoe in raw_province.get("amphure") or []:
            tambons = [
                Tambon(
                    name=raw_tambon["name_th"],
                    coordinates=Coordinates(
                        float(raw_tambon.get("lat") or 0),
                        float(raw_tambon.get("long") or 0),
                    ),
                )
                for raw_tambon in raw_amphoe.get("tambon") or []
            ]
            amphoes.append(Amphoe(name=raw_amphoe["name_th"], tambons=tambons))
        provinces.append(Province(name=raw_province["name_th"], amphoes=amphoes))
    return provinces


def find_province(locations: list[Province], name: Optional[str]) -> Optional[Province]:
    target = normalize_name(name)
    if not target:
        return None
    return next((p for p in locations if normalize_name(p.name) == target), None)


def find_amphoe(province: Province, name: Optional[str]) -> Optional[Amphoe]:
    target = normalize_name(name)
    if not target:
        return None
    return next((a for a in province.amphoes if normalize_name(a.name) == target), None)


def find_tambon(amphoe: Amphoe, name: Optional[str]) -> Optional[Tambon]:
    target = normalize_name(name)
    if not target:
        return None
    return next((t for t in amphoe.tambons if normalize_name(t.name) == target), None)


def _mean_tambon_coordinates(province: Province) -> Optional[Coordinates]:
    known = [
        t.coordinates
        for a in province.amphoes
        for t in a.tambons
        if not t.coordinates.is_unset
    ]
    if not known:
        return None
    return Coordinates(
        sum(c.lat for c in known) / len(known),
        sum(c.lng for c in known) / len(known),
    )


def get_coordinates(
    locations: list[Province],
    province_name: str,
    amphoe_name: Optional[str] = None,
    tambon_name: Optional[str] = None,
) -> Coordinates:
    """Best known coordinates for a province, optionally narrowed down.

    Unknown province -> Bangkok. A province without coordinates uses the
    fixed fallback table, then the mean of its tambons, then Bangkok. An
    amphoe without coordinates uses its first tambon; a matching tambon
    wins. A level without coordinates never replaces a coarser position.
    """
    province = find_province(locations, province_name)
    if province is None:
        return BANGKOK

    coordinates = province.coordinates
    if coordinates.is_unset:
        coordinates = (
            PROVINCE_FALLBACK_COORDINATES.get(normalize_name(province.name))
            or _mean_tambon_coordinates(province)
            or BANGKOK
        )

    amphoe = find_amphoe(province, amphoe_name)
    if amphoe is not None:
        amphoe_coordinates = amphoe.coordinates
        if amphoe_coordinates.is_unset and amphoe.tambons:
            amphoe_coordinates = amphoe.tambons[0].coordinates
        if not amphoe_coordinates.is_unset:
            coordinates = amphoe_coordinates

        tambon = find_tambon(amphoe, tambon_name)
        if tambon is not None and not tambon.coordinates.is_unset:
            coordinates = tambon.coordinates

    return coordinates


class ThaiLocationCache:
    """Initialize-once holder for the parsed location tree.

    Load failures are logged and yield an empty list without being memoized.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._locations: Optional[list[Province]] = None
        self._lock = asyncio.Lock()

    def _read(self) -> list[Province]:
        with open(self.path, "r", encoding="utf-8") as f:
            return parse_locations(json.load(f))

    async def get(self) -> list[Province]:
        if self._locations is not None:
            return self._locations

        async with self._lock:
            if self._locations is None:
                try:
                    locations = await asyncio.to_thread(self._read)
                except (OSError, ValueError, KeyError, TypeError) as e:
                    logger.error(f"Error loading Thai locations from {self.path}: {e}")
                    return []
                self._locations = locations
                logger.info(f"Loaded {len(locations)} provinces from {self.path}")
        return self._locations

    def reset(self) -> None:
        self._locations = None


def get_location_cache(request: Request) -> ThaiLocationCache:
    """FastAPI dependency returning the application's location cache."""
    return request.app.state.location_cache
