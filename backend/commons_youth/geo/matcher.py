"""Province name reconciliation between boundary features and group records.

Boundary datasets and group records are maintained independently, so the same
province may be spelled with a different Unicode composition, with stray
whitespace, or with/without an administrative prefix ("จังหวัด..."). Matching
is exact-first, then first substring hit in label order.
"""
import unicodedata
from typing import Any, Iterable, Mapping, Optional, Sequence

from commons_youth.geo.models import BoundaryFeature

# Localized name first, then romanized names, then other field conventions
# seen across published versions of the Thai province boundary files.
NAME_KEYS: tuple[str, ...] = (
    "name_th",
    "NAME_TH",
    "pro_th",
    "PROV_NAMT",
    "ADM1_TH",
    "name",
    "NAME",
    "name_en",
    "NAME_EN",
    "pro_en",
    "PROV_NAMEE",
    "ADM1_EN",
    "NAME_1",
    "province",
)

ProvinceIndex = dict[str, list]
MatchResult = list[Optional[str]]


def normalize_name(value: Optional[str]) -> str:
    """NFC-compose and trim a province name. None becomes ''."""
    if not value:
        return ""
    return unicodedata.normalize("NFC", str(value)).strip()


def resolve_display_name(properties: Optional[Mapping[str, Any]]) -> str:
    """Return the first non-blank candidate name property, or ''."""
    if not properties:
        return ""
    for key in NAME_KEYS:
        value = properties.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def match_province_name(raw_name: Optional[str], known_labels: Iterable[str]) -> Optional[str]:
    """Resolve a boundary feature name to one of the known province labels.

    Returns the known label itself (never a rewritten string) or None when
    the region has no groups.
    """
    name = normalize_name(raw_name)
    if not name:
        return None

    candidates = [(label, normalize_name(label)) for label in known_labels]

    for label, normalized in candidates:
        if normalized == name:
            return label

    for label, normalized in candidates:
        if normalized and (normalized in name or name in normalized):
            return label

    return None


def build_province_index(groups: Iterable[Any]) -> ProvinceIndex:
    """Group records by normalized province label. Unlabelled groups are left out."""
    index: ProvinceIndex = {}
    for group in groups:
        label = normalize_name(getattr(group, "province", None))
        if not label:
            continue
        index.setdefault(label, []).append(group)
    return index


def match_features(features: Sequence[BoundaryFeature], index: ProvinceIndex) -> MatchResult:
    """Match every feature against the index keys, positionally aligned with ``features``."""
    labels = list(index.keys())
    return [
        match_province_name(resolve_display_name(feature.properties), labels)
        for feature in features
    ]
