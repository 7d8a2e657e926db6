import unicodedata
from pathlib import Path

import commons_youth
from commons_youth.geo.icons import (
    FALLBACK_ICON,
    ISSUE_ICONS,
    Issue,
    icon_for_issue,
    parse_issue,
)

ICON_DIR = Path(commons_youth.__file__).parent / "static" / "icons"


def test_every_issue_has_an_icon():
    assert set(ISSUE_ICONS) == set(Issue)
    assert len(set(ISSUE_ICONS.values())) == len(Issue)


def test_icon_files_are_shipped():
    for filename in [*ISSUE_ICONS.values(), FALLBACK_ICON]:
        assert (ICON_DIR / filename).is_file(), filename


def test_known_issue_icon():
    assert icon_for_issue("สิทธิดิจิทัล") == "digital-rights.svg"
    assert icon_for_issue(Issue.ARTS_AND_CULTURE.value) == "arts-culture.svg"


def test_tag_is_normalized_before_lookup():
    tag = unicodedata.normalize("NFD", " ปฏิรูปการศึกษา ")
    assert parse_issue(tag) is Issue.EDUCATION_REFORM


def test_unknown_or_missing_tag_uses_fallback():
    assert icon_for_issue("Space exploration") == FALLBACK_ICON
    assert icon_for_issue(None) == FALLBACK_ICON
    assert icon_for_issue("") == FALLBACK_ICON


def test_base_url_is_joined_once():
    assert icon_for_issue("การพัฒนาเมือง", "/static/icons/") == "/static/icons/urban-development.svg"
    assert icon_for_issue(None, "https://cdn.example.org/i") == "https://cdn.example.org/i/issue-default.svg"
