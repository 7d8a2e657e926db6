"""Issue tags and the icon drawn for each of them on the map."""
import unicodedata
from enum import Enum
from typing import Optional


class Issue(str, Enum):
    """Issue tags a group can work on."""

    CLIMATE_JUSTICE = "ความยุติธรรมทางสภาพอากาศ"
    URBAN_DEVELOPMENT = "การพัฒนาเมือง"
    INDIGENOUS_RIGHTS = "สิทธิชนเผ่าพื้นเมือง"
    EDUCATION_REFORM = "ปฏิรูปการศึกษา"
    GENDER_EQUALITY = "ความเท่าเทียมทางเพศ"
    DIGITAL_RIGHTS = "สิทธิดิจิทัล"
    ARTS_AND_CULTURE = "ศิลปะและวัฒนธรรม"


ISSUE_ICONS: dict[Issue, str] = {
    Issue.CLIMATE_JUSTICE: "climate-justice.svg",
    Issue.URBAN_DEVELOPMENT: "urban-development.svg",
    Issue.INDIGENOUS_RIGHTS: "indigenous-rights.svg",
    Issue.EDUCATION_REFORM: "education-reform.svg",
    Issue.GENDER_EQUALITY: "gender-equality.svg",
    Issue.DIGITAL_RIGHTS: "digital-rights.svg",
    Issue.ARTS_AND_CULTURE: "arts-culture.svg",
}

FALLBACK_ICON = "issue-default.svg"


def parse_issue(tag: Optional[str]) -> Optional[Issue]:
    """Return the Issue for a free-text tag, or None if it is not a known tag."""
    if not tag:
        return None
    try:
        return Issue(unicodedata.normalize("NFC", tag).strip())
    except ValueError:
        return None


def icon_for_issue(tag: Optional[str], base_url: str = "") -> str:
    """Icon path for an issue tag; unknown or missing tags get FALLBACK_ICON."""
    issue = parse_issue(tag)
    filename = ISSUE_ICONS.get(issue, FALLBACK_ICON) if issue else FALLBACK_ICON
    if not base_url:
        return filename
    return f"{base_url.rstrip('/')}/{filename}"
