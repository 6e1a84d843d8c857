"""List + filter helpers for browse pages.

Every filter is pure: it never mutates its input, keeps the input order, and
applying it to its own output changes nothing. Items may be plain dicts (JSON
from the API) or pydantic models (server-side views).
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def _any_skill(item_skills: Optional[Iterable[str]], selected: Sequence[str]) -> bool:
    if not selected:
        return True
    owned = set(item_skills or ())
    return any(skill in owned for skill in selected)


def toggle_skill(selected: Sequence[str], skill: str) -> List[str]:
    """Return a new selection with ``skill`` added when absent or removed when present."""
    if skill in selected:
        return [s for s in selected if s != skill]
    return [*selected, skill]


def open_projects(projects: Iterable[Any]) -> List[Any]:
    return [p for p in projects if _get(p, "status") == "open"]


def filter_projects(
    projects: Iterable[Any],
    search: str = "",
    category: Optional[str] = None,
    skills: Sequence[str] = (),
) -> List[Any]:
    """Search title/description, exact category, any selected skill."""
    needle = (search or "").lower()
    result = []
    for project in projects:
        if needle and not (
            _contains(_get(project, "title"), needle)
            or _contains(_get(project, "description"), needle)
        ):
            continue
        if category and _get(project, "category") != category:
            continue
        if not _any_skill(_get(project, "skills"), skills):
            continue
        result.append(project)
    return result


def filter_talents(
    talents: Iterable[Any],
    search: str = "",
    experience: Optional[str] = None,
    skills: Sequence[str] = (),
) -> List[Any]:
    """Talent cards carry account fields at the top level and the rest under ``profile``."""
    needle = (search or "").lower()
    result = []
    for talent in talents:
        profile = _get(talent, "profile")
        if profile is None:
            continue
        if needle and not (
            _contains(_get(talent, "name"), needle)
            or _contains(_get(profile, "first_name"), needle)
            or _contains(_get(profile, "last_name"), needle)
            or _contains(_get(profile, "title"), needle)
        ):
            continue
        if experience and _get(profile, "experience") != experience:
            continue
        if not _any_skill(_get(profile, "skills"), skills):
            continue
        result.append(talent)
    return result


def filter_agencies(
    agencies: Iterable[Any],
    search: str = "",
    industry: Optional[str] = None,
    company_size: Optional[str] = None,
) -> List[Any]:
    needle = (search or "").lower()
    result = []
    for agency in agencies:
        profile = _get(agency, "profile")
        if profile is None:
            continue
        if needle and not (
            _contains(_get(agency, "name"), needle)
            or _contains(_get(profile, "agency_name"), needle)
            or _contains(_get(profile, "description"), needle)
            or _contains(_get(profile, "location"), needle)
        ):
            continue
        if industry and _get(profile, "industry") != industry:
            continue
        if company_size and _get(profile, "company_size") != company_size:
            continue
        result.append(agency)
    return result


def select_by_ids(items: Iterable[Any], ids: Iterable[str]) -> List[Any]:
    """Keep items whose ``id`` is in ``ids``; ids with no matching item are ignored."""
    wanted = set(ids)
    return [item for item in items if _get(item, "id") in wanted]


def parse_csv(value: Optional[str]) -> List[str]:
    """``"a, b,,c"`` -> ``["a", "b", "c"]``."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
