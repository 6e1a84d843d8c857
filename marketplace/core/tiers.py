"""
Tier system - bronze/silver/gold badges.

A tier caps how many projects a talent may hold picked at once and which
projects (by minimum_tier) they can see.
"""

from typing import Optional

TIER_ORDER = ["bronze", "silver", "gold"]

TIER_CONFIGS = {
    "bronze": {
        "name": "bronze",
        "display_name": "Bronze",
        "max_concurrent_picks": 3,
        "min_completed_projects": 0,
        "min_success_rate": 0,
        "min_total_earnings": 0,
        "benefits": [
            "Access to basic projects",
            "Up to 3 concurrent picks",
            "Portfolio showcase",
            "Direct client communication after mutual interest",
        ],
        "color": "#CD7F32",
    },
    "silver": {
        "name": "silver",
        "display_name": "Silver",
        "max_concurrent_picks": 4,
        "min_completed_projects": 5,
        "min_success_rate": 80,
        "min_total_earnings": 5000,
        "benefits": [
            "Access to intermediate projects",
            "Up to 4 concurrent picks",
            "Priority in search results",
            "Enhanced portfolio showcase",
            "Direct client communication after mutual interest",
            "Featured talent badge",
        ],
        "color": "#C0C0C0",
    },
    "gold": {
        "name": "gold",
        "display_name": "Gold",
        "max_concurrent_picks": 5,
        "min_completed_projects": 15,
        "min_success_rate": 90,
        "min_total_earnings": 15000,
        "benefits": [
            "Access to premium projects",
            "Up to 5 concurrent picks",
            "Top priority in search results",
            "Premium portfolio showcase",
            "Direct client communication after mutual interest",
            "Gold talent badge",
            "Exclusive project invitations",
            "Reduced platform fees",
        ],
        "color": "#FFD700",
    },
}


def get_tier_config(tier: str) -> dict:
    """Config for ``tier``; unknown tiers fall back to bronze."""
    return TIER_CONFIGS.get(tier, TIER_CONFIGS["bronze"])


def _rank(tier: str) -> int:
    return TIER_ORDER.index(tier) if tier in TIER_ORDER else 0


def get_max_concurrent_picks(tier: str) -> int:
    return get_tier_config(tier)["max_concurrent_picks"]


def can_pick_project(current_picks: int, tier: str) -> bool:
    return current_picks < get_max_concurrent_picks(tier)


def _meets(config: dict, completed_projects: int, success_rate: float, total_earnings: float) -> bool:
    return (
        completed_projects >= config["min_completed_projects"]
        and success_rate >= config["min_success_rate"]
        and total_earnings >= config["min_total_earnings"]
    )


def calculate_eligible_tier(completed_projects: int, success_rate: float, total_earnings: float) -> str:
    """Highest tier whose thresholds are all met."""
    for tier in reversed(TIER_ORDER):
        if _meets(TIER_CONFIGS[tier], completed_projects, success_rate, total_earnings):
            return tier
    return "bronze"


def can_access_project(talent_tier: str, project_minimum_tier: str) -> bool:
    return _rank(talent_tier) >= _rank(project_minimum_tier)


def get_next_tier_requirements(current_tier: str) -> Optional[dict]:
    rank = _rank(current_tier)
    if rank + 1 >= len(TIER_ORDER):
        return None
    return TIER_CONFIGS[TIER_ORDER[rank + 1]]


def _percent(value: float, target: float) -> float:
    if target <= 0:
        return 100.0
    return min(value / target * 100, 100.0)


def calculate_progress_to_next_tier(
    current_tier: str, completed_projects: int, success_rate: float, total_earnings: float
) -> Optional[dict]:
    """Per-dimension progress (capped at 100) toward the next tier, None at the top tier."""
    next_config = get_next_tier_requirements(current_tier)
    if next_config is None:
        return None

    projects_progress = _percent(completed_projects, next_config["min_completed_projects"])
    success_rate_progress = _percent(success_rate, next_config["min_success_rate"])
    earnings_progress = _percent(total_earnings, next_config["min_total_earnings"])

    return {
        "next_tier": next_config["name"],
        "projects_progress": projects_progress,
        "success_rate_progress": success_rate_progress,
        "earnings_progress": earnings_progress,
        "overall_progress": (projects_progress + success_rate_progress + earnings_progress) / 3,
    }


def should_upgrade_tier(
    current_tier: str, completed_projects: int, success_rate: float, total_earnings: float
) -> bool:
    eligible = calculate_eligible_tier(completed_projects, success_rate, total_earnings)
    return _rank(eligible) > _rank(current_tier)
