"""
Talent verification rules: scoring, progress and submission validation.
"""

import re
from typing import Optional

VERIFICATION_STATUSES = ("pending", "in_review", "verified", "rejected")

DEFAULT_REQUIREMENTS = {
    "portfolio_required": True,
    "code_repository_required": True,
    "skill_tests_required": False,
    "linkedin_required": True,
    "identity_verification_required": True,
}

# Weights for the overall score (identity is pass/fail and carries no score)
VERIFICATION_WEIGHTS = {
    "portfolio": 0.35,
    "code_sample": 0.35,
    "skill_tests": 0.20,
    "identity": 0.10,
}

MINIMUM_SCORES = {
    "portfolio": 60,
    "code_sample": 60,
    "skill_tests": 70,
    "overall": 65,
}

STATUS_INFO = {
    "pending": {
        "label": "Pending Verification",
        "color": "yellow",
        "description": "Your profile is awaiting verification. Please complete all required steps.",
    },
    "in_review": {
        "label": "Under Review",
        "color": "blue",
        "description": "Our team is reviewing your submission. This typically takes 1-2 business days.",
    },
    "verified": {
        "label": "Verified",
        "color": "green",
        "description": "Your profile has been verified. You now have full access to the platform.",
    },
    "rejected": {
        "label": "Verification Failed",
        "color": "red",
        "description": "Your verification was not approved. Please review the feedback and resubmit.",
    },
}

GITHUB_USERNAME_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,37}[a-zA-Z0-9])?$")
GITLAB_USERNAME_RE = re.compile(r"^[a-zA-Z0-9._-]+$")
LINKEDIN_URL_RE = re.compile(r"^https?://(www\.)?linkedin\.com/(in|pub)/[a-zA-Z0-9-]+/?$")
GITHUB_URL_PATTERNS = [
    re.compile(r"github\.com/([a-zA-Z0-9-]+)"),
    re.compile(r"\A@?([a-zA-Z0-9-]+)\Z"),
]


def calculate_overall_score(
    portfolio_score: Optional[float] = None,
    code_sample_score: Optional[float] = None,
    skill_tests_score: Optional[float] = None,
) -> float:
    """Weighted mean of the scores that are present, rounded to 2 decimals. 0 when none are."""
    weighted_sum = 0.0
    total_weight = 0.0
    for score, weight in (
        (portfolio_score, VERIFICATION_WEIGHTS["portfolio"]),
        (code_sample_score, VERIFICATION_WEIGHTS["code_sample"]),
        (skill_tests_score, VERIFICATION_WEIGHTS["skill_tests"]),
    ):
        if score is not None:
            weighted_sum += score * weight
            total_weight += weight

    if total_weight == 0:
        return 0.0
    return round(weighted_sum / total_weight, 2)


def meets_verification_requirements(
    portfolio_score: Optional[float] = None,
    code_sample_score: Optional[float] = None,
    skill_tests_score: Optional[float] = None,
    overall_score: Optional[float] = None,
    requirements: dict = None,
) -> dict:
    """Return ``{"approved": bool, "reasons": [...]}`` for a set of review scores."""
    requirements = requirements or DEFAULT_REQUIREMENTS
    reasons = []

    if requirements["portfolio_required"]:
        if not portfolio_score:
            reasons.append("Portfolio review not completed")
        elif portfolio_score < MINIMUM_SCORES["portfolio"]:
            reasons.append(
                f"Portfolio score ({portfolio_score}) below minimum ({MINIMUM_SCORES['portfolio']})"
            )

    if requirements["code_repository_required"]:
        if not code_sample_score:
            reasons.append("Code sample review not completed")
        elif code_sample_score < MINIMUM_SCORES["code_sample"]:
            reasons.append(
                f"Code sample score ({code_sample_score}) below minimum ({MINIMUM_SCORES['code_sample']})"
            )

    if requirements["skill_tests_required"] and skill_tests_score:
        if skill_tests_score < MINIMUM_SCORES["skill_tests"]:
            reasons.append(
                f"Skill tests score ({skill_tests_score}) below minimum ({MINIMUM_SCORES['skill_tests']})"
            )

    if overall_score is None:
        overall_score = calculate_overall_score(portfolio_score, code_sample_score, skill_tests_score)
    if overall_score < MINIMUM_SCORES["overall"]:
        reasons.append(f"Overall score ({overall_score}) below minimum ({MINIMUM_SCORES['overall']})")

    return {"approved": not reasons, "reasons": reasons}


def calculate_verification_progress(verification: Optional[dict], requirements: dict = None) -> dict:
    """Which review steps are done and the share of required steps completed."""
    requirements = requirements or DEFAULT_REQUIREMENTS
    verification = verification or {}

    portfolio_reviewed = bool(verification.get("portfolio_reviewed"))
    code_sample_reviewed = bool(verification.get("code_sample_reviewed"))
    skill_tests_taken = bool(verification.get("skill_tests_taken"))
    linkedin_verified = bool(verification.get("linkedin_verified"))
    identity_verified = bool(verification.get("identity_verified"))

    checks = [
        (requirements["portfolio_required"], portfolio_reviewed),
        (requirements["code_repository_required"], code_sample_reviewed),
        (requirements["skill_tests_required"], skill_tests_taken),
        (requirements["linkedin_required"], linkedin_verified),
        (requirements["identity_verification_required"], identity_verified),
    ]
    total = sum(1 for required, _ in checks if required)
    completed = sum(1 for required, done in checks if required and done)

    return {
        "portfolio_reviewed": portfolio_reviewed,
        "code_sample_reviewed": code_sample_reviewed,
        "skill_tests_taken": skill_tests_taken,
        "linkedin_verified": linkedin_verified,
        "identity_verified": identity_verified,
        "completion_percentage": round(completed / total * 100) if total else 0,
    }


def can_access_platform(verification_status: str, platform_access: bool) -> bool:
    return verification_status == "verified" and bool(platform_access)


def get_status_info(status: str) -> dict:
    return STATUS_INFO.get(
        status,
        {"label": "Unknown", "color": "gray", "description": "Verification status unknown."},
    )


def is_valid_github_username(username: str) -> bool:
    return bool(GITHUB_USERNAME_RE.fullmatch(username))


def is_valid_gitlab_username(username: str) -> bool:
    return bool(GITLAB_USERNAME_RE.fullmatch(username))


def is_valid_linkedin_url(url: str) -> bool:
    return bool(LINKEDIN_URL_RE.fullmatch(url))


def extract_github_username(value: str) -> Optional[str]:
    """Accept a bare username, ``@username`` or any github.com URL."""
    if is_valid_github_username(value):
        return value
    for pattern in GITHUB_URL_PATTERNS:
        match = pattern.search(value)
        if match and is_valid_github_username(match.group(1)):
            return match.group(1)
    return None


def generate_verification_checklist(requirements: dict = None) -> list:
    requirements = requirements or DEFAULT_REQUIREMENTS
    checklist = []

    if requirements["portfolio_required"]:
        checklist.append({"id": "portfolio", "label": "Submit portfolio for review", "required": True})
    if requirements["code_repository_required"]:
        checklist.append({
            "id": "code_repository",
            "label": "Connect GitHub/GitLab account and submit code samples",
            "required": True,
        })
    if requirements["skill_tests_required"]:
        checklist.append({"id": "skill_tests", "label": "Complete skill verification tests", "required": True})
    else:
        checklist.append({
            "id": "skill_tests",
            "label": "Complete skill verification tests (optional, boosts credibility)",
            "required": False,
        })
    if requirements["linkedin_required"]:
        checklist.append({"id": "linkedin", "label": "Verify LinkedIn profile", "required": True})
    if requirements["identity_verification_required"]:
        checklist.append({"id": "identity", "label": "Complete identity verification", "required": True})

    return checklist
