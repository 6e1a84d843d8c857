from marketplace.core.verification import (
    calculate_overall_score,
    calculate_verification_progress,
    can_access_platform,
    extract_github_username,
    generate_verification_checklist,
    get_status_info,
    is_valid_github_username,
    is_valid_gitlab_username,
    is_valid_linkedin_url,
    meets_verification_requirements,
)


def test_overall_score_is_weighted_mean_of_present_scores():
    assert calculate_overall_score(80, 60) == 70.0
    assert calculate_overall_score(80, 60, 90) == round((80 * .35 + 60 * .35 + 90 * .2) / .9, 2)
    assert calculate_overall_score() == 0.0


def test_requirements_pass_with_good_scores():
    result = meets_verification_requirements(portfolio_score=80, code_sample_score=75)
    assert result == {"approved": True, "reasons": []}


def test_requirements_report_every_failure():
    result = meets_verification_requirements(portfolio_score=50, code_sample_score=None)
    assert not result["approved"]
    assert "Portfolio score (50) below minimum (60)" in result["reasons"]
    assert "Code sample review not completed" in result["reasons"]
    assert any(reason.startswith("Overall score") for reason in result["reasons"])


def test_progress_counts_required_items_only():
    progress = calculate_verification_progress({"portfolio_reviewed": True, "code_sample_reviewed": True})
    assert progress["completion_percentage"] == 50
    assert calculate_verification_progress(None)["completion_percentage"] == 0


def test_platform_access_needs_verified_and_flag():
    assert can_access_platform("verified", True)
    assert not can_access_platform("verified", False)
    assert not can_access_platform("in_review", True)


def test_status_info_has_fallback():
    assert get_status_info("in_review")["label"] == "Under Review"
    assert get_status_info("bogus")["label"] == "Unknown"


def test_github_username_extraction():
    assert extract_github_username("octocat") == "octocat"
    assert extract_github_username("@octocat") == "octocat"
    assert extract_github_username("https://github.com/octocat") == "octocat"
    assert extract_github_username("not a username!") is None


def test_gitlab_and_linkedin_formats():
    assert is_valid_gitlab_username("some.user_name-1")
    assert not is_valid_gitlab_username("bad user")
    assert is_valid_linkedin_url("https://www.linkedin.com/in/ada-lovelace/")
    assert not is_valid_linkedin_url("https://example.org/in/ada")


def test_checklist_marks_skill_tests_optional():
    checklist = generate_verification_checklist()
    assert [item["id"] for item in checklist] == [
        "portfolio", "code_repository", "skill_tests", "linkedin", "identity"
    ]
    skill_tests = next(item for item in checklist if item["id"] == "skill_tests")
    assert skill_tests["required"] is False


def test_trailing_newline_is_not_a_valid_handle():
    assert not is_valid_github_username("ada\n")
    assert extract_github_username("ada\n") is None
    assert extract_github_username("@ada\n") is None
    assert not is_valid_gitlab_username("ada.l\n")
    assert not is_valid_linkedin_url("https://linkedin.com/in/ada\n")
