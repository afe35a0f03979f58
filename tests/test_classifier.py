import pytest

from ats_scanner.services.classifier import IndustryRoleClassifier, estimate_years, rank_by_margin, years_to_level
from ats_scanner.utils.exceptions import ValidationError
from samples import SENIOR_TECH_JOB, SENIOR_TECH_RESUME


@pytest.fixture
def classifier(reference):
    return IndustryRoleClassifier(reference)


class TestRankByMargin:
    """Test cases for the margin based winner selection"""

    def test_clear_winner(self):
        assert rank_by_margin({"a": 3.0, "b": 1.0}, ["a", "b"]) == ("a", pytest.approx(0.6667, abs=1e-4))

    def test_tie_is_broken_by_priority(self):
        assert rank_by_margin({"a": 2.0, "b": 2.0}, ["b", "a"]) == ("b", 0.0)

    def test_no_evidence(self):
        assert rank_by_margin({"a": 0.0}, ["a"]) == (None, 0.0)
        assert rank_by_margin({}, []) == (None, 0.0)


class TestExperienceHelpers:
    """Test cases for years-of-experience parsing"""

    @pytest.mark.parametrize("text,expected", [
        ("5+ years of experience in Python", 5),
        ("Over 12 years in banking; 3 years experience with SQL", 12),
        ("10 yrs exp", 10),
        ("No figures here", None),
        ("75 years of experience", None),
    ])
    def test_estimate_years(self, text, expected):
        assert estimate_years(text) == expected

    @pytest.mark.parametrize("years,level", [
        (0, "entry"), (2, "entry"), (3, "mid"), (5, "mid"), (8, "senior"), (12, "lead"), (13, "executive"),
    ])
    def test_years_to_level(self, years, level):
        assert years_to_level(years) == level


class TestIndustryRoleClassifier:
    """Test cases for industry and role level detection"""

    def test_detects_technology(self, classifier):
        assessment = classifier.classify(SENIOR_TECH_RESUME, SENIOR_TECH_JOB)

        assert assessment.detected_industry == "technology"
        assert assessment.confidence > 0.5
        assert assessment.industry_scores["technology"] == max(assessment.industry_scores.values())

    def test_detects_healthcare(self, classifier):
        assessment = classifier.classify("Registered nurse providing patient care in a hospital", "")

        assert assessment.detected_industry == "healthcare"
        registered = next(c for c in assessment.certifications if c.name == "registered nurse")
        assert registered.found

    def test_no_vocabulary_reports_general(self, classifier):
        assessment = classifier.classify("lorem ipsum dolor", "sit amet")

        assert assessment.detected_industry == "general"
        assert assessment.confidence == 0.0
        assert assessment.certifications == []
        assert assessment.role_level.detected_level == "mid"
        assert assessment.role_level.confidence == 0.0

    def test_both_documents_empty(self, classifier):
        with pytest.raises(ValidationError):
            classifier.classify("", "   ")

    def test_senior_role_level(self, classifier):
        role = classifier.classify(SENIOR_TECH_RESUME, SENIOR_TECH_JOB).role_level

        assert role.detected_level == "senior"
        assert role.years_of_experience_estimate == 8
        assert role.leadership_indicators == ["Led a team", "Mentored junior", "team of 5"]
        assert "8 years of experience stated" in role.experience_indicators
        assert 0.0 < role.confidence <= 1.0

    def test_entry_role_level(self, classifier):
        role = classifier.assess_role_level("Recent graduate seeking an internship", "")

        assert role.detected_level == "entry"
        assert role.confidence == 1.0

    def test_certification_found_through_name(self, classifier):
        checks = {c.name: c for c in classifier.classify(SENIOR_TECH_RESUME, SENIOR_TECH_JOB).certifications}

        assert checks["aws certified"].found
        assert checks["aws certified"].matched_as == "aws certified"
        assert not checks["certified kubernetes administrator"].found
        assert checks["certified kubernetes administrator"].alternatives == ["docker certified associate"]
