import pytest

from ats_scanner.services.ats_simulator import ATSSimulator
from ats_scanner.services.format_quality import assess_format_quality

CLEAN_RESUME = (
    "Experience\n"
    + "Built and operated backend services for a payments platform.\n" * 20
    + "\nEducation\nBachelor of Science in Computer Science\n"
    + "\nSkills\nPython, Django, PostgreSQL\n"
)


@pytest.fixture
def assess(reference):
    simulator = ATSSimulator(reference)

    def _assess(text):
        return assess_format_quality(text, simulator.parse_structure(text))
    return _assess


def _issue_ids(report):
    return [issue.issue_id for issue in report.issues]


class TestFormatQuality:
    """Test cases for the structural quality heuristic"""

    def test_clean_resume(self, assess):
        report = assess(CLEAN_RESUME)

        assert report.score == 100.0
        assert report.issues == []
        assert report.sections_found == ["education", "experience", "skills"]

    def test_short_resume_without_sections(self, assess):
        report = assess("Gardener who loves plants")

        assert report.score == 55.0
        assert _issue_ids(report) == ["missing_experience", "missing_education", "missing_skills", "too_short"]
        assert report.word_count == 4

    def test_nonstandard_headings(self, assess):
        report = assess(CLEAN_RESUME + "\nMY JOURNEY\nHiking\n\nHobbies:\nChess\n")

        issue = next(i for i in report.issues if i.issue_id == "nonstandard_headings")
        assert issue.penalty == 10.0
        assert "MY JOURNEY" in issue.description
        assert report.score == 90.0

    def test_layout_noise(self, assess):
        text = CLEAN_RESUME + "\n\n\n• one\n- two\n* three\n�\n"
        ids = _issue_ids(assess(text))

        assert "excessive_whitespace" in ids
        assert "inconsistent_bullets" in ids
        assert "encoding_artifacts" in ids
