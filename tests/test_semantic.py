import pytest

from ats_scanner.models.document import MatchKind
from ats_scanner.models.settings import MatchingSettings
from ats_scanner.services.semantic import SemanticMatcher, relatedness
from ats_scanner.utils.exceptions import AnalysisError


@pytest.fixture
def matcher(reference):
    return SemanticMatcher(reference)


def _kinds(result):
    return {m.job_keyword: m.match_kind for m in result.keyword_matches}


class TestRelatedness:
    """Test cases for the string relatedness measure"""

    def test_identical_terms(self):
        assert relatedness("kubernetes", "kubernetes") == 1.0

    def test_single_edit(self):
        assert relatedness("microservice", "microservices") == pytest.approx(12 / 13)

    def test_phrase_token_overlap(self):
        assert relatedness("data analysis", "analysis data") >= 1.0 - 1e-9


class TestSemanticMatcher:
    """Test cases for keyword matching and scores"""

    def test_exact_matches_and_missing_keyword(self, matcher):
        result = matcher.analyze("Python developer with React and AWS experience", "Python, React, AWS, team leadership")

        kinds = _kinds(result)
        assert kinds["python"] == MatchKind.EXACT
        assert kinds["react"] == MatchKind.EXACT
        assert kinds["aws"] == MatchKind.EXACT
        assert kinds["team leadership"] == MatchKind.MISSING
        # (3.0 + 2.5 + 2.5) / (3.0 + 2.5 + 2.5 + 1.5)
        assert result.similarity_score == pytest.approx(0.8421, abs=1e-4)
        assert result.industry == "general"

    def test_job_keyword_order_is_preserved(self, matcher):
        result = matcher.analyze("Python developer", "Python, React, AWS, team leadership")

        assert result.job_keywords == ["python", "react", "aws", "team leadership"]

    def test_synonym_matches_are_discounted(self, matcher):
        result = matcher.analyze("Built services in JavaScript and Postgres", "JS, PostgreSQL")

        matches = {m.job_keyword: m for m in result.keyword_matches}
        assert matches["js"].match_kind == MatchKind.SYNONYM
        assert matches["js"].resume_keyword == "javascript"
        assert matches["postgresql"].match_kind == MatchKind.SYNONYM
        assert matches["postgresql"].resume_keyword == "postgres"
        assert result.similarity_score == pytest.approx(0.85)

    def test_fuzzy_match(self, matcher):
        result = matcher.analyze("Designed microservices", "Microservice")

        match = result.keyword_matches[0]
        assert match.match_kind == MatchKind.FUZZY
        assert match.resume_keyword == "microservices"
        assert match.confidence == pytest.approx(0.9231, abs=1e-4)
        assert result.similarity_score == pytest.approx(0.60)

    def test_fuzzy_threshold_is_configurable(self, reference):
        strict = SemanticMatcher(reference, MatchingSettings(fuzzy_threshold=0.95))
        result = strict.analyze("Designed microservices", "Microservice")

        assert result.keyword_matches[0].match_kind == MatchKind.MISSING

    def test_zero_overlap(self, matcher):
        result = matcher.analyze("Gardening, pottery, painting", "Kubernetes, Terraform")

        assert result.similarity_score == 0.0
        assert result.industry_relevance_score == 0.0
        assert 0.0 < result.confidence_score < 0.1

    def test_scores_are_bounded(self, matcher):
        result = matcher.analyze("Python Python Python", "Python")

        for score in (result.similarity_score, result.industry_relevance_score, result.confidence_score):
            assert 0.0 <= score <= 1.0

    def test_adding_an_exact_match_never_lowers_similarity(self, matcher):
        job = "Python, React, Docker, Kubernetes"
        before = matcher.analyze("Python developer", job)
        after = matcher.analyze("Python developer who ships Docker images", job)

        assert after.similarity_score >= before.similarity_score

    def test_exact_job_keyword_raises_similarity(self, matcher):
        before = matcher.analyze("Microservices architect", "Microservice")
        after = matcher.analyze("Microservices architect", "Microservice, microservices")

        assert before.similarity_score == pytest.approx(0.60)
        # (1.0 * 0.6 + 2.0 * 1.0) / 3.0
        assert after.similarity_score == pytest.approx(0.8667, abs=1e-4)
        assert after.similarity_score >= before.similarity_score

    def test_confidence_grows_with_exact_share(self, matcher):
        """Missing and fuzzy matches become exact one at a time against a fixed job"""
        job = "Python, React, Docker, Kubernetes, Microservice"
        resumes = [
            "Gardening microservices",
            "Gardening microservices Python",
            "Gardening microservices Python React",
            "Gardening microservices Python React Docker",
            "Gardening microservices Python React Docker Kubernetes",
            "Gardening microservice Python React Docker Kubernetes",
        ]

        results = [matcher.analyze(resume, job) for resume in resumes]

        assert results[0].keyword_matches[-1].match_kind == MatchKind.FUZZY
        assert all(m.match_kind == MatchKind.EXACT for m in results[-1].keyword_matches)
        confidences = [r.confidence_score for r in results]
        assert all(c > 0.0 for c in confidences)
        assert confidences == sorted(confidences)
        assert confidences[-1] > confidences[0]

    def test_industry_relevance_and_recommendations(self, matcher):
        result = matcher.analyze("Docker", "Kubernetes, Docker", industry="technology")

        assert result.industry == "technology"
        assert result.industry_relevance_score == 1.0
        assert result.recommended_skills == ["kubernetes"]

    def test_industry_alias_is_resolved(self, matcher):
        result = matcher.analyze("Docker", "Docker", industry="Software")

        assert result.industry == "technology"

    def test_skill_gaps_are_ranked_by_weight(self, matcher):
        result = matcher.analyze("Gardening", "Agile, Kubernetes, team leadership")

        gaps = result.skill_gaps
        assert [g.skill for g in gaps] == ["kubernetes", "agile", "team leadership"]
        assert gaps[0].importance == "critical"
        assert gaps[1].importance == "important"
        assert "kubernetes" in gaps[0].suggestion

    def test_skill_gap_limit(self, reference):
        matcher = SemanticMatcher(reference, MatchingSettings(max_skill_gaps=1))
        result = matcher.analyze("Gardening", "Agile, Kubernetes, team leadership")

        assert len(result.skill_gaps) == 1

    def test_empty_resume_keywords_raise(self, matcher):
        with pytest.raises(AnalysisError) as exc_info:
            matcher.analyze("the and of", "Python")
        assert exc_info.value.details["field"] == "resume_text"

    def test_empty_job_keywords_raise(self, matcher):
        with pytest.raises(AnalysisError):
            matcher.analyze("Python", "")
