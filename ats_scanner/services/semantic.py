"""
Semantic Matcher: exact, synonym and fuzzy matching of job keywords against a resume
"""
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from ats_scanner.helpers.lexicons import GENERAL_INDUSTRY
from ats_scanner.models.analysis import SemanticAnalysisResult, SkillGap
from ats_scanner.models.document import DocumentKind, Keyword, KeywordMatch, MatchKind
from ats_scanner.models.settings import MatchingSettings
from ats_scanner.services.extractor import KeywordExtractor
from ats_scanner.services.reference_data import ReferenceData
from ats_scanner.utils.exceptions import AnalysisError, raise_logged
from ats_scanner.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

CONFIDENCE_FLOOR = 0.05
EVIDENCE_SATURATION = 20

_GAP_SUGGESTIONS = {
    "programming_language": "Add projects or roles that show you writing {skill} code.",
    "framework": "List hands-on work with {skill}, including what you built with it.",
    "tool": "Name {skill} where you used it, with the outcome it supported.",
    "cloud": "Describe the {skill} services you have deployed or operated.",
    "credential": "Consider obtaining {skill}, or list it if you already hold it.",
    "leadership": "Describe situations that show {skill}, with team size and results.",
    "methodology": "Mention how your teams applied {skill} day to day.",
    "regulation": "Call out your experience working under {skill} requirements.",
}
_DEFAULT_SUGGESTION = "Mention {skill} explicitly if it reflects your experience."


def relatedness(a: str, b: str) -> float:
    """Normalized edit-distance similarity, or token overlap for phrases, whichever is higher"""
    score = Levenshtein.normalized_similarity(a, b)
    if " " in a or " " in b:
        ta, tb = set(a.split()), set(b.split())
        score = max(score, len(ta & tb) / len(ta | tb))
    return score


def _importance(weight: float) -> str:
    if weight >= 2.5:
        return "critical"
    if weight >= 1.5:
        return "important"
    return "nice_to_have"


class SemanticMatcher:
    """Scores how well resume keywords cover job-description keywords"""

    def __init__(self, reference: ReferenceData, settings: MatchingSettings = None):
        self.reference = reference
        self.settings = settings or MatchingSettings()
        self.extractor = KeywordExtractor(reference)

    @log_function_call
    def analyze(self, resume_text: str, job_text: str, industry: Optional[str] = None) -> SemanticAnalysisResult:
        industry_id = self.reference.resolve_industry(industry)
        if industry and industry_id is None:
            logger.info(f"Unknown industry '{industry}'; matching with global synonyms only")

        resume_keywords = self.extractor.extract(resume_text, DocumentKind.RESUME)
        job_keywords = self.extractor.extract(job_text, DocumentKind.JOB_DESCRIPTION)
        if not resume_keywords:
            raise_logged(AnalysisError("No keywords could be extracted from the resume", field="resume_text"),
                         logger, "semantic_analysis")
        if not job_keywords:
            raise_logged(AnalysisError("No keywords could be extracted from the job description", field="job_text"),
                         logger, "semantic_analysis")

        matches = self._match_all(job_keywords, resume_keywords, industry_id)
        similarity = self._similarity(matches)
        relevance = self.industry_relevance(matches, industry_id)
        confidence = self._confidence(matches)

        logger.info(
            f"Semantic analysis: {len(job_keywords)} job keywords, similarity={similarity:.3f}, "
            f"relevance={relevance:.3f}, confidence={confidence:.3f}"
        )
        return SemanticAnalysisResult(
            industry=industry_id or GENERAL_INDUSTRY,
            keyword_matches=matches,
            similarity_score=similarity,
            industry_relevance_score=relevance,
            confidence_score=confidence,
            skill_gaps=self._skill_gaps(matches),
            recommended_skills=self._recommended_skills(matches, industry_id),
        )

    # ------------------------------------------------------------ matching

    def _match_all(self, job_keywords: Sequence[Keyword], resume_keywords: Sequence[Keyword],
                   industry_id: Optional[str]) -> List[KeywordMatch]:
        resume_terms = [k.term for k in resume_keywords]
        resume_set = set(resume_terms)
        by_canonical: Dict[str, str] = {}
        for term in resume_terms:
            by_canonical.setdefault(self.reference.canonical(term, industry_id), term)

        return [self._match_one(jk, resume_terms, resume_set, by_canonical, industry_id) for jk in job_keywords]

    def _match_one(self, keyword: Keyword, resume_terms: List[str], resume_set, by_canonical: Dict[str, str],
                   industry_id: Optional[str]) -> KeywordMatch:
        term = keyword.term
        common = dict(job_keyword=term, weight=keyword.weight, category=keyword.category)

        if term in resume_set:
            return KeywordMatch(resume_keyword=term, match_kind=MatchKind.EXACT, confidence=1.0, **common)

        synonym = by_canonical.get(self.reference.canonical(term, industry_id))
        if synonym is not None:
            return KeywordMatch(resume_keyword=synonym, match_kind=MatchKind.SYNONYM,
                                confidence=self.settings.synonym_discount, **common)

        candidate, score = self._best_fuzzy(term, resume_terms)
        if candidate is not None:
            return KeywordMatch(resume_keyword=candidate, match_kind=MatchKind.FUZZY,
                                confidence=round(score, 4), **common)

        return KeywordMatch(match_kind=MatchKind.MISSING, confidence=0.0, **common)

    def _best_fuzzy(self, term: str, resume_terms: List[str]) -> Tuple[Optional[str], float]:
        min_length = self.settings.min_fuzzy_length
        if len(term) < min_length:
            return None, 0.0
        best, best_score = None, 0.0
        for candidate in resume_terms:
            if len(candidate) < min_length:
                continue
            score = relatedness(term, candidate)
            if score > best_score:
                best, best_score = candidate, score
        if best_score >= self.settings.fuzzy_threshold:
            return best, best_score
        return None, 0.0

    # ------------------------------------------------------------ scores

    def credit(self, match: KeywordMatch) -> float:
        if match.match_kind == MatchKind.EXACT:
            return 1.0
        if match.match_kind == MatchKind.SYNONYM:
            return self.settings.synonym_discount
        if match.match_kind == MatchKind.FUZZY:
            return self.settings.fuzzy_discount
        return 0.0

    def _similarity(self, matches: List[KeywordMatch]) -> float:
        total = sum(m.weight for m in matches)
        if total <= 0:
            return 0.0
        earned = sum(m.weight * self.credit(m) for m in matches)
        return round(min(1.0, earned / total), 4)

    def industry_relevance(self, matches: List[KeywordMatch], industry_id: Optional[str]) -> float:
        matched = [m for m in matches if m.matched]
        vocabulary = self.reference.industry_vocabulary(industry_id)
        if not matched or not vocabulary:
            return 0.0
        relevant = sum(
            1 for m in matched
            if m.job_keyword in vocabulary or self.reference.canonical(m.job_keyword, industry_id) in vocabulary
        )
        return round(relevant / len(matched), 4)

    @staticmethod
    def _confidence(matches: List[KeywordMatch]) -> float:
        """Grows with the share of exact matches, overall coverage and the amount of evidence"""
        count = len(matches)
        if count == 0:
            return 0.0
        exact_fraction = sum(1 for m in matches if m.match_kind == MatchKind.EXACT) / count
        coverage = sum(1 for m in matches if m.matched) / count
        evidence = min(1.0, count / EVIDENCE_SATURATION)
        blended = 0.5 * exact_fraction + 0.3 * coverage + 0.2 * evidence
        return round(min(1.0, CONFIDENCE_FLOOR + (1.0 - CONFIDENCE_FLOOR) * blended), 4)

    # ------------------------------------------------------------ guidance

    def _skill_gaps(self, matches: List[KeywordMatch]) -> List[SkillGap]:
        missing = sorted((m for m in matches if not m.matched), key=lambda m: -m.weight)
        gaps = []
        for match in missing[:self.settings.max_skill_gaps]:
            template = _GAP_SUGGESTIONS.get(match.category, _DEFAULT_SUGGESTION)
            gaps.append(SkillGap(
                skill=match.job_keyword,
                category=match.category,
                importance=_importance(match.weight),
                weight=match.weight,
                suggestion=template.format(skill=match.job_keyword),
            ))
        return gaps

    def _recommended_skills(self, matches: List[KeywordMatch], industry_id: Optional[str]) -> List[str]:
        vocabulary = self.reference.industry_vocabulary(industry_id)
        missing = [m for m in matches if not m.matched and m.job_keyword in vocabulary]
        return [m.job_keyword for m in sorted(missing, key=lambda m: -m.weight)]
