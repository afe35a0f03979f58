"""
Composite Scoring Engine

Orchestrates one comprehensive evaluation: semantic matching and
industry/role classification run concurrently in worker threads, the ATS
simulation follows with the job keywords as targets, and the results are
folded into weighted dimension scores using the weight table selected for
the target industry and role level.
"""
import asyncio
from typing import Callable, Dict, Optional, Tuple

from ats_scanner.helpers.lexicons import (
    CONTINUING_EDUCATION, DEGREE_TIERS, LEADERSHIP_KEYWORDS, RELEVANT_FIELDS, ROLE_LEVELS
)
from ats_scanner.helpers.text import TokenizedText
from ats_scanner.models.analysis import (
    ATSSimulationResult, BaseAnalysis, ComprehensiveAnalysisResult, DimensionScore, FormatQualityReport,
    IndustryAssessment, ScoringBreakdown, SemanticAnalysisResult
)
from ats_scanner.models.document import Document, DocumentKind
from ats_scanner.models.reference import WeightTable
from ats_scanner.models.settings import AnalysisSettings
from ats_scanner.services.ats_simulator import ATSSimulator
from ats_scanner.services.classifier import IndustryRoleClassifier
from ats_scanner.services.format_quality import assess_format_quality
from ats_scanner.services.reference_data import ReferenceData
from ats_scanner.services.semantic import SemanticMatcher
from ats_scanner.utils.exceptions import ConfigurationError, DocumentParsingError, raise_logged
from ats_scanner.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)

SKILL_CATEGORIES = frozenset({"programming_language", "framework", "tool", "cloud", "skill", "methodology"})

EXPERIENCE_BASE = 40.0
EXPERIENCE_LEVEL_BONUS = {"entry": 5.0, "mid": 15.0, "senior": 25.0, "lead": 35.0, "executive": 40.0}
LEVEL_SHORTFALL_PENALTY = 10.0
EDUCATION_BASE = 40.0
RELEVANT_FIELD_BONUS = 15.0
CONTINUING_EDUCATION_BONUS = 10.0
LEADERSHIP_LEVEL_BONUS = {"senior": 15.0, "lead": 20.0, "executive": 30.0}
NEUTRAL_SCORE = 50.0


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


class CompositeScoringEngine:
    """Runs the full pipeline for one resume/job pair"""

    def __init__(self, reference: ReferenceData, settings: AnalysisSettings = None):
        self.reference = reference
        self.settings = settings or AnalysisSettings()
        self.semantic_matcher = SemanticMatcher(reference, self.settings.matching)
        self.classifier = IndustryRoleClassifier(reference)
        self.ats_simulator = ATSSimulator(reference)

    async def comprehensive_analysis(
        self,
        resume_text: str,
        job_text: str,
        target_industry: Optional[str] = None,
        target_role_level: Optional[str] = None,
    ) -> ComprehensiveAnalysisResult:
        resume = Document(text=resume_text or "", kind=DocumentKind.RESUME)
        if resume.is_empty:
            raise_logged(DocumentParsingError("Resume text is empty; nothing to analyze", document_kind=resume.kind.value),
                         logger, "comprehensive_analysis")

        features = self.settings.features
        industry_id = self.reference.resolve_industry(target_industry)
        role_level = self.reference.resolve_role_level(target_role_level)
        logger.info(
            f"Comprehensive analysis requested: industry={target_industry!r} -> {industry_id}, "
            f"role_level={target_role_level!r} -> {role_level}"
        )

        with PerformanceMonitor("comprehensive_analysis", logger, threshold_ms=5000):
            with PerformanceMonitor("semantic_and_classification", logger):
                semantic, assessment = await self._semantic_and_classification(
                    resume_text, job_text, target_industry, features.enable_industry_analysis
                )

            ats: Optional[ATSSimulationResult] = None
            with PerformanceMonitor("ats_simulation", logger):
                if features.enable_ats_compatibility:
                    ats = await asyncio.to_thread(self.ats_simulator.simulate, resume_text, semantic.job_keywords)
                    parsing = ats.parsing_analysis
                else:
                    parsing = self.ats_simulator.parse_structure(resume_text)

            with PerformanceMonitor("scoring", logger):
                format_quality = assess_format_quality(resume_text, parsing)
                effective_industry = industry_id or self._detected_industry(assessment)
                table = self.reference.select_weight_table(industry_id, role_level)
                breakdown = self.score_dimensions(
                    table, resume_text, semantic, assessment, ats, format_quality,
                    effective_industry, role_level,
                )

        overall = round(_clamp(sum(d.weighted_score for d in breakdown.dimensions.values())), 2)
        logger.info(f"Overall score {overall} using weight table {table.key}")

        return ComprehensiveAnalysisResult(
            target_industry=industry_id,
            target_role_level=role_level,
            overall_score=overall,
            base_analysis=self._base_analysis(overall, breakdown),
            semantic_analysis=semantic,
            industry_assessment=assessment,
            ats_simulation=ats,
            format_quality=format_quality,
            scoring_breakdown=breakdown,
        )

    async def _semantic_and_classification(
        self, resume_text: str, job_text: str, target_industry: Optional[str], classify: bool
    ) -> Tuple[SemanticAnalysisResult, Optional[IndustryAssessment]]:
        semantic_step = asyncio.to_thread(self.semantic_matcher.analyze, resume_text, job_text, target_industry)
        if not classify:
            return await semantic_step, None
        semantic, assessment = await asyncio.gather(
            semantic_step,
            asyncio.to_thread(self.classifier.classify, resume_text, job_text),
        )
        return semantic, assessment

    @staticmethod
    def _detected_industry(assessment: Optional[IndustryAssessment]) -> Optional[str]:
        if assessment is None or assessment.confidence <= 0:
            return None
        return assessment.detected_industry

    # ------------------------------------------------------------ dimensions

    def score_dimensions(
        self,
        table: WeightTable,
        resume_text: str,
        semantic: SemanticAnalysisResult,
        assessment: Optional[IndustryAssessment],
        ats: Optional[ATSSimulationResult],
        format_quality: FormatQualityReport,
        industry_id: Optional[str] = None,
        target_role_level: Optional[str] = None,
    ) -> ScoringBreakdown:
        """
        Raw 0-100 score per dimension, weighted by ``table``.

        Dimensions whose pipeline step was switched off (or that have nothing
        to measure against) are dropped and the remaining weights are scaled
        back up to sum to 1. A dimension name with no scorer is a configuration
        error.
        """
        resume = TokenizedText(resume_text)
        calculators: Dict[str, Callable[[], Optional[Tuple[float, str]]]] = {
            "skills": lambda: self._skills_score(semantic),
            "experience": lambda: self._experience_score(assessment, target_role_level),
            "education": lambda: self._education_score(resume),
            "keywords": lambda: self._keywords_score(ats),
            "format": lambda: self._format_score(ats, format_quality),
            "leadership": lambda: self._leadership_score(assessment, resume),
            "certifications": lambda: self._certifications_score(resume, industry_id),
            "industry_specific": lambda: self._industry_specific_score(semantic, industry_id),
        }

        unknown = [d for d in table.weights if d not in calculators]
        if unknown:
            raise_logged(ConfigurationError(
                f"Weight table {table.key} names dimensions with no scorer: {unknown}",
                config_key="weight_tables", config_value=table.key,
            ), logger, "score_dimensions")

        raw: Dict[str, Tuple[float, str]] = {}
        skipped = []
        for dimension in table.weights:
            result = calculators[dimension]()
            if result is None:
                skipped.append(dimension)
            else:
                raw[dimension] = result

        present_weight = sum(table.weights[d] for d in raw)
        dimensions = {}
        for dimension, (score, explanation) in raw.items():
            weight = table.weights[dimension] / present_weight if present_weight > 0 else 1.0 / len(raw)
            score = round(_clamp(score), 2)
            dimensions[dimension] = DimensionScore(
                raw_score=score,
                weight=weight,
                weighted_score=round(score * weight, 4),
                explanation=explanation,
            )

        if skipped:
            logger.info(f"Skipped dimensions {skipped}; remaining weights renormalized")
        return ScoringBreakdown(dimensions=dimensions, weight_table_key=table.key, skipped_dimensions=skipped)

    def _skills_score(self, semantic: SemanticAnalysisResult) -> Tuple[float, str]:
        skills = [m for m in semantic.keyword_matches if m.category in SKILL_CATEGORIES]
        total = sum(m.weight for m in skills)
        if not skills or total <= 0:
            return (semantic.similarity_score * 100,
                    "No categorized skills in the job description; using overall keyword similarity")
        earned = sum(m.weight * self.semantic_matcher.credit(m) for m in skills)
        matched = sum(1 for m in skills if m.matched)
        return earned / total * 100, f"{matched} of {len(skills)} required skills matched"

    @staticmethod
    def _experience_score(assessment: Optional[IndustryAssessment],
                          target_role_level: Optional[str]) -> Optional[Tuple[float, str]]:
        if assessment is None:
            return None
        role = assessment.role_level
        years = role.years_of_experience_estimate or 0
        score = (
            EXPERIENCE_BASE
            + min(years * 2.0, 30.0)
            + EXPERIENCE_LEVEL_BONUS.get(role.detected_level, 0.0)
            + min(len(role.experience_indicators) * 2.0, 20.0)
        )
        explanation = f"Detected {role.detected_level} level"
        if role.years_of_experience_estimate is not None:
            explanation += f" with {years} years stated"

        if target_role_level in ROLE_LEVELS and role.detected_level in ROLE_LEVELS:
            shortfall = ROLE_LEVELS.index(target_role_level) - ROLE_LEVELS.index(role.detected_level)
            if shortfall > 0:
                score -= shortfall * LEVEL_SHORTFALL_PENALTY
                explanation += f"; {shortfall} level(s) below the {target_role_level} target"
        return score, explanation

    @staticmethod
    def _education_score(resume: TokenizedText) -> Tuple[float, str]:
        tier_score = 0.0
        for names, points in DEGREE_TIERS:
            if any(resume.contains(name) for name in names):
                tier_score = points
                break
        field = next((f for f in RELEVANT_FIELDS if resume.contains(f)), None)
        continuing = any(resume.contains(term) for term in CONTINUING_EDUCATION)

        score = EDUCATION_BASE + tier_score
        parts = [f"degree tier +{tier_score:g}" if tier_score else "no degree found"]
        if field:
            score += RELEVANT_FIELD_BONUS
            parts.append(f"relevant field ({field})")
        if continuing:
            score += CONTINUING_EDUCATION_BONUS
            parts.append("continuing education")
        return score, ", ".join(parts)

    @staticmethod
    def _keywords_score(ats: Optional[ATSSimulationResult]) -> Optional[Tuple[float, str]]:
        if ats is None:
            return None
        extraction = ats.keyword_extraction
        total = len(extraction.keywords_found) + len(extraction.keywords_missing)
        return (extraction.coverage * 100,
                f"{len(extraction.keywords_found)} of {total} job keywords visible to ATS parsers")

    @staticmethod
    def _format_score(ats: Optional[ATSSimulationResult], format_quality: FormatQualityReport) -> Tuple[float, str]:
        if ats is None:
            return format_quality.score, f"Format quality {format_quality.score:g}"
        score = (ats.overall_ats_score * 100 + format_quality.score) / 2
        return score, f"ATS compatibility {ats.overall_ats_score:.2f}, format quality {format_quality.score:g}"

    @staticmethod
    def _leadership_score(assessment: Optional[IndustryAssessment],
                          resume: TokenizedText) -> Optional[Tuple[float, str]]:
        if assessment is None:
            return None
        role = assessment.role_level
        keywords = [k for k in LEADERSHIP_KEYWORDS if resume.contains(k)]
        score = (
            min(len(role.leadership_indicators) * 10.0, 40.0)
            + len(keywords) * 5.0
            + LEADERSHIP_LEVEL_BONUS.get(role.detected_level, 0.0)
        )
        return score, f"{len(role.leadership_indicators)} leadership statements, {len(keywords)} leadership keywords"

    def _certifications_score(self, resume: TokenizedText, industry_id: Optional[str]) -> Tuple[float, str]:
        profile = self.reference.industry(industry_id)
        if profile is None or not profile.credentials:
            return NEUTRAL_SCORE, "No certifications defined for this industry"
        total = sum(c.importance for c in profile.credentials)
        found = [
            c for c in profile.credentials
            if any(resume.contains(name) for name in (c.name,) + c.alternatives)
        ]
        score = sum(c.importance for c in found) / total * 100 if total > 0 else NEUTRAL_SCORE
        return score, f"{len(found)} of {len(profile.credentials)} {profile.display_name} certifications found"

    def _industry_specific_score(self, semantic: SemanticAnalysisResult,
                                 industry_id: Optional[str]) -> Optional[Tuple[float, str]]:
        if industry_id is None:
            return None
        relevance = self.semantic_matcher.industry_relevance(semantic.keyword_matches, industry_id)
        return relevance * 100, f"{relevance:.0%} of matched keywords are {industry_id} vocabulary"

    @staticmethod
    def _base_analysis(overall: float, breakdown: ScoringBreakdown) -> BaseAnalysis:
        def raw(name: str) -> Optional[float]:
            dimension = breakdown.dimensions.get(name)
            return dimension.raw_score if dimension is not None else None

        return BaseAnalysis(
            overall_score=overall,
            skills_score=raw("skills"),
            experience_score=raw("experience"),
            education_score=raw("education"),
            keywords_score=raw("keywords"),
            format_score=raw("format"),
        )
