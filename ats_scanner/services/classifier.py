"""
Industry & Role Classifier
"""
from typing import Dict, List, Optional, Sequence, Tuple

from ats_scanner.helpers.lexicons import (
    DEFAULT_ROLE_LEVEL, EXPERIENCE_PATTERNS, GENERAL_INDUSTRY, LEADERSHIP_PATTERNS, ROLE_LEVEL_PRIORITY,
    ROLE_LEVELS, SCOPE_INDICATORS, YEARS_TO_LEVEL
)
from ats_scanner.helpers.text import TokenizedText
from ats_scanner.models.analysis import CertificationCheck, IndustryAssessment, RoleLevelAssessment
from ats_scanner.models.reference import IndustryProfile
from ats_scanner.services.reference_data import ReferenceData
from ats_scanner.utils.exceptions import ValidationError, raise_logged
from ats_scanner.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

JOB_SIGNAL_FACTOR = 0.5
YEARS_SIGNAL_WEIGHT = 2.0
SCOPE_SIGNAL_FACTOR = 0.5
MAX_YEARS = 50


def rank_by_margin(scores: Dict[str, float], priority: Sequence[str]) -> Tuple[Optional[str], float]:
    """
    Pick the highest score, breaking ties by ``priority`` order.

    Confidence is the normalized margin ``(top - runner_up) / top``. Returns
    ``(None, 0.0)`` when no candidate scored above zero.
    """
    ranked = sorted(priority, key=lambda key: (-scores.get(key, 0.0), priority.index(key)))
    if not ranked:
        return None, 0.0
    top = scores.get(ranked[0], 0.0)
    if top <= 0:
        return None, 0.0
    runner_up = scores.get(ranked[1], 0.0) if len(ranked) > 1 else 0.0
    return ranked[0], round((top - runner_up) / top, 4)


def years_to_level(years: int) -> str:
    for upper, level in YEARS_TO_LEVEL:
        if years <= upper:
            return level
    return "executive"


def estimate_years(text: str) -> Optional[int]:
    """Largest explicit 'N years of experience' style figure in ``text``"""
    found = []
    for pattern in EXPERIENCE_PATTERNS:
        found.extend(int(m.group(1)) for m in pattern.finditer(text or ""))
    found = [y for y in found if 0 < y <= MAX_YEARS]
    return max(found) if found else None


class IndustryRoleClassifier:
    """Infers the industry and seniority implied by a resume/job pair"""

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    @log_function_call
    def classify(self, resume_text: str, job_text: str) -> IndustryAssessment:
        resume = TokenizedText(resume_text)
        job = TokenizedText(job_text)
        if not resume and not job:
            raise_logged(ValidationError("Resume and job description are both empty"), logger, "classification")

        combined = TokenizedText(f"{resume_text or ''}\n{job_text or ''}")
        priority = [p.industry_id for p in self.reference.industries]
        scores = {p.industry_id: self._industry_score(p, combined) for p in self.reference.industries}
        industry_id, confidence = rank_by_margin(scores, priority)

        if industry_id is None:
            logger.info("No industry vocabulary found in either document; reporting general")
        else:
            logger.info(f"Detected industry {industry_id} (confidence {confidence:.2f})")

        profile = self.reference.industry(industry_id)
        return IndustryAssessment(
            detected_industry=industry_id or GENERAL_INDUSTRY,
            confidence=confidence,
            industry_scores=scores,
            role_level=self.assess_role_level(resume_text, job_text, industry_id),
            certifications=self._check_certifications(resume, profile),
        )

    def _industry_score(self, profile: IndustryProfile, text: TokenizedText) -> float:
        score = 0.0
        for term in profile.terms:
            forms = (term.term,) + self.reference.variants(term.term, profile.industry_id)
            if any(text.contains(form) for form in forms):
                score += term.weight
        return round(score, 4)

    def assess_role_level(self, resume_text: str, job_text: str, industry_id: Optional[str] = None) -> RoleLevelAssessment:
        resume = TokenizedText(resume_text)
        job = TokenizedText(job_text)
        scores = {level: 0.0 for level in ROLE_LEVELS}
        experience_indicators: List[str] = []
        leadership_indicators: List[str] = []

        for level, phrases in self.reference.level_signals(industry_id).items():
            for phrase in phrases:
                if resume.contains(phrase):
                    scores[level] += 1.0
                    experience_indicators.append(f"{level} signal: {phrase}")
                if job.contains(phrase):
                    scores[level] += JOB_SIGNAL_FACTOR

        years = estimate_years(resume_text)
        if years is not None:
            band = years_to_level(years)
            scores[band] += YEARS_SIGNAL_WEIGHT
            experience_indicators.append(f"{years} years of experience stated")

        for pattern in LEADERSHIP_PATTERNS:
            for match in pattern.finditer(resume_text or ""):
                scores["lead"] += 0.75
                scores["senior"] += 0.25
                leadership_indicators.append(match.group(0).strip())

        for phrase, weight, level in SCOPE_INDICATORS:
            if resume.contains(phrase):
                scores[level] += weight * SCOPE_SIGNAL_FACTOR
                experience_indicators.append(f"scope indicator: {phrase}")

        scores = {level: round(value, 4) for level, value in scores.items()}
        level, confidence = rank_by_margin(scores, ROLE_LEVEL_PRIORITY)
        return RoleLevelAssessment(
            detected_level=level or DEFAULT_ROLE_LEVEL,
            confidence=confidence,
            level_scores=scores,
            years_of_experience_estimate=years,
            experience_indicators=experience_indicators,
            leadership_indicators=leadership_indicators,
        )

    @staticmethod
    def _check_certifications(resume: TokenizedText, profile: Optional[IndustryProfile]) -> List[CertificationCheck]:
        if profile is None:
            return []
        checks = []
        for credential in profile.credentials:
            matched_as = next(
                (name for name in (credential.name,) + credential.alternatives if resume.contains(name)), None
            )
            checks.append(CertificationCheck(
                name=credential.name,
                importance=credential.importance,
                found=matched_as is not None,
                matched_as=matched_as,
                alternatives=list(credential.alternatives),
            ))
        return checks
