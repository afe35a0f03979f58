"""
Result models produced by the analysis pipeline
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ats_scanner.models.document import KeywordMatch
from ats_scanner.models.reference import RuleSeverity


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------- semantic

class SkillGap(_Result):
    skill: str
    category: Optional[str] = None
    importance: str = Field(description="critical, important or nice_to_have")
    weight: float
    suggestion: str


class SemanticAnalysisResult(_Result):
    industry: str
    keyword_matches: List[KeywordMatch]
    similarity_score: float = Field(ge=0.0, le=1.0)
    industry_relevance_score: float = Field(ge=0.0, le=1.0)
    confidence_score: float = Field(ge=0.0, le=1.0)
    skill_gaps: List[SkillGap] = Field(default_factory=list)
    recommended_skills: List[str] = Field(default_factory=list)

    @property
    def job_keywords(self) -> List[str]:
        return [m.job_keyword for m in self.keyword_matches]


# ---------------------------------------------------------------- industry

class CertificationCheck(_Result):
    name: str
    importance: float = Field(ge=0.0, le=1.0)
    found: bool
    matched_as: Optional[str] = None
    alternatives: List[str] = Field(default_factory=list)


class RoleLevelAssessment(_Result):
    detected_level: str
    confidence: float = Field(ge=0.0, le=1.0)
    level_scores: Dict[str, float] = Field(default_factory=dict)
    years_of_experience_estimate: Optional[int] = None
    experience_indicators: List[str] = Field(default_factory=list)
    leadership_indicators: List[str] = Field(default_factory=list)


class IndustryAssessment(_Result):
    detected_industry: str
    confidence: float = Field(ge=0.0, le=1.0)
    industry_scores: Dict[str, float] = Field(default_factory=dict)
    role_level: RoleLevelAssessment
    certifications: List[CertificationCheck] = Field(default_factory=list)


# ---------------------------------------------------------------- ATS

class ContactInfo(_Result):
    email_detected: bool = False
    email_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    phone_detected: bool = False
    phone_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    linkedin_detected: bool = False
    extraction_confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class SectionBoundary(_Result):
    name: str = Field(description="Canonical section name, e.g. experience")
    heading: str = Field(description="Heading text as written")
    start_line: int
    end_line: int


class ParsingAnalysis(_Result):
    contact: ContactInfo
    sections: List[SectionBoundary] = Field(default_factory=list)

    @property
    def section_names(self) -> List[str]:
        return [s.name for s in self.sections]


class TriggeredRule(_Result):
    rule_id: str
    category: str
    severity: RuleSeverity
    penalty: float
    description: str
    recommendation: str


class ATSSystemSimulationResult(_Result):
    system_id: str
    display_name: str
    score: float = Field(ge=0.0, le=1.0)
    triggered_rules: List[TriggeredRule] = Field(default_factory=list)


class KeywordExtraction(_Result):
    keywords_found: List[str] = Field(default_factory=list)
    keywords_missing: List[str] = Field(default_factory=list)
    coverage: float = Field(default=0.0, ge=0.0, le=1.0)


class OptimizationRecommendation(_Result):
    category: str
    severity: RuleSeverity
    total_penalty: float
    affected_systems: List[str]
    rule_ids: List[str]
    recommendation: str


class ATSSimulationResult(_Result):
    system_results: List[ATSSystemSimulationResult]
    overall_ats_score: float = Field(ge=0.0, le=1.0)
    parsing_analysis: ParsingAnalysis
    keyword_extraction: KeywordExtraction
    recommendations: List[OptimizationRecommendation] = Field(default_factory=list)


# ---------------------------------------------------------------- scoring

class FormatIssue(_Result):
    issue_id: str
    description: str
    penalty: float
    recommendation: str


class FormatQualityReport(_Result):
    score: float = Field(ge=0.0, le=100.0)
    word_count: int
    sections_found: List[str] = Field(default_factory=list)
    issues: List[FormatIssue] = Field(default_factory=list)


class DimensionScore(_Result):
    raw_score: float = Field(ge=0.0, le=100.0)
    weight: float = Field(ge=0.0, le=1.0)
    weighted_score: float
    explanation: str


class ScoringBreakdown(_Result):
    dimensions: Dict[str, DimensionScore]
    weight_table_key: str
    skipped_dimensions: List[str] = Field(default_factory=list)

    @property
    def total_weight(self) -> float:
        return sum(d.weight for d in self.dimensions.values())


class BaseAnalysis(_Result):
    """Headline category scores, 0-100"""
    overall_score: float
    skills_score: Optional[float] = None
    experience_score: Optional[float] = None
    education_score: Optional[float] = None
    keywords_score: Optional[float] = None
    format_score: Optional[float] = None


class ComprehensiveAnalysisResult(_Result):
    target_industry: Optional[str] = None
    target_role_level: Optional[str] = None
    overall_score: float = Field(ge=0.0, le=100.0)
    base_analysis: BaseAnalysis
    semantic_analysis: SemanticAnalysisResult
    industry_assessment: Optional[IndustryAssessment] = None
    ats_simulation: Optional[ATSSimulationResult] = None
    format_quality: FormatQualityReport
    scoring_breakdown: ScoringBreakdown
