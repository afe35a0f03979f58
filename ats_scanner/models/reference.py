"""
Reference data records: industry lexicons, ATS system profiles and weight tables.

These are static configuration records. New industries and ATS systems are
added by registering another record, never by subclassing.
"""
import re
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WEIGHT_SUM_TOLERANCE = 1e-6


class RuleSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class LexiconTerm(BaseModel):
    model_config = ConfigDict(frozen=True)

    term: str
    weight: float = Field(default=1.0, gt=0.0)
    category: str = "skill"


class Credential(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    importance: float = Field(ge=0.0, le=1.0)
    alternatives: Tuple[str, ...] = ()


class IndustryProfile(BaseModel):
    """Lexicon and heuristics for one industry"""
    model_config = ConfigDict(frozen=True)

    industry_id: str
    display_name: str
    aliases: Tuple[str, ...] = ()
    terms: Tuple[LexiconTerm, ...] = ()
    synonyms: Dict[str, Tuple[str, ...]] = Field(
        default_factory=dict, description="Canonical term -> equivalent variants"
    )
    credentials: Tuple[Credential, ...] = ()
    level_signals: Dict[str, Tuple[str, ...]] = Field(
        default_factory=dict, description="Role level -> industry specific signal phrases"
    )
    related_industries: Tuple[str, ...] = ()

    @field_validator("industry_id")
    @classmethod
    def validate_industry_id(cls, v):
        if not v or v != v.strip().lower():
            raise ValueError("industry_id must be a non-empty lowercase identifier")
        return v


class DetectionPattern(BaseModel):
    """A regex rule evaluated against the full resume text"""
    model_config = ConfigDict(frozen=True)

    pattern_id: str
    category: str
    pattern: str
    penalty: float = Field(ge=0.0, le=1.0)
    description: str
    recommendation: str
    ignore_case: bool = True
    trigger_when_absent: bool = Field(
        default=False, description="Fire when the pattern is NOT found"
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v):
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"Invalid detection pattern {v!r}: {exc}")
        return v

    def compiled(self) -> "re.Pattern[str]":
        return re.compile(self.pattern, re.IGNORECASE if self.ignore_case else 0)


class StructuralRules(BaseModel):
    """What a system's parser needs to find to file the resume correctly"""
    model_config = ConfigDict(frozen=True)

    required_sections: Tuple[str, ...] = ()
    missing_section_penalty: float = Field(default=0.05, ge=0.0, le=1.0)
    max_section_penalty: float = Field(default=0.15, ge=0.0, le=1.0)
    require_email: bool = True
    require_phone: bool = False
    missing_contact_penalty: float = Field(default=0.1, ge=0.0, le=1.0)
    min_recognized_sections: int = Field(default=0, ge=0)
    unrecognized_layout_penalty: float = Field(default=0.0, ge=0.0, le=1.0)


class SeverityThreshold(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_penalty: float = Field(ge=0.0, le=1.0)
    severity: RuleSeverity


DEFAULT_SEVERITY_CLASSES: Tuple[SeverityThreshold, ...] = (
    SeverityThreshold(min_penalty=0.20, severity=RuleSeverity.CRITICAL),
    SeverityThreshold(min_penalty=0.10, severity=RuleSeverity.HIGH),
    SeverityThreshold(min_penalty=0.05, severity=RuleSeverity.MEDIUM),
    SeverityThreshold(min_penalty=0.0, severity=RuleSeverity.LOW),
)


class ATSSystemProfile(BaseModel):
    """Emulation settings for one applicant tracking system"""
    model_config = ConfigDict(frozen=True)

    system_id: str
    display_name: str
    structural_rules: StructuralRules = Field(default_factory=StructuralRules)
    detection_patterns: Tuple[DetectionPattern, ...] = ()
    severity_classes: Tuple[SeverityThreshold, ...] = DEFAULT_SEVERITY_CLASSES

    @field_validator("severity_classes")
    @classmethod
    def validate_severity_classes(cls, v):
        if not v:
            raise ValueError("At least one severity class is required")
        ordered = tuple(sorted(v, key=lambda t: t.min_penalty, reverse=True))
        if ordered[-1].min_penalty != 0.0:
            raise ValueError("Severity classes must cover a zero penalty")
        return ordered

    @model_validator(mode="after")
    def validate_unique_patterns(self):
        ids = [p.pattern_id for p in self.detection_patterns]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate pattern ids in ATS profile {self.system_id}")
        return self

    def classify_severity(self, penalty: float) -> RuleSeverity:
        for threshold in self.severity_classes:
            if penalty >= threshold.min_penalty:
                return threshold.severity
        return self.severity_classes[-1].severity


class WeightTable(BaseModel):
    """Scoring dimension weights for an (industry, role level) pair"""
    model_config = ConfigDict(frozen=True)

    industry: Optional[str] = None
    role_level: Optional[str] = None
    weights: Dict[str, float]

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v):
        if not v:
            raise ValueError("Weight table must not be empty")
        for dimension, weight in v.items():
            if weight < 0:
                raise ValueError(f'Weight for dimension "{dimension}" must be non-negative')
        total = sum(v.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Dimension weights must sum to 1.0 (got {total:.6f})")
        return v

    @property
    def key(self) -> str:
        return f"{self.industry or 'default'}/{self.role_level or 'default'}"
