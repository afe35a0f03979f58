from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentKind(str, Enum):
    RESUME = "resume"
    JOB_DESCRIPTION = "job_description"


class MatchKind(str, Enum):
    EXACT = "exact"
    SYNONYM = "synonym"
    FUZZY = "fuzzy"
    MISSING = "missing"


class Document(BaseModel):
    """Raw input text tagged with its kind"""
    model_config = ConfigDict(frozen=True)

    text: str
    kind: DocumentKind

    @property
    def is_empty(self) -> bool:
        return not self.text or not self.text.strip()


class Keyword(BaseModel):
    """A normalized term or phrase extracted from a document"""
    model_config = ConfigDict(frozen=True)

    term: str = Field(description="Normalized form (case-folded, punctuation-stripped)")
    document_kind: DocumentKind
    weight: float = Field(default=1.0, gt=0.0, description="Relative importance")
    category: Optional[str] = Field(default=None, description="skill, tool, credential, ...")


class KeywordMatch(BaseModel):
    """How a single job-description keyword was (or was not) found in the resume"""
    model_config = ConfigDict(frozen=True)

    job_keyword: str
    resume_keyword: Optional[str] = None
    match_kind: MatchKind
    confidence: float = Field(ge=0.0, le=1.0)
    weight: float = Field(default=1.0, gt=0.0)
    category: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.match_kind != MatchKind.MISSING
