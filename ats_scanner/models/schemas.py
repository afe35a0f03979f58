import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from ats_scanner.models.analysis import ComprehensiveAnalysisResult
from ats_scanner.models.prompts import PromptResponse


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -------- Requests --------
class ComprehensiveAnalysisRequest(BaseModel):
    resume_text: str
    job_text: str
    target_industry: Optional[str] = None
    target_role_level: Optional[str] = None


class SemanticAnalysisRequest(BaseModel):
    resume_text: str
    job_text: str
    industry: Optional[str] = None


class IndustryAnalysisRequest(BaseModel):
    resume_text: str
    job_text: str = ""


class ATSSimulationRequest(BaseModel):
    resume_text: str
    target_keywords: List[str] = []


# -------- Responses --------
class ComprehensiveAnalysisResponse(BaseModel):
    analysis_id: Optional[str] = None   # set only when the result was persisted
    result: ComprehensiveAnalysisResult


class PromptGenerationResponse(BaseModel):
    prompt: PromptResponse
    response: str
    parsed: Optional[dict] = None


# -------- Persistence --------
class AnalysisRecord(BaseModel):
    """Write-once envelope around a comprehensive result"""
    analysis_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    target_industry: Optional[str] = None
    target_role_level: Optional[str] = None
    overall_score: float
    result: ComprehensiveAnalysisResult
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_result(cls, result: ComprehensiveAnalysisResult) -> "AnalysisRecord":
        return cls(
            target_industry=result.target_industry,
            target_role_level=result.target_role_level,
            overall_score=result.overall_score,
            result=result,
        )
