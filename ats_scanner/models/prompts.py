"""
Prompt Composer request/response models and registry records
"""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from ats_scanner.models.analysis import IndustryAssessment, SemanticAnalysisResult


class ModelProfile(BaseModel):
    """Context window and instruction format of a model family"""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str
    max_context_length: int = Field(gt=0)
    optimal_temperature: float = Field(ge=0.0, le=2.0)
    supports_system_message: bool = False
    instruction_format: str = Field(description="alpaca, chatML, llama2, mistral or plain")
    stop_tokens: Tuple[str, ...] = ()
    token_factor: float = Field(default=1.0, gt=0.0, description="Tokenizer density relative to 4 chars/token")


class PromptTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    template_id: str
    name: str
    category: str
    template: str
    variables: Tuple[str, ...]
    context_window_size: int
    temperature: float
    max_tokens: Optional[int] = None


class ContextStrategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy_id: str
    name: str
    max_context_ratio: float = Field(gt=0.0, le=1.0)
    prioritization: Tuple[str, ...]
    compression_technique: str


class PromptRequest(BaseModel):
    """Everything the composer needs to build one prompt"""
    model_config = ConfigDict(frozen=True)

    prompt_type: str
    target_model_name: str = "default"
    resume_text: str
    job_text: str
    industry_context: Optional[IndustryAssessment] = None
    semantic_context: Optional[SemanticAnalysisResult] = None
    analysis_focus: List[str] = Field(default_factory=list, description="Ordered topic tags")
    output_format: str = "structured text"

    @field_validator('analysis_focus')
    @classmethod
    def strip_focus(cls, v):
        return [tag.strip() for tag in v if tag and tag.strip()]


class ContextSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    included_context: List[str] = Field(default_factory=list)
    excluded_context: List[str] = Field(default_factory=list)
    available_tokens: int
    used_tokens: int
    compressed: bool = False
    compression_technique: Optional[str] = None


class PromptResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    formatted_prompt: str = Field(min_length=1)
    model_settings: ModelProfile = Field(serialization_alias="model_config")
    estimated_token_count: PositiveInt
    prompt_strategy: str = Field(min_length=1)
    context_summary: ContextSummary
    generation_options: Dict[str, float] = Field(default_factory=dict)
