"""
Settings Models for pipeline configuration
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ats_scanner.helpers.weight_tables import unknown_dimensions
from ats_scanner.models.reference import WeightTable


class FeatureToggles(BaseModel):
    """Pipeline steps that can be switched off at process start"""
    model_config = ConfigDict(frozen=True)

    enable_industry_analysis: bool = Field(default=True, description="Run the industry & role classifier")
    enable_ats_compatibility: bool = Field(default=True, description="Run the ATS behavior simulation")
    persist_results: bool = Field(default=False, description="Store comprehensive results as write-once records")
    load_reference_overrides: bool = Field(
        default=False, description="Merge industry and ATS profiles stored in the database over the built-in ones"
    )


class MatchingSettings(BaseModel):
    """Semantic matcher constants"""
    model_config = ConfigDict(frozen=True)

    fuzzy_threshold: float = Field(default=0.80, gt=0.0, le=1.0, description="Minimum relatedness for a fuzzy match")
    synonym_discount: float = Field(default=0.85, ge=0.0, le=1.0, description="Credit for a synonym match")
    fuzzy_discount: float = Field(default=0.60, ge=0.0, le=1.0, description="Credit for a fuzzy match")
    min_fuzzy_length: int = Field(default=3, ge=1, description="Shortest term eligible for fuzzy matching")
    max_skill_gaps: int = Field(default=10, ge=0, le=100)

    @field_validator('fuzzy_discount')
    @classmethod
    def validate_discount_order(cls, v, info):
        synonym = info.data.get('synonym_discount')
        if synonym is not None and v > synonym:
            raise ValueError('fuzzy_discount must not exceed synonym_discount')
        return v


class LLMSettings(BaseModel):
    """Inference service settings"""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str = Field(default="llama2", description="Ollama model name")
    base_url: str = Field(default="http://localhost:11434", description="Ollama base URL")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Generation temperature")
    timeout: int = Field(default=120, ge=1, le=600, description="Request timeout in seconds")


class AnalysisSettings(BaseModel):
    """Complete process-start configuration"""
    model_config = ConfigDict(frozen=True)

    features: FeatureToggles = Field(default_factory=FeatureToggles)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    weight_tables: Optional[List[WeightTable]] = Field(
        default=None, description="Replaces the built-in weight tables when set"
    )

    @model_validator(mode="after")
    def validate_weight_tables(self):
        if self.weight_tables is None:
            return self
        keys = [t.key for t in self.weight_tables]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate (industry, role_level) weight tables")
        if not any(t.industry is None and t.role_level is None for t in self.weight_tables):
            raise ValueError("Weight tables must include a global default (no industry, no role level)")
        dimensions = {frozenset(t.weights) for t in self.weight_tables}
        if len(dimensions) > 1:
            raise ValueError("All weight tables must define the same dimensions")
        for table in self.weight_tables:
            unknown = unknown_dimensions(table.weights)
            if unknown:
                raise ValueError(f"Weight table {table.key} names unknown dimensions: {unknown}")
        return self

