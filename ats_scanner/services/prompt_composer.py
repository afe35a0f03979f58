"""
Prompt Composer

Builds a model-specific prompt from a template, the two documents and
whatever analysis context fits the model's context window. The composer is
pure: it performs no inference and never touches the network.
"""
import math
import re
from typing import Dict, List, Mapping, Optional, Tuple

from ats_scanner.helpers.prompts import (
    CHATML_SYSTEM_MESSAGE, CONTEXT_STRATEGIES, LARGE_CONTEXT_THRESHOLD, LLAMA2_SYSTEM_MESSAGE, MODEL_FAMILIES,
    MODEL_PROFILES, NOT_AVAILABLE, PROMPT_TEMPLATES
)
from ats_scanner.models.analysis import IndustryAssessment, SemanticAnalysisResult
from ats_scanner.models.prompts import (
    ContextStrategy, ContextSummary, ModelProfile, PromptRequest, PromptResponse, PromptTemplate
)
from ats_scanner.utils.exceptions import ConfigurationError, raise_logged
from ats_scanner.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

CHARS_PER_TOKEN = 4
MIN_PARTIAL_SECTION_TOKENS = 50
EXAMPLE_MARKERS = ("example:", "for example", "e.g.")

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def estimate_tokens(text: str, factor: float = 1.0) -> int:
    """Roughly four characters per token, scaled by the model family's tokenizer density"""
    return math.ceil(math.ceil(len(text) / CHARS_PER_TOKEN) * factor)


def summarize_industry(assessment: IndustryAssessment) -> str:
    role = assessment.role_level
    found = [c.name for c in assessment.certifications if c.found]
    return (
        "Industry Analysis:\n"
        f"- Detected Industry: {assessment.detected_industry} (confidence: {assessment.confidence * 100:.1f}%)\n"
        f"- Role Level: {role.detected_level} (confidence: {role.confidence * 100:.1f}%)\n"
        f"- Experience Estimate: {role.years_of_experience_estimate or 0} years\n"
        f"- Key Indicators: {', '.join(role.experience_indicators[:3]) or 'none'}\n"
        f"- Certifications Found: {', '.join(found) or 'none'}"
    )


def summarize_semantic(analysis: SemanticAnalysisResult) -> str:
    top = [f"{m.job_keyword} ({m.match_kind.value})" for m in analysis.keyword_matches if m.matched][:5]
    gaps = [g.skill for g in analysis.skill_gaps[:3]]
    return (
        "Semantic Analysis:\n"
        f"- Industry Relevance: {analysis.industry_relevance_score * 100:.1f}%\n"
        f"- Semantic Similarity: {analysis.similarity_score * 100:.1f}%\n"
        f"- Confidence: {analysis.confidence_score * 100:.1f}%\n"
        f"- Top Keywords Found: {', '.join(top) or 'none'}\n"
        f"- Skill Gaps: {', '.join(gaps) or 'none'}"
    )


def truncate_context(text: str, max_tokens: int) -> str:
    """Cut to the token budget, preferring a sentence or word boundary"""
    target_chars = max_tokens * CHARS_PER_TOKEN
    if len(text) <= target_chars:
        return text
    truncated = text[:target_chars]
    last_period = truncated.rfind(".")
    if last_period > 0:
        return truncated[:last_period + 1]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space]
    return truncated


def summarize_sections(text: str, max_tokens: int) -> str:
    """Keep whole paragraphs while they fit, then a truncated tail if there is room for one"""
    kept: List[str] = []
    used = 0
    for section in text.split("\n\n"):
        tokens = estimate_tokens(section)
        if used + tokens <= max_tokens:
            kept.append(section)
            used += tokens
            continue
        remaining = max_tokens - used
        if remaining > MIN_PARTIAL_SECTION_TOKENS:
            kept.append(truncate_context(section, remaining))
        break
    return "\n\n".join(kept)


def remove_examples(text: str, max_tokens: int) -> str:
    lines = [line for line in text.splitlines() if not any(m in line.lower() for m in EXAMPLE_MARKERS)]
    stripped = "\n".join(lines)
    if estimate_tokens(stripped) <= max_tokens:
        return stripped
    return truncate_context(stripped, max_tokens)


COMPRESSORS = {
    "truncate_context": truncate_context,
    "summarize_sections": summarize_sections,
    "remove_examples": remove_examples,
}


class PromptComposer:
    def __init__(
        self,
        templates: Mapping[str, PromptTemplate] = None,
        models: Mapping[str, ModelProfile] = None,
        strategies: Mapping[str, ContextStrategy] = None,
    ):
        self.templates = dict(PROMPT_TEMPLATES if templates is None else templates)
        self.models = dict(MODEL_PROFILES if models is None else models)
        self.strategies = dict(CONTEXT_STRATEGIES if strategies is None else strategies)

    @log_function_call
    def compose(self, request: PromptRequest) -> PromptResponse:
        template = self.select_template(request.prompt_type, request.target_model_name)
        profile = self.resolve_model(request.target_model_name)
        strategy = self.select_strategy(profile, template)
        logger.info(
            f"Composing {template.template_id} prompt for {request.target_model_name} "
            f"({profile.model_name}, {profile.instruction_format}) with {strategy.strategy_id} strategy"
        )

        available = int(profile.max_context_length * strategy.max_context_ratio)
        context, included, excluded, used = self._prepare_context(request, strategy, available)
        body = self._fill(template, context)

        compressed = False
        wrapper_tokens = estimate_tokens(self._wrap("", profile))
        body_budget = max(available - wrapper_tokens, 1)
        if estimate_tokens(body) > body_budget:
            logger.info(f"Prompt body exceeds {body_budget} tokens; applying {strategy.compression_technique}")
            compressor = COMPRESSORS.get(strategy.compression_technique)
            if compressor is None:
                logger.warning(f"Unknown compression technique {strategy.compression_technique}; truncating")
                compressor = truncate_context
            body = compressor(body, body_budget)
            compressed = True

        generation_options: Dict[str, float] = {
            "temperature": template.temperature,
            "num_ctx": profile.max_context_length,
        }
        if template.max_tokens:
            generation_options["num_predict"] = template.max_tokens

        return PromptResponse(
            formatted_prompt=self._wrap(body, profile),
            model_settings=profile,
            estimated_token_count=self.estimate_request_tokens(request, template, profile),
            prompt_strategy=f"{template.name} with {strategy.name}",
            context_summary=ContextSummary(
                included_context=included,
                excluded_context=excluded,
                available_tokens=available,
                used_tokens=used,
                compressed=compressed,
                compression_technique=strategy.compression_technique if compressed else None,
            ),
            generation_options=generation_options,
        )

    # ------------------------------------------------------------ selection

    def select_template(self, prompt_type: str, model_name: str = "default") -> PromptTemplate:
        template = self.templates.get(f"{prompt_type}_{model_name}") or self.templates.get(prompt_type)
        if template is None:
            raise_logged(
                ConfigurationError(f"No template found for prompt type: {prompt_type}",
                                   config_key="prompt_type", config_value=prompt_type),
                logger, "prompt_composition",
            )
        return template

    def resolve_model(self, model_name: str) -> ModelProfile:
        """Exact profile name, then model family by substring, then the default profile"""
        if model_name in self.models:
            return self.models[model_name]
        lowered = (model_name or "").lower()
        for marker, profile_name in MODEL_FAMILIES:
            if marker in lowered and profile_name in self.models:
                return self.models[profile_name]
        if "default" not in self.models:
            raise_logged(
                ConfigurationError(f"No model profile for {model_name} and no default profile",
                                   config_key="model_profiles", config_value=model_name),
                logger, "prompt_composition",
            )
        return self.models["default"]

    def select_strategy(self, profile: ModelProfile, template: PromptTemplate) -> ContextStrategy:
        if max(template.context_window_size, profile.max_context_length) > LARGE_CONTEXT_THRESHOLD:
            strategy_id = "comprehensive"
        elif "code" in profile.model_name.lower():
            strategy_id = "technical_focused"
        elif template.category == "analysis":
            strategy_id = "analytical"
        else:
            strategy_id = "default"
        return self.strategies.get(strategy_id) or self.strategies["default"]

    # ------------------------------------------------------------ context

    @staticmethod
    def _context_items(request: PromptRequest) -> Dict[str, Optional[str]]:
        return {
            "industry_analysis": summarize_industry(request.industry_context) if request.industry_context else None,
            "semantic_analysis": summarize_semantic(request.semantic_context) if request.semantic_context else None,
            "analysis_focus": ", ".join(request.analysis_focus) or None,
        }

    def _prepare_context(
        self, request: PromptRequest, strategy: ContextStrategy, available: int
    ) -> Tuple[Dict[str, str], List[str], List[str], int]:
        context = {
            "resume_text": request.resume_text,
            "job_text": request.job_text,
            "output_format": request.output_format,
        }
        base_tokens = estimate_tokens(request.resume_text) + estimate_tokens(request.job_text)
        remaining = max(available - base_tokens, 0)
        items = self._context_items(request)

        included, excluded = [], []
        used = 0
        for name in strategy.prioritization:
            if name not in items:
                logger.warning(f"Unknown priority item in context strategy {strategy.strategy_id}: {name}")
                continue
            text = items[name]
            if text is None:
                continue
            tokens = estimate_tokens(text)
            if used + tokens <= remaining:
                context[name] = text
                included.append(name)
                used += tokens
            else:
                excluded.append(name)

        logger.debug(f"Context prepared: {base_tokens + used} of {available} tokens, excluded={excluded}")
        return context, included, excluded, base_tokens + used

    @staticmethod
    def _fill(template: PromptTemplate, context: Mapping[str, str]) -> str:
        def substitute(match):
            name = match.group(1)
            if name not in template.variables:
                return match.group(0)
            return context.get(name) or NOT_AVAILABLE

        return _PLACEHOLDER.sub(substitute, template.template)

    @staticmethod
    def _wrap(body: str, profile: ModelProfile) -> str:
        fmt = profile.instruction_format
        if fmt == "alpaca":
            return f"### Instruction:\n{body}\n\n### Response:\n"
        if fmt == "chatML":
            return (f"<|im_start|>system\n{CHATML_SYSTEM_MESSAGE}<|im_end|>\n"
                    f"<|im_start|>user\n{body}<|im_end|>\n<|im_start|>assistant\n")
        if fmt == "llama2":
            return f"[INST] <<SYS>>\n{LLAMA2_SYSTEM_MESSAGE}\n<</SYS>>\n\n{body} [/INST]"
        if fmt == "mistral":
            return f"<s>[INST] {body} [/INST]"
        return body

    def estimate_request_tokens(self, request: PromptRequest, template: PromptTemplate, profile: ModelProfile) -> int:
        """
        Token estimate for the request before any context selection or compression.

        Counted over the full inputs so that it never decreases as an input grows.
        """
        parts = [template.template, request.resume_text, request.job_text, request.output_format]
        parts.extend(text for text in self._context_items(request).values() if text)
        return max(1, estimate_tokens("\n".join(parts), profile.token_factor))
