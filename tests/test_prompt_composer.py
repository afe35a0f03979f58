import pytest

from ats_scanner.helpers.prompts import MODEL_PROFILES, NOT_AVAILABLE, PROMPT_TEMPLATES
from ats_scanner.models.prompts import PromptRequest
from ats_scanner.services.prompt_composer import (
    PromptComposer, estimate_tokens, remove_examples, summarize_sections, truncate_context
)
from ats_scanner.services.semantic import SemanticMatcher
from ats_scanner.utils.exceptions import ConfigurationError
from samples import SENIOR_TECH_JOB, SENIOR_TECH_RESUME

LONG_RESUME = "\n\n".join(["Built and operated backend services for a payments platform. " * 20] * 30)


@pytest.fixture
def composer():
    return PromptComposer()


@pytest.fixture
def semantic(reference):
    return SemanticMatcher(reference).analyze(SENIOR_TECH_RESUME, SENIOR_TECH_JOB, "technology")


def _request(**kwargs):
    values = dict(prompt_type="comprehensive_analysis", resume_text=SENIOR_TECH_RESUME, job_text=SENIOR_TECH_JOB)
    values.update(kwargs)
    return PromptRequest(**values)


class TestCompressionHelpers:
    """Test cases for token estimation and compression functions"""

    def test_estimate_tokens(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("abcd" * 10, 0.9) == 9

    def test_truncate_prefers_sentence_boundary(self):
        assert truncate_context("First sentence. Second sentence runs on", 5) == "First sentence."
        assert truncate_context("short", 10) == "short"

    def test_summarize_sections_drops_small_tails(self):
        text = "a" * 40 + "\n\n" + "b" * 400
        assert summarize_sections(text, 20) == "a" * 40

    def test_remove_examples(self):
        text = "Keep this line\nFor example: drop this\nDrop this too, e.g. here"
        assert remove_examples(text, 100) == "Keep this line"


class TestModelAndTemplateSelection:
    """Test cases for template, model profile and strategy lookup"""

    def test_unknown_prompt_type(self, composer):
        with pytest.raises(ConfigurationError):
            composer.select_template("cover_letter")

    def test_model_specific_template_wins(self):
        templates = dict(PROMPT_TEMPLATES)
        specific = PROMPT_TEMPLATES["skills_analysis"].model_copy(update={"template_id": "skills_analysis_mistral"})
        templates["skills_analysis_mistral"] = specific
        composer = PromptComposer(templates=templates)

        assert composer.select_template("skills_analysis", "mistral") is specific
        assert composer.select_template("skills_analysis", "llama2") is PROMPT_TEMPLATES["skills_analysis"]

    @pytest.mark.parametrize("model_name,profile", [
        ("llama2", "llama2"),
        ("llama3:8b", "llama2"),
        ("codellama:13b", "codellama"),
        ("starcoder2", "codellama"),
        ("mistral:7b-instruct", "mistral"),
        ("openchat", "neural-chat"),
        ("phi3", "default"),
    ])
    def test_resolve_model(self, composer, model_name, profile):
        assert composer.resolve_model(model_name).model_name == profile

    def test_resolve_model_without_default(self):
        composer = PromptComposer(models={"llama2": MODEL_PROFILES["llama2"]})

        with pytest.raises(ConfigurationError):
            composer.resolve_model("phi3")

    def test_strategy_selection(self, composer):
        comprehensive = PROMPT_TEMPLATES["comprehensive_analysis"]
        ats = PROMPT_TEMPLATES["ats_optimization"]

        assert composer.select_strategy(MODEL_PROFILES["mistral"], comprehensive).strategy_id == "comprehensive"
        assert composer.select_strategy(MODEL_PROFILES["codellama"], comprehensive).strategy_id == "technical_focused"
        assert composer.select_strategy(MODEL_PROFILES["llama2"], comprehensive).strategy_id == "analytical"
        assert composer.select_strategy(MODEL_PROFILES["default"], ats).strategy_id == "default"


class TestCompose:
    """Test cases for full prompt composition"""

    def test_default_model_uses_alpaca_format(self, composer):
        response = composer.compose(_request())

        assert response.formatted_prompt.startswith("### Instruction:\n")
        assert response.formatted_prompt.endswith("### Response:\n")
        assert response.prompt_strategy == "Comprehensive Resume Analysis with Analytical Deep Dive"
        assert response.generation_options == {"temperature": 0.1, "num_ctx": 2048, "num_predict": 2048}

    def test_missing_context_is_marked_not_available(self, composer):
        response = composer.compose(_request())

        assert f"Please focus your analysis on: {NOT_AVAILABLE}" in response.formatted_prompt
        assert response.context_summary.included_context == []
        assert not response.context_summary.compressed

    def test_braces_in_documents_are_left_alone(self, composer):
        response = composer.compose(_request(resume_text="Templating with {job_text} and {unknown}"))

        assert "Templating with {job_text} and {unknown}" in response.formatted_prompt

    def test_context_is_included_in_priority_order(self, composer, semantic):
        response = composer.compose(_request(semantic_context=semantic, analysis_focus=[" skills ", "ats"]))

        assert response.context_summary.included_context == ["semantic_analysis", "analysis_focus"]
        assert "Semantic Analysis:" in response.formatted_prompt
        assert "Please focus your analysis on: skills, ats" in response.formatted_prompt
        assert response.context_summary.used_tokens <= response.context_summary.available_tokens

    def test_oversized_documents_exclude_context_and_compress(self, composer, semantic):
        response = composer.compose(_request(resume_text=LONG_RESUME, semantic_context=semantic))
        summary = response.context_summary

        assert summary.excluded_context == ["semantic_analysis"]
        assert summary.compressed
        assert summary.compression_technique == "summarize_sections"
        assert len(response.formatted_prompt) < len(LONG_RESUME)

    def test_token_estimate_grows_with_input(self, composer):
        short = composer.compose(_request())
        longer = composer.compose(_request(resume_text=SENIOR_TECH_RESUME * 3))
        longest = composer.compose(_request(resume_text=LONG_RESUME))

        assert short.estimated_token_count <= longer.estimated_token_count <= longest.estimated_token_count

    def test_model_specific_formats(self, composer):
        mistral = composer.compose(_request(target_model_name="mistral"))
        codellama = composer.compose(_request(target_model_name="codellama:7b"))
        chat = composer.compose(_request(target_model_name="neural-chat"))

        assert mistral.formatted_prompt.startswith("<s>[INST] ")
        assert mistral.prompt_strategy.endswith("with Comprehensive Analysis")
        assert codellama.formatted_prompt.startswith("[INST] <<SYS>>")
        assert codellama.prompt_strategy.endswith("with Technical Focus")
        assert chat.formatted_prompt.startswith("<|im_start|>system\n")

    def test_serialized_response_uses_model_config_key(self, composer):
        dumped = composer.compose(_request(target_model_name="llama2")).model_dump(by_alias=True)

        assert dumped["model_config"]["model_name"] == "llama2"
        assert "model_settings" not in dumped
