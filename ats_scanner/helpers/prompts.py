from typing import Dict

from ats_scanner.models.prompts import ContextStrategy, ModelProfile, PromptTemplate

COMPREHENSIVE_ANALYSIS_PROMPT = """Analyze the following resume against the job description.

RESUME CONTENT:
{resume_text}

JOB DESCRIPTION:
{job_text}

CONTEXT ANALYSIS:
{industry_analysis}
{semantic_analysis}

ANALYSIS FOCUS:
Please focus your analysis on: {analysis_focus}

Please provide a comprehensive analysis covering:
1. Skills alignment and gaps
2. Experience relevance and level assessment
3. Industry-specific insights
4. ATS compatibility considerations
5. Specific recommendations for improvement

For example: "Add 'Kubernetes' to the skills section; the job lists it as a core requirement."

Output format: {output_format}

Provide detailed, actionable insights that will help improve the candidate's resume effectiveness."""

SKILLS_ANALYSIS_PROMPT = """Perform a detailed skills analysis of this resume against the job requirements.

RESUME:
{resume_text}

JOB REQUIREMENTS:
{job_text}

SEMANTIC CONTEXT:
{semantic_analysis}

Focus on:
- Technical skills matching
- Experience level appropriateness
- Missing critical skills
- Skill development recommendations

Provide specific, actionable recommendations in {output_format} format."""

ATS_OPTIMIZATION_PROMPT = """Analyze this resume for ATS (Applicant Tracking System) optimization.

RESUME:
{resume_text}

TARGET JOB:
{job_text}

Provide specific recommendations for:
1. Keyword optimization
2. Format improvements for ATS parsing
3. Section organization
4. Content structure optimization

Example: replace a two-column table of skills with a plain comma-separated list.

Output in {output_format} format with specific, implementable suggestions."""

NOT_AVAILABLE = "Not available."

CHATML_SYSTEM_MESSAGE = "You are an expert resume analyzer and career consultant."
LLAMA2_SYSTEM_MESSAGE = "You are an expert resume analyzer. Provide detailed, actionable analysis."

PROMPT_TEMPLATES: Dict[str, PromptTemplate] = {
    t.template_id: t for t in (
        PromptTemplate(
            template_id="comprehensive_analysis",
            name="Comprehensive Resume Analysis",
            category="analysis",
            template=COMPREHENSIVE_ANALYSIS_PROMPT,
            variables=("resume_text", "job_text", "industry_analysis", "semantic_analysis",
                       "analysis_focus", "output_format"),
            context_window_size=6000,
            temperature=0.1,
            max_tokens=2048,
        ),
        PromptTemplate(
            template_id="skills_analysis",
            name="Skills-Focused Analysis",
            category="analysis",
            template=SKILLS_ANALYSIS_PROMPT,
            variables=("resume_text", "job_text", "semantic_analysis", "output_format"),
            context_window_size=4000,
            temperature=0.05,
            max_tokens=1024,
        ),
        PromptTemplate(
            template_id="ats_optimization",
            name="ATS Optimization Analysis",
            category="optimization",
            template=ATS_OPTIMIZATION_PROMPT,
            variables=("resume_text", "job_text", "output_format"),
            context_window_size=3000,
            temperature=0.05,
            max_tokens=1024,
        ),
    )
}

MODEL_PROFILES: Dict[str, ModelProfile] = {
    p.model_name: p for p in (
        ModelProfile(model_name="llama2", max_context_length=4096, optimal_temperature=0.1,
                     supports_system_message=True, instruction_format="llama2",
                     stop_tokens=("</s>", "[/INST]"), token_factor=1.1),
        ModelProfile(model_name="mistral", max_context_length=8192, optimal_temperature=0.1,
                     instruction_format="mistral", stop_tokens=("</s>",), token_factor=0.9),
        ModelProfile(model_name="codellama", max_context_length=4096, optimal_temperature=0.05,
                     supports_system_message=True, instruction_format="llama2",
                     stop_tokens=("</s>", "[/INST]"), token_factor=1.2),
        ModelProfile(model_name="neural-chat", max_context_length=4096, optimal_temperature=0.1,
                     supports_system_message=True, instruction_format="chatML",
                     stop_tokens=("<|im_end|>",)),
        ModelProfile(model_name="default", max_context_length=2048, optimal_temperature=0.1,
                     instruction_format="alpaca", stop_tokens=("###",)),
    )
}

# substring -> model profile, checked in order
MODEL_FAMILIES = (
    ("code", "codellama"),
    ("starcoder", "codellama"),
    ("llama", "llama2"),
    ("mistral", "mistral"),
    ("neural", "neural-chat"),
    ("chat", "neural-chat"),
)

CONTEXT_STRATEGIES: Dict[str, ContextStrategy] = {
    s.strategy_id: s for s in (
        ContextStrategy(strategy_id="comprehensive", name="Comprehensive Analysis", max_context_ratio=0.8,
                        prioritization=("industry_analysis", "semantic_analysis", "analysis_focus"),
                        compression_technique="summarize_sections"),
        ContextStrategy(strategy_id="technical_focused", name="Technical Focus", max_context_ratio=0.7,
                        prioritization=("semantic_analysis", "analysis_focus", "industry_analysis"),
                        compression_technique="remove_examples"),
        ContextStrategy(strategy_id="analytical", name="Analytical Deep Dive", max_context_ratio=0.85,
                        prioritization=("industry_analysis", "semantic_analysis", "analysis_focus"),
                        compression_technique="summarize_sections"),
        ContextStrategy(strategy_id="default", name="Balanced Approach", max_context_ratio=0.75,
                        prioritization=("analysis_focus", "semantic_analysis", "industry_analysis"),
                        compression_technique="truncate_context"),
    )
}

LARGE_CONTEXT_THRESHOLD = 8000
