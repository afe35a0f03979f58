import asyncio

from fastapi import APIRouter, Request

from ats_scanner.models.prompts import PromptRequest, PromptResponse
from ats_scanner.models.schemas import PromptGenerationResponse
from ats_scanner.utils.logging_config import get_logger
from ats_scanner.utils.utils import ollama_generate, safe_json

logger = get_logger(__name__)

router = APIRouter()


@router.get("/templates")
async def list_templates(request: Request):
    """Prompt types and model profiles the composer knows about"""
    composer = request.app.state.composer
    return {
        "prompt_types": sorted(composer.templates),
        "models": sorted(composer.models),
        "strategies": sorted(composer.strategies),
    }


@router.post("/compose", response_model=PromptResponse)
async def compose_prompt(body: PromptRequest, request: Request):
    return request.app.state.composer.compose(body)


@router.post("/generate", response_model=PromptGenerationResponse)
async def generate(body: PromptRequest, request: Request):
    """Compose a prompt and send it to the configured Ollama model"""
    llm = request.app.state.settings.llm
    prompt = request.app.state.composer.compose(body)
    model = body.target_model_name if body.target_model_name != "default" else llm.model_name

    text = await asyncio.to_thread(
        ollama_generate, prompt.formatted_prompt, llm, prompt.generation_options, model
    )
    logger.info(f"Generated {len(text)} chars with {model}")
    return PromptGenerationResponse(prompt=prompt, response=text, parsed=safe_json(text))
