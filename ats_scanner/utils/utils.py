import json
from typing import Any, Dict, Optional

import requests

from ats_scanner.models.settings import LLMSettings
from ats_scanner.utils.exceptions import ExternalServiceError
from ats_scanner.utils.logging_config import get_logger

logger = get_logger(__name__)


def ollama_generate(prompt: str, settings: LLMSettings, options: Optional[Dict[str, Any]] = None,
                    model: str = None) -> str:
    """Single non-streaming completion from Ollama's /api/generate"""
    model = model or settings.model_name
    url = f"{settings.base_url.rstrip('/')}/api/generate"
    generation_options = {"temperature": settings.temperature}
    generation_options.update(options or {})

    logger.info(f"Calling Ollama model {model} ({len(prompt)} prompt chars)")
    try:
        resp = requests.post(
            url,
            json={
                "model": model,
                "prompt": prompt,
                "options": generation_options,
                "stream": False,
            },
            timeout=settings.timeout,
        )
        resp.raise_for_status()
        return resp.json().get("response", "") or ""
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise ExternalServiceError(
            f"Ollama returned an error for model {model}: {e}",
            service_name="ollama", status_code=status, cause=e,
        ).log(logger, "ollama_generate") from e
    except (requests.RequestException, ValueError) as e:
        raise ExternalServiceError(
            f"Ollama request failed: {e}", service_name="ollama", cause=e,
        ).log(logger, "ollama_generate") from e


def safe_json(s: str, fallback: Optional[dict] = None):
    """First {...} block in a model response, or ``fallback`` if there is none"""
    start = s.find("{")
    end = s.rfind("}")
    if start < 0 or end < start:
        return fallback
    try:
        return json.loads(s[start:end + 1])
    except json.JSONDecodeError:
        logger.debug("Model response contained no parseable JSON object")
        return fallback
