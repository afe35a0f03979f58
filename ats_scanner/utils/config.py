import json
import os
from typing import List, Optional

from dotenv import load_dotenv

from ats_scanner.models.reference import WeightTable
from ats_scanner.models.settings import AnalysisSettings, FeatureToggles, LLMSettings, MatchingSettings
from ats_scanner.utils.exceptions import ConfigurationError, ExceptionContext
from ats_scanner.utils.logging_config import get_logger

logger = get_logger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false)", config_key=name, config_value=raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number", config_key=name, config_value=raw, cause=e) from e


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer", config_key=name, config_value=raw, cause=e) from e


def load_weight_tables(path: str) -> List[WeightTable]:
    """Read a JSON list of ``{"industry", "role_level", "weights"}`` objects"""
    with ExceptionContext("load_weight_tables", logger, wrap_as=ConfigurationError, config_key="WEIGHT_TABLES_FILE",
                          path=path):
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError("weight tables file must contain a JSON list")
        tables = [WeightTable(**entry) for entry in raw]
    logger.info(f"Loaded {len(tables)} weight tables from {path}")
    return tables


def load_settings(env_file: Optional[str] = None) -> AnalysisSettings:
    """
    Build the process-start settings from the environment (and ``.env``).

    Raises ConfigurationError for values that cannot be parsed or that fail
    validation, e.g. a weight table that does not sum to 1.
    """
    load_dotenv(env_file)

    weight_tables_file = os.getenv("WEIGHT_TABLES_FILE")
    weight_tables = load_weight_tables(weight_tables_file) if weight_tables_file else None

    with ExceptionContext("load_settings", logger, wrap_as=ConfigurationError):
        settings = AnalysisSettings(
            features=FeatureToggles(
                enable_industry_analysis=_env_bool("ENABLE_INDUSTRY_ANALYSIS", True),
                enable_ats_compatibility=_env_bool("ENABLE_ATS_COMPATIBILITY", True),
                persist_results=_env_bool("PERSIST_RESULTS", False),
                load_reference_overrides=_env_bool("LOAD_REFERENCE_OVERRIDES", False),
            ),
            matching=MatchingSettings(
                fuzzy_threshold=_env_float("FUZZY_THRESHOLD", 0.80),
                synonym_discount=_env_float("SYNONYM_DISCOUNT", 0.85),
                fuzzy_discount=_env_float("FUZZY_DISCOUNT", 0.60),
                max_skill_gaps=_env_int("MAX_SKILL_GAPS", 10),
            ),
            llm=LLMSettings(
                model_name=os.getenv("LLM_MODEL", "llama2"),
                base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
                temperature=_env_float("LLM_TEMPERATURE", 0.1),
                timeout=_env_int("LLM_TIMEOUT", 120),
            ),
            weight_tables=weight_tables,
        )

    logger.info(
        f"Settings loaded: industry_analysis={settings.features.enable_industry_analysis}, "
        f"ats_compatibility={settings.features.enable_ats_compatibility}, "
        f"persist_results={settings.features.persist_results}, llm={settings.llm.model_name}"
    )
    return settings
