import json

import pytest

from ats_scanner.utils.config import load_settings, load_weight_tables
from ats_scanner.utils.exceptions import ConfigurationError

_ENV_VARS = (
    "ENABLE_INDUSTRY_ANALYSIS", "ENABLE_ATS_COMPATIBILITY", "PERSIST_RESULTS", "LOAD_REFERENCE_OVERRIDES",
    "FUZZY_THRESHOLD", "SYNONYM_DISCOUNT", "FUZZY_DISCOUNT", "MAX_SKILL_GAPS", "LLM_MODEL", "OLLAMA_BASE_URL",
    "LLM_TEMPERATURE", "LLM_TIMEOUT", "WEIGHT_TABLES_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def empty_env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("")
    return str(path)


def _write_tables(tmp_path, tables):
    path = tmp_path / "weights.json"
    path.write_text(json.dumps(tables))
    return str(path)


class TestLoadSettings:
    """Test cases for environment-driven settings"""

    def test_defaults(self, empty_env_file):
        settings = load_settings(empty_env_file)

        assert settings.features.enable_industry_analysis
        assert settings.features.enable_ats_compatibility
        assert not settings.features.persist_results
        assert settings.matching.fuzzy_threshold == 0.80
        assert settings.llm.model_name == "llama2"
        assert settings.weight_tables is None

    def test_env_file_values(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("ENABLE_ATS_COMPATIBILITY=off\nFUZZY_THRESHOLD=0.9\nLLM_MODEL=mistral\n")
        for name in ("ENABLE_ATS_COMPATIBILITY", "FUZZY_THRESHOLD", "LLM_MODEL"):
            # load_dotenv writes into os.environ; let monkeypatch restore it
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

        settings = load_settings(str(env_file))

        assert not settings.features.enable_ats_compatibility
        assert settings.matching.fuzzy_threshold == 0.9
        assert settings.llm.model_name == "mistral"

    def test_invalid_boolean(self, monkeypatch, empty_env_file):
        monkeypatch.setenv("PERSIST_RESULTS", "sometimes")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(empty_env_file)
        assert exc_info.value.details["config_key"] == "PERSIST_RESULTS"

    def test_invalid_number(self, monkeypatch, empty_env_file):
        monkeypatch.setenv("FUZZY_THRESHOLD", "high")

        with pytest.raises(ConfigurationError):
            load_settings(empty_env_file)

    def test_fuzzy_discount_above_synonym_discount(self, monkeypatch, empty_env_file):
        monkeypatch.setenv("SYNONYM_DISCOUNT", "0.5")
        monkeypatch.setenv("FUZZY_DISCOUNT", "0.7")

        with pytest.raises(ConfigurationError):
            load_settings(empty_env_file)

    def test_weight_tables_file(self, tmp_path, monkeypatch, empty_env_file):
        path = _write_tables(tmp_path, [
            {"weights": {"skills": 0.6, "keywords": 0.4}},
            {"industry": "technology", "weights": {"skills": 0.8, "keywords": 0.2}},
        ])
        monkeypatch.setenv("WEIGHT_TABLES_FILE", path)

        settings = load_settings(empty_env_file)

        assert [t.key for t in settings.weight_tables] == ["default/default", "technology/default"]

    def test_weight_tables_without_global_default(self, tmp_path, monkeypatch, empty_env_file):
        path = _write_tables(tmp_path, [{"industry": "technology", "weights": {"skills": 1.0}}])
        monkeypatch.setenv("WEIGHT_TABLES_FILE", path)

        with pytest.raises(ConfigurationError):
            load_settings(empty_env_file)

    def test_weight_tables_with_misspelled_dimension(self, tmp_path, monkeypatch, empty_env_file):
        path = _write_tables(tmp_path, [{"weights": {"skils": 0.3, "experience": 0.7}}])
        monkeypatch.setenv("WEIGHT_TABLES_FILE", path)

        with pytest.raises(ConfigurationError, match="skils"):
            load_settings(empty_env_file)


class TestLoadWeightTables:
    """Test cases for reading weight tables from disk"""

    def test_weights_must_sum_to_one(self, tmp_path):
        path = _write_tables(tmp_path, [{"weights": {"skills": 0.6, "keywords": 0.6}}])

        with pytest.raises(ConfigurationError) as exc_info:
            load_weight_tables(path)
        assert exc_info.value.details["path"] == path

    def test_file_must_hold_a_list(self, tmp_path):
        path = _write_tables(tmp_path, {"weights": {"skills": 1.0}})

        with pytest.raises(ConfigurationError, match="JSON list"):
            load_weight_tables(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_weight_tables(str(tmp_path / "absent.json"))
