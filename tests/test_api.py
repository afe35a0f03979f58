import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from ats_scanner.models.settings import AnalysisSettings, FeatureToggles
from ats_scanner.utils.exceptions import ExternalServiceError
from samples import SENIOR_TECH_JOB, SENIOR_TECH_RESUME


@pytest.fixture
def client():
    from ats_scanner.main import app

    with TestClient(app) as test_client:
        yield test_client


class TestServiceEndpoints:
    """Test cases for the root and health endpoints"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "X-Request-ID" in response.headers
        assert "X-Processing-Time" in response.headers

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestAnalysisEndpoints:
    """Test cases for the analysis router"""

    def test_comprehensive_analysis(self, client):
        response = client.post("/api/analysis/comprehensive", json={
            "resume_text": SENIOR_TECH_RESUME,
            "job_text": SENIOR_TECH_JOB,
            "target_industry": "technology",
            "target_role_level": "senior",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["analysis_id"] is None
        assert 0 <= data["result"]["overall_score"] <= 100
        assert data["result"]["scoring_breakdown"]["weight_table_key"] == "technology/senior"

    def test_empty_resume_is_unprocessable(self, client):
        """Structural parsing errors map to 422 with a machine-stable kind"""
        response = client.post("/api/analysis/comprehensive", json={"resume_text": "", "job_text": SENIOR_TECH_JOB})

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert data["error"]["error_kind"] == "document_parsing"
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_nothing_to_compare_is_bad_request(self, client):
        response = client.post("/api/analysis/semantic", json={"resume_text": "the and of", "job_text": "Python"})

        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "ANALYSIS_ERROR"

    @patch('ats_scanner.routers.analysis.save_analysis_record')
    def test_results_are_persisted_when_enabled(self, mock_save, client):
        mock_save.return_value = "record-1"
        client.app.state.settings = AnalysisSettings(features=FeatureToggles(persist_results=True))

        response = client.post("/api/analysis/comprehensive", json={
            "resume_text": SENIOR_TECH_RESUME, "job_text": SENIOR_TECH_JOB,
        })

        assert response.status_code == 200
        assert response.json()["analysis_id"] == "record-1"
        record = mock_save.call_args.args[0]
        assert record.overall_score == response.json()["result"]["overall_score"]

    @patch('ats_scanner.routers.analysis.get_analysis_record', new_callable=AsyncMock)
    def test_record_not_found(self, mock_get, client):
        mock_get.return_value = None

        response = client.get("/api/analysis/records/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Analysis record not found"

    def test_industry_and_ats_endpoints(self, client):
        industry = client.post("/api/analysis/industry", json={"resume_text": SENIOR_TECH_RESUME})
        ats = client.post("/api/analysis/ats", json={"resume_text": SENIOR_TECH_RESUME, "target_keywords": ["Python"]})

        assert industry.status_code == 200
        assert industry.json()["detected_industry"] == "technology"
        assert ats.status_code == 200
        assert ats.json()["keyword_extraction"]["keywords_found"] == ["Python"]


class TestReferenceEndpoints:
    """Test cases for the reference data router"""

    def test_lists(self, client):
        industries = client.get("/api/reference/industries").json()
        systems = client.get("/api/reference/ats-systems").json()
        tables = client.get("/api/reference/weight-tables").json()

        assert [i["industry_id"] for i in industries][0] == "technology"
        assert {s["system_id"] for s in systems} == {"greenhouse", "lever", "workday", "taleo", "icims"}
        assert any(t["industry"] is None and t["role_level"] is None for t in tables)


class TestPromptEndpoints:
    """Test cases for prompt composition and generation"""

    def test_templates(self, client):
        data = client.get("/api/prompts/templates").json()

        assert data["prompt_types"] == ["ats_optimization", "comprehensive_analysis", "skills_analysis"]
        assert "default" in data["models"]

    def test_compose_serializes_model_config(self, client):
        response = client.post("/api/prompts/compose", json={
            "prompt_type": "ats_optimization", "resume_text": SENIOR_TECH_RESUME, "job_text": SENIOR_TECH_JOB,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["model_config"]["model_name"] == "default"
        assert data["formatted_prompt"].startswith("### Instruction:")

    def test_unknown_prompt_type(self, client):
        response = client.post("/api/prompts/compose", json={
            "prompt_type": "cover_letter", "resume_text": "x", "job_text": "y",
        })

        assert response.status_code == 400
        assert response.json()["error"]["error_kind"] == "configuration"

    @patch('ats_scanner.routers.prompts.ollama_generate')
    def test_generate(self, mock_generate, client):
        mock_generate.return_value = 'Summary follows. {"score": 82}'

        response = client.post("/api/prompts/generate", json={
            "prompt_type": "skills_analysis", "target_model_name": "mistral",
            "resume_text": SENIOR_TECH_RESUME, "job_text": SENIOR_TECH_JOB,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["parsed"] == {"score": 82}
        assert mock_generate.call_args.args[3] == "mistral"

    @patch('ats_scanner.routers.prompts.ollama_generate')
    def test_generate_service_failure(self, mock_generate, client):
        mock_generate.side_effect = ExternalServiceError("Ollama request failed", service_name="ollama")

        response = client.post("/api/prompts/generate", json={
            "prompt_type": "skills_analysis", "resume_text": SENIOR_TECH_RESUME, "job_text": SENIOR_TECH_JOB,
        })

        assert response.status_code == 502
        assert response.json()["error"]["details"]["service_name"] == "ollama"
