import pytest
import requests
from unittest.mock import MagicMock, patch

from ats_scanner.models.settings import LLMSettings
from ats_scanner.utils.exceptions import ExternalServiceError
from ats_scanner.utils.utils import ollama_generate, safe_json


def _response(payload=None, status_error=None):
    resp = MagicMock()
    resp.json.return_value = payload or {}
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    return resp


class TestOllamaGenerate:
    """Test cases for the Ollama client"""

    @patch('ats_scanner.utils.utils.requests.post')
    def test_posts_non_streaming_request(self, mock_post):
        mock_post.return_value = _response({"response": "Looks good"})
        settings = LLMSettings(base_url="http://ollama:11434/", timeout=30)

        text = ollama_generate("Analyze", settings, {"num_ctx": 4096}, model="mistral")

        assert text == "Looks good"
        url = mock_post.call_args.args[0]
        payload = mock_post.call_args.kwargs["json"]
        assert url == "http://ollama:11434/api/generate"
        assert payload["model"] == "mistral"
        assert payload["stream"] is False
        assert payload["options"] == {"temperature": 0.1, "num_ctx": 4096}
        assert mock_post.call_args.kwargs["timeout"] == 30

    @patch('ats_scanner.utils.utils.requests.post')
    def test_http_error(self, mock_post):
        error_response = MagicMock(status_code=503)
        mock_post.return_value = _response(status_error=requests.HTTPError("unavailable", response=error_response))

        with pytest.raises(ExternalServiceError) as exc_info:
            ollama_generate("Analyze", LLMSettings())
        assert exc_info.value.details == {"service_name": "ollama", "status_code": 503}

    @patch('ats_scanner.utils.utils.requests.post')
    def test_connection_error(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ExternalServiceError, match="refused"):
            ollama_generate("Analyze", LLMSettings())


class TestSafeJson:
    """Test cases for lenient JSON extraction"""

    def test_extracts_embedded_object(self):
        assert safe_json('Result: {"score": 80, "notes": ["ok"]} done') == {"score": 80, "notes": ["ok"]}

    def test_fallback(self):
        assert safe_json("no json here") is None
        assert safe_json("{broken", fallback={}) == {}
        assert safe_json("{not: valid}", fallback={"raw": True}) == {"raw": True}
