"""Tests for the Gemini REST client error mapping and retries."""
import httpx
import pytest

from fundquery.services import gemini_client
from fundquery.services.gemini_client import GeminiClient, get_gemini_client
from fundquery.services.gemini_exceptions import (
    GeminiAPIError,
    GeminiConfigurationError,
    GeminiRateLimitError,
    GeminiTimeoutError,
)


def _ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


@pytest.fixture
def mock_transport(monkeypatch):
    """Route the client's httpx calls through a scripted handler."""
    real_client = httpx.Client
    calls = []

    def install(*responses):
        queue = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            item = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(item, Exception):
                raise item
            # Fresh copy so a scripted response can be served more than once
            return httpx.Response(item.status_code, headers=item.headers, content=item.content)

        transport = httpx.MockTransport(handler)
        monkeypatch.setattr(
            gemini_client.httpx,
            "Client",
            lambda **kwargs: real_client(transport=transport, **kwargs),
        )
        return calls

    return install


def _client(max_retries: int = 1) -> GeminiClient:
    # Zero waits keep retry tests fast
    return GeminiClient(api_key="test-key", max_retries=max_retries, initial_wait=0, max_wait=0)


class TestGeminiClient:
    def test_returns_text(self, mock_transport):
        calls = mock_transport(_ok("分析結果"))
        assert _client().generate_text("prompt") == "分析結果"

        request = calls[0]
        assert request.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"
        assert request.url.params["key"] == "test-key"

    def test_missing_key(self):
        with pytest.raises(GeminiConfigurationError):
            GeminiClient(api_key="  ").generate_text("prompt")

    def test_rate_limit(self, mock_transport):
        mock_transport(httpx.Response(429, headers={"Retry-After": "7"}))
        with pytest.raises(GeminiRateLimitError) as excinfo:
            _client().generate_text("prompt")
        assert excinfo.value.retry_after == 7
        assert "429" in str(excinfo.value)

    def test_client_error_is_not_retried(self, mock_transport):
        calls = mock_transport(httpx.Response(400, json={"error": {"message": "API key not valid"}}))
        with pytest.raises(GeminiAPIError) as excinfo:
            _client(max_retries=3).generate_text("prompt")
        assert excinfo.value.status_code == 400
        assert "API key not valid" in str(excinfo.value)
        assert len(calls) == 1

    def test_rate_limit_is_retried(self, mock_transport):
        calls = mock_transport(httpx.Response(429), _ok("第二次成功"))
        assert _client(max_retries=3).generate_text("prompt") == "第二次成功"
        assert len(calls) == 2

    def test_server_error_exhausts_retries(self, mock_transport):
        calls = mock_transport(httpx.Response(503, text="unavailable"))
        with pytest.raises(GeminiAPIError):
            _client(max_retries=2).generate_text("prompt")
        assert len(calls) == 2

    def test_timeout(self, mock_transport):
        request = httpx.Request("POST", "https://example.invalid")
        mock_transport(httpx.ReadTimeout("timed out", request=request))
        with pytest.raises(GeminiTimeoutError):
            _client().generate_text("prompt")

    def test_malformed_candidate_content(self, mock_transport):
        mock_transport(httpx.Response(200, json={"candidates": [{"content": "oops"}]}))
        with pytest.raises(GeminiAPIError):
            _client().generate_text("prompt")

    def test_placeholder_key_is_not_configured(self, mock_transport):
        calls = mock_transport(_ok("不應呼叫"))
        client = GeminiClient(api_key="your_gemini_api_key_here")
        assert not client.configured
        with pytest.raises(GeminiConfigurationError):
            client.generate_text("prompt")
        assert calls == []

    def test_empty_candidates(self, mock_transport):
        mock_transport(httpx.Response(200, json={"candidates": []}))
        with pytest.raises(GeminiAPIError):
            _client().generate_text("prompt")

    def test_factory_uses_settings(self, monkeypatch):
        settings = gemini_client.get_settings()
        monkeypatch.setattr(settings, "gemini_api_key", "configured-key")
        client = get_gemini_client()
        assert client.api_key == "configured-key"
        assert client.model_name == settings.gemini_model
        assert client.max_retries == settings.gemini_max_retries
        assert get_gemini_client(api_key="override").api_key == "override"


class TestSdkPath:
    """google-generativeai path, with the model object stubbed."""

    class FakeModel:
        def __init__(self, outcome):
            self.outcome = outcome

        def generate_content(self, prompt):
            if isinstance(self.outcome, Exception):
                raise self.outcome
            return type("Response", (), {"text": self.outcome})()

    def _sdk_client(self, outcome) -> GeminiClient:
        client = GeminiClient(api_key="test-key", max_retries=1, initial_wait=0, max_wait=0, use_sdk=True)
        client.model = self.FakeModel(outcome)
        return client

    def test_sdk_text(self):
        assert self._sdk_client("SDK 回應").generate_text("prompt") == "SDK 回應"

    def test_sdk_rate_limit(self):
        error = gemini_client.google_exceptions.ResourceExhausted("quota exceeded")
        with pytest.raises(GeminiRateLimitError):
            self._sdk_client(error).generate_text("prompt")

    def test_sdk_api_error(self):
        error = gemini_client.google_exceptions.InvalidArgument("bad request")
        with pytest.raises(GeminiAPIError) as excinfo:
            self._sdk_client(error).generate_text("prompt")
        assert excinfo.value.status_code == 400

    def test_sdk_empty_text(self):
        with pytest.raises(GeminiAPIError):
            self._sdk_client("").generate_text("prompt")
