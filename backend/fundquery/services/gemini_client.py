"""Gemini AI client for generating narrative fund commentary."""
import logging
from typing import Any, Dict, Optional

import google.generativeai as genai
import httpx
from google.api_core import exceptions as google_exceptions
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

from fundquery.config import get_settings, is_usable_api_key
from fundquery.services.gemini_exceptions import (
    GeminiAPIError,
    GeminiConfigurationError,
    GeminiRateLimitError,
    GeminiTimeoutError,
)

logger = logging.getLogger(__name__)

# Retry configuration constants
DEFAULT_MAX_RETRIES = 2
DEFAULT_INITIAL_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 60  # seconds
DEFAULT_EXPONENTIAL_MULTIPLIER = 2
DEFAULT_REQUEST_TIMEOUT = 60  # seconds

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
MISSING_KEY_MESSAGE = "請先設定 GEMINI_API_KEY 才能使用 AI 功能。"
RATE_LIMIT_MESSAGE = "AI 目前繁忙中 (429)，請稍後再試。"
EMPTY_RESPONSE_MESSAGE = "無法取得回應"


def _should_retry(exc: BaseException) -> bool:
    if isinstance(exc, (GeminiRateLimitError, GeminiTimeoutError)):
        return True
    if isinstance(exc, GeminiAPIError) and exc.status_code and exc.status_code >= 500:
        return True
    return False


class GeminiClient:
    """Client for interacting with Gemini AI."""

    def __init__(
        self,
        api_key: str = "",
        model_name: str = "gemini-2.5-flash",
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_wait: int = DEFAULT_INITIAL_WAIT,
        max_wait: int = DEFAULT_MAX_WAIT,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
        use_sdk: bool = False,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key; calls fail with GeminiConfigurationError when empty
            model_name: Name of the Gemini model to use
            max_retries: Maximum number of attempts for rate-limited or timed out requests
            initial_wait: Initial wait time in seconds before first retry
            max_wait: Maximum wait time in seconds between retries
            request_timeout: Seconds allowed for one API call
            use_sdk: Call through google-generativeai instead of the REST endpoint
        """
        self.api_key = (api_key or "").strip()
        self.model_name = model_name
        self.request_timeout = request_timeout
        self.generation_config = {"maxOutputTokens": 2048, "temperature": 0.5}

        # Retry configuration
        self.max_retries = max_retries
        self.initial_wait = initial_wait
        self.max_wait = max_wait

        self.use_sdk = use_sdk
        self.model = None
        if use_sdk and self.configured:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(
                model_name,
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=self.generation_config["maxOutputTokens"],
                    temperature=self.generation_config["temperature"],
                ),
            )

    @property
    def configured(self) -> bool:
        return is_usable_api_key(self.api_key)

    def _resolve_model_path(self) -> str:
        name = self.model_name
        return name if name.startswith("models/") else f"models/{name}"

    def _http_generate_content(self, prompt: str) -> str:
        """
        Call the generateContent REST endpoint once.

        Raises:
            GeminiRateLimitError: When API returns 429 (rate limit exceeded)
            GeminiAPIError: When API returns other 4xx/5xx errors or no text
            GeminiTimeoutError: When request times out
        """
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.generation_config,
        }
        url = f"{GEMINI_BASE_URL}/{self._resolve_model_path()}:generateContent"

        try:
            with httpx.Client(timeout=self.request_timeout) as client:
                response = client.post(url, params={"key": self.api_key}, json=payload)

                if response.status_code == 429:
                    retry_after = response.headers.get("Retry-After")
                    retry_seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
                    raise GeminiRateLimitError(RATE_LIMIT_MESSAGE, retry_after=retry_seconds)

                if response.status_code >= 400:
                    raise GeminiAPIError(
                        f"API Error: {response.status_code} {_error_message(response)}".strip(),
                        status_code=response.status_code,
                        response_body=response.text[:500],
                    )

                data = response.json()

        except httpx.TimeoutException as timeout_exc:
            raise GeminiTimeoutError(
                f"Gemini API request timed out after {self.request_timeout}s"
            ) from timeout_exc

        except (GeminiRateLimitError, GeminiAPIError):
            raise

        except (httpx.HTTPError, ValueError) as unexpected_exc:
            # Transport failures and undecodable bodies
            raise GeminiAPIError(
                f"Unexpected error during Gemini API call: {unexpected_exc}",
                status_code=500,
            ) from unexpected_exc

        return _extract_text(data)

    def _sdk_generate_content(self, prompt: str) -> str:
        """Call Gemini through google-generativeai, mapping its errors to ours."""
        # No per-call request_options: some SDK/proto combinations reject the field
        try:
            response = self.model.generate_content(prompt)
            text = response.text
        except google_exceptions.ResourceExhausted as exc:
            raise GeminiRateLimitError(RATE_LIMIT_MESSAGE) from exc
        except google_exceptions.DeadlineExceeded as exc:
            raise GeminiTimeoutError(
                f"Gemini API request timed out after {self.request_timeout}s"
            ) from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise GeminiAPIError(
                f"API Error: {exc.code} {exc.message}",
                status_code=int(exc.code or 500),
            ) from exc
        except ValueError as exc:
            # response.text raises when the candidate was blocked or empty
            raise GeminiAPIError(EMPTY_RESPONSE_MESSAGE, status_code=500, response_body=str(exc)) from exc

        if not text:
            raise GeminiAPIError(EMPTY_RESPONSE_MESSAGE, status_code=500)
        return text

    def generate_text(self, prompt: str) -> str:
        """
        Generate text for ``prompt`` with exponential backoff.

        Retries on rate limits, timeouts and 5xx responses; everything else
        surfaces immediately.

        Raises:
            GeminiConfigurationError: When no API key is configured
            GeminiRateLimitError, GeminiAPIError, GeminiTimeoutError: After retries are exhausted
        """
        if not self.configured:
            raise GeminiConfigurationError(MISSING_KEY_MESSAGE)

        call = self._sdk_generate_content if self.model is not None else self._http_generate_content

        @retry(
            retry=retry_if_exception(_should_retry),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(
                multiplier=DEFAULT_EXPONENTIAL_MULTIPLIER,
                min=self.initial_wait,
                max=self.max_wait
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True  # Re-raise the exception after all retries exhausted
        )
        def _retry_wrapper() -> str:
            return call(prompt)

        return _retry_wrapper()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        error = body.get("error") or {}
        if isinstance(error, dict):
            return error.get("message") or ""
    return ""


def _extract_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") if isinstance(data, dict) else None
    for candidate in candidates or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            continue
        texts = [part.get("text") for part in parts if isinstance(part, dict) and part.get("text")]
        if texts:
            return "".join(texts)

    raise GeminiAPIError(
        EMPTY_RESPONSE_MESSAGE,
        status_code=500,
        response_body=str(data)[:500],
    )


def get_gemini_client(api_key: Optional[str] = None) -> GeminiClient:
    """Get Gemini client instance with settings from config."""
    settings = get_settings()

    return GeminiClient(
        api_key=api_key if api_key is not None else settings.gemini_api_key,
        model_name=settings.gemini_model,
        max_retries=settings.gemini_max_retries,
        initial_wait=settings.gemini_initial_wait,
        max_wait=settings.gemini_max_wait,
        request_timeout=settings.gemini_request_timeout,
        use_sdk=settings.gemini_use_sdk,
    )
