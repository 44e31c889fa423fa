"""OpenRouter client for generating short store recommendations."""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx

from app.config import get_settings
from app.services.openrouter_exceptions import (
    OpenRouterAPIError,
    OpenRouterClientError,
    OpenRouterRateLimitError,
    OpenRouterTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT = 15.0  # seconds
DEFAULT_TEMPERATURE = 0.25
DEFAULT_MAX_TOKENS = 120

SYSTEM_PROMPT = "Respond with a single plain-text recommendation. No JSON."


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation attempt: text on success, a reason on failure."""

    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, reason: str) -> "GenerationResult":
        return cls(error=reason)


class TextGenClient(Protocol):
    """Anything that can turn a structured prompt into recommendation text."""

    def generate(self, prompt: Dict[str, Any]) -> GenerationResult:
        ...


class OpenRouterClient:
    """Client for the OpenRouter chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        request_timeout: float = DEFAULT_TIMEOUT,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        site_url: Optional[str] = None,
        app_title: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize OpenRouter client.

        Args:
            api_key: OpenRouter API key
            model_name: Model routed by OpenRouter
            base_url: API root, without the trailing ``/chat/completions``
            request_timeout: Seconds before a request is abandoned
            temperature: Sampling temperature
            max_tokens: Response budget in tokens
            site_url: Optional HTTP-Referer sent for OpenRouter attribution
            app_title: Optional X-Title sent for OpenRouter attribution
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.site_url = site_url
        self.app_title = app_title
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.site_url:
            headers["HTTP-Referer"] = self.site_url
        if self.app_title:
            headers["X-Title"] = self.app_title
        return headers

    def _build_messages(self, prompt: Dict[str, Any]) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(prompt, default=str)},
        ]

    def _read_body(self, response: httpx.Response, deadline: float) -> bytes:
        """Read a streamed body, giving up once the overall deadline passes."""
        chunks: List[bytes] = []
        for chunk in response.iter_bytes():
            if time.monotonic() > deadline:
                raise OpenRouterTimeoutError(
                    f"OpenRouter request timed out after {self.request_timeout}s"
                )
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _extract_text(data: Any) -> str:
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list):
            return ""
        for choice in choices:
            message = choice.get("message") if isinstance(choice, dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str) and content.strip():
                return content.strip()
        return ""

    def _http_generate_content(self, prompt: Dict[str, Any]) -> str:
        """
        Make a single chat-completions call.

        ``request_timeout`` bounds the whole call, body included, not only
        each individual socket operation.

        Raises:
            OpenRouterRateLimitError: When API returns 429 (rate limit exceeded)
            OpenRouterAPIError: When API returns other 4xx/5xx errors or no text
            OpenRouterTimeoutError: When request times out
        """
        payload = {
            "model": self.model_name,
            "messages": self._build_messages(prompt),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        url = f"{self.base_url}/chat/completions"
        deadline = time.monotonic() + self.request_timeout

        try:
            with httpx.Client(timeout=self.request_timeout, transport=self.transport) as client:
                with client.stream("POST", url, headers=self._headers(), json=payload) as response:
                    body = self._read_body(response, deadline)

                if response.status_code == 429:
                    retry_after = response.headers.get("Retry-After")
                    retry_seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
                    raise OpenRouterRateLimitError(
                        "OpenRouter rate limit exceeded.", retry_after=retry_seconds
                    )

                if response.status_code >= 400:
                    raise OpenRouterAPIError(
                        f"OpenRouter API error: {response.status_code}",
                        status_code=response.status_code,
                        response_body=body.decode("utf-8", errors="replace")[:500],
                    )

                data = json.loads(body)

        except httpx.TimeoutException as timeout_exc:
            raise OpenRouterTimeoutError(
                f"OpenRouter request timed out after {self.request_timeout}s"
            ) from timeout_exc

        except OpenRouterClientError:
            raise

        except (httpx.HTTPError, ValueError) as transport_exc:
            # Connection failures and undecodable bodies
            raise OpenRouterAPIError(
                f"Unexpected error during OpenRouter call: {transport_exc}",
                status_code=500,
            ) from transport_exc

        text_response = self._extract_text(data)
        if not text_response:
            raise OpenRouterAPIError(
                "OpenRouter returned no text content",
                status_code=500,
                response_body=str(data)[:500],
            )

        return text_response

    def generate(self, prompt: Dict[str, Any]) -> GenerationResult:
        """
        Generate recommendation text for a structured prompt.

        Never raises: every transport failure, error status, timeout or empty
        completion comes back as a failure result. No retries are attempted.
        """
        try:
            return GenerationResult.success(self._http_generate_content(prompt))
        except OpenRouterClientError as exc:
            logger.warning("OpenRouter generation failed: %s", exc)
            return GenerationResult.failure(str(exc))


def get_openrouter_client() -> Optional[OpenRouterClient]:
    """Get an OpenRouter client from settings, or None when no API key is configured."""
    settings = get_settings()
    api_key = (settings.openrouter_api_key or "").strip()
    if not api_key:
        return None

    return OpenRouterClient(
        api_key=api_key,
        model_name=settings.openrouter_model,
        base_url=settings.openrouter_base_url,
        request_timeout=settings.generation_timeout,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
        site_url=settings.openrouter_site_url,
        app_title=settings.openrouter_app_title,
    )
