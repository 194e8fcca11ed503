"""
AI Client - chat-completions wrapper for explain/refactor

Provides an async interface to any OpenAI-compatible provider.
The client never reads editor state: callers pass the captured scope
text in, which is what lets a reply be applied to the range that was
selected when the request was made.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from devmind.ai.parser import AIResult, parse_response
from devmind.ai.prompts import SCOPE_LABELS, SYSTEM_PROMPTS, USER_PROMPT_TEMPLATE
from devmind.config import DEFAULT_BASE_URL, DEFAULT_MODEL
from devmind.exceptions import AIError, NetworkError, UpstreamError
from devmind.logging import AILogEntry, ai_logger, now_iso

logger = logging.getLogger(__name__)

MODES = ("explain", "refactor")

# API configuration
DEFAULT_TIMEOUT = 60.0  # seconds
MAX_RETRIES = 2


@dataclass
class AIRequest:
    """A fully built provider request plus the context it was built from."""

    mode: str
    scope: str  # "selection" or "document"
    language: str
    model: str
    messages: list[dict[str, str]] = field(default_factory=list)
    temperature: float = 0.2

    @property
    def system_prompt(self) -> str:
        return self.messages[0]["content"] if self.messages else ""

    @property
    def user_prompt(self) -> str:
        return self.messages[-1]["content"] if self.messages else ""

    def to_payload(self) -> dict[str, Any]:
        """Body for POST {base_url}/chat/completions."""
        return {
            "model": self.model,
            "messages": [dict(m) for m in self.messages],
            "temperature": self.temperature,
        }


class AIClient:
    """
    Client for the explain/refactor AI actions.

    Provides async methods for:
    - Sending a built request and returning the raw payload
    - One-call explain/refactor (build, send, parse)
    - Connectivity checks
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.2,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize AI client.

        Args:
            api_key: Provider API key (sent as a Bearer token)
            base_url: Provider base URL, without /chat/completions
            model: Model identifier
            temperature: Sampling temperature
            timeout: Request timeout in seconds
        """
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._api_key = api_key
        self._base_url = base_url

        # Lazy-initialized client (created in async context)
        self._client: AsyncOpenAI | None = None
        self._client_loop: asyncio.AbstractEventLoop | None = None

        # Track usage
        self.total_tokens_used = 0
        self.request_count = 0

    async def _get_client(self) -> AsyncOpenAI:
        """Get or create AsyncOpenAI client, recreating it if the event loop changed."""
        current_loop = asyncio.get_running_loop()

        # A client bound to a dead loop cannot be closed, only dropped
        if self._client is not None and self._client_loop is not current_loop:
            self._client = None
            self._client_loop = None

        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self.timeout,
                max_retries=MAX_RETRIES,
            )
            self._client_loop = current_loop

        return self._client

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client is not None:
            client = self._client
            self._client = None
            self._client_loop = None
            await client.close()

    def build_request(
        self,
        mode: str,
        scope_text: str,
        language: str,
        scope: str = "document",
    ) -> AIRequest:
        """
        Build the provider request for an AI action.

        Args:
            mode: "explain" or "refactor"
            scope_text: Code to send, verbatim
            language: Language tag of the code
            scope: "selection" or "document", used for the scope label

        Returns:
            AIRequest ready for send()

        Raises:
            ValueError: If mode is unknown
        """
        if mode not in SYSTEM_PROMPTS:
            raise ValueError(f"Unknown AI mode '{mode}', expected one of {', '.join(MODES)}")

        user_prompt = USER_PROMPT_TEMPLATE.format(
            scope_label=SCOPE_LABELS.get(scope, scope),
            language=language,
            code=scope_text,
        )
        return AIRequest(
            mode=mode,
            scope=scope,
            language=language,
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPTS[mode]},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
        )

    async def send(self, request: AIRequest) -> dict[str, Any]:
        """
        Send a built request to the provider.

        Args:
            request: Request from build_request()

        Returns:
            Raw response payload ({"choices": [...], ...})

        Raises:
            NetworkError: If the provider could not be reached
            UpstreamError: If the provider answered with an error status
        """
        request_id = str(uuid.uuid4())
        start_time = time.monotonic()

        log_entry = AILogEntry(
            timestamp=now_iso(),
            request_id=request_id,
            mode=request.mode,
            scope=request.scope,
            language=request.language,
            system_prompt=request.system_prompt[:2000],  # Truncate for log size
            user_prompt=request.user_prompt[:5000],
            temperature=request.temperature,
            model=request.model,
        )

        try:
            client = await self._get_client()
            response = await client.chat.completions.create(**request.to_payload())

        except APIConnectionError as e:
            # Also covers APITimeoutError
            raise self._log_failure(
                log_entry, start_time, NetworkError(f"Could not reach AI provider: {e}")
            )
        except APIStatusError as e:
            message = _provider_message(e)
            raise self._log_failure(
                log_entry,
                start_time,
                UpstreamError(f"AI provider error: {message}", status_code=e.status_code),
            )
        except OpenAIError as e:
            raise self._log_failure(log_entry, start_time, NetworkError(f"AI request failed: {e}"))

        payload = response.model_dump() if hasattr(response, "model_dump") else dict(response)
        self.request_count += 1

        usage = payload.get("usage") or {}
        self.total_tokens_used += usage.get("total_tokens") or 0

        choices = payload.get("choices") or []
        first = choices[0] if choices and isinstance(choices[0], dict) else {}
        content = (first.get("message") or {}).get("content") or ""

        log_entry.response_content = content[:10000]
        log_entry.model = payload.get("model") or request.model
        log_entry.finish_reason = first.get("finish_reason") or ""
        log_entry.prompt_tokens = usage.get("prompt_tokens") or 0
        log_entry.completion_tokens = usage.get("completion_tokens") or 0
        log_entry.total_tokens = usage.get("total_tokens") or 0
        log_entry.latency_ms = int((time.monotonic() - start_time) * 1000)
        ai_logger.info(log_entry.to_json())

        return payload

    def _log_failure(self, log_entry: AILogEntry, start_time: float, error: AIError) -> AIError:
        log_entry.error = error.message[:500]
        log_entry.error_type = type(error).__name__
        log_entry.status_code = getattr(error, "status_code", None)
        log_entry.latency_ms = int((time.monotonic() - start_time) * 1000)
        ai_logger.error(log_entry.to_json())
        logger.warning(error.message)
        return error

    async def ask(
        self,
        mode: str,
        scope_text: str,
        language: str,
        scope: str = "document",
    ) -> AIResult:
        """
        Build, send and parse an explain/refactor request in one call.

        Raises:
            NetworkError, UpstreamError, MalformedResponseError
        """
        request = self.build_request(mode, scope_text, language, scope)
        payload = await self.send(request)
        return parse_response(payload, mode)

    async def ping(self, timeout: float = 10.0) -> tuple[bool, str]:
        """
        Ping the provider to verify connectivity.

        Args:
            timeout: Request timeout in seconds

        Returns:
            Tuple of (success, message)
        """
        try:
            client = await self._get_client()
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": "Hello"}],
                    max_tokens=5,
                    temperature=0,
                ),
                timeout=timeout,
            )
            return True, response.model or self.model

        except TimeoutError:
            return False, f"timeout ({timeout}s)"
        except APIStatusError as e:
            if e.status_code == 401:
                return False, "invalid API key"
            if e.status_code == 429:
                return False, "rate limited"
            return False, f"API error: {_provider_message(e)[:50]}"
        except OpenAIError as e:
            return False, f"connection failed: {str(e)[:50]}"


def _provider_message(error: APIStatusError) -> str:
    """The provider's own error.message if the body carries one."""
    body = error.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and isinstance(inner.get("message"), str):
            return inner["message"]
    return error.message


def ping_sync(api_key: str, base_url: str = DEFAULT_BASE_URL, model: str = DEFAULT_MODEL,
              timeout: float = 10.0) -> tuple[bool, str]:
    """Synchronous wrapper around AIClient.ping() for CLI use."""

    async def _ping() -> tuple[bool, str]:
        client = AIClient(api_key, base_url=base_url, model=model)
        try:
            return await client.ping(timeout=timeout)
        finally:
            await client.close()

    return asyncio.run(_ping())
