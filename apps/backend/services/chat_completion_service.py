"""
Chat Completion Service

Talks to the hosted OpenAI-compatible chat completion endpoint. Every call
goes through the retry-wrapped HTTP client; the service only builds the
payload and interprets the response.
"""

from typing import Any, Dict, List, Optional

import aiohttp

from agents.generation.config import AIConfig, get_config
from agents.generation.exceptions import FormatError, MissingConfigError, UpstreamError
from services import http_client
from services.http_client import HTTPResponse
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


class ChatCompletionService:
    """Sends messages, returns the assistant's text"""

    def __init__(self, config: Optional[AIConfig] = None, session: Optional[aiohttp.ClientSession] = None):
        self.config = config or get_config().ai
        self.session = session

    def _headers(self) -> Dict[str, str]:
        if not self.config.endpoint:
            raise MissingConfigError('endpoint')
        if not self.config.api_key:
            raise MissingConfigError('api_key', "API key not configured")
        return {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.config.api_key}',
        }

    async def create(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **extra: Any,
    ) -> HTTPResponse:
        """POST the completion request and hand back the raw response.

        Non-2xx answers are returned as-is; only the HTTP client's retry policy applies.
        """
        headers = self._headers()
        payload = {
            'model': self.config.model,
            'messages': messages,
            'temperature': self.config.temperature if temperature is None else temperature,
            'max_tokens': self.config.max_tokens if max_tokens is None else max_tokens,
            **extra,
        }

        logger.info(f"[CHAT] Requesting completion from {self.config.model} ({len(messages)} messages)")
        return await http_client.request(
            self.config.endpoint,
            method='POST',
            headers=headers,
            body=payload,
            max_retries=self.config.max_retries,
            timeout_ms=self.config.timeout_ms,
            retry_delay_ms=self.config.retry_delay_ms,
            session=self.session,
        )

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **extra: Any,
    ) -> str:
        """Return ``choices[0].message.content`` of the completion.

        Raises:
            MissingConfigError: endpoint or key absent
            NetworkError: transport failure after retries
            UpstreamError: non-2xx answer from the endpoint
            FormatError: response body is not a completion
        """
        response = await self.create(messages, temperature=temperature, max_tokens=max_tokens, **extra)
        logger.info(f"[CHAT] Response status: {response.status}")

        if not response.ok:
            logger.error(f"[CHAT] API error: {response.status} - {response.text[:500]}")
            raise UpstreamError(response.status, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise FormatError("Chat completion response is not JSON", raw_text=response.text, cause=e) from e

        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise FormatError("Chat completion response has no message content", raw_text=response.text, cause=e) from e

        if not isinstance(content, str):
            raise FormatError("Chat completion message content is not text", raw_text=response.text)
        return content
