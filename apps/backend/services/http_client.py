"""
Retry-wrapped HTTP client for the flaky upstream calls.

Transport failures and gateway timeouts (504) are retried with a linear
backoff; any other response, error statuses included, goes back to the
caller untouched. A single timeout covers the whole call, retries and
backoff sleeps included.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import aiohttp

from agents import config as global_config
from agents.generation.exceptions import GenerationError, NetworkError, get_retry_delay, is_retryable
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

GATEWAY_TIMEOUT = 504


@dataclass
class HTTPResponse:
    """Fully-read response returned by request()"""
    status: int
    text: str
    url: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.text)


def _describe(error: Optional[BaseException]) -> str:
    if error is None:
        return "unknown error"
    if isinstance(error, GenerationError):
        return error.message
    return str(error) or type(error).__name__


async def _attempt_loop(
    session: aiohttp.ClientSession,
    url: str,
    method: str,
    headers: Optional[Dict[str, str]],
    body: Any,
    max_retries: int,
    retry_delay_ms: float,
) -> HTTPResponse:
    kwargs: Dict[str, Any] = {'headers': headers or {}}
    if isinstance(body, (dict, list)):
        kwargs['json'] = body
    elif body is not None:
        kwargs['data'] = body

    last_error: Optional[BaseException] = None
    for attempt in range(1, max_retries + 1):
        try:
            async with session.request(method, url, **kwargs) as response:
                text = await response.text(errors="replace")
                if response.status == GATEWAY_TIMEOUT:
                    raise NetworkError("Gateway Timeout")
                return HTTPResponse(
                    status=response.status,
                    text=text,
                    url=url,
                    headers=dict(response.headers),
                )
        except Exception as e:
            if not is_retryable(e):
                raise
            last_error = e
            logger.warning(f"API request attempt {attempt} failed: {_describe(e)}")
            if attempt < max_retries:
                await asyncio.sleep(get_retry_delay(attempt, retry_delay_ms) / 1000)

    raise NetworkError(
        f"Failed after {max_retries} attempts. Last error: {_describe(last_error)}",
        cause=last_error if isinstance(last_error, Exception) else None,
    )


async def request(
    url: str,
    method: str = 'GET',
    headers: Optional[Dict[str, str]] = None,
    body: Any = None,
    max_retries: int = global_config.HTTP_MAX_RETRIES,
    timeout_ms: float = global_config.HTTP_TIMEOUT_MS,
    retry_delay_ms: float = global_config.HTTP_RETRY_DELAY_MS,
    session: Optional[aiohttp.ClientSession] = None,
) -> HTTPResponse:
    """Issue a request, retrying transport failures and gateway timeouts.

    Args:
        url: Target URL
        method: HTTP method
        headers: Request headers
        body: dict/list sent as JSON, anything else sent as the raw body
        max_retries: Total number of attempts (>= 1)
        timeout_ms: Budget for the whole call including retries (> 0)
        retry_delay_ms: Base delay; attempt n waits n times this value
        session: Optional aiohttp session to reuse

    Returns:
        The first response that is not a gateway timeout

    Raises:
        ValueError: Invalid retry/timeout arguments
        NetworkError: Attempts exhausted or overall timeout reached
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")
    if timeout_ms <= 0:
        raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")

    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession()

    try:
        return await asyncio.wait_for(
            _attempt_loop(session, url, method.upper(), headers, body, max_retries, retry_delay_ms),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Request to {url} timed out after {timeout_ms}ms")
        raise NetworkError(f"Request timed out after {timeout_ms}ms", cause=e) from e
    except NetworkError as e:
        logger.error(f"Request to {url} failed: {e.message}")
        raise
    finally:
        if owns_session:
            await session.close()
