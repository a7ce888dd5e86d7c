"""
Exception hierarchy for the deck generation pipeline.

Every failure raised while turning a prompt into a deck derives from
GenerationError so the API layer can catch it once and map it to a
status code.
"""

import asyncio
from typing import Optional, Dict, Any

import aiohttp


class GenerationError(Exception):
    """Base exception for all generation errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Configuration exceptions ===

class ConfigurationError(GenerationError):
    """Required credential or endpoint is missing or invalid. Never retried."""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration missing"""

    def __init__(self, option: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"Missing required configuration: {option}", **kwargs)
        self.option = option
        self.context.setdefault('option', option)


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""
    pass


# === Transport exceptions ===

class NetworkError(GenerationError):
    """Transport failure, timeout or gateway timeout"""

    status_code = 504


class UpstreamError(GenerationError):
    """Upstream collaborator answered with a non-retryable error status"""

    def __init__(self, status: int, body: str = "", message: Optional[str] = None, **kwargs):
        super().__init__(message or f"API error: {status} - {body}", **kwargs)
        self.status = status
        self.body = body
        self.status_code = status


# === Format exceptions ===

class FormatError(GenerationError):
    """Model reply could not be decoded or lacks required fields"""

    status_code = 502

    def __init__(self, message: str, raw_text: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        # Keep the offending text around for diagnostics
        self.raw_text = raw_text


# === Recovery helpers ===

# Transport-level failures raised by aiohttp and the socket layer
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


def is_retryable(error: BaseException) -> bool:
    """Only transport failures are retried; configuration, upstream and format errors are not."""
    return isinstance(error, (NetworkError,) + TRANSPORT_ERRORS)


def get_retry_delay(attempt: int, retry_delay: float) -> float:
    """Linear backoff: attempt 1 waits one delay, attempt 2 waits two, and so on."""
    return retry_delay * attempt
