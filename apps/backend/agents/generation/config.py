"""
Configuration management for the generation pipeline.

Centralized configuration with:
- Environment variable support (.env loaded through python-dotenv)
- Validation raising ConfigurationError
- Explicit object passed into the pipeline entry points
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from functools import lru_cache

from dotenv import load_dotenv

from agents import config as global_config
from agents.generation.exceptions import MissingConfigError, InvalidConfigError

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, 'true' if default else 'false').lower() == 'true'


@dataclass
class AIConfig:
    """Chat completion collaborator"""
    endpoint: Optional[str] = field(default_factory=lambda: os.getenv('AI_API_URL', global_config.DECK_API_URL))
    api_key: Optional[str] = field(default_factory=lambda: os.getenv('AI_API_KEY') or os.getenv('NEXT_PUBLIC_AI_API_KEY'))
    model: str = field(default_factory=lambda: os.getenv('AI_MODEL', global_config.DECK_MODEL))
    temperature: float = field(default_factory=lambda: float(os.getenv('AI_TEMPERATURE', str(global_config.DECK_TEMPERATURE))))
    max_tokens: int = field(default_factory=lambda: int(os.getenv('AI_MAX_TOKENS', str(global_config.DECK_MAX_TOKENS))))
    timeout_ms: int = field(default_factory=lambda: int(os.getenv('AI_TIMEOUT_MS', str(global_config.DECK_TIMEOUT_MS))))
    max_retries: int = field(default_factory=lambda: int(os.getenv('AI_MAX_RETRIES', str(global_config.HTTP_MAX_RETRIES))))
    retry_delay_ms: int = field(default_factory=lambda: int(os.getenv('AI_RETRY_DELAY_MS', str(global_config.HTTP_RETRY_DELAY_MS))))


@dataclass
class MediaConfig:
    """Image generation collaborator"""
    image_endpoint: Optional[str] = field(default_factory=lambda: os.getenv('IMAGE_API_URL', global_config.IMAGE_API_URL))
    verify_images: bool = field(default_factory=lambda: _env_flag('VERIFY_IMAGES', global_config.VERIFY_IMAGES))
    icon_size: int = field(default_factory=lambda: int(os.getenv('ICON_SIZE', str(global_config.ICON_SIZE))))
    image_width: int = global_config.IMAGE_WIDTH
    image_height: int = global_config.IMAGE_HEIGHT
    verify_timeout_ms: int = field(default_factory=lambda: int(os.getenv('IMAGE_VERIFY_TIMEOUT_MS', '15000')))


@dataclass
class TrendConfig:
    """Trending topic cache"""
    cache_duration_seconds: float = field(default_factory=lambda: float(os.getenv('TREND_CACHE_SECONDS', '600')))
    min_trends: int = field(default_factory=lambda: int(os.getenv('TREND_MIN_COUNT', '6')))


@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))
    format: str = field(default_factory=lambda: os.getenv('LOG_FORMAT', 'text'))


@dataclass
class GeneratorConfig:
    """Master configuration"""
    ai: AIConfig = field(default_factory=AIConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
    trends: TrendConfig = field(default_factory=TrendConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (credentials are masked)"""
        return {
            'ai': {
                'endpoint': self.ai.endpoint,
                'api_key': '***' if self.ai.api_key else None,
                'model': self.ai.model,
                'temperature': self.ai.temperature,
                'max_tokens': self.ai.max_tokens,
                'timeout_ms': self.ai.timeout_ms,
                'max_retries': self.ai.max_retries,
                'retry_delay_ms': self.ai.retry_delay_ms,
            },
            'media': {
                'image_endpoint': self.media.image_endpoint,
                'verify_images': self.media.verify_images,
                'icon_size': self.media.icon_size,
            },
            'trends': {
                'cache_duration_seconds': self.trends.cache_duration_seconds,
                'min_trends': self.trends.min_trends,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
            },
        }

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            MissingConfigError: endpoint, api_key or image_endpoint is absent
            InvalidConfigError: a numeric option is out of range
        """
        if not self.ai.endpoint:
            raise MissingConfigError('endpoint')
        if not self.ai.api_key:
            raise MissingConfigError('api_key', "API key not configured")
        if not self.media.image_endpoint:
            raise MissingConfigError('image_endpoint')

        if self.ai.temperature < 0 or self.ai.temperature > 2:
            raise InvalidConfigError(f"AI temperature must be between 0 and 2, got {self.ai.temperature}")
        if self.ai.max_retries < 1:
            raise InvalidConfigError(f"max_retries must be at least 1, got {self.ai.max_retries}")
        if self.ai.timeout_ms <= 0:
            raise InvalidConfigError(f"timeout_ms must be positive, got {self.ai.timeout_ms}")
        if self.ai.retry_delay_ms < 0:
            raise InvalidConfigError(f"retry_delay_ms cannot be negative, got {self.ai.retry_delay_ms}")


@lru_cache(maxsize=1)
def get_config() -> GeneratorConfig:
    """Get the process-wide configuration built from the environment."""
    return GeneratorConfig()


def reset_config() -> None:
    """Drop the cached configuration (used after changing the environment)."""
    get_config.cache_clear()
