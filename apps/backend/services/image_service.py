"""
Image references for slides.

The image endpoint renders a picture for any URL-encoded prompt appended to
its base path, so "generating" an image is building a URL. When
verify_images is on, the URL is fetched once through the retry client and
dropped if it does not load. Failures never propagate to the caller.
"""

from typing import Dict, Optional
from urllib.parse import quote, urlencode

import aiohttp

from agents.generation.config import MediaConfig, get_config
from agents.generation.exceptions import GenerationError
from agents.prompts.generation.deck_prompts import build_icon_prompt, build_image_prompt
from services import http_client
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


class ImageService:
    """Builds (and optionally checks) image and icon URLs for slides."""

    def __init__(self, config: Optional[MediaConfig] = None, session: Optional[aiohttp.ClientSession] = None):
        self.config = config or get_config().media
        self.session = session

    def build_url(self, prompt: str, params: Optional[Dict[str, str]] = None) -> str:
        url = f"{self.config.image_endpoint}{quote(prompt, safe=_URI_COMPONENT_SAFE)}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    async def image_for_slide(
        self,
        title: Optional[str],
        content: Optional[str],
        image_prompt: Optional[str] = None,
    ) -> Optional[str]:
        """URL of the main visual for an image slide, or None if it could not be resolved."""
        prompt = build_image_prompt(title, content, image_prompt)
        params = {
            'width': str(self.config.image_width),
            'height': str(self.config.image_height),
            'nologo': 'true',
        }
        return await self._resolve(self.build_url(prompt, params), 'image')

    async def icon_for_slide(self, title: Optional[str]) -> Optional[str]:
        size = str(self.config.icon_size)
        url = self.build_url(build_icon_prompt(title), {'width': size, 'height': size, 'nologo': 'true'})
        return await self._resolve(url, 'icon')

    async def _resolve(self, url: str, kind: str) -> Optional[str]:
        if not self.config.verify_images:
            return url

        try:
            response = await http_client.request(
                url,
                method='GET',
                timeout_ms=self.config.verify_timeout_ms,
                session=self.session,
            )
        except (GenerationError, ValueError) as e:
            logger.warning(f"Could not load {kind} {url}: {e}")
            return None

        if not response.ok:
            logger.warning(f"Could not load {kind} {url}: HTTP {response.status}")
            return None
        return url
