"""Test doubles for the aiohttp session and the chat completion service."""

import json
from typing import Any, Dict, List, Optional

from agents.generation.config import AIConfig, GeneratorConfig, MediaConfig
from services.http_client import HTTPResponse

CHAT_ENDPOINT = "https://chat.test/v1/chat/completions"
IMAGE_ENDPOINT = "https://img.test/prompt/"


class FakeResponse:
    def __init__(self, status: int, body: str = "", headers: Optional[Dict[str, str]] = None):
        self.status = status
        self._body = body
        self.headers = headers or {}

    async def text(self, errors: str = "strict") -> str:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Plays back a scripted list of responses or exceptions, one per request."""

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self):
        pass


def completion_body(content: str) -> str:
    return json.dumps({'choices': [{'message': {'role': 'assistant', 'content': content}}]})


class StubChatService:
    """Answers every completion with a fixed reply (or raises a fixed error)."""

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None,
                 response: Optional[HTTPResponse] = None):
        self.reply = reply
        self.error = error
        self.response = response
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, messages, **kwargs) -> str:
        self.calls.append({'messages': messages, **kwargs})
        if self.error:
            raise self.error
        return self.reply

    async def create(self, messages, **kwargs) -> HTTPResponse:
        self.calls.append({'messages': messages, **kwargs})
        if self.error:
            raise self.error
        return self.response


def make_config(api_key: Optional[str] = "test-key", verify_images: bool = False) -> GeneratorConfig:
    return GeneratorConfig(
        ai=AIConfig(endpoint=CHAT_ENDPOINT, api_key=api_key, max_retries=1, retry_delay_ms=10),
        media=MediaConfig(image_endpoint=IMAGE_ENDPOINT, verify_images=verify_images, icon_size=256),
    )


QUARTERLY_DECK = {
    "title": "Quarterly Sales Results",
    "slides": [
        {"type": "title", "title": "Quarterly Sales Results", "content": "Q3 performance review"},
        {"type": "overview", "title": "Agenda", "content": "Revenue\nRegions\nOutlook"},
        {"title": "Highlights", "content": "• Revenue up 12% • EMEA grew fastest • Churn down to 3%"},
        {"type": "image", "title": "Regional Growth", "content": "EMEA led all regions",
         "imagePrompt": "bar chart of regional sales growth"},
        {"type": "content", "title": "Conclusion", "content": "Strong quarter overall"},
    ],
}

QUARTERLY_REPLY = "```json\n" + json.dumps(QUARTERLY_DECK, ensure_ascii=False, indent=2) + "\n```"
