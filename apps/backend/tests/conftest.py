import pytest

from agents.generation.config import reset_config
from services import http_client


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def recorded_sleeps(monkeypatch):
    """Replace the backoff sleep with a recorder (delays in seconds)."""
    delays = []

    async def fake_sleep(delay, *args, **kwargs):
        delays.append(delay)

    monkeypatch.setattr(http_client.asyncio, "sleep", fake_sleep)
    return delays
