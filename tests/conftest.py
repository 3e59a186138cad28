"""Shared pytest fixtures for all tests."""

import io

import httpx
import pytest

from cli.config import Config
from cli.webhook_client import WebhookClient
from http_fakes import WEBHOOK_URL


@pytest.fixture
def make_file(tmp_path):
    """
    Factory that writes a file of a given size with a repeating byte pattern.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Callable(size, name='source.bin') -> Path
    """
    def _make(size: int, name: str = 'source.bin'):
        file_path = tmp_path / name
        pattern = bytes(range(256))
        data = (pattern * (size // 256 + 1))[:size]
        file_path.write_bytes(data)
        return file_path

    return _make


@pytest.fixture
def config():
    """Config with a small buffer size so tests can use tiny files."""
    return Config(WEBHOOK_URL, {'buffer_size': 4})


@pytest.fixture
def recorded_sleeps():
    """
    Fake sleep that records requested delays instead of waiting.

    Returns:
        (sleep coroutine function, list of delays)
    """
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    return fake_sleep, delays


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def make_client(config, recorded_sleeps, out):
    """
    Factory that builds a WebhookClient backed by an httpx.MockTransport.

    Args:
        config: Config fixture
        recorded_sleeps: Fake sleep fixture
        out: Notice stream fixture

    Returns:
        Callable(handler, config=None) -> WebhookClient
    """
    fake_sleep, _ = recorded_sleeps

    def _make(handler, client_config=None):
        session = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return WebhookClient(client_config or config, session=session, sleep=fake_sleep, out=out)

    return _make
