"""Shared fixtures for the trawl test-suite."""

import asyncio
import threading
from collections import Counter
from collections.abc import Generator
from pathlib import Path

import pytest
from aiohttp import web

from tests.mock_server import create_app
from trawl.config import ScraperConfig


class GazetteServer:
    """Serves the Pond Gazette from its own event loop thread.

    The site is bound to port 0, so the OS picks a free port and the real
    one is read back from the runner once it is listening.
    """

    host = "127.0.0.1"

    def __init__(self, hits: Counter) -> None:
        self.hits = hits
        self.port = 0
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def _listen(self) -> None:
        self._runner = web.AppRunner(create_app(self.hits))
        await self._runner.setup()
        await web.TCPSite(self._runner, self.host, 0).start()
        self.port = self._runner.addresses[0][1]

    def __enter__(self) -> "GazetteServer":
        self._thread.start()
        asyncio.run_coroutine_threadsafe(self._listen(), self._loop).result(5)
        return self

    def __exit__(self, *args) -> None:
        asyncio.run_coroutine_threadsafe(
            self._runner.cleanup(), self._loop
        ).result(5)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._loop.close()


@pytest.fixture
def hits() -> Counter:
    """Request counter shared with the mock server, keyed by path_qs."""
    return Counter()


@pytest.fixture
def gazette_server(hits: Counter) -> Generator[GazetteServer, None, None]:
    """The Pond Gazette, listening until the test finishes."""
    with GazetteServer(hits) as server:
        yield server


@pytest.fixture
def server_url(gazette_server: GazetteServer) -> str:
    """Base URL of the test server, e.g. "http://127.0.0.1:8080"."""
    return gazette_server.url


@pytest.fixture
def stash_folder(tmp_path: Path) -> Path:
    """A stash folder that does not exist yet."""
    return tmp_path / "stashes"


@pytest.fixture
def config(stash_folder: Path) -> ScraperConfig:
    """Test configuration: no delay, stash in a temp folder."""
    return ScraperConfig(
        sleep_time_between_requests=0,
        stash_folder=stash_folder,
        timeout=10,
    )
