"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment before any app code runs
os.environ["ENV"] = "test"
os.environ["API_KEY"] = "test-key"

from readiness.crawler.fetcher import FetchResult  # noqa: E402
from readiness.engine import ReadinessEngine, Submission  # noqa: E402
from readiness.scoring.catalog import SIGNAL_CATALOG, Tier  # noqa: E402

TEST_API_KEY = "test-key"
PINNED_TODAY = date(2025, 6, 1)


def pinned_clock() -> date:
    return PINNED_TODAY


class StubFetcher:
    """Fetcher double that returns a canned page and records calls."""

    def __init__(self, html: str | None = None, error: str | None = None):
        self.html = html
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        return FetchResult(
            url=url,
            final_url=url,
            status_code=0 if self.error else 200,
            text=None if self.error else (self.html or "").lower(),
            error=self.error,
            fetch_time_ms=1,
        )


@pytest.fixture
def mandatory_answers() -> dict[str, bool]:
    """Every mandatory signal satisfied."""
    return {key: True for key in SIGNAL_CATALOG.keys_in(Tier.MANDATORY)}


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher(html="")


@pytest.fixture
def engine(stub_fetcher: StubFetcher) -> ReadinessEngine:
    """Engine with the default configuration, a stub fetcher and a pinned clock."""
    return ReadinessEngine(fetcher=stub_fetcher, clock=pinned_clock)  # type: ignore[arg-type]


@pytest.fixture
def make_submission():
    def _make(**kwargs) -> Submission:
        return Submission.from_payload(kwargs)

    return _make


@pytest.fixture
def settings():
    from api.config import Settings

    return Settings(env="test", api_key=TEST_API_KEY)  # type: ignore[call-arg]


@pytest.fixture
def app(settings, engine):
    """App wired to the test settings and the stub-backed engine."""
    from api.config import get_settings
    from api.deps import get_engine
    from api.main import create_app

    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_engine] = lambda: engine
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac
