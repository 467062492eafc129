"""Tests for the single-shot page fetcher."""

import asyncio

import httpx
import pytest

from readiness.crawler.fetcher import PageFetcher, is_fetchable_url


def _fetcher(handler) -> PageFetcher:
    return PageFetcher(timeout=1.0, transport=httpx.MockTransport(handler))


class TestIsFetchableUrl:
    @pytest.mark.parametrize(
        "url",
        ["https://example.com", "http://example.com/about", "HTTPS://EXAMPLE.COM"],
    )
    def test_http_urls(self, url) -> None:
        assert is_fetchable_url(url) is True

    @pytest.mark.parametrize("url", [None, "", "example.com", "ftp://example.com", "javascript:x"])
    def test_other_values(self, url) -> None:
        assert is_fetchable_url(url) is False


class TestPageFetcher:
    """Tests for fetch results and failure handling."""

    @pytest.mark.asyncio
    async def test_success_returns_lowercased_text(self) -> None:
        seen_headers = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen_headers["user-agent"] = request.headers["user-agent"]
            return httpx.Response(200, text="<footer>Privacy | Company Number 123</footer>")

        result = await _fetcher(handler).fetch("https://example.com")

        assert result.success is True
        assert result.status_code == 200
        assert result.text == "<footer>privacy | company number 123</footer>"
        assert "GapScoreBot" in seen_headers["user-agent"]

    @pytest.mark.asyncio
    async def test_error_status_still_returns_text(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="Not Found")

        result = await _fetcher(handler).fetch("https://example.com/missing")

        assert result.success is True
        assert result.status_code == 404
        assert result.text == "not found"

    @pytest.mark.asyncio
    async def test_timeout_reported_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        result = await _fetcher(handler).fetch("https://slow.example")

        assert result.success is False
        assert result.text is None
        assert result.error == "Request timed out"
        assert result.status_code == 0

    @pytest.mark.asyncio
    async def test_network_error_reported_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        result = await _fetcher(handler).fetch("https://nowhere.example")

        assert result.success is False
        assert "ConnectError" in result.error

    @pytest.mark.asyncio
    async def test_unexpected_error_reported_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("socket exploded")

        result = await _fetcher(handler).fetch("https://broken.example")

        assert result.success is False
        assert result.error == "socket exploded"


class TestFetchLimits:
    """Tests for the total deadline and the body size cap."""

    @pytest.mark.asyncio
    async def test_trickling_body_hits_total_deadline(self) -> None:
        async def trickle():
            for _ in range(20):
                await asyncio.sleep(0.1)
                yield b"x"

        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=trickle())

        fetcher = PageFetcher(timeout=0.3, transport=httpx.MockTransport(handler))
        loop = asyncio.get_running_loop()
        started = loop.time()

        result = await fetcher.fetch("https://slow.example")

        assert loop.time() - started < 1.5
        assert result.success is False
        assert result.error == "Request timed out"
        assert result.text is None

    @pytest.mark.asyncio
    async def test_large_body_truncated(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="PRIVACY " * 100)

        fetcher = PageFetcher(max_bytes=16, transport=httpx.MockTransport(handler))

        result = await fetcher.fetch("https://big.example")

        assert result.success is True
        assert result.truncated is True
        assert result.text == "privacy privacy "

    @pytest.mark.asyncio
    async def test_body_within_limit_not_truncated(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="contact")

        fetcher = PageFetcher(max_bytes=7, transport=httpx.MockTransport(handler))

        result = await fetcher.fetch("https://small.example")

        assert result.truncated is False
        assert result.text == "contact"
