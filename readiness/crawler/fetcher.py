"""Single-shot HTTP page fetcher.

Fetches one page within a total deadline and returns its lower-cased body,
truncated to a byte limit. There are no retries: the website scan is
advisory, so any failure is reported in the result and never raised.
"""

import asyncio
import re
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 GapScoreBot"
DEFAULT_TIMEOUT = 8.0  # Seconds for the whole fetch, redirects included
DEFAULT_MAX_BYTES = 2 * 1024 * 1024

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


def is_fetchable_url(url: str | None) -> bool:
    """Only absolute http(s) URLs are fetched."""
    return bool(url) and bool(_HTTP_URL.match(url))


@dataclass
class FetchResult:
    """Result of fetching a URL."""

    url: str
    final_url: str  # After redirects
    status_code: int
    text: str | None  # Lower-cased body
    error: str | None
    fetch_time_ms: int
    truncated: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and self.text is not None


class PageFetcher:
    """Fetches a single page for the website scan."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        max_bytes: int = DEFAULT_MAX_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._transport = transport

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a URL once.

        The timeout bounds the whole exchange, not each socket operation,
        so a server trickling bytes or chaining redirects cannot hold the
        request open past it.

        Args:
            url: Absolute http(s) URL

        Returns:
            FetchResult with the lower-cased body, or with error set
        """
        start_time = datetime.now(UTC)

        try:
            async with asyncio.timeout(self.timeout):
                async with httpx.AsyncClient(
                    timeout=self.timeout,
                    follow_redirects=True,
                    max_redirects=5,
                    transport=self._transport,
                ) as client:
                    async with client.stream(
                        "GET",
                        url,
                        headers={
                            "User-Agent": self.user_agent,
                            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                        },
                    ) as response:
                        body, truncated = await self._read_capped(response)
                        text = body.decode(response.encoding or "utf-8", errors="replace")

            if truncated:
                logger.info("website_body_truncated", url=url, max_bytes=self.max_bytes)

            return FetchResult(
                url=url,
                final_url=str(response.url),
                status_code=response.status_code,
                text=text.lower(),
                error=None,
                fetch_time_ms=_elapsed_ms(start_time),
                truncated=truncated,
            )

        except (httpx.TimeoutException, TimeoutError):
            error = "Request timed out"
        except httpx.HTTPError as e:
            error = f"{type(e).__name__}: {e}"
        except Exception as e:
            error = str(e) or type(e).__name__

        logger.warning("website_fetch_failed", url=url, error=error)
        return FetchResult(
            url=url,
            final_url=url,
            status_code=0,
            text=None,
            error=error,
            fetch_time_ms=_elapsed_ms(start_time),
        )

    async def _read_capped(self, response: httpx.Response) -> tuple[bytes, bool]:
        """Read the body up to max_bytes. Returns (body, truncated)."""
        chunks: list[bytes] = []
        size = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size > self.max_bytes:
                break
        body = b"".join(chunks)
        truncated = len(body) > self.max_bytes
        return body[: self.max_bytes], truncated


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now(UTC) - start_time).total_seconds() * 1000)
