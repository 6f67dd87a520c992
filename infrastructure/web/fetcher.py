"""
HTTP fetching of the origin resource.

Follows redirects, enforces a fixed deadline and sends a browser-like User-Agent.
Any non-2xx status, timeout or transport failure raises FetchError.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from domain.errors import FetchError
from infrastructure.config.models import FetchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    status: int
    body: str


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchResult: ...


class HttpFetcher:
    """httpx-backed fetcher; one client reused across requests."""

    def __init__(self, cfg: FetchConfig, *, transport: httpx.BaseTransport | None = None) -> None:
        self.cfg = cfg
        self.client = httpx.Client(
            follow_redirects=True,
            max_redirects=cfg.max_redirects,
            timeout=cfg.timeout_s,
            headers={"User-Agent": cfg.user_agent},
            transport=transport,
        )

    def fetch(self, url: str) -> FetchResult:
        logger.info("Fetching content from: %s", url)
        try:
            response = self.client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching the URL after {self.cfg.timeout_s:g}s.") from e
        except httpx.TooManyRedirects as e:
            raise FetchError("Failed to fetch the URL (too many redirects).") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch the URL ({type(e).__name__}: {e}).") from e
        except httpx.InvalidURL as e:
            # Not an HTTPError subclass; raised before any request is sent
            raise FetchError(f"Failed to fetch the URL (invalid URL: {e}).") from e

        if not response.is_success:
            raise FetchError(
                f"Failed to fetch the URL (Status: {response.status_code}). Site might be down or blocking requests.",
                status=response.status_code,
            )

        body = response.text
        logger.info("Fetched %d bytes.", len(response.content))
        return FetchResult(status=response.status_code, body=body)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
