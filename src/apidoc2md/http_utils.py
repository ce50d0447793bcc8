"""Download remote API model documents.

All URLs of one run share a single ``httpx.AsyncClient`` and are fetched
concurrently, bounded by ``APIDOC2MD_FETCH_CONCURRENCY``. Connection errors,
429 and 5xx answers are retried with exponential backoff; a numeric
``Retry-After`` header replaces the computed delay. Any other error status
fails at once.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Final, Sequence

import httpx

from apidoc2md.config import (
    APIDOC2MD_FETCH_BACKOFF_S,
    APIDOC2MD_FETCH_CONCURRENCY,
    APIDOC2MD_FETCH_MAX_RETRIES,
    APIDOC2MD_FETCH_TIMEOUT_S,
    APIDOC2MD_USER_AGENT,
)
from apidoc2md.exceptions import FetchError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to wait before giving up on a URL."""

    max_retries: int = 2
    backoff_s: float = 0.5
    max_delay_s: float = 30.0
    status_codes: frozenset[int] = RETRY_STATUS_CODES

    @classmethod
    def from_config(cls) -> RetryPolicy:
        return cls(max_retries=APIDOC2MD_FETCH_MAX_RETRIES, backoff_s=APIDOC2MD_FETCH_BACKOFF_S)

    def delay(self, attempt: int, response: httpx.Response | None = None) -> float:
        seconds = _retry_after_seconds(response)
        if seconds is None:
            seconds = self.backoff_s * (2**attempt)
        return min(seconds, self.max_delay_s)


def _retry_after_seconds(response: httpx.Response | None) -> float | None:
    if response is None:
        return None
    value = response.headers.get("Retry-After", "").strip()
    # The HTTP-date form is ignored.
    if not value.isdigit():
        return None
    return float(value)


def create_client(*, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(APIDOC2MD_FETCH_TIMEOUT_S),
        headers={"User-Agent": APIDOC2MD_USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
        transport=transport,
    )


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    policy: RetryPolicy | None = None,
    not_found: type[FetchError] = FetchError,
) -> str:
    """Fetch the decoded body of ``url``.

    Raises:
        FetchError: ``not_found`` on 404; ``FetchError`` on any other error
            status, or once every retry of a transient failure is used up.
    """
    policy = policy or RetryPolicy.from_config()
    failure = ""

    for attempt in range(policy.max_retries + 1):
        response: httpx.Response | None = None
        try:
            response = await client.get(url)
        except httpx.RequestError as exc:
            failure = f"{type(exc).__name__}: {exc}"
        else:
            if response.status_code == 404:
                raise not_found(f"Nothing found at {url}")
            if response.status_code not in policy.status_codes:
                if response.is_error:
                    raise FetchError(f"HTTP {response.status_code} from {url}")
                return response.text
            failure = f"HTTP {response.status_code}"

        if attempt < policy.max_retries:
            delay = policy.delay(attempt, response)
            logger.debug("Retrying %s in %.2fs after %s", url, delay, failure)
            await asyncio.sleep(delay)

    raise FetchError(f"Failed to fetch {url} after {policy.max_retries + 1} attempts: {failure}")


async def fetch_all(
    urls: Sequence[str],
    *,
    policy: RetryPolicy | None = None,
    not_found: type[FetchError] = FetchError,
    transport: httpx.AsyncBaseTransport | None = None,
    max_concurrency: int = APIDOC2MD_FETCH_CONCURRENCY,
) -> list[str]:
    """Fetch every URL over one client and return the bodies in the order of ``urls``.

    Every download runs to completion before the first failure, in input
    order, is raised.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async with create_client(transport=transport) as client:

        async def fetch_one(url: str) -> str:
            async with semaphore:
                return await fetch_text(client, url, policy=policy, not_found=not_found)

        results = await asyncio.gather(*(fetch_one(url) for url in urls), return_exceptions=True)

    bodies: list[str] = []
    for result in results:
        if isinstance(result, BaseException):
            raise result
        bodies.append(result)
    return bodies
