"""
Base class for remote data sources.

Every source implements one contract: ``fetch(kind, limit, hint)`` returns
a list of typed records and never raises. Transport errors, non-success
statuses and unparseable payloads are logged and turned into an empty
list, so the source chain can move on to the next source.
"""
import logging
from typing import Any, ClassVar

import httpx
from bs4 import BeautifulSoup
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from app.config import get_settings
from app.services.sources.records import DataKind, PlayerHint

settings = get_settings()
logger = logging.getLogger(__name__)

# Exceptions to retry on
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.ConnectError,
    httpx.RemoteProtocolError,
)


class BaseSource:
    """
    Base class for ranking and fixture sources.

    Subclasses set ``name`` (the source tag stored on matches),
    ``kinds`` (data kinds they can serve) and implement ``_fetch``.
    """

    name: ClassVar[str] = "unknown"
    kinds: ClassVar[frozenset[DataKind]] = frozenset()
    # Sources that only make sense for a known player pair
    requires_hint: ClassVar[bool] = False

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or settings.scraper_timeout_seconds
        self.headers = {
            "User-Agent": settings.scraper_user_agent,
            "Accept": settings.scraper_accept,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} source={self.name}>"

    def supports(self, kind: DataKind, hint: PlayerHint | None = None) -> bool:
        if kind not in self.kinds:
            return False
        return hint is not None or not self.requires_hint

    async def fetch(
        self,
        kind: DataKind,
        limit: int,
        hint: PlayerHint | None = None,
    ) -> list[Any]:
        """Fetch up to ``limit`` records; any failure yields an empty list."""
        if not self.supports(kind, hint):
            return []
        try:
            records = await self._fetch(kind, limit, hint)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "%s: %s -> %s", self.name, e.request.url, e.response.status_code
            )
            return []
        except httpx.HTTPError as e:
            logger.warning("%s: request failed: %s", self.name, e)
            return []
        except Exception as e:
            logger.warning("%s: fetch failed: %s", self.name, e, exc_info=True)
            return []
        return records[:limit]

    async def _fetch(
        self,
        kind: DataKind,
        limit: int,
        hint: PlayerHint | None,
    ) -> list[Any]:
        raise NotImplementedError

    @retry(
        stop=stop_after_attempt(settings.scraper_max_retries),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """
        Make an HTTP request with automatic retry on transient failures.

        Non-success statuses raise ``httpx.HTTPStatusError``.
        """
        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.request(
                method.upper(),
                url,
                headers=self.headers,
                params=params,
                timeout=timeout or self.timeout,
            )
            logger.info(
                "%s: %s %s -> %s (%s bytes)",
                self.name,
                method.upper(),
                url,
                response.status_code,
                len(response.content or b""),
            )
            response.raise_for_status()
            return response

    async def get_text(self, url: str, **kwargs) -> str:
        response = await self._make_request("get", url, **kwargs)
        return response.text

    async def get_json(self, url: str, **kwargs) -> Any:
        response = await self._make_request("get", url, **kwargs)
        return response.json()

    async def get_soup(self, url: str, **kwargs) -> BeautifulSoup:
        return make_soup(await self.get_text(url, **kwargs))


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")
