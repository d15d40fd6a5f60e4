from __future__ import annotations

import asyncio
import logging
import random
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import httpx

from .config import FeedConfig

log = logging.getLogger("maplealerts.feed")


# Datamart listings are plain Apache-style index pages; there is no JSON index.
_HOUR_RE = re.compile(r"""<a\s[^>]*href=["'](\d{2})/["']""", re.IGNORECASE)
_CAP_RE = re.compile(r"""<a\s[^>]*href=["']([^"']+\.cap)["']""", re.IGNORECASE)

_RETRY_STATUS = (429, 500, 502, 503, 504)


class FeedError(RuntimeError):
    pass


class FeedNotFound(FeedError):
    """404 on a listing or file. For the office directory: no alerts issued today."""


class FeedNetworkError(FeedError):
    pass


@dataclass(frozen=True)
class FetchedBulletin:
    hour: str
    position: int
    filename: str
    xml: str

    @property
    def crawl_key(self) -> Tuple[str, int]:
        return (self.hour, self.position)


@dataclass
class CrawlResult:
    date: str
    office: str
    hours: List[str] = field(default_factory=list)
    files_seen: int = 0
    bulletins: List[FetchedBulletin] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def parse_hour_listing(html: str) -> List[str]:
    return sorted(set(_HOUR_RE.findall(html or "")))


def parse_file_listing(html: str) -> List[str]:
    out: List[str] = []
    seen: set[str] = set()
    for href in _CAP_RE.findall(html or ""):
        name = href.rstrip("/").rsplit("/", 1)[-1]
        if not name or name in seen:
            continue
        seen.add(name)
        out.append(name)
    return out


class CapFeed:
    """
    Crawls `{base}/{date}/{office}/{hour}/*.cap` on the EC datamart.

    Only the most recent `hour_window` hour folders are scanned and every
    bulletin in them is fetched: a skipped Cancel or Update would bring a
    stale alert back. Fetches go through a small semaphore-bounded pool, but
    request starts share one pacer and stay `request_delay_seconds` apart
    across all workers, so the upstream never sees more than one new request
    per delay window.
    """

    def __init__(self, config: FeedConfig = FeedConfig(), *, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout_seconds),
            headers={
                "User-Agent": config.user_agent,
                "Accept": "text/html,application/xml,text/xml;q=0.9,*/*;q=0.8",
            },
            follow_redirects=True,
        )
        self._pace_lock = asyncio.Lock()
        self._next_slot = 0.0

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "CapFeed":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *(p.strip("/") for p in parts)])

    async def _get(self, url: str, timeout: float) -> httpx.Response:
        """
        GET with a small bounded retry on transient failures (timeouts,
        connection errors, 429/5xx). 404 is final.
        """
        attempts = 1 + max(0, int(self.config.retries))
        backoff = float(self.config.retry_backoff_seconds)
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                r = await self._client.get(url, timeout=timeout)
                if r.status_code == 404:
                    raise FeedNotFound(f"not found: {url}")
                if r.status_code in _RETRY_STATUS:
                    raise httpx.HTTPStatusError(f"HTTP {r.status_code}", request=r.request, response=r)
                r.raise_for_status()
                return r
            except FeedNotFound:
                raise
            except httpx.HTTPStatusError as e:
                if e.response.status_code not in _RETRY_STATUS:
                    raise FeedNetworkError(f"HTTP {e.response.status_code} for {url}") from e
                last_exc = e
            except httpx.TransportError as e:
                last_exc = e

            if attempt < attempts:
                sleep_s = backoff + random.random() * 0.25 * backoff
                log.warning("Feed GET failed (try %d/%d): %s: %s; sleeping %.2fs", attempt, attempts, url, last_exc, sleep_s)
                await asyncio.sleep(sleep_s)
                backoff *= 2.0

        raise FeedNetworkError(f"GET failed after {attempts} tries: {url}") from last_exc

    async def list_hours(self, date: str, office: str) -> List[str]:
        url = self._url(date, office) + "/"
        r = await self._get(url, timeout=self.config.listing_timeout_seconds)
        hours = parse_hour_listing(r.text)
        log.info("Found %d hour directories for %s on %s", len(hours), office, date)
        return hours

    async def list_files(self, date: str, office: str, hour: str) -> List[str]:
        url = self._url(date, office, hour) + "/"
        r = await self._get(url, timeout=self.config.request_timeout_seconds)
        files = parse_file_listing(r.text)
        log.info("Found %d CAP files in %s/%s/%s", len(files), date, office, hour)
        return files

    async def fetch_bulletin(self, date: str, office: str, hour: str, filename: str) -> str:
        url = self._url(date, office, hour, filename)
        r = await self._get(url, timeout=self.config.request_timeout_seconds)
        return r.text

    async def crawl(self, date: str, office: str) -> CrawlResult:
        """
        List, then fetch everything for one (date, office).

        FeedNotFound from the office listing propagates (callers treat it as
        "nothing issued today"); failures on individual hours or files are
        logged, recorded in `errors`, and skipped.
        """
        result = CrawlResult(date=date, office=office)

        await self._paced_sleep()
        hours = await self.list_hours(date, office)
        result.hours = hours[-max(1, int(self.config.hour_window)):]

        targets: List[Tuple[str, int, str]] = []
        for hour in result.hours:
            await self._paced_sleep()
            try:
                files = await self.list_files(date, office, hour)
            except FeedError as e:
                log.warning("Failed to list hour directory %s: %s", hour, e)
                result.errors.append(f"hour {hour}: {e}")
                continue
            targets.extend((hour, i, name) for i, name in enumerate(files))

        result.files_seen = len(targets)

        sem = asyncio.Semaphore(max(1, int(self.config.max_concurrency)))

        async def _one(hour: str, pos: int, name: str) -> Optional[FetchedBulletin]:
            async with sem:
                await self._paced_sleep()
                try:
                    xml = await self.fetch_bulletin(date, office, hour, name)
                except FeedError as e:
                    log.warning("Failed to fetch CAP file %s/%s: %s", hour, name, e)
                    result.errors.append(f"file {hour}/{name}: {e}")
                    return None
            log.debug("Fetched %s/%s (%d bytes)", hour, name, len(xml))
            return FetchedBulletin(hour=hour, position=pos, filename=name, xml=xml)

        fetched = await asyncio.gather(*(_one(h, p, n) for h, p, n in targets))
        # completion order is not crawl order; lifecycle dedupe depends on it
        result.bulletins = sorted((b for b in fetched if b is not None), key=lambda b: b.crawl_key)
        return result

    async def _paced_sleep(self) -> None:
        """Wait for the next shared request slot."""
        delay = float(self.config.request_delay_seconds)
        if delay <= 0:
            return
        loop = asyncio.get_running_loop()
        async with self._pace_lock:
            wait = self._next_slot - loop.time()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_slot = loop.time() + delay
