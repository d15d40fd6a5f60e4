from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import httpx

from .cap_parser import CapParseError, parse_cap
from .config import AppConfig, load_config
from .feed import CapFeed, FeedError, FeedNotFound
from .geo import filter_by_location
from .lifecycle import LifecycleSummary, resolve_with_summary
from .models import Alert, ParseResult
from .regions import office_for_province, province_code

log = logging.getLogger("maplealerts.service")


def _utcnow() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc)


@dataclass
class CrawlReport:
    """
    Alerts plus what happened while getting them, so "no alerts today" can
    be told apart from "the crawl failed".
    """
    alerts: List[Alert] = field(default_factory=list)
    province: Optional[str] = None
    office: Optional[str] = None
    date: Optional[str] = None
    hours_scanned: List[str] = field(default_factory=list)
    files_seen: int = 0
    bulletins_parsed: int = 0
    not_found: bool = False
    errors: List[str] = field(default_factory=list)
    summary: Optional[LifecycleSummary] = None

    @property
    def ok(self) -> bool:
        return self.office is not None and not self.errors


class AlertService:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        now: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self.config = config or AppConfig()
        self._now = now
        self._feed = CapFeed(self.config.feed, client=client)

    async def aclose(self) -> None:
        await self._feed.aclose()

    async def __aenter__(self) -> "AlertService":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def fetch_alerts(
        self,
        province: str,
        lat: float | None = None,
        lon: float | None = None,
        location_name: str | None = None,
    ) -> List[Alert]:
        """Active, deduplicated alerts for a province, optionally narrowed to a place name. Never raises."""
        report = await self.crawl_report(province, lat, lon, location_name)
        return report.alerts

    async def crawl_report(
        self,
        province: str,
        lat: float | None = None,
        lon: float | None = None,
        location_name: str | None = None,
    ) -> CrawlReport:
        report = CrawlReport()
        try:
            await self._run(report, province, location_name)
        except Exception as e:
            log.exception("Alert crawl failed for %s", province)
            report.alerts = []
            report.errors.append(f"crawl: {e}")
        return report

    async def _run(self, report: CrawlReport, province: str, location_name: str | None) -> None:
        code = province_code(province)
        office = office_for_province(code)
        report.province = code
        if not office:
            log.info("No forecast office mapped for province %r", province)
            return
        report.office = office

        now = self._now()
        date = now.strftime("%Y%m%d")
        report.date = date
        log.info("Fetching CAP alerts for %s (office %s, date %s, location %r)", code, office, date, location_name)

        try:
            crawl = await self._feed.crawl(date, office)
        except FeedNotFound:
            log.info("No alerts directory for %s on %s (nothing issued yet today)", office, date)
            report.not_found = True
            return
        except FeedError as e:
            log.warning("Could not list alerts for %s on %s: %s", office, date, e)
            report.errors.append(f"office {office}: {e}")
            return

        report.hours_scanned = list(crawl.hours)
        report.files_seen = crawl.files_seen
        report.errors.extend(crawl.errors)

        results: List[ParseResult] = []
        for b in crawl.bulletins:
            try:
                results.append(parse_cap(b.xml, now=now, config=self.config.parser))
            except CapParseError as e:
                log.warning("Skipping unparseable bulletin %s/%s: %s", b.hour, b.filename, e)
                report.errors.append(f"parse {b.hour}/{b.filename}: {e}")
        report.bulletins_parsed = len(results)

        alerts, summary = resolve_with_summary(results)
        report.summary = summary
        log.info(
            "%d total alerts, %d cancelled, %d superseded, %d active",
            summary.total,
            summary.cancelled,
            summary.superseded,
            summary.active,
        )

        if location_name:
            alerts = filter_by_location(alerts, location_name)

        report.alerts = alerts
        log.info("Returning %d alerts for %s", len(alerts), location_name or code.upper())


async def fetch_alerts(
    province: str,
    lat: float | None = None,
    lon: float | None = None,
    location_name: str | None = None,
    *,
    config: AppConfig | None = None,
) -> List[Alert]:
    if config is None:
        try:
            config = load_config()
        except Exception:
            log.exception("Could not load alert config; returning no alerts")
            return []
    async with AlertService(config) as svc:
        return await svc.fetch_alerts(province, lat, lon, location_name)
