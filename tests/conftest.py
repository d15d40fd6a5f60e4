import datetime as dt
from typing import Dict, Iterable, Optional, Tuple

import httpx
import pytest

from maplealerts.config import AppConfig, FeedConfig

NOW = dt.datetime(2026, 10, 18, 15, 0, tzinfo=dt.timezone.utc)
BASE = "https://dd.example.test/alerts/cap"


def info_xml(
    *,
    language: str = "en-CA",
    response_type: Optional[str] = None,
    expires: str = "2026-10-19T06:00:00-00:00",
    alert_type: Optional[str] = "warning",
    alert_name: Optional[str] = "yellow warning - rainfall",
    coverage: Optional[str] = "North Coast",
    areas: Iterable[str] = ("North Coast - coastal sections",),
    description: str = "",
    headline: str = "rainfall warning in effect",
) -> str:
    params = []
    for key, val in (("Alert_Type", alert_type), ("Alert_Name", alert_name), ("Alert_Coverage", coverage)):
        if val is not None:
            params.append(
                f"<parameter><valueName>layer:EC-MSC-SMC:1.0:{key}</valueName><value>{val}</value></parameter>"
            )
    area_xml = "".join(f"<area><areaDesc>{a}</areaDesc></area>" for a in areas)
    rt = f"<responseType>{response_type}</responseType>" if response_type else ""
    return (
        "<info>"
        f"<language>{language}</language>"
        "<category>Met</category>"
        "<event>rainfall</event>"
        f"{rt}"
        "<urgency>Future</urgency><severity>Moderate</severity><certainty>Likely</certainty>"
        "<effective>2026-10-18T10:00:00-00:00</effective>"
        f"<expires>{expires}</expires>"
        f"<headline>{headline}</headline>"
        f"<description>{description}</description>"
        "<instruction>Avoid low-lying areas.</instruction>"
        "<web>https://weather.gc.ca/warnings/index_e.html</web>"
        f"{''.join(params)}"
        f"{area_xml}"
        "</info>"
    )


def cap_xml(
    identifier: str,
    *,
    msg_type: str = "Alert",
    references: Iterable[str] = (),
    infos: Iterable[str] = (),
    sent: str = "2026-10-18T12:00:00-00:00",
) -> str:
    refs = " ".join(f"cap-pac@canada.ca,{r},2026-10-18T09:00:00-00:00" for r in references)
    refs_xml = f"<references>{refs}</references>" if refs else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<alert xmlns="urn:oasis:names:tc:emergency:cap:1.2">'
        f"<identifier>{identifier}</identifier>"
        "<sender>cap-pac@canada.ca</sender>"
        f"<sent>{sent}</sent>"
        "<status>Actual</status>"
        f"<msgType>{msg_type}</msgType>"
        "<scope>Public</scope>"
        f"{refs_xml}"
        f"{''.join(infos)}"
        "</alert>"
    )


def listing(*hrefs: str) -> str:
    rows = "".join(f'<tr><td><a href="{h}">{h}</a></td></tr>' for h in hrefs)
    return f'<html><body><h1>Index</h1><table><tr><td><a href="../">Parent Directory</a></td></tr>{rows}</table></body></html>'


class FakeDatamart:
    """Serves canned responses for URLs; records every request path."""

    def __init__(self, routes: Dict[str, object]) -> None:
        self.routes = routes
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        entry = self.routes.get(url)
        if entry is None:
            return httpx.Response(404, text="Not Found")
        if callable(entry):
            return entry(request)
        if isinstance(entry, tuple):
            status, body = entry
            return httpx.Response(status, text=body)
        return httpx.Response(200, text=str(entry))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def fast_feed_config(**overrides) -> FeedConfig:
    base = dict(base_url=BASE, request_delay_seconds=0.0, retry_backoff_seconds=0.0, retries=1)
    base.update(overrides)
    return FeedConfig(**base)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(feed=fast_feed_config())


def office_routes(date: str, office: str, hours: Dict[str, Iterable[Tuple[str, str]]]) -> Dict[str, object]:
    """Route table for one office/day: {hour: [(filename, xml), ...]}."""
    routes: Dict[str, object] = {f"{BASE}/{date}/{office}/": listing(*(f"{h}/" for h in hours))}
    for hour, files in hours.items():
        files = list(files)
        routes[f"{BASE}/{date}/{office}/{hour}/"] = listing(*(name for name, _ in files))
        for name, xml in files:
            routes[f"{BASE}/{date}/{office}/{hour}/{name}"] = xml
    return routes
