import asyncio

import httpx
import pytest

from conftest import BASE, FakeDatamart, fast_feed_config, listing, office_routes
from maplealerts.feed import (
    CapFeed,
    FeedNetworkError,
    FeedNotFound,
    parse_file_listing,
    parse_hour_listing,
)


def test_parse_hour_listing_sorted_and_filtered():
    html = listing("12/", "03/", "latest/", "7/", "03/", "20251018/")
    assert parse_hour_listing(html) == ["03", "12"]


def test_parse_file_listing_keeps_order_and_strips_paths():
    html = listing("b.cap", "/x/y/a.cap", "readme.txt", "b.cap")
    assert parse_file_listing(html) == ["b.cap", "a.cap"]


def _crawl(routes, **cfg):
    mart = FakeDatamart(routes)

    async def go():
        async with CapFeed(fast_feed_config(**cfg), client=mart.client()) as feed:
            return await feed.crawl("20261018", "CWVR")

    return asyncio.run(go()), mart


def test_crawl_scans_only_recent_hours_and_fetches_every_file():
    hours = {f"{h:02d}": [(f"f{h}.cap", f"<x>{h}</x>")] for h in range(0, 10)}
    hours["09"] = [("late-b.cap", "<b/>"), ("late-a.cap", "<a/>")]
    result, mart = _crawl(office_routes("20261018", "CWVR", hours))

    assert result.hours == ["04", "05", "06", "07", "08", "09"]
    assert result.files_seen == 7
    assert [(b.hour, b.filename) for b in result.bulletins] == [
        ("04", "f4.cap"),
        ("05", "f5.cap"),
        ("06", "f6.cap"),
        ("07", "f7.cap"),
        ("08", "f8.cap"),
        ("09", "late-b.cap"),
        ("09", "late-a.cap"),
    ]
    assert result.errors == []
    assert not any("/03/" in u for u in mart.requests)


def test_crawl_order_survives_out_of_order_completion():
    async def slow(request):
        await asyncio.sleep(0.05)
        return httpx.Response(200, text="<slow/>")

    routes = office_routes("20261018", "CWVR", {"01": [("a.cap", "")], "02": [("b.cap", "<fast/>")]})
    routes[f"{BASE}/20261018/CWVR/01/a.cap"] = slow

    # MockTransport awaits the coroutine the async route returns
    result, _ = _crawl(routes, max_concurrency=4)
    assert [b.filename for b in result.bulletins] == ["a.cap", "b.cap"]
    assert result.bulletins[0].xml == "<slow/>"


def test_office_404_raises_not_found():
    with pytest.raises(FeedNotFound):
        _crawl({})


def test_failed_hour_and_file_are_skipped():
    routes = office_routes(
        "20261018",
        "CWVR",
        {"01": [("ok.cap", "<ok/>"), ("gone.cap", "")], "02": []},
    )
    routes[f"{BASE}/20261018/CWVR/01/gone.cap"] = (500, "boom")
    routes[f"{BASE}/20261018/CWVR/02/"] = (503, "busy")
    result, mart = _crawl(routes)

    assert [b.filename for b in result.bulletins] == ["ok.cap"]
    assert len(result.errors) == 2
    # one retry each for the 5xx responses
    assert mart.requests.count(f"{BASE}/20261018/CWVR/01/gone.cap") == 2
    assert mart.requests.count(f"{BASE}/20261018/CWVR/02/") == 2


def test_transient_error_is_retried_then_succeeds():
    calls = {"n": 0}

    def flaky(request):
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, text="<alert/>")

    routes = office_routes("20261018", "CWVR", {"05": [("a.cap", "")]})
    routes[f"{BASE}/20261018/CWVR/05/a.cap"] = flaky
    result, _ = _crawl(routes)
    assert [b.xml for b in result.bulletins] == ["<alert/>"]
    assert calls["n"] == 2


def test_client_error_is_not_retried():
    mart = FakeDatamart({f"{BASE}/20261018/CWVR/05/a.cap": (403, "forbidden")})

    async def go():
        async with CapFeed(fast_feed_config(retries=3), client=mart.client()) as feed:
            return await feed.fetch_bulletin("20261018", "CWVR", "05", "a.cap")

    with pytest.raises(FeedNetworkError):
        asyncio.run(go())
    assert len(mart.requests) == 1


def test_pool_request_starts_share_one_pacer():
    delay = 0.03
    starts = []

    async def timed(request):
        starts.append(asyncio.get_running_loop().time())
        await asyncio.sleep(0.01)
        return httpx.Response(200, text="<alert/>")

    names = [f"f{i}.cap" for i in range(8)]
    routes = office_routes("20261018", "CWVR", {"07": [(n, "") for n in names]})
    for n in names:
        routes[f"{BASE}/20261018/CWVR/07/{n}"] = timed

    result, _ = _crawl(routes, max_concurrency=4, request_delay_seconds=delay)

    assert len(result.bulletins) == 8
    starts.sort()
    gaps = [b - a for a, b in zip(starts, starts[1:])]
    # small allowance for event-loop timer granularity
    assert min(gaps) >= delay * 0.9
    assert starts[-1] - starts[0] >= 7 * delay * 0.9
