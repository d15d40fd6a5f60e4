"""
Command-line reader for EC CAP alerts.

- `python -m maplealerts.cli.alerts --province BC --location "Prince Rupert"`
- installed as the `maplealerts` console script
"""
from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import json
import logging
import sys
from typing import List, Optional

from maplealerts.alert_feed import atomic_write_json, build_alert_feed_payload
from maplealerts.classifier import sort_by_severity
from maplealerts.config import load_config
from maplealerts.models import Alert
from maplealerts.service import AlertService, CrawlReport


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _render(alerts: List[Alert]) -> str:
    if not alerts:
        return "No active weather alerts."
    out: List[str] = []
    for a in sort_by_severity(alerts):
        line = f"[{a.ec_color}] {a.title} ({a.severity}, {a.alert_type})"
        if a.matched_area:
            line += f" - {a.matched_area}"
        out.append(line)
        if a.details.when:
            out.append(f"    When: {a.details.when.splitlines()[0]}")
        if a.expires:
            out.append(f"    Expires: {a.expires}")
    return "\n".join(out)


def _render_report(report: CrawlReport) -> str:
    lines = [
        f"province={report.province} office={report.office} date={report.date}",
        f"hours={','.join(report.hours_scanned) or '-'} files={report.files_seen} parsed={report.bulletins_parsed}",
        f"not_found={report.not_found} errors={len(report.errors)}",
    ]
    if report.summary:
        s = report.summary
        lines.append(f"total={s.total} cancelled={s.cancelled} superseded={s.superseded} active={s.active}")
    lines.extend(f"  ! {e}" for e in report.errors)
    return "\n".join(lines)


async def _run(args: argparse.Namespace) -> CrawlReport:
    cfg = load_config(args.config)
    async with AlertService(cfg) as svc:
        return await svc.crawl_report(args.province, args.lat, args.lon, args.location)


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="maplealerts", description="List active Environment Canada weather alerts")
    ap.add_argument("--province", required=True, help="Province code or name (e.g. BC, Ontario)")
    ap.add_argument("--location", help="Place name to filter by (e.g. 'Prince Rupert')")
    ap.add_argument("--lat", type=float)
    ap.add_argument("--lon", type=float)
    ap.add_argument("--config", help="Path to config.yaml (default: $MAPLEALERTS_CONFIG or built-in)")
    ap.add_argument("--json", action="store_true", help="Print alert records as JSON")
    ap.add_argument("--out", help="Also write the alert feed payload to this path")
    ap.add_argument("--report", action="store_true", help="Print crawl diagnostics")
    ap.add_argument("--verbose", "-v", action="store_true")
    args = ap.parse_args(argv)

    _setup_logging(args.verbose)
    report = asyncio.run(_run(args))

    if args.out:
        payload = build_alert_feed_payload(
            province=report.province,
            office=report.office,
            location_name=args.location,
            generated_at_iso=dt.datetime.now(tz=dt.timezone.utc).isoformat(),
            alerts=report.alerts,
        )
        atomic_write_json(args.out, payload)

    if args.json:
        print(json.dumps([a.to_dict() for a in report.alerts], ensure_ascii=False, indent=2))
    else:
        print(_render(report.alerts))

    if args.report:
        print(_render_report(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
