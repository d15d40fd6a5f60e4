from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from .models import Alert, ParseResult

log = logging.getLogger("maplealerts.lifecycle")


@dataclass(frozen=True)
class LifecycleSummary:
    total: int
    cancelled: int
    superseded: int
    active: int


def resolve_with_summary(results: Iterable[ParseResult]) -> Tuple[List[Alert], LifecycleSummary]:
    """
    Apply every Cancel/AllClear/Update seen in one crawl to every draft from
    that crawl, then dedupe by id keeping the first draft in crawl order.

    `results` must already be in crawl order (ascending hour, then listing
    order within an hour).
    """
    cancelled_ids: Set[str] = set()
    superseded_ids: Set[str] = set()
    drafts: List[Alert] = []

    for res in results:
        cancelled_ids.update(res.cancellations)
        for alert in res.alerts:
            if alert.supersedes:
                superseded_ids.update(alert.supersedes)
                log.debug("Alert %s supersedes %s", alert.id, ", ".join(alert.supersedes))
            drafts.append(alert)

    dead = cancelled_ids | superseded_ids
    active: List[Alert] = []
    seen: Set[str] = set()
    for alert in drafts:
        if alert.id in dead:
            log.debug("Dropping %s alert %s", "cancelled" if alert.id in cancelled_ids else "superseded", alert.id)
            continue
        if alert.id in seen:
            continue
        seen.add(alert.id)
        active.append(alert)

    summary = LifecycleSummary(
        total=len(drafts),
        cancelled=len(cancelled_ids),
        superseded=len(superseded_ids),
        active=len(active),
    )
    return active, summary


def resolve(results: Iterable[ParseResult]) -> List[Alert]:
    active, _ = resolve_with_summary(results)
    return active
