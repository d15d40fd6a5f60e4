from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from .models import Alert


@dataclass
class AlertChanges:
    new: List[Alert] = field(default_factory=list)
    updated: List[Alert] = field(default_factory=list)
    removed: List[Alert] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.new or self.updated or self.removed)


def fingerprint(alert: Alert) -> str:
    return f"{alert.title}_{alert.sent or ''}_{alert.severity}"


def diff_alerts(previous: Iterable[Alert], fresh: Iterable[Alert]) -> AlertChanges:
    """
    Compare two refreshes of the same location.

    An alert with an unseen fingerprint is "updated" when an earlier alert
    had the same title, else "new". Earlier titles that vanished are "removed".
    """
    prev = list(previous)
    cur = list(fresh)
    prev_prints: Set[str] = {fingerprint(a) for a in prev}
    prev_titles: Set[str] = {a.title for a in prev}
    cur_titles: Set[str] = {a.title for a in cur}

    out = AlertChanges()
    for a in cur:
        if fingerprint(a) in prev_prints:
            continue
        if a.title in prev_titles:
            out.updated.append(a)
        else:
            out.new.append(a)

    out.removed = [a for a in prev if a.title not in cur_titles]
    return out
