from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import Alert


# Top-level string fields of an alert record that get cut down for the UI.
FIELD_LIMITS: Dict[str, int] = {
    "id": 300,
    "title": 160,
    "headline": 220,
    "coverage": 320,
}


def _trim_fields(record: Dict[str, Any]) -> None:
    for key, limit in FIELD_LIMITS.items():
        text = record.get(key) or ""
        record[key] = text[:limit]
    if not record["title"]:
        record["title"] = "Weather Alert"


def _distinct(names: Optional[List[str]]) -> List[str]:
    """Area names / alert ids in first-seen order, blanks dropped."""
    return list(dict.fromkeys(n.strip() for n in names or [] if n and n.strip()))


def atomic_write_json(path: str, payload: Dict[str, Any]) -> None:
    """
    Write the feed next to its target and rename it into place, so readers
    never see a half-written file.
    """
    target = Path(path)
    if target.parent != Path("."):
        target.parent.mkdir(parents=True, exist_ok=True)

    tmp = target.with_name(f".{target.name}.{os.getpid()}.tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
        f.write("\n")
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, target)


def build_alert_feed_payload(
    *,
    province: Optional[str],
    office: Optional[str],
    location_name: Optional[str],
    generated_at_iso: str,
    alerts: Iterable[Alert],
    source: str = "Environment Canada CAP",
) -> Dict[str, Any]:
    records: List[Dict[str, Any]] = []
    for a in alerts:
        rec = a.to_dict()
        _trim_fields(rec)
        rec["areas"] = _distinct(rec.get("areas"))
        rec["supersedes"] = _distinct(rec.get("supersedes"))
        records.append(rec)

    return {
        "province": province,
        "office": office,
        "location": location_name,
        "generatedAt": generated_at_iso,
        "source": source,
        "alerts": records,
    }
