from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List


# Section headers EC uses in alert descriptions. "What: heavy snow" and
# "What:" followed by content lines are both common.
_HEADERS = (
    ("what:", "what"),
    ("when:", "when"),
    ("where:", "where"),
    ("remarks:", "remarks"),
)
_IN_EFFECT_FOR = "in effect for:"

_BOILERPLATE_PREFIXES = (
    "please continue to monitor",
    "for more information",
    "to report severe weather",
)
_BOILERPLATE_SUBSTRINGS = (
    "colour-coded weather alerts",
    "color-coded weather alerts",
    "@ec.gc.ca",
)
# #ONStorm, #BCStorm, #NSStorm ...
_HASHTAG_RE = re.compile(r"#\w*storm\b", re.IGNORECASE)


@dataclass
class Sections:
    summary: str = ""
    what: str = ""
    when: str = ""
    where: str = ""
    remarks: str = ""
    additional_info: str = ""
    in_effect_for: str = ""


def _is_boilerplate(lower: str) -> bool:
    if lower == "###":
        return True
    if lower.startswith(_BOILERPLATE_PREFIXES):
        return True
    if any(s in lower for s in _BOILERPLATE_SUBSTRINGS):
        return True
    return bool(_HASHTAG_RE.search(lower))


def sectionize(text: str | None) -> Sections:
    """
    Split an EC alert description into What/When/Where/Remarks/Summary.

    Best effort over human-written text: missing headers just leave the
    matching field empty, nothing here raises.
    """
    out = Sections()
    if not text:
        return out

    lines = [ln.strip() for ln in str(text).splitlines()]
    buckets: Dict[str, List[str]] = {
        "summary": [],
        "what": [],
        "when": [],
        "where": [],
        "remarks": [],
    }
    current = "summary"

    for line in lines:
        if not line:
            continue
        lower = line.lower()

        if _is_boilerplate(lower):
            continue

        header = None
        for token, section in _HEADERS:
            if lower.startswith(token):
                header = (token, section)
                break

        if header is not None:
            token, current = header
            rest = line[len(token):].strip()
            if rest:
                buckets[current].append(rest)
        elif lower.startswith(_IN_EFFECT_FOR):
            out.in_effect_for = line[len(_IN_EFFECT_FOR):].strip()
            current = "remarks"
        else:
            buckets[current].append(line)

    out.summary = "\n".join(buckets["summary"])
    out.what = "\n".join(buckets["what"])
    out.when = "\n".join(buckets["when"])
    out.where = "\n".join(buckets["where"])
    out.remarks = "\n".join(buckets["remarks"])
    return out
