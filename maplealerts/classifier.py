from __future__ import annotations

from typing import Dict, Iterable, List

from .models import Alert, Classification


# EC colour-coded alert palette (bg/text/border)
ALERT_COLORS: Dict[str, Dict[str, str]] = {
    "RED": {"bg": "#DC3545", "text": "#FFFFFF", "border": "#B02A37"},
    "YELLOW": {"bg": "#FFC107", "text": "#000000", "border": "#D39E00"},
    "GREY": {"bg": "#6C757D", "text": "#FFFFFF", "border": "#565E64"},
    "ORANGE": {"bg": "#FD7E14", "text": "#FFFFFF", "border": "#DC6A12"},
}

SEVERITY_ORDER: Dict[str, int] = {"Severe": 0, "Moderate": 1, "Minor": 2}

_RED_HAZARDS = ("tornado", "severe thunderstorm", "blizzard", "ice storm", "hurricane")

_RED = Classification("RED", "Severe", "WARNING")
_ORANGE = Classification("ORANGE", "Moderate", "ADVISORY")
_GREY = Classification("GREY", "Minor", "STATEMENT")
_YELLOW_WARNING = Classification("YELLOW", "Moderate", "WARNING")
_YELLOW_WATCH = Classification("YELLOW", "Moderate", "WATCH")
_YELLOW_ADVISORY = Classification("YELLOW", "Moderate", "ADVISORY")


def classify(alert_type: str | None, alert_name: str | None) -> Classification:
    """
    Map a CAP Alert_Type / Alert_Name pair to (colour, severity, kind).

    EC puts the colour in the alert name ("yellow warning - rainfall"), so an
    explicit colour word wins; otherwise fall back on hazard and type words.
    """
    t = (alert_type or "").lower()
    name = (alert_name or "").lower()
    tokens = set(name.split())

    if "red" in tokens:
        return _RED
    if "yellow" in tokens:
        if "advisory" in name:
            return _YELLOW_ADVISORY
        if "watch" in name:
            return _YELLOW_WATCH
        return _YELLOW_WARNING
    if "orange" in tokens:
        return _ORANGE
    if "grey" in tokens or "gray" in tokens:
        return _GREY

    if any(h in name or h in t for h in _RED_HAZARDS):
        return _RED

    if "warning" in t or "warning" in name:
        return _YELLOW_WARNING
    if "watch" in t or "watch" in name:
        return _YELLOW_WATCH
    if "advisory" in t or "advisory" in name:
        return _ORANGE
    if "statement" in t or "statement" in name:
        return _GREY

    return _GREY


def colors_for(color: str) -> Dict[str, str]:
    return dict(ALERT_COLORS.get(color, ALERT_COLORS["GREY"]))


def sort_by_severity(alerts: Iterable[Alert]) -> List[Alert]:
    # stable: keeps crawl order inside a severity band
    return sorted(alerts, key=lambda a: SEVERITY_ORDER.get(a.severity, 2))
