from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Mapping, NamedTuple, Optional, Sequence

from .models import Alert
from .regions import QUALIFIER_REGIONS, REGION_KEYWORDS

log = logging.getLogger("maplealerts.geo")


class GeoMatch(NamedTuple):
    matched: bool
    matched_area: Optional[str]


_NO_FILTER = GeoMatch(True, None)
_NO_MATCH = GeoMatch(False, None)


def _any_keyword(location: str, keywords: Sequence[str]) -> Optional[str]:
    for kw in keywords:
        if kw in location:
            return kw
    return None


def match_location(
    alert: Alert,
    location_name: str | None,
    regions: Mapping[str, Sequence[str]] = REGION_KEYWORDS,
) -> GeoMatch:
    """
    Keyword heuristic deciding whether an alert's area descriptions cover a
    reverse-geocoded place name. Not a geofence: false hits and misses are
    expected on odd place names.
    """
    if not alert.areas:
        return _NO_FILTER
    if not location_name:
        return _NO_FILTER

    loc = location_name.lower()
    for area in alert.areas:
        a = area.lower()

        if loc in a:
            log.debug("Direct match: %r in area %r", location_name, area)
            return GeoMatch(True, area)

        qualifier = next((q for q in QUALIFIER_REGIONS if q in a), None)
        if qualifier is not None:
            kw = _any_keyword(loc, regions.get(qualifier, ()))
            if kw:
                log.debug("%s match: %r via %r", qualifier.capitalize(), area, kw)
                return GeoMatch(True, area)
            # a coastal/inland area only ever matches through its own keywords
            continue

        for region, keywords in regions.items():
            if region in QUALIFIER_REGIONS or region not in a:
                continue
            kw = _any_keyword(loc, keywords)
            if kw:
                log.debug("Region match: %r (%s) via %r", area, region, kw)
                return GeoMatch(True, area)

    return _NO_MATCH


def filter_by_location(alerts: Iterable[Alert], location_name: str | None) -> List[Alert]:
    out: List[Alert] = []
    total = 0
    for alert in alerts:
        total += 1
        m = match_location(alert, location_name)
        if m.matched:
            out.append(replace(alert, matched_area=m.matched_area))
    log.info("Location filter: %d of %d alerts apply to %r", len(out), total, location_name)
    return out
