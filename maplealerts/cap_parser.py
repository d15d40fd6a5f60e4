from __future__ import annotations

import datetime as dt
import logging
import time
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional

from .classifier import classify, colors_for
from .config import ParserConfig
from .models import Alert, AlertDetails, Bulletin, MsgType, ParseResult, ResponseType
from .sectionizer import sectionize

log = logging.getLogger("maplealerts.cap")


class CapParseError(ValueError):
    """Raised when a bulletin is not well-formed XML."""


def _local(tag: str) -> str:
    # "{urn:oasis:names:tc:emergency:cap:1.2}info" -> "info"
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _children(el: ET.Element, name: str) -> List[ET.Element]:
    return [c for c in el if _local(c.tag) == name]


def _child(el: ET.Element, name: str) -> Optional[ET.Element]:
    for c in el:
        if _local(c.tag) == name:
            return c
    return None


def _text(el: ET.Element, name: str) -> Optional[str]:
    c = _child(el, name)
    if c is None or c.text is None:
        return None
    s = c.text.strip()
    return s or None


def _parse_time(s: str | None) -> Optional[dt.datetime]:
    if not s:
        return None
    try:
        t = dt.datetime.fromisoformat(s.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if t.tzinfo is None:
        t = t.replace(tzinfo=dt.timezone.utc)
    return t


def parse_references(raw: str | None) -> List[str]:
    """
    CAP references: space-separated "sender,identifier,sent" triples.
    Returns the identifiers, in order.
    """
    out: List[str] = []
    for token in (raw or "").split():
        parts = token.split(",")
        if len(parts) >= 2 and parts[1].strip():
            out.append(parts[1].strip())
    return out


def read_bulletin(root: ET.Element) -> Bulletin:
    return Bulletin(
        identifier=_text(root, "identifier") or "",
        sender=_text(root, "sender") or "",
        sent=_text(root, "sent"),
        msg_type=MsgType.parse(_text(root, "msgType")),
        references=tuple(parse_references(_text(root, "references"))),
    )


def _param(params: Iterable[ET.Element], key: str, default: str) -> str:
    for p in params:
        name = _text(p, "valueName") or ""
        if key in name:
            return _text(p, "value") or default
    return default


def _language_ok(lang: str | None, target: str) -> bool:
    # CAP default language is en-US; an info with no language is English.
    if not lang:
        return True
    return lang.strip().lower() == target.strip().lower()


def parse_cap(
    raw_xml: str | bytes,
    *,
    now: Optional[dt.datetime] = None,
    config: ParserConfig = ParserConfig(),
) -> ParseResult:
    """
    Parse one CAP bulletin into alert drafts plus lifecycle signals.

    Cancel bulletins (and AllClear info blocks) only produce cancellations.
    Expired info blocks are dropped here so they never reach lifecycle
    resolution.
    """
    try:
        root = ET.fromstring(raw_xml)
    except ET.ParseError as e:
        raise CapParseError(f"malformed CAP XML: {e}") from e

    if _local(root.tag) != "alert":
        return ParseResult.empty()

    now = now or dt.datetime.now(tz=dt.timezone.utc)
    bulletin = read_bulletin(root)
    references = list(bulletin.references)

    if bulletin.msg_type is MsgType.CANCEL:
        log.info("CAP Cancel %s: cancelling %d referenced alert(s)", bulletin.identifier, len(references))
        return ParseResult(alerts=[], cancellations=references, msg_type=MsgType.CANCEL)

    infos = _children(root, "info")
    if not infos:
        return ParseResult.empty(bulletin.msg_type)

    alerts: List[Alert] = []
    for info in infos:
        if not _language_ok(_text(info, "language"), config.language):
            continue

        if ResponseType.parse(_text(info, "responseType")) is ResponseType.ALL_CLEAR:
            cancelled = references if references else [bulletin.identifier]
            log.info("CAP AllClear %s: ending %s", bulletin.identifier, ", ".join(cancelled))
            return ParseResult(alerts=[], cancellations=cancelled, msg_type=MsgType.ALLCLEAR)

        expires = _text(info, "expires")
        exp_t = _parse_time(expires)
        if exp_t is not None and exp_t < now:
            log.debug("CAP %s: dropping expired info (expires=%s)", bulletin.identifier, expires)
            continue

        alerts.append(_build_alert(bulletin, info, expires, config))

    return ParseResult(alerts=alerts, cancellations=[], msg_type=bulletin.msg_type)


def _build_alert(bulletin: Bulletin, info: ET.Element, expires: Optional[str], config: ParserConfig) -> Alert:
    params = _children(info, "parameter")
    alert_type = _param(params, "Alert_Type", "statement")
    alert_name = _param(params, "Alert_Name", "Unknown Alert")
    coverage = _param(params, "Alert_Coverage", "Unknown Area")

    color, severity, kind = classify(alert_type, alert_name)

    area_descs = [d for d in (_text(a, "areaDesc") for a in _children(info, "area")) if d]
    areas_text = ", ".join(area_descs) or coverage

    description = _text(info, "description") or ""
    headline = _text(info, "headline")
    certainty = _text(info, "certainty")
    sections = sectionize(description)

    details = AlertDetails(
        issued_time=_text(info, "effective") or bulletin.sent,
        impact_level=severity,
        forecast_confidence=certainty or "Observed",
        summary=sections.summary or headline or "",
        what=sections.what or alert_name,
        when=sections.when,
        where=sections.where or areas_text,
        remarks=sections.remarks,
        additional_info=sections.additional_info,
        in_effect_for=sections.in_effect_for or areas_text,
    )

    return Alert(
        id=bulletin.identifier or f"cap_{int(time.time() * 1000)}",
        title=alert_name,
        description=description,
        instruction=_text(info, "instruction") or "",
        headline=headline or alert_name,
        details=details,
        details_url=_text(info, "web") or config.default_details_url,
        sent=bulletin.sent,
        expires=expires,
        severity=severity,
        alert_type=kind,
        ec_color=color,
        colors=colors_for(color),
        provider=config.provider,
        urgency=_text(info, "urgency"),
        certainty=certainty,
        event=_text(info, "event"),
        areas=area_descs,
        coverage=coverage,
        msg_type=bulletin.msg_type,
        supersedes=list(bulletin.references),
    )
