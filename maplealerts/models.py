from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


class MsgType(Enum):
    ALERT = "Alert"
    UPDATE = "Update"
    CANCEL = "Cancel"
    ALLCLEAR = "AllClear"
    ACK = "Ack"
    ERROR = "Error"

    @classmethod
    def parse(cls, raw: str | None) -> "MsgType":
        s = (raw or "").strip()
        for m in cls:
            if m.value.lower() == s.lower():
                return m
        return cls.ALERT


class ResponseType(Enum):
    ALL_CLEAR = "AllClear"
    OTHER = "Other"

    @classmethod
    def parse(cls, raw: str | None) -> "ResponseType":
        if (raw or "").strip().lower() == "allclear":
            return cls.ALL_CLEAR
        return cls.OTHER


class Classification(NamedTuple):
    color: str
    severity: str
    kind: str


@dataclass(frozen=True)
class Bulletin:
    identifier: str
    sender: str
    sent: Optional[str]
    msg_type: MsgType
    references: Tuple[str, ...] = ()


@dataclass
class AlertDetails:
    issued_time: Optional[str] = None
    impact_level: str = ""
    forecast_confidence: str = ""
    summary: str = ""
    what: str = ""
    when: str = ""
    where: str = ""
    remarks: str = ""
    additional_info: str = ""
    in_effect_for: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issuedTime": self.issued_time,
            "impactLevel": self.impact_level,
            "forecastConfidence": self.forecast_confidence,
            "summary": self.summary,
            "what": self.what,
            "when": self.when,
            "where": self.where,
            "remarks": self.remarks,
            "additionalInfo": self.additional_info,
            "inEffectFor": self.in_effect_for,
        }


@dataclass
class Alert:
    """
    One user-facing alert built from a single CAP info block.

    `supersedes` carries the identifiers the source bulletin referenced;
    `matched_area` is only set once the alert has been filtered against a
    location.
    """
    id: str
    title: str
    description: str = ""
    instruction: str = ""
    headline: str = ""
    details: AlertDetails = field(default_factory=AlertDetails)
    details_url: str = ""
    sent: Optional[str] = None
    expires: Optional[str] = None
    severity: str = "Minor"
    alert_type: str = "STATEMENT"
    ec_color: str = "GREY"
    colors: Dict[str, str] = field(default_factory=dict)
    provider: str = ""
    urgency: Optional[str] = None
    certainty: Optional[str] = None
    event: Optional[str] = None
    areas: List[str] = field(default_factory=list)
    coverage: str = ""
    msg_type: MsgType = MsgType.ALERT
    supersedes: List[str] = field(default_factory=list)
    matched_area: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "instruction": self.instruction,
            "headline": self.headline,
            "details": self.details.to_dict(),
            "detailsUrl": self.details_url,
            "sent": self.sent,
            "expires": self.expires,
            "severity": self.severity,
            "alertType": self.alert_type,
            "ecColor": self.ec_color,
            "colors": dict(self.colors),
            "provider": self.provider,
            "urgency": self.urgency,
            "certainty": self.certainty,
            "event": self.event,
            "areas": list(self.areas),
            "coverage": self.coverage,
            "msgType": self.msg_type.value,
            "supersedes": list(self.supersedes),
            "matchedArea": self.matched_area,
        }


@dataclass(frozen=True)
class ParseResult:
    alerts: List[Alert]
    cancellations: List[str]
    msg_type: Optional[MsgType]

    @classmethod
    def empty(cls, msg_type: Optional[MsgType] = None) -> "ParseResult":
        return cls(alerts=[], cancellations=[], msg_type=msg_type)
