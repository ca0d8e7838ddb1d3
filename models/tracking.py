# Tracking Models
# Canonical shipment tracking snapshot produced from raw provider payloads

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from utils.dates import isoformat_utc


class TrackingStatus(IntEnum):
    """Provider status codes (17TRACK numeric scheme)."""

    NOT_FOUND = 0
    IN_TRANSIT = 10
    EXPIRED = 20
    PICKUP = 30
    UNDELIVERED = 35
    DELIVERED = 40
    ALERT = 50

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    TrackingStatus.NOT_FOUND: "Not Found",
    TrackingStatus.IN_TRANSIT: "In Transit",
    TrackingStatus.EXPIRED: "Expired",
    TrackingStatus.PICKUP: "Ready for Pickup",
    TrackingStatus.UNDELIVERED: "Undelivered",
    TrackingStatus.DELIVERED: "Delivered",
    TrackingStatus.ALERT: "Alert",
}


@dataclass(frozen=True)
class TrackingEvent:
    """A single carrier scan event."""

    timestamp: str  # raw provider value
    description: str
    location: Optional[str] = None
    occurred_at: Optional[datetime] = None  # None when the timestamp is unparseable

    @property
    def dedup_key(self) -> Tuple[str, str]:
        return (self.timestamp, self.description)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "description": self.description,
            "location": self.location,
            "occurred_at": isoformat_utc(self.occurred_at),
        }


@dataclass(frozen=True)
class TrackingSnapshot:
    """Result of one live provider lookup. Transient, never persisted."""

    tracking_number: str
    status_code: TrackingStatus
    status_text: str
    carrier_name: str
    carrier_code: int
    events: Tuple[TrackingEvent, ...] = ()  # newest first
    days_in_transit: Optional[int] = None
    estimated_delivery_at: Optional[datetime] = None
    last_event_at: Optional[datetime] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    event_source: Optional[str] = None  # which payload shape supplied the events

    @property
    def is_delivered(self) -> bool:
        return self.status_code == TrackingStatus.DELIVERED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tracking_number": self.tracking_number,
            "status_code": int(self.status_code),
            "status": self.status_code.name,
            "status_text": self.status_text,
            "carrier_name": self.carrier_name,
            "carrier_code": self.carrier_code,
            "events": [e.to_dict() for e in self.events],
            "days_in_transit": self.days_in_transit,
            "estimated_delivery_at": isoformat_utc(self.estimated_delivery_at),
            "last_event_at": isoformat_utc(self.last_event_at),
            "origin": self.origin,
            "destination": self.destination,
            "event_source": self.event_source,
        }


@dataclass(frozen=True)
class ProviderRejected:
    """The provider refused a tracking number (usually because it is not registered)."""

    tracking_number: str
    reason: str
    code: Optional[int] = None
