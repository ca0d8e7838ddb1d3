# TrackingNormalizer
# Turns one raw tracking provider entry into a canonical TrackingSnapshot.
# The provider has shipped several payload shapes over time; each shape is an
# EventSource with a structural probe, tried in precedence order.

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from models.tracking import (
    STATUS_LABELS,
    ProviderRejected,
    TrackingEvent,
    TrackingSnapshot,
    TrackingStatus,
)
from utils.dates import parse_timestamp
from utils.logger import logger


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _make_event(timestamp: Any, description: Any, location: Any) -> TrackingEvent:
    raw = _str(timestamp) or ""
    return TrackingEvent(
        timestamp=raw,
        description=_str(description) or "",
        location=_str(location),
        occurred_at=parse_timestamp(raw),
    )


# ============ Event sources ============

@dataclass(frozen=True)
class EventSource:
    """
    One known payload shape.

    probe: does the entry carry this shape at all?
    extract: pull raw events out of the entry (unsorted, may contain duplicates)
    """

    name: str
    probe: Callable[[Dict[str, Any]], bool]
    extract: Callable[[Dict[str, Any]], List[TrackingEvent]]


def _providers(entry: Dict[str, Any]) -> List[Dict[str, Any]]:
    track_info = _dict(entry.get("track_info"))
    return [_dict(p) for p in _list(_dict(track_info.get("tracking")).get("providers"))]


def _probe_providers(entry: Dict[str, Any]) -> bool:
    return bool(_providers(entry))


def _extract_providers(entry: Dict[str, Any]) -> List[TrackingEvent]:
    events = []
    for provider in _providers(entry):
        for e in _list(provider.get("events")):
            e = _dict(e)
            timestamp = e.get("time_utc") or e.get("time_iso") or e.get("time_raw")
            events.append(_make_event(timestamp, e.get("description"), e.get("location")))
    return events


def _probe_latest_event(entry: Dict[str, Any]) -> bool:
    return bool(_dict(_dict(entry.get("track_info")).get("latest_event")))


def _extract_latest_event(entry: Dict[str, Any]) -> List[TrackingEvent]:
    e = _dict(_dict(entry.get("track_info")).get("latest_event"))
    timestamp = e.get("time_utc") or e.get("time_iso")
    return [_make_event(timestamp, e.get("description"), e.get("location"))]


LEGACY_BUCKETS = ("z0", "z1", "z2")


def _probe_legacy_buckets(entry: Dict[str, Any]) -> bool:
    track = _dict(entry.get("track"))
    return any(_list(track.get(bucket)) for bucket in LEGACY_BUCKETS)


def _extract_legacy_buckets(entry: Dict[str, Any]) -> List[TrackingEvent]:
    track = _dict(entry.get("track"))
    events = []
    for bucket in LEGACY_BUCKETS:
        for e in _list(track.get(bucket)):
            e = _dict(e)
            events.append(_make_event(e.get("a"), e.get("z"), e.get("c")))
    return events


# Precedence order: first source that matches and yields events wins; sources are never merged
EVENT_SOURCES = (
    EventSource("providers", _probe_providers, _extract_providers),
    EventSource("latest_event", _probe_latest_event, _extract_latest_event),
    EventSource("legacy_buckets", _probe_legacy_buckets, _extract_legacy_buckets),
)


# ============ Status ============

# Keyword rules for the textual status, checked in order.
# "undelivered" and "failure" must be checked before "delivered".
STATUS_KEYWORDS = (
    (("undelivered", "fail"), TrackingStatus.UNDELIVERED),
    (("delivered",), TrackingStatus.DELIVERED),
    (("transit", "shipping", "inforeceived"), TrackingStatus.IN_TRANSIT),
    (("pickup",), TrackingStatus.PICKUP),
    (("expired",), TrackingStatus.EXPIRED),
    (("alert", "exception"), TrackingStatus.ALERT),
)


def status_code_from_text(text: str) -> TrackingStatus:
    lowered = text.lower()
    for keywords, status in STATUS_KEYWORDS:
        if any(k in lowered for k in keywords):
            return status
    return TrackingStatus.NOT_FOUND


def status_from_legacy_code(code: Any) -> tuple:
    """Map the legacy numeric status. Unknown codes become (NOT_FOUND, 'Unknown')."""
    try:
        status = TrackingStatus(int(code))
    except (TypeError, ValueError):
        return TrackingStatus.NOT_FOUND, "Unknown"
    return status, STATUS_LABELS[status]


class TrackingNormalizer:
    """
    Normalizes raw tracking provider entries. Pure: the same entry always
    produces an equal snapshot, and shape problems never raise.
    """

    def __init__(self, sources=EVENT_SOURCES):
        self.sources = tuple(sources)

    def normalize_response(
        self, payload: Dict[str, Any], tracking_number: str
    ) -> Union[TrackingSnapshot, ProviderRejected, None]:
        """
        Pick the entry for one tracking number out of a batched provider response.

        Returns:
            TrackingSnapshot for an accepted entry, ProviderRejected for a rejected
            one, or None if the number is in neither list.
        """
        data = _dict(_dict(payload).get("data"))
        for entry in _list(data.get("accepted")):
            if _dict(entry).get("number") == tracking_number:
                return self.normalize_entry(entry)
        for entry in _list(data.get("rejected")):
            if _dict(entry).get("number") == tracking_number:
                return self.normalize_entry(entry, rejected=True)
        logger.warning(f"⚠️ No tracking entry returned for {tracking_number}")
        return None

    def normalize_entry(
        self, entry: Dict[str, Any], rejected: bool = False
    ) -> Union[TrackingSnapshot, ProviderRejected]:
        entry = _dict(entry)
        number = _str(entry.get("number")) or ""

        if rejected:
            error = _dict(entry.get("error"))
            code = error.get("code")
            return ProviderRejected(
                tracking_number=number,
                reason=_str(error.get("message")) or "Rejected by tracking provider",
                code=code if isinstance(code, int) else None,
            )

        track = _dict(entry.get("track"))
        track_info = _dict(entry.get("track_info"))
        time_metrics = _dict(track_info.get("time_metrics"))
        shipping_info = _dict(track_info.get("shipping_info"))
        providers = _providers(entry)
        first_provider = providers[0] if providers else {}

        source_name, events = self.select_events(entry)
        status_code, status_text = self.derive_status(entry)

        carrier = _dict(first_provider.get("provider"))
        carrier_name = (
            _str(carrier.get("name"))
            or _str(carrier.get("alias"))
            or (f"Carrier {track['b']}" if track.get("b") else None)
            or (f"Carrier {entry['carrier']}" if entry.get("carrier") else "Unknown")
        )
        carrier_code = track.get("b") or entry.get("carrier") or 0

        estimated = _dict(time_metrics.get("estimated_delivery_date"))
        estimated_delivery_at = parse_timestamp(
            track.get("d") or estimated.get("from") or estimated.get("to")
        )

        last_event_at = next((e.occurred_at for e in events if e.occurred_at), None)
        if last_event_at is None:
            last_event_at = parse_timestamp(first_provider.get("latest_sync_time"))

        days = time_metrics.get("days_of_transit")

        return TrackingSnapshot(
            tracking_number=number,
            status_code=status_code,
            status_text=status_text,
            carrier_name=carrier_name,
            carrier_code=carrier_code if isinstance(carrier_code, int) else 0,
            events=tuple(events),
            days_in_transit=int(days) if isinstance(days, (int, float)) else None,
            estimated_delivery_at=estimated_delivery_at,
            last_event_at=last_event_at,
            origin=_str(track.get("w1")) or _str(_dict(shipping_info.get("shipper_address")).get("country")),
            destination=_str(track.get("w2")) or _str(_dict(shipping_info.get("recipient_address")).get("country")),
            event_source=source_name,
        )

    def select_events(self, entry: Dict[str, Any]) -> tuple:
        """
        Take events from the first matching, non-empty source.

        Returns:
            (source name or None, deduplicated events newest first)
        """
        for source in self.sources:
            if not source.probe(entry):
                continue
            events = source.extract(entry)
            if events:
                return source.name, sort_events(dedupe_events(events))
        return None, []

    def derive_status(self, entry: Dict[str, Any]) -> tuple:
        """Explicit status text first, then the legacy numeric code, else NOT_FOUND."""
        latest_status = _dict(_dict(entry.get("track_info")).get("latest_status"))
        text = _str(latest_status.get("status"))
        if text:
            return status_code_from_text(text), text

        track = _dict(entry.get("track"))
        if track.get("e") is not None:
            return status_from_legacy_code(track.get("e"))

        return TrackingStatus.NOT_FOUND, STATUS_LABELS[TrackingStatus.NOT_FOUND]


def dedupe_events(events: List[TrackingEvent]) -> List[TrackingEvent]:
    """Drop repeated (timestamp, description) pairs, keeping the first occurrence."""
    seen = set()
    result = []
    for event in events:
        if event.dedup_key in seen:
            continue
        seen.add(event.dedup_key)
        result.append(event)
    return result


def sort_events(events: List[TrackingEvent]) -> List[TrackingEvent]:
    """Newest first. Unparseable timestamps go last, keeping their relative order."""
    return sorted(
        events,
        key=lambda e: (0, -e.occurred_at.timestamp()) if e.occurred_at else (1, 0),
    )
