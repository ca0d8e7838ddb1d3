# OrderReconciliationAgent
# Combines the stored order tracking fields with an optional live snapshot into the
# derived tracking state the dashboard and the prompt builders consume.
# Rule-based - NO LLM needed.

import math
from datetime import datetime
from typing import Any, Dict, Optional

from config import STALE_TRACKING_DAYS
from models.order import OrderReconciliation, OrderTrackingFacts
from models.tracking import TrackingSnapshot
from utils.dates import utc_now


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and value != ""


def canonical_tracking_number(facts: OrderTrackingFacts) -> Optional[str]:
    """
    The one tracking number that may be shown to the customer:
    marketplace number, else carrier number, else None.
    """
    if _present(facts.marketplace_tracking_number):
        return facts.marketplace_tracking_number
    if _present(facts.carrier_tracking_number):
        return facts.carrier_tracking_number
    return None


def is_stale(last_update_at: Optional[datetime], now: datetime, stale_after: float = STALE_TRACKING_DAYS) -> bool:
    """True when the last update is more than stale_after days old. No update at all is not stale."""
    if last_update_at is None:
        return False
    return (now - last_update_at).total_seconds() > stale_after * 86400


def _text_says_delivered(text: Optional[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return "delivered" in lowered and "undelivered" not in lowered


def reconcile_order(
    facts: OrderTrackingFacts,
    snapshot: Optional[TrackingSnapshot] = None,
    now: Optional[datetime] = None,
    stale_after: float = STALE_TRACKING_DAYS,
) -> OrderReconciliation:
    """
    Derive the tracking state of one order.

    Args:
        facts: Stored tracking fields of the order
        snapshot: Live provider snapshot, if the user requested one
        now: Reference time (defaults to the current UTC time)
        stale_after: Days without an update before tracking counts as stale

    Returns:
        OrderReconciliation. Live snapshot values take precedence for display;
        stored values are the fallback.
    """
    now = now or utc_now()

    has_marketplace = _present(facts.marketplace_tracking_number)
    has_carrier = _present(facts.carrier_tracking_number)

    if snapshot is not None:
        status_text = snapshot.status_text
        detail_text = facts.tracking_detail_status_text
        events = list(snapshot.events)
        last_update_at = snapshot.last_event_at or facts.last_tracking_update_at
        delivered = snapshot.is_delivered
    else:
        status_text = facts.tracking_status_text
        detail_text = facts.tracking_detail_status_text
        events = []
        last_update_at = facts.last_tracking_update_at
        delivered = _text_says_delivered(facts.tracking_status_text)

    days_since_update = None
    if last_update_at is not None:
        days_since_update = max(0, math.floor((now - last_update_at).total_seconds() / 86400))

    return OrderReconciliation(
        has_marketplace_tracking=has_marketplace,
        has_carrier_tracking=has_carrier,
        tracking_mismatch=(
            has_marketplace
            and has_carrier
            and facts.marketplace_tracking_number != facts.carrier_tracking_number
        ),
        upload_gap=has_carrier and not has_marketplace,
        canonical_customer_tracking_number=canonical_tracking_number(facts),
        is_stale=is_stale(last_update_at, now, stale_after),
        is_delivered=delivered or facts.actual_delivery_at is not None,
        display_status_text=status_text,
        display_detail_status_text=detail_text,
        display_events=events,
        last_update_at=last_update_at,
        days_since_update=days_since_update,
        live=snapshot is not None,
    )


def derive_order_status(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Node function for the LangGraph workflow.
    Reconciles the case's order and classifies its cancelability.
    """
    from agents.cancelability_classifier import cancel_guidance, classify_cancelability
    from utils.logger import log_node_start, log_node_end, logger

    log_node_start("derive_order_status", live=state.get("tracking_snapshot") is not None)

    order = state.get("order")
    if order is None:
        logger.info("📭 No order linked to this case, skipping order status")
        result = {
            "tracking_facts": None,
            "reconciliation": None,
            "cancel_eligibility": None,
            "cancel_notes": [],
        }
        log_node_end("derive_order_status", {"reconciliation": "skipped"})
        return result

    facts = OrderTrackingFacts.from_order(order)
    reconciliation = reconcile_order(facts, state.get("tracking_snapshot"), state.get("now"))
    eligibility = classify_cancelability(facts)

    if reconciliation.tracking_mismatch:
        logger.warning("⚠️ Marketplace and carrier tracking numbers differ")
    if reconciliation.upload_gap:
        logger.warning("⚠️ Tracking not uploaded to marketplace")
    if reconciliation.is_stale:
        logger.warning(f"⚠️ No tracking update for {reconciliation.days_since_update} days")
    logger.info(f"🏷️  Cancel eligibility: {eligibility.value}")

    result = {
        "tracking_facts": facts,
        "reconciliation": reconciliation,
        "cancel_eligibility": eligibility,
        "cancel_notes": cancel_guidance(facts),
    }
    log_node_end("derive_order_status", {
        "canonical_tracking": reconciliation.canonical_customer_tracking_number,
        "cancel_eligibility": eligibility.value,
    })
    return result
