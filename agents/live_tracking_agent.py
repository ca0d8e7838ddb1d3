# LiveTrackingAgent
# On-demand live lookup of an order's shipment with the tracking provider.
# A number the provider does not know yet is registered and looked up once more.

from typing import Any, Dict, Optional, Tuple

from errors import TrackingProviderError
from models.order import OrderInfo
from models.tracking import ProviderRejected, TrackingSnapshot
from utils.logger import log_error, logger


NOT_CONFIGURED_MESSAGE = "17Track API key not configured"
NOT_FOUND_MESSAGE = "Tracking information not found"


def lookup_number(order: OrderInfo) -> Optional[str]:
    """The provider can only track the carrier number; fall back to the marketplace number."""
    return order.carrier_tracking_number or order.marketplace_tracking_number


class LiveTrackingAgent:
    """
    Wraps a tracking provider client (anything with lookup() and register()).
    Provider failures are turned into user-facing messages, never raised.
    """

    def __init__(self, tracking_client):
        self.client = tracking_client

    def track(self, tracking_number: str) -> Tuple[Optional[TrackingSnapshot], Optional[str]]:
        """
        Returns:
            (snapshot, None) on success, (None, message) otherwise
        """
        if self.client is None:
            return None, NOT_CONFIGURED_MESSAGE

        try:
            result = self.client.lookup(tracking_number)
            if isinstance(result, ProviderRejected):
                logger.info(f"📝 {tracking_number} rejected ({result.reason}), registering and retrying once")
                registration = self.client.register([tracking_number])
                if tracking_number not in registration.get("accepted", []):
                    rejected = registration.get("rejected") or [result]
                    return None, f"Tracking number rejected: {rejected[0].reason}"
                result = self.client.lookup(tracking_number)
        except TrackingProviderError as e:
            log_error(f"Live tracking failed for {tracking_number}", e)
            return None, e.user_message

        if isinstance(result, ProviderRejected):
            return None, f"Tracking number rejected: {result.reason}"
        if result is None:
            return None, NOT_FOUND_MESSAGE
        return result, None


def fetch_live_tracking(state: Dict[str, Any], tracking_client) -> Dict[str, Any]:
    """
    Node function for the LangGraph workflow.
    Runs only when the caller asked for live tracking and the case has an order.
    """
    from utils.logger import log_node_start, log_node_end

    log_node_start("fetch_live_tracking", live_tracking=state.get("live_tracking", False))

    order = state.get("order")
    if not state.get("live_tracking") or order is None:
        log_node_end("fetch_live_tracking", {"snapshot": "skipped"})
        return {"tracking_snapshot": None, "tracking_error": None}

    number = lookup_number(order)
    if not number:
        logger.info("📭 Order has no tracking number yet")
        log_node_end("fetch_live_tracking", {"snapshot": "no tracking number"})
        return {"tracking_snapshot": None, "tracking_error": None}

    snapshot, error = LiveTrackingAgent(tracking_client).track(number)
    result = {"tracking_snapshot": snapshot, "tracking_error": error}
    log_node_end("fetch_live_tracking", {
        "status": snapshot.status_text if snapshot else None,
        "tracking_error": error,
    })
    return result
