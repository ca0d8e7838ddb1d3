"""Tests for LiveTrackingAgent and the fetch_live_tracking node."""

from agents.live_tracking_agent import (
    NOT_CONFIGURED_MESSAGE,
    NOT_FOUND_MESSAGE,
    LiveTrackingAgent,
    fetch_live_tracking,
)
from errors import TrackingRateLimitedError
from models.tracking import ProviderRejected, TrackingSnapshot, TrackingStatus

from .conftest import FakeTracking, make_order


SNAPSHOT = TrackingSnapshot(
    tracking_number="1Z999",
    status_code=TrackingStatus.IN_TRANSIT,
    status_text="InTransit",
    carrier_name="UPS",
    carrier_code=100002,
)
REJECTED = ProviderRejected("1Z999", "Tracking number not registered", -18019902)


class TestTrack:
    """Register-and-retry-once semantics."""

    def test_direct_hit(self):
        tracking = FakeTracking(results={"1Z999": [SNAPSHOT]})

        assert LiveTrackingAgent(tracking).track("1Z999") == (SNAPSHOT, None)
        assert tracking.registered == []

    def test_rejected_then_registered_then_found(self):
        tracking = FakeTracking(results={"1Z999": [REJECTED, SNAPSHOT]})

        snapshot, error = LiveTrackingAgent(tracking).track("1Z999")

        assert snapshot == SNAPSHOT
        assert error is None
        assert tracking.registered == ["1Z999"]
        assert tracking.lookups == ["1Z999", "1Z999"]

    def test_second_rejection_is_not_retried_again(self):
        tracking = FakeTracking(results={"1Z999": [REJECTED, REJECTED]})

        snapshot, error = LiveTrackingAgent(tracking).track("1Z999")

        assert snapshot is None
        assert error == "Tracking number rejected: Tracking number not registered"
        assert len(tracking.lookups) == 2

    def test_registration_rejected(self):
        tracking = FakeTracking(results={"1Z999": [REJECTED]}, register_accepts=False)

        snapshot, error = LiveTrackingAgent(tracking).track("1Z999")

        assert snapshot is None
        assert error == "Tracking number rejected: Invalid tracking number"
        assert tracking.lookups == ["1Z999"]

    def test_rate_limit_message(self):
        tracking = FakeTracking(error=TrackingRateLimitedError("429"))

        assert LiveTrackingAgent(tracking).track("1Z999") == (
            None, "Rate limit exceeded. Please try again later."
        )
        assert tracking.registered == []

    def test_not_found(self):
        assert LiveTrackingAgent(FakeTracking()).track("1Z999") == (None, NOT_FOUND_MESSAGE)

    def test_not_configured(self):
        assert LiveTrackingAgent(None).track("1Z999") == (None, NOT_CONFIGURED_MESSAGE)


class TestNode:
    """The workflow node only calls the provider when asked to."""

    def test_skipped_without_live_flag(self):
        tracking = FakeTracking(results={"1Z999": [SNAPSHOT]})
        state = {"live_tracking": False, "order": make_order(carrier_tracking_number="1Z999")}

        result = fetch_live_tracking(state, tracking)

        assert result == {"tracking_snapshot": None, "tracking_error": None}
        assert tracking.lookups == []

    def test_prefers_carrier_number(self):
        tracking = FakeTracking(results={"1Z999": [SNAPSHOT]})
        order = make_order(carrier_tracking_number="1Z999", marketplace_tracking_number="WM123")

        result = fetch_live_tracking({"live_tracking": True, "order": order}, tracking)

        assert result["tracking_snapshot"] == SNAPSHOT
        assert tracking.lookups == ["1Z999"]

    def test_order_without_numbers(self):
        tracking = FakeTracking()

        result = fetch_live_tracking({"live_tracking": True, "order": make_order()}, tracking)

        assert result["tracking_error"] is None
        assert tracking.lookups == []
