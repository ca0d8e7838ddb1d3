"""Integration tests for CaseOrchestrator running the compiled workflow with fakes."""

import json
from datetime import date

import pytest

from clients import DashboardClients
from errors import CaseNotFoundError, ValidationError
from orchestrator.case_orchestrator import CaseOrchestrator
from models.tracking import TrackingSnapshot, TrackingStatus

from .conftest import (
    CASE_ID,
    NOW,
    OTHER_CASE_ID,
    FakeFetcher,
    FakeGenerator,
    FakeTracking,
    make_case,
    make_order,
)


SUMMARY_JSON = json.dumps({
    "summary": "Parcel shipped, customer has not received it.",
    "keyFindings": ["Order has already shipped"],
    "recommendations": ["Share the marketplace tracking number"],
    "canFulfillRequest": True,
    "reason": "Parcel is in transit",
})

DELIVERED = TrackingSnapshot(
    tracking_number="1Z999",
    status_code=TrackingStatus.DELIVERED,
    status_text="Delivered",
    carrier_name="UPS",
    carrier_code=100002,
    last_event_at=NOW,
)


def shipped_order():
    return make_order(carrier_tracking_number="1Z999", marketplace_tracking_number="WM123")


def make_orchestrator(fetcher=None, tracking=None, generator=None):
    fetcher = fetcher or FakeFetcher(cases=[make_case()], orders=[shipped_order()])
    clients = DashboardClients(fetcher=fetcher, tracking=tracking or FakeTracking(), generator=generator)
    return CaseOrchestrator(clients, now_fn=lambda: NOW)


class TestViewCase:
    """The view flow loads, reconciles and classifies."""

    def test_invalid_id_fails_before_any_fetch(self):
        orchestrator = make_orchestrator()

        with pytest.raises(ValidationError):
            orchestrator.view_case("rec'); DROP")
        assert orchestrator.clients.fetcher.calls == []

    def test_missing_case(self):
        result = make_orchestrator().view_case(OTHER_CASE_ID)

        assert result["error"] == "Case not found"
        assert result["case"] is None
        assert result["checklist"] == []

    def test_store_failure(self):
        fetcher = FakeFetcher(cases=[make_case()])
        fetcher.fail_get_case = True

        result = make_orchestrator(fetcher).view_case(CASE_ID)

        assert result["error"] == "Failed to load case"

    def test_full_view(self):
        result = make_orchestrator().view_case(CASE_ID)

        assert result["error"] is None
        assert result["has_order"] is True
        assert result["case"]["order"]["carrier_tracking_number"] == "1Z999"
        assert result["reconciliation"]["tracking_mismatch"] is True
        assert result["reconciliation"]["canonical_customer_tracking_number"] == "WM123"
        assert result["reconciliation"]["live"] is False
        assert result["cancel_eligibility"] == "Cannot Cancel"
        assert result["aging"] == {"age_hours": 24, "is_overdue": False, "is_critical": False}
        assert result["escalation_level"] == "normal"
        assert result["tracking"] is None
        assert result["ai_summary"] is None
        assert "resolve-tracking-mismatch" in [i["id"] for i in result["checklist"]]

    def test_case_without_order(self):
        fetcher = FakeFetcher(cases=[make_case()])

        result = make_orchestrator(fetcher).view_case(CASE_ID)

        assert result["has_order"] is False
        assert result["reconciliation"] is None
        assert result["cancel_eligibility"] is None
        assert result["aging"]["age_hours"] == 24

    def test_live_tracking_uses_snapshot(self):
        tracking = FakeTracking(results={"1Z999": [DELIVERED]})

        result = make_orchestrator(tracking=tracking).view_case(CASE_ID, live_tracking=True)

        assert tracking.lookups == ["1Z999"]
        assert result["tracking"]["status_text"] == "Delivered"
        assert result["reconciliation"]["live"] is True
        assert result["reconciliation"]["is_delivered"] is True
        assert "file-claim" in [i["id"] for i in result["checklist"]]

    def test_live_tracking_error_is_reported_not_raised(self):
        tracking = FakeTracking(results={"1Z999": [None]})

        result = make_orchestrator(tracking=tracking).view_case(CASE_ID, live_tracking=True)

        assert result["error"] is None
        assert result["tracking_error"] == "Tracking information not found"
        assert result["reconciliation"]["live"] is False

    def test_stream_yields_node_updates(self):
        updates = list(make_orchestrator().view_case_stream(CASE_ID))

        nodes = [name for update in updates for name in update]
        assert nodes == ["load_case", "load_order", "fetch_live_tracking", "derive_order_status", "derive_case_status"]


class TestAiActions:
    """Summary and reply actions."""

    def test_summary_is_generated_and_cached(self):
        fetcher = FakeFetcher(cases=[make_case()], orders=[shipped_order()])
        generator = FakeGenerator(response=SUMMARY_JSON)
        orchestrator = make_orchestrator(fetcher, generator=generator)

        first = orchestrator.get_ai_summary(CASE_ID)
        second = orchestrator.get_ai_summary(CASE_ID)

        assert first["summary_cached"] is False
        assert first["ai_summary"]["summary"].startswith("Parcel shipped")
        assert second["summary_cached"] is True
        assert len(generator.prompts) == 1
        assert "Cancel eligibility: Cannot Cancel" in generator.prompts[0]["prompt"]

    def test_malformed_cached_summary_is_regenerated(self):
        case = make_case(ai_summary=json.dumps({"summary": "x", "keyFindings": 5}))
        fetcher = FakeFetcher(cases=[case], orders=[shipped_order()])
        generator = FakeGenerator(response=SUMMARY_JSON)

        result = make_orchestrator(fetcher, generator=generator).get_ai_summary(CASE_ID)

        assert result["summary_cached"] is False
        assert result["summary_error"] is None
        assert result["ai_summary"]["key_findings"] == ["Order has already shipped"]

    def test_summary_without_generator(self):
        result = make_orchestrator().get_ai_summary(CASE_ID)

        assert result["ai_summary"]["reason"] == "AI not configured"

    def test_reply_uses_customer_tracking_number(self):
        generator = FakeGenerator(response="Hi Jamie, here is your tracking: WM123")

        result = make_orchestrator(generator=generator).generate_reply(CASE_ID)

        assert result["draft_reply"] == "Hi Jamie, here is your tracking: WM123"
        assert result["reply_error"] is None
        assert "1Z999" not in generator.prompts[0]["prompt"]

    def test_reply_failure(self):
        result = make_orchestrator(generator=FakeGenerator(error=True)).generate_reply(CASE_ID)

        assert result["draft_reply"] is None
        assert result["reply_error"] == "Unable to generate draft reply. Please compose manually."


class TestRecords:
    """Plain record operations."""

    def test_list_cases_triage(self):
        fresh = make_case(id="rec00000000000001", created_time="2024-06-10T10:00:00Z")
        critical = make_case(id="rec00000000000002", created_time="2024-06-07T12:00:00Z")
        orchestrator = make_orchestrator(FakeFetcher(cases=[fresh, critical]))

        rows = orchestrator.list_cases(triage=True)

        assert [r["case"]["id"] for r in rows] == [critical.id, fresh.id]
        assert rows[0]["escalation_level"] == "critical"
        assert rows[0]["aging"]["age_hours"] == 72

    def test_create_case_validation(self):
        orchestrator = make_orchestrator()

        with pytest.raises(ValidationError):
            orchestrator.create_case("PO-1", "Jamie", "not-an-email", "Where is it?")
        with pytest.raises(ValidationError):
            orchestrator.create_case("PO-1", "Jamie", "jamie@example.com", "   ")
        assert orchestrator.clients.fetcher.created == []

    def test_create_case_without_llm_keeps_caller_values(self):
        orchestrator = make_orchestrator()

        orchestrator.create_case(
            "PO-1002", " Jamie Rivera ", "jamie@example.com", "It arrived broken", issue_category="Damaged Item"
        )

        fields = orchestrator.clients.fetcher.created[0]
        assert fields["customer_name"] == "Jamie Rivera"
        assert fields["issue_category"] == "Damaged Item"
        assert fields["sentiment"] == "Neutral"
        assert fields["urgency"] == "Medium"
        assert fields["status"] == "New"

    def test_create_case_with_llm_triage(self):
        generator = FakeGenerator(response=json.dumps({
            "issueCategory": "Damaged Item", "sentiment": "Frustrated", "urgency": "High", "suggestedActions": [],
        }))
        orchestrator = make_orchestrator(generator=generator)

        orchestrator.create_case("PO-1002", "Jamie", "jamie@example.com", "Broken!!", issue_category="Other")

        fields = orchestrator.clients.fetcher.created[0]
        assert fields["issue_category"] == "Damaged Item"
        assert fields["urgency"] == "High"

    def test_update_case_rejects_unknown_status(self):
        orchestrator = make_orchestrator()

        with pytest.raises(ValidationError):
            orchestrator.update_case(CASE_ID, {"status": "Deleted"})
        assert orchestrator.clients.fetcher.updates == []

    def test_resolving_sets_resolved_at_and_reattaches_order(self):
        orchestrator = make_orchestrator()

        case = orchestrator.update_case(CASE_ID, {"status": "Resolved", "internal_notes": "  refunded  "})

        _, updates = orchestrator.clients.fetcher.updates[0]
        assert updates["resolved_at"] == NOW.isoformat()
        assert updates["internal_notes"] == "refunded"
        assert case.order is not None

    def test_search_clamps_days_and_requires_names(self):
        orchestrator = make_orchestrator()

        result = orchestrator.search_orders_by_name("Jamie", "Rivera", days_back=365)
        assert result["meta"]["days_back"] == 90
        assert orchestrator.clients.fetcher.search_args == ("Jamie", "Rivera", None, 90, date(2024, 6, 10))

        assert orchestrator.search_orders_by_name("Jamie", "Rivera", days_back=1)["meta"]["days_back"] == 7

        with pytest.raises(ValidationError):
            orchestrator.search_orders_by_name("J", "Rivera")

    def test_customer_history_requires_email(self):
        with pytest.raises(ValidationError):
            make_orchestrator().customer_history("nope")

    def test_customer_history_excludes_current_case(self):
        other = make_case(id=OTHER_CASE_ID)
        orchestrator = make_orchestrator(FakeFetcher(cases=[make_case(), other]))

        history = orchestrator.customer_history("jamie@example.com", exclude_case_id=CASE_ID)

        assert [c["id"] for c in history["cases"]] == [OTHER_CASE_ID]

    def test_track_package(self):
        tracking = FakeTracking(results={"1Z999": [DELIVERED]})

        result = make_orchestrator(tracking=tracking).track_package(" 1Z999 ")

        assert result["success"] is True
        assert result["data"]["status"] == "DELIVERED"
        assert tracking.lookups == ["1Z999"]

    def test_update_missing_case(self):
        with pytest.raises(CaseNotFoundError):
            make_orchestrator().update_case(OTHER_CASE_ID, {"status": "In Progress"})

    def test_case_stats(self):
        stats = make_orchestrator().case_stats()

        assert stats["new"] == 1
        assert stats["overdue"] == 0
