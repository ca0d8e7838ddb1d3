"""Tests for ReplyDraftAgent prompt building and failure handling."""

from agents.order_reconciliation_agent import reconcile_order
from agents.reply_draft_agent import (
    REPLY_FAILED_MESSAGE,
    REPLY_NOT_CONFIGURED_MESSAGE,
    ReplyDraftAgent,
    build_order_context,
    build_persona,
    build_reply_prompt,
    load_reply_context,
)
from models.case import Playbook, Store
from models.order import OrderTrackingFacts
from prompts.prompts import DEFAULT_PERSONA_PROMPT

from .conftest import NOW, FakeFetcher, FakeGenerator, make_case, make_order


def reconciled(order):
    return reconcile_order(OrderTrackingFacts.from_order(order), now=NOW)


class TestCustomerTrackingNumber:
    """Only the canonical customer-facing number reaches the model."""

    def test_carrier_number_never_leaks_when_marketplace_number_exists(self):
        order = make_order(carrier_tracking_number="1Z999", marketplace_tracking_number="WM123")

        prompt = build_reply_prompt(make_case(), order, reconciliation=reconciled(order))

        assert "WM123" in prompt
        assert "1Z999" not in prompt

    def test_upload_gap_uses_carrier_number(self):
        order = make_order(carrier_tracking_number="1Z999")

        context = build_order_context(order, reconciled(order))

        assert "Tracking Number (for customer): 1Z999" in context
        assert "use this tracking number: 1Z999" in context

    def test_without_reconciliation_still_canonical(self):
        order = make_order(carrier_tracking_number="1Z999", marketplace_tracking_number="WM123")

        context = build_order_context(order)

        assert "1Z999" not in context
        assert "WM123" in context

    def test_no_tracking_yet(self):
        context = build_order_context(make_order())

        assert "Not yet shipped" in context
        assert "IMPORTANT" not in context


class TestPersona:
    def test_default_persona(self):
        assert build_persona(None) == DEFAULT_PERSONA_PROMPT
        assert build_persona(Store(id="recSTOREAAAAAAAAA", store_code="ST1")) == DEFAULT_PERSONA_PROMPT

    def test_store_persona_is_the_system_prompt(self):
        store = Store(id="recSTOREAAAAAAAAA", store_code="ST1", persona_name="Dana", persona_age=31)
        generator = FakeGenerator(response="  Hi Jamie, your parcel is on its way.  ")

        result = ReplyDraftAgent(generator).draft({"case": make_case(), "order": None, "store": store})

        assert result["draft_reply"] == "Hi Jamie, your parcel is on its way."
        assert result["persona"] == "Dana"
        assert generator.prompts[0]["system_prompt"].startswith("You are Dana, a 31 year old")


class TestDraft:
    def test_playbook_guidance_in_prompt(self):
        playbook = Playbook(id="recPLAYBOOKAAAAAA", scenario_name="Lost parcel", decision_tree="Check tracking")
        generator = FakeGenerator(response="Reply")

        result = ReplyDraftAgent(generator).draft({"case": make_case(), "playbook": playbook})

        assert result["playbook_name"] == "Lost parcel"
        assert "PLAYBOOK GUIDANCE for Lost parcel" in generator.prompts[0]["prompt"]

    def test_generation_failure(self):
        result = ReplyDraftAgent(FakeGenerator(error=True)).draft({"case": make_case()})

        assert result["draft_reply"] is None
        assert result["reply_error"] == REPLY_FAILED_MESSAGE

    def test_not_configured(self):
        result = ReplyDraftAgent(None).draft({"case": make_case()})

        assert result["reply_error"] == REPLY_NOT_CONFIGURED_MESSAGE

    def test_load_reply_context(self):
        store = Store(id="recSTOREAAAAAAAAA", store_code="ST1", persona_name="Dana")
        playbook = Playbook(id="recPLAYBOOKAAAAAA", issue_category="Not Received", scenario_name="Lost parcel")
        fetcher = FakeFetcher(stores=[store], playbooks=[playbook])

        result = load_reply_context({"case": make_case()}, fetcher)

        assert result == {"store": store, "playbook": playbook}
