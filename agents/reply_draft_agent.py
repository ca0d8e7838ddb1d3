# ReplyDraftAgent
# Drafts a customer-facing reply in the store's persona, guided by the issue playbook.
# The only tracking number the model ever sees is the canonical customer-facing one.

from typing import Any, Dict, Optional

from agents.order_reconciliation_agent import canonical_tracking_number
from errors import GenerationError
from models.case import CSCase, Playbook, Store
from models.order import OrderInfo, OrderReconciliation, OrderTrackingFacts
from prompts.prompts import (
    DEFAULT_PERSONA_PROMPT,
    PERSONA_PROMPT,
    PLAYBOOK_GUIDANCE,
    REPLY_ORDER_CONTEXT,
    REPLY_USER_PROMPT,
)
from utils.logger import log_error


REPLY_FAILED_MESSAGE = "Unable to generate draft reply. Please compose manually."
REPLY_NOT_CONFIGURED_MESSAGE = "AI draft replies not available - API key not configured"


def build_persona(store: Optional[Store]) -> str:
    if store is None or not store.persona_name:
        return DEFAULT_PERSONA_PROMPT
    return PERSONA_PROMPT.format(
        persona_name=store.persona_name,
        persona_age=store.persona_age or "professional",
        persona_location=store.persona_location or "the company",
        personality=store.personality_traits or "Friendly and professional",
        writing_style=store.writing_style or "Clear and helpful",
        greeting=store.greeting_template or "Hi [Name],",
        signoff=store.signoff_template or f"Best regards, {store.persona_name}",
        background=f"Background: {store.persona_background}" if store.persona_background else "",
    ).strip()


def build_order_context(order: Optional[OrderInfo], reconciliation: Optional[OrderReconciliation] = None) -> str:
    """Order details for the customer reply. Carrier numbers are never included unless they are canonical."""
    if order is None:
        return ""

    if reconciliation is not None:
        customer_tracking = reconciliation.canonical_customer_tracking_number
        tracking_status = reconciliation.display_status_text
    else:
        customer_tracking = canonical_tracking_number(OrderTrackingFacts.from_order(order))
        tracking_status = order.tracking_status

    instruction = ""
    if customer_tracking:
        instruction = (
            "\nIMPORTANT: When providing tracking info to customer, "
            f"use this tracking number: {customer_tracking}"
        )

    return REPLY_ORDER_CONTEXT.format(
        item_name=order.item_name,
        amount=order.sales_amount,
        order_date=order.order_date,
        order_status=order.status,
        customer_tracking=customer_tracking or "Not yet shipped",
        tracking_status=tracking_status or "N/A",
        actual_delivery=order.actual_delivery or "Not yet delivered",
        expected_delivery=order.expected_delivery or "N/A",
        tracking_instruction=instruction,
    )


def build_playbook_guidance(playbook: Optional[Playbook]) -> str:
    if playbook is None:
        return ""
    return PLAYBOOK_GUIDANCE.format(
        scenario_name=playbook.scenario_name,
        response_template=playbook.response_template or "",
        decision_tree=playbook.decision_tree or "Use your best judgment",
        when_to_escalate=playbook.when_to_escalate or "If customer remains unsatisfied after offering solution",
    )


def build_reply_prompt(
    case: CSCase,
    order: Optional[OrderInfo] = None,
    playbook: Optional[Playbook] = None,
    reconciliation: Optional[OrderReconciliation] = None,
) -> str:
    return REPLY_USER_PROMPT.format(
        message=case.original_message,
        customer_name=case.customer_name,
        issue_category=case.issue_category or "Unknown",
        contact_reason=case.contact_reason or "General inquiry",
        order_context=build_order_context(order, reconciliation),
        playbook_guidance=build_playbook_guidance(playbook),
    )


class ReplyDraftAgent:
    """Agent responsible for the customer-facing draft reply."""

    def __init__(self, generator):
        self.generator = generator

    def draft(self, state: Dict[str, Any]) -> Dict[str, Any]:
        store = state.get("store")
        playbook = state.get("playbook")
        result = {
            "draft_reply": None,
            "persona": store.persona_name if store else None,
            "playbook_name": playbook.scenario_name if playbook else None,
            "reply_error": None,
        }

        if self.generator is None:
            result["reply_error"] = REPLY_NOT_CONFIGURED_MESSAGE
            return result

        prompt = build_reply_prompt(state["case"], state.get("order"), playbook, state.get("reconciliation"))
        try:
            result["draft_reply"] = self.generator.generate(
                prompt, system_prompt=build_persona(store), agent_name="reply_draft"
            ).strip()
        except GenerationError as e:
            log_error("Draft reply generation failed", e)
            result["reply_error"] = REPLY_FAILED_MESSAGE
        return result


def load_reply_context(state: Dict[str, Any], fetcher) -> Dict[str, Any]:
    """
    Node function for the LangGraph workflow.
    Loads the store persona and the active playbook for the case. Both are optional.
    """
    from utils.logger import log_node_start, log_node_end

    case: CSCase = state["case"]
    log_node_start("load_reply_context", store_code=case.store_code, issue_category=case.issue_category)

    store = fetcher.get_store_by_code(case.store_code) if case.store_code else None
    playbook = fetcher.get_playbook_by_category(case.issue_category) if case.issue_category else None

    log_node_end("load_reply_context", {
        "persona": store.persona_name if store else None,
        "playbook": playbook.scenario_name if playbook else None,
    })
    return {"store": store, "playbook": playbook}


def draft_reply(state: Dict[str, Any], generator) -> Dict[str, Any]:
    """
    Node function for the LangGraph workflow.
    Drafts the reply; a generation failure becomes reply_error.
    """
    from utils.logger import log_node_start, log_node_end

    log_node_start("draft_reply")
    result = ReplyDraftAgent(generator).draft(state)
    log_node_end("draft_reply", result)
    return result
