# Graph State Definition
# Defines the TypedDict for the shared state across all nodes in the case graph

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, TypedDict

from models.case import CaseAgingFacts, CaseSummary, CSCase, Playbook, Store
from models.order import CancelEligibility, OrderInfo, OrderReconciliation, OrderTrackingFacts
from models.tracking import TrackingSnapshot


class CaseState(TypedDict, total=False):
    """Shared state across all nodes in the case workflow."""

    # Input
    case_id: str
    action: Literal["view", "summary", "reply"]
    live_tracking: bool
    force_refresh: bool
    now: datetime

    # Record store data
    case: Optional[CSCase]
    order: Optional[OrderInfo]

    # Live tracking
    tracking_snapshot: Optional[TrackingSnapshot]
    tracking_error: Optional[str]

    # Order derivations
    tracking_facts: Optional[OrderTrackingFacts]
    reconciliation: Optional[OrderReconciliation]
    cancel_eligibility: Optional[CancelEligibility]
    cancel_notes: List[str]

    # Case derivations
    aging: Optional[CaseAgingFacts]
    escalation_level: Optional[str]

    # AI summary
    ai_summary: Optional[CaseSummary]
    summary_cached: bool
    summary_generated_at: Optional[str]
    summary_error: Optional[str]

    # Draft reply
    store: Optional[Store]
    playbook: Optional[Playbook]
    draft_reply: Optional[str]
    persona: Optional[str]
    playbook_name: Optional[str]
    reply_error: Optional[str]

    # Error handling
    error: Optional[str]


def initial_state(
    case_id: str,
    action: str = "view",
    live_tracking: bool = False,
    force_refresh: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    return {
        "case_id": case_id,
        "action": action,
        "live_tracking": live_tracking,
        "force_refresh": force_refresh,
        "now": now,
        "case": None,
        "order": None,
        "tracking_snapshot": None,
        "tracking_error": None,
        "tracking_facts": None,
        "reconciliation": None,
        "cancel_eligibility": None,
        "cancel_notes": [],
        "aging": None,
        "escalation_level": None,
        "ai_summary": None,
        "summary_cached": False,
        "summary_generated_at": None,
        "summary_error": None,
        "store": None,
        "playbook": None,
        "draft_reply": None,
        "persona": None,
        "playbook_name": None,
        "reply_error": None,
        "error": None,
    }
