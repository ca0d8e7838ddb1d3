# Case Dashboard Agents

from agents.tracking_normalizer import TrackingNormalizer, EventSource
from agents.order_reconciliation_agent import reconcile_order, derive_order_status
from agents.cancelability_classifier import classify_cancelability, cancel_guidance
from agents.case_aging_agent import derive_case_aging, escalation_level, sort_cases_for_triage, dashboard_stats, derive_case_status
from agents.live_tracking_agent import LiveTrackingAgent, fetch_live_tracking
from agents.message_analysis_agent import MessageAnalysisAgent
from agents.case_summary_agent import CaseSummaryAgent, summarize_case
from agents.reply_draft_agent import ReplyDraftAgent, load_reply_context, draft_reply
from agents.follow_up_checklist import build_follow_up_checklist

__all__ = [
    "TrackingNormalizer",
    "EventSource",
    "reconcile_order",
    "derive_order_status",
    "classify_cancelability",
    "cancel_guidance",
    "derive_case_aging",
    "escalation_level",
    "sort_cases_for_triage",
    "dashboard_stats",
    "derive_case_status",
    "LiveTrackingAgent",
    "fetch_live_tracking",
    "MessageAnalysisAgent",
    "CaseSummaryAgent",
    "summarize_case",
    "ReplyDraftAgent",
    "load_reply_context",
    "draft_reply",
    "build_follow_up_checklist",
]
