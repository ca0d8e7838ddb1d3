# CaseSummaryAgent
# Produces the internal AI analysis of a case for CS agents.
# Summaries are cached on the case record as JSON; an unreadable cache is simply regenerated.

from datetime import datetime
from typing import Any, Dict, List, Optional

from errors import GenerationError, RecordStoreError
from models.case import CaseAgingFacts, CaseSummary, CSCase
from models.order import CancelEligibility, OrderInfo, OrderReconciliation
from prompts.prompts import (
    NO_ORDER_CONTEXT,
    SUMMARY_ORDER_CONTEXT,
    SUMMARY_SYSTEM_PROMPT,
    SUMMARY_USER_PROMPT,
)
from utils.dates import isoformat_utc, utc_now
from utils.json_response import parse_json_response
from utils.logger import log_error, logger


NOT_CONFIGURED_SUMMARY = CaseSummary(
    summary="AI Summary not available - API key not configured",
    key_findings=[],
    recommendations=["Configure GOOGLE_API_KEY to enable AI summaries"],
    can_fulfill_request=False,
    reason="AI not configured",
)

SUMMARY_FAILED_MESSAGE = "Failed to generate AI summary"


def tracking_warnings(reconciliation: Optional[OrderReconciliation]) -> List[str]:
    """Human-readable tracking warnings, shared by the prompt and the dashboard."""
    if reconciliation is None:
        return []
    warnings = []
    if reconciliation.tracking_mismatch:
        warnings.append("Marketplace and carrier tracking numbers differ; customer may see a different status")
    if reconciliation.upload_gap:
        warnings.append("Tracking not uploaded to marketplace; customer cannot see tracking yet")
    if reconciliation.is_stale:
        warnings.append(f"No tracking update for {reconciliation.days_since_update} days")
    return warnings


def build_summary_prompt(
    case: CSCase,
    order: Optional[OrderInfo] = None,
    reconciliation: Optional[OrderReconciliation] = None,
    eligibility: Optional[CancelEligibility] = None,
    aging: Optional[CaseAgingFacts] = None,
) -> str:
    order_context = NO_ORDER_CONTEXT
    if order is not None:
        warnings = tracking_warnings(reconciliation)
        order_context = SUMMARY_ORDER_CONTEXT.format(
            order_date=order.order_date or "Unknown",
            order_status=order.status or "Unknown",
            platform_status=order.platform_order_status or "Unknown",
            supplier_order=f"#{order.supplier_order_number}" if order.supplier_order_number else "Not placed",
            shipment_dropped="Yes" if order.shipment_dropped else "No",
            carrier_tracking=order.carrier_tracking_number or "None",
            marketplace_tracking=order.marketplace_tracking_number or "None",
            ship_date=order.ship_date or "Not shipped",
            delivery_status=(reconciliation.display_status_text if reconciliation else order.tracking_status) or "Unknown",
            last_update=isoformat_utc(reconciliation.last_update_at) if reconciliation and reconciliation.last_update_at else "Unknown",
            actual_delivery=order.actual_delivery or "Not delivered",
            amount=order.sales_amount,
            cancel_eligibility=eligibility.value if eligibility else "Unknown",
            tracking_warnings="; ".join(warnings) if warnings else "None",
        )

    aging_flag = ""
    if aging is not None and aging.is_critical:
        aging_flag = " (CRITICAL: open more than 48 hours)"
    elif aging is not None and aging.is_overdue:
        aging_flag = " (OVERDUE: open more than 24 hours)"

    return SUMMARY_USER_PROMPT.format(
        issue_category=case.issue_category or "Unknown",
        message=case.original_message,
        status=case.status,
        age_hours=aging.age_hours if aging else "Unknown",
        aging_flag=aging_flag,
        order_context=order_context,
    )


class CaseSummaryAgent:
    """
    Agent responsible for the internal case summary.

    Args:
        generator: Text generator, or None when no LLM is configured
        fetcher: Data fetcher used to write the summary cache back to the case
    """

    def __init__(self, generator, fetcher=None):
        self.generator = generator
        self.fetcher = fetcher

    def summarize(self, state: Dict[str, Any]) -> Dict[str, Any]:
        case: CSCase = state["case"]

        if not state.get("force_refresh") and case.ai_summary:
            cached = self._read_cache(case)
            if cached is not None:
                return {
                    "ai_summary": cached,
                    "summary_cached": True,
                    "summary_generated_at": case.ai_summary_generated_at,
                    "summary_error": None,
                }

        if self.generator is None:
            return {
                "ai_summary": NOT_CONFIGURED_SUMMARY,
                "summary_cached": False,
                "summary_generated_at": None,
                "summary_error": None,
            }

        prompt = build_summary_prompt(
            case,
            state.get("order"),
            state.get("reconciliation"),
            state.get("cancel_eligibility"),
            state.get("aging"),
        )
        try:
            content = self.generator.generate(prompt, system_prompt=SUMMARY_SYSTEM_PROMPT, agent_name="case_summary")
            summary = CaseSummary.from_data(parse_json_response(content))
        except (GenerationError, ValueError) as e:
            log_error("Case summary generation failed", e)
            return {
                "ai_summary": None,
                "summary_cached": False,
                "summary_generated_at": None,
                "summary_error": SUMMARY_FAILED_MESSAGE,
            }

        generated_at = isoformat_utc(state.get("now") or utc_now())
        self._write_cache(case, summary, generated_at)
        return {
            "ai_summary": summary,
            "summary_cached": False,
            "summary_generated_at": generated_at,
            "summary_error": None,
        }

    def _read_cache(self, case: CSCase) -> Optional[CaseSummary]:
        try:
            return CaseSummary.from_json(case.ai_summary)
        except ValueError:
            logger.warning("⚠️ Invalid cached summary, regenerating...")
            return None

    def _write_cache(self, case: CSCase, summary: CaseSummary, generated_at: str) -> None:
        if self.fetcher is None:
            return
        try:
            self.fetcher.update_case(case.id, {
                "ai_summary": summary.to_json(),
                "ai_summary_generated_at": generated_at,
            })
        except RecordStoreError as e:
            # The summary is still returned; only the cache write is lost
            log_error("Failed to save AI summary to the case", e)


def summarize_case(state: Dict[str, Any], generator, fetcher=None) -> Dict[str, Any]:
    """
    Node function for the LangGraph workflow.
    Returns the cached summary when valid, otherwise generates a fresh one.
    """
    from utils.logger import log_node_start, log_node_end

    log_node_start("summarize_case", force_refresh=state.get("force_refresh", False))

    result = CaseSummaryAgent(generator, fetcher).summarize(state)

    summary = result.get("ai_summary")
    log_node_end("summarize_case", {
        "cached": result.get("summary_cached"),
        "summary": summary.summary if summary else None,
        "summary_error": result.get("summary_error"),
    })
    return result
