# CaseOrchestrator
# Main LangGraph orchestrator that coordinates all agents
# Manages the flow: Case → Order → Live Tracking → Derived Status → Summary / Reply
# Also hosts the plain record operations (list, create, update, history, order search).

from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

from agents.case_aging_agent import case_aging, dashboard_stats, escalation_level, sort_cases_for_triage
from agents.case_summary_agent import tracking_warnings
from agents.follow_up_checklist import build_follow_up_checklist
from agents.live_tracking_agent import LiveTrackingAgent
from agents.message_analysis_agent import MessageAnalysisAgent
from config import (
    CASE_STATUSES,
    ORDER_SEARCH_DEFAULT_DAYS,
    ORDER_SEARCH_MAX_DAYS,
    ORDER_SEARCH_MIN_DAYS,
)
from errors import CaseNotFoundError, RecordStoreError, ValidationError
from graph.state import initial_state
from graph.workflow import compile_workflow
from models.case import CSCase
from utils.dates import utc_now
from utils.logger import log_workflow_end, log_workflow_start, logger
from utils.validation import require_email, require_record_id, require_text, sanitize_string


class CaseOrchestrator:
    """
    Main orchestrator for the case dashboard.

    Args:
        clients: DashboardClients; built from config when omitted
        now_fn: Clock, injectable for tests
    """

    def __init__(self, clients=None, now_fn: Optional[Callable[[], datetime]] = None):
        if clients is None:
            from clients import build_clients

            clients = build_clients()
        self.clients = clients
        self.now_fn = now_fn or utc_now
        self.workflow = compile_workflow(clients, self.now_fn)

    # ============ Workflow actions ============

    def _run(self, case_id: str, action: str, live_tracking: bool = False, force_refresh: bool = False) -> Dict[str, Any]:
        require_record_id(case_id)
        log_workflow_start(case_id, action, live_tracking)

        state = initial_state(case_id, action, live_tracking, force_refresh, self.now_fn())
        final_state = self.workflow.invoke(state)

        result = self.get_case_result(final_state)
        log_workflow_end(result["error"] is None, result["error"] or f"action: {action}")
        return result

    def view_case(self, case_id: str, live_tracking: bool = False) -> Dict[str, Any]:
        """
        Load a case with its order and all derived status.

        Raises:
            ValidationError: If the case ID is malformed (before any external call)
        """
        return self._run(case_id, "view", live_tracking)

    def view_case_stream(self, case_id: str, live_tracking: bool = False) -> Iterator[Dict[str, Any]]:
        """
        Run the view flow with streaming to see intermediate steps.

        Yields state updates at each node.
        """
        require_record_id(case_id)
        state = initial_state(case_id, "view", live_tracking, False, self.now_fn())
        for update in self.workflow.stream(state):
            yield update

    def get_ai_summary(self, case_id: str, force_refresh: bool = False, live_tracking: bool = False) -> Dict[str, Any]:
        """Cached or fresh internal AI summary of a case."""
        return self._run(case_id, "summary", live_tracking, force_refresh)

    def generate_reply(self, case_id: str, live_tracking: bool = False) -> Dict[str, Any]:
        """Customer-facing draft reply for a case."""
        return self._run(case_id, "reply", live_tracking)

    def get_case_result(self, final_state: Dict[str, Any]) -> Dict[str, Any]:
        """
        Extract the key results from the final state.

        Args:
            final_state: The final workflow state

        Returns:
            Cleaned up case result
        """
        case: Optional[CSCase] = final_state.get("case")
        order = final_state.get("order")
        reconciliation = final_state.get("reconciliation")
        eligibility = final_state.get("cancel_eligibility")
        snapshot = final_state.get("tracking_snapshot")
        aging = final_state.get("aging")
        summary = final_state.get("ai_summary")

        if case is not None:
            case.order = order

        checklist = []
        if case is not None:
            checklist = [i.to_dict() for i in build_follow_up_checklist(case, order, reconciliation, eligibility)]

        return {
            "case_id": final_state.get("case_id"),
            "case": case.to_dict() if case else None,
            "has_order": order is not None,
            "reconciliation": reconciliation.to_dict() if reconciliation else None,
            "tracking_warnings": tracking_warnings(reconciliation),
            "cancel_eligibility": eligibility.value if eligibility else None,
            "cancel_notes": final_state.get("cancel_notes") or [],
            "tracking": snapshot.to_dict() if snapshot else None,
            "tracking_error": final_state.get("tracking_error"),
            "aging": aging.to_dict() if aging else None,
            "escalation_level": final_state.get("escalation_level"),
            "checklist": checklist,
            "ai_summary": summary.to_dict() if summary else None,
            "summary_cached": final_state.get("summary_cached", False),
            "summary_generated_at": final_state.get("summary_generated_at"),
            "summary_error": final_state.get("summary_error"),
            "draft_reply": final_state.get("draft_reply"),
            "persona": final_state.get("persona"),
            "playbook": final_state.get("playbook_name"),
            "reply_error": final_state.get("reply_error"),
            "error": final_state.get("error"),
        }

    # ============ Tracking ============

    def track_package(self, tracking_number: str) -> Dict[str, Any]:
        """
        Live lookup of one tracking number.

        Returns:
            {"success", "data", "error"}; provider failures become the error message
        """
        number = require_text(tracking_number, "tracking_number", max_length=100)
        snapshot, error = LiveTrackingAgent(self.clients.tracking).track(number)
        return {
            "success": snapshot is not None,
            "tracking_number": number,
            "data": snapshot.to_dict() if snapshot else None,
            "error": error,
        }

    # ============ Case records ============

    def list_cases(self, status: Optional[str] = None, triage: bool = False) -> List[Dict[str, Any]]:
        """
        List cases with their aging badge.

        Args:
            status: Optional status filter (unknown statuses are ignored)
            triage: Sort most severe first instead of by order number
        """
        cases = self.clients.fetcher.list_cases(status)
        now = self.now_fn()
        if triage:
            cases = sort_cases_for_triage(cases, now)

        rows = []
        for case in cases:
            aging = case_aging(case, now)
            rows.append({
                "case": case.to_dict(),
                "aging": aging.to_dict(),
                "escalation_level": escalation_level(aging, case.urgency, case.sentiment, case.status),
            })
        logger.info(f"📋 Listed {len(rows)} cases")
        return rows

    def case_stats(self) -> Dict[str, int]:
        """Status and aging counts over all cases, for the stats bar."""
        return dashboard_stats(self.clients.fetcher.list_cases(), self.now_fn())

    def create_case(
        self,
        platform_order_number: str,
        customer_name: str,
        customer_email: str,
        original_message: str,
        store_code: Optional[str] = None,
        contact_reason: Optional[str] = None,
        issue_category: Optional[str] = None,
        sentiment: Optional[str] = None,
        urgency: Optional[str] = None,
    ) -> CSCase:
        """
        Validate and create a case. The message is triaged by the LLM when one is
        configured; triage never blocks creation.

        Raises:
            ValidationError: On missing or malformed input
        """
        fields = {
            "platform_order_number": require_text(platform_order_number, "platform_order_number", max_length=100),
            "customer_name": require_text(customer_name, "customer_name", max_length=200),
            "customer_email": require_email(sanitize_string(customer_email, 254)),
            "original_message": require_text(original_message, "original_message"),
            "store_code": sanitize_string(store_code, 50) or None,
            "contact_reason": sanitize_string(contact_reason, 200) or None,
            "status": "New",
        }

        analysis = MessageAnalysisAgent(self.clients.generator).analyze(fields["original_message"])
        # Triage wins when an LLM is configured; otherwise caller values, then defaults
        triaged = self.clients.generator is not None
        provided = {"issue_category": issue_category, "sentiment": sentiment, "urgency": urgency}
        for key, value in provided.items():
            fields[key] = analysis[key] if triaged or not value else value

        case = self.clients.fetcher.create_case(fields)
        logger.info(f"🆕 Created case {case.id} ({case.issue_category}, {case.urgency})")
        return case

    def update_case(self, case_id: str, updates: Dict[str, Any]) -> CSCase:
        """
        Update a case and re-attach its order.

        Raises:
            ValidationError: On a malformed ID or an unknown status
            CaseNotFoundError: If the record store has no such case
        """
        require_record_id(case_id)
        updates = dict(updates)

        status = updates.get("status")
        if status is not None and status not in CASE_STATUSES:
            raise ValidationError("status", f"Unknown case status: {status}")
        if status == "Resolved" and not updates.get("resolved_at"):
            updates["resolved_at"] = self.now_fn().isoformat()

        for key, value in list(updates.items()):
            if isinstance(value, str) and key != "status":
                updates[key] = sanitize_string(value, 10000)

        try:
            case = self.clients.fetcher.update_case(case_id, updates)
        except RecordStoreError as e:
            if e.status_code == 404:
                raise CaseNotFoundError(case_id) from e
            raise
        if case.platform_order_number:
            case.order = self.clients.fetcher.get_order_by_platform_number(case.platform_order_number)
        return case

    def customer_history(self, email: str, exclude_case_id: Optional[str] = None) -> Dict[str, Any]:
        """Other cases and all orders of a customer. Both lists degrade to empty."""
        require_email(email, "email")
        if exclude_case_id:
            require_record_id(exclude_case_id, "exclude_case_id")
        return {
            "cases": [c.to_dict() for c in self.clients.fetcher.get_cases_by_customer_email(email, exclude_case_id)],
            "orders": [o.to_dict() for o in self.clients.fetcher.get_orders_by_customer_email(email)],
        }

    def search_orders_by_name(
        self,
        first_name: str,
        last_name: str,
        store_code: Optional[str] = None,
        days_back: int = ORDER_SEARCH_DEFAULT_DAYS,
    ) -> Dict[str, Any]:
        """
        Find recent orders by recipient name.

        Raises:
            ValidationError: If either name is shorter than 2 characters
        """
        first = require_text(first_name, "first_name", min_length=2, max_length=100)
        last = require_text(last_name, "last_name", min_length=2, max_length=100)
        safe_days = min(max(int(days_back), ORDER_SEARCH_MIN_DAYS), ORDER_SEARCH_MAX_DAYS)

        orders = self.clients.fetcher.search_orders_by_customer_name(
            first, last, store_code or None, safe_days, today=self.now_fn().date()
        )
        return {
            "orders": [o.to_dict() for o in orders],
            "meta": {
                "first_name": first,
                "last_name": last,
                "store_code": store_code or None,
                "days_back": safe_days,
                "match_count": len(orders),
            },
        }


def run_case_view(case_id: str, live_tracking: bool = False) -> Dict[str, Any]:
    """
    Convenience function to view a case with clients built from config.

    Args:
        case_id: Case record ID
        live_tracking: Look the shipment up with the tracking provider

    Returns:
        Case result dictionary
    """
    return CaseOrchestrator().view_case(case_id, live_tracking)
