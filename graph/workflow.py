# LangGraph Workflow
# Defines the StateGraph with nodes and edges for the case flow:
# case -> order -> optional live tracking -> derived status -> summary / reply

from typing import Any, Callable, Dict, Literal, Optional

from langgraph.graph import END, StateGraph

from agents.case_aging_agent import derive_case_status
from agents.case_summary_agent import summarize_case
from agents.live_tracking_agent import fetch_live_tracking
from agents.order_reconciliation_agent import derive_order_status
from agents.reply_draft_agent import draft_reply, load_reply_context
from errors import RecordStoreError
from graph.state import CaseState
from utils.dates import utc_now
from utils.logger import log_error, log_node_end, log_node_start, logger


CASE_NOT_FOUND_MESSAGE = "Case not found"
CASE_LOAD_FAILED_MESSAGE = "Failed to load case"


def make_load_case(fetcher, now_fn: Callable) -> Callable:
    def load_case(state: CaseState) -> Dict[str, Any]:
        """
        Node: Load the case record.
        A missing case is a normal outcome and ends the flow with an error message.
        """
        case_id = state.get("case_id", "")
        log_node_start("load_case", case_id=case_id)

        result: Dict[str, Any] = {"now": state.get("now") or now_fn()}
        try:
            case = fetcher.get_case(case_id)
        except RecordStoreError as e:
            log_error(f"Failed to load case {case_id}", e)
            result.update({"case": None, "error": CASE_LOAD_FAILED_MESSAGE})
            log_node_end("load_case", {"error": result["error"]})
            return result

        if case is None:
            logger.warning(f"⚠️ Case {case_id} not found")
            result.update({"case": None, "error": CASE_NOT_FOUND_MESSAGE})
        else:
            result["case"] = case

        log_node_end("load_case", {"status": case.status if case else None, "error": result.get("error")})
        return result

    return load_case


def make_load_order(fetcher) -> Callable:
    def load_order(state: CaseState) -> Dict[str, Any]:
        """Node: Attach the case's order. Best-effort; the fetcher already degrades to None."""
        case = state["case"]
        log_node_start("load_order", platform_order_number=case.platform_order_number)

        order = None
        if case.platform_order_number:
            order = fetcher.get_order_by_platform_number(case.platform_order_number)

        log_node_end("load_order", {"order": order.order_id if order else None})
        return {"order": order}

    return load_order


def route_after_load(state: CaseState) -> Literal["continue", "end"]:
    """Router: stop when the case could not be loaded."""
    return "end" if state.get("case") is None else "continue"


def route_action(state: CaseState) -> Literal["summary", "reply", "end"]:
    """Router: pick the AI step for the requested action."""
    action = state.get("action", "view")
    if action == "summary":
        return "summary"
    if action == "reply":
        return "reply"
    return "end"


def create_case_workflow(clients, now_fn: Optional[Callable] = None) -> StateGraph:
    """
    Create and return the LangGraph workflow for one case action.

    Flow:
    1. load_case → Case record (missing → END with error)
    2. load_order → Order record (best-effort)
    3. fetch_live_tracking → Tracking provider lookup (only when requested)
    4. derive_order_status → Reconciliation + cancel eligibility
    5. derive_case_status → Aging + escalation level
    6. Router:
       - summary → summarize_case → END
       - reply → load_reply_context → draft_reply → END
       - view → END

    Args:
        clients: DashboardClients (fetcher, tracking, generator, reply_generator)
        now_fn: Clock used when the caller does not pass "now"
    """
    now_fn = now_fn or utc_now
    reply_generator = getattr(clients, "reply_generator", None) or clients.generator

    workflow = StateGraph(CaseState)

    # Add nodes
    workflow.add_node("load_case", make_load_case(clients.fetcher, now_fn))
    workflow.add_node("load_order", make_load_order(clients.fetcher))
    workflow.add_node("fetch_live_tracking", lambda state: fetch_live_tracking(state, clients.tracking))
    workflow.add_node("derive_order_status", derive_order_status)
    workflow.add_node("derive_case_status", derive_case_status)
    workflow.add_node("summarize_case", lambda state: summarize_case(state, clients.generator, clients.fetcher))
    workflow.add_node("load_reply_context", lambda state: load_reply_context(state, clients.fetcher))
    workflow.add_node("draft_reply", lambda state: draft_reply(state, reply_generator))

    # Define edges
    workflow.set_entry_point("load_case")

    workflow.add_conditional_edges(
        "load_case",
        route_after_load,
        {
            "continue": "load_order",
            "end": END,
        }
    )

    # Linear flow: order → live tracking → order status → case status
    workflow.add_edge("load_order", "fetch_live_tracking")
    workflow.add_edge("fetch_live_tracking", "derive_order_status")
    workflow.add_edge("derive_order_status", "derive_case_status")

    workflow.add_conditional_edges(
        "derive_case_status",
        route_action,
        {
            "summary": "summarize_case",
            "reply": "load_reply_context",
            "end": END,
        }
    )

    workflow.add_edge("summarize_case", END)
    workflow.add_edge("load_reply_context", "draft_reply")
    workflow.add_edge("draft_reply", END)

    return workflow


def compile_workflow(clients, now_fn: Optional[Callable] = None):
    """Compile the workflow into a runnable graph."""
    return create_case_workflow(clients, now_fn).compile()
