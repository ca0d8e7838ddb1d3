# Streamlit Application
# UI for the Customer-Service Case Dashboard

import streamlit as st

from errors import DashboardError, ValidationError
from orchestrator.case_orchestrator import CaseOrchestrator
from orchestrator.refresh_coordinator import TrackingRefreshCoordinator, session_coordinator
from config import CASE_STATUSES

# Page configuration
st.set_page_config(
    page_title="CS Case Dashboard",
    page_icon="📨",
    layout="wide"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #1E88E5;
        margin-bottom: 1rem;
    }
    .badge {
        color: white;
        padding: 0.25rem 0.75rem;
        border-radius: 20px;
        font-size: 0.875rem;
    }
</style>
""", unsafe_allow_html=True)

ESCALATION_BADGES = {
    "critical": ("🔥", "#dc3545"),
    "overdue": ("⏰", "#FF9800"),
    "attention": ("⚠️", "#17a2b8"),
    "normal": ("✅", "#4CAF50"),
}

CANCEL_BADGES = {
    "Can Cancel": "#4CAF50",
    "Check Supplier": "#FF9800",
    "Cannot Cancel": "#dc3545",
}


@st.cache_resource
def get_orchestrator() -> CaseOrchestrator:
    return CaseOrchestrator()


def get_refresh_coordinator() -> TrackingRefreshCoordinator:
    return session_coordinator(st.session_state)


def badge(text: str, color: str) -> str:
    return f'<span class="badge" style="background: {color};">{text}</span>'


def render_case_list(orchestrator: CaseOrchestrator):
    """Sidebar: filter, triage sort and pick a case."""
    st.header("📋 Cases")
    status = st.selectbox("Status", ["All"] + CASE_STATUSES)
    triage = st.checkbox("Most urgent first", value=True)

    try:
        rows = orchestrator.list_cases(None if status == "All" else status, triage=triage)
    except DashboardError as e:
        st.error(f"❌ Failed to fetch cases: {e}")
        return

    if not rows:
        st.info("No cases found.")
        return

    for row in rows:
        case = row["case"]
        icon, _ = ESCALATION_BADGES[row["escalation_level"]]
        label = f"{icon} {case['customer_name'] or 'Unknown'} · {case['issue_category'] or 'Other'} · {row['aging']['age_hours']}h"
        if st.button(label, key=f"case-{case['id']}", use_container_width=True):
            previous = st.session_state.get("selected_case")
            if previous and previous != case["id"]:
                get_refresh_coordinator().cancel(previous)
            st.session_state["selected_case"] = case["id"]
            st.session_state.pop("live_result", None)


def render_tracking(result: dict):
    """Tracking panel: canonical number, warnings, status and events."""
    rec = result.get("reconciliation")
    if rec is None:
        st.info("📭 No order found for this case")
        return

    st.subheader("🚚 Delivery Status")
    for warning in result.get("tracking_warnings", []):
        st.warning(f"⚠️ {warning}")

    col1, col2, col3 = st.columns(3)
    col1.metric("Tracking (customer sees)", rec["canonical_customer_tracking_number"] or "Not yet shipped")
    col2.metric("Status", rec["display_status_text"] or "Unknown", "live" if rec["live"] else None)
    col3.metric(
        "Days Since Update",
        f"{rec['days_since_update']} days" if rec["days_since_update"] is not None else "N/A",
    )

    if rec["display_events"]:
        with st.expander("📍 Tracking Events", expanded=True):
            for event in rec["display_events"]:
                location = f" · {event['location']}" if event["location"] else ""
                st.markdown(f"**{event['timestamp']}**{location}  \n{event['description']}")


def refresh_tracking(orchestrator: CaseOrchestrator, case_id: str):
    """Live lookup through the coordinator; a result for a case no longer viewed is discarded."""
    coordinator = get_refresh_coordinator()
    token = coordinator.begin(case_id)
    with st.spinner("Contacting tracking provider..."):
        live_result = orchestrator.view_case(case_id, live_tracking=True)
    if coordinator.complete(case_id, token, live_result):
        st.session_state["live_result"] = live_result


def render_stats(orchestrator: CaseOrchestrator):
    """Stats bar across the top of the page."""
    try:
        stats = orchestrator.case_stats()
    except DashboardError as e:
        st.warning(f"⚠️ Stats unavailable: {e}")
        return

    cols = st.columns(6)
    cols[0].metric("🆕 New", stats["new"])
    cols[1].metric("⏳ In Progress", stats["in_progress"])
    cols[2].metric("🕓 Pending", stats["pending"])
    cols[3].metric("✅ Resolved Today", stats["resolved_today"])
    cols[4].metric("⏰ Overdue", stats["overdue"])
    cols[5].metric("🔥 Critical", stats["critical"])


def render_customer_history(orchestrator: CaseOrchestrator, case: dict):
    with st.expander("👤 Customer History"):
        try:
            history = orchestrator.customer_history(case["customer_email"], exclude_case_id=case["id"])
        except ValidationError:
            st.info("No valid customer email on this case.")
            return
        if not history["cases"] and not history["orders"]:
            st.info("No other cases or orders for this customer.")
            return
        for other in history["cases"]:
            st.markdown(f"- **{other['status']}** · {other['issue_category'] or 'Other'} · {other['platform_order_number']}")
        for order in history["orders"]:
            st.markdown(f"- 📦 {order['order_date']} · {order['item_name']} · ${order['sales_amount']:.2f}")


def render_status_update(orchestrator: CaseOrchestrator, case: dict):
    col1, col2 = st.columns([3, 1])
    current = CASE_STATUSES.index(case["status"]) if case["status"] in CASE_STATUSES else 0
    new_status = col1.selectbox("Case status", CASE_STATUSES, index=current, key=f"status-{case['id']}")
    if col2.button("Update", key=f"update-{case['id']}") and new_status != case["status"]:
        orchestrator.update_case(case["id"], {"status": new_status})
        st.success(f"Status updated to {new_status}")
        st.rerun()


def render_case_detail(orchestrator: CaseOrchestrator, case_id: str):
    try:
        result = orchestrator.view_case(case_id)
    except ValidationError as e:
        st.error(f"❌ {e.message}")
        return

    if result.get("error"):
        st.error(f"❌ {result['error']}")
        return

    case = result["case"]
    level = result["escalation_level"]
    icon, color = ESCALATION_BADGES[level]

    st.subheader(f"📨 {case['customer_name']} · {case['platform_order_number']}")
    badges = [badge(f"{icon} {level.upper()} · {result['aging']['age_hours']}h", color), badge(case["status"], "#6c757d")]
    if result.get("cancel_eligibility"):
        badges.append(badge(result["cancel_eligibility"], CANCEL_BADGES[result["cancel_eligibility"]]))
    st.markdown(" ".join(badges), unsafe_allow_html=True)

    st.markdown(f"**Issue:** {case['issue_category'] or 'Unknown'} · **Sentiment:** {case['sentiment'] or 'N/A'} · **Urgency:** {case['urgency'] or 'N/A'}")
    st.text_area("Customer message", case["original_message"], disabled=True)
    render_status_update(orchestrator, case)
    render_customer_history(orchestrator, case)

    if result.get("cancel_notes"):
        with st.expander("📦 Order Processing Status"):
            for note in result["cancel_notes"]:
                st.markdown(f"- {note}")

    if result["has_order"] and st.button("🔄 Refresh live tracking"):
        refresh_tracking(orchestrator, case_id)

    live_result = st.session_state.get("live_result")
    if live_result and live_result.get("case_id") == case_id:
        if live_result.get("tracking_error"):
            st.error(f"❌ {live_result['tracking_error']}")
        else:
            result = live_result

    render_tracking(result)

    with st.expander("✅ Follow-up Checklist"):
        for item in result["checklist"]:
            st.checkbox(item["label"], key=f"{case_id}-{item['id']}", help=item["description"])

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("📝 AI Summary")
        refresh = st.checkbox("Regenerate", key="refresh-summary")
        if st.button("Get AI Summary"):
            summary_result = orchestrator.get_ai_summary(case_id, force_refresh=refresh)
            if summary_result.get("summary_error"):
                st.error(f"❌ {summary_result['summary_error']}")
            elif summary_result.get("ai_summary"):
                summary = summary_result["ai_summary"]
                if summary_result.get("summary_cached"):
                    st.caption(f"Cached · generated {summary_result.get('summary_generated_at')}")
                st.markdown(summary["summary"])
                st.markdown("**Key findings**")
                for finding in summary["key_findings"]:
                    st.markdown(f"- {finding}")
                st.markdown("**Recommendations**")
                for recommendation in summary["recommendations"]:
                    st.markdown(f"- {recommendation}")
                st.markdown(f"**Can fulfill request:** {'Yes' if summary['can_fulfill_request'] else 'No'} - {summary['reason']}")

    with col2:
        st.subheader("✉️ Draft Reply")
        if st.button("Generate Reply"):
            reply_result = orchestrator.generate_reply(case_id)
            if reply_result.get("reply_error"):
                st.error(f"❌ {reply_result['reply_error']}")
            else:
                st.caption(f"Persona: {reply_result.get('persona') or 'default'} · Playbook: {reply_result.get('playbook') or 'none'}")
                st.text_area("Reply", reply_result["draft_reply"], height=300)


def main():
    # Header
    st.markdown('<p class="main-header">📨 CS Case Dashboard</p>', unsafe_allow_html=True)
    st.markdown("Support cases enriched with order and shipment status, AI summaries and draft replies.")

    orchestrator = get_orchestrator()
    render_stats(orchestrator)

    st.divider()

    with st.sidebar:
        render_case_list(orchestrator)

    case_id = st.session_state.get("selected_case")
    if case_id:
        try:
            render_case_detail(orchestrator, case_id)
        except DashboardError as e:
            st.error(f"❌ {e}")
            st.exception(e)
    else:
        st.markdown("""
        ### 👋 Welcome

        **How it works:**
        1. **Case** - Loads the support case and its order
        2. **Tracking** - Reconciles marketplace and carrier tracking, optionally with a live lookup
        3. **Status** - Derives cancel eligibility and case aging
        4. **AI** - Summarizes the case and drafts a reply in the store's persona

        👈 **Pick a case in the sidebar to begin.**
        """)


if __name__ == "__main__":
    main()
