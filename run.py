# Main Entry Point
# Run the case workflow for one case from the command line

import argparse
import json
import sys

from errors import DashboardError, ValidationError


STEP_NAMES = {
    "load_case": "📥 Load Case",
    "load_order": "📦 Load Order",
    "fetch_live_tracking": "🚚 Live Tracking",
    "derive_order_status": "🏷️ Order Status",
    "derive_case_status": "⏱️ Case Status",
    "summarize_case": "📝 Summary",
    "load_reply_context": "📚 Reply Context",
    "draft_reply": "✉️ Draft Reply",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Customer-service case dashboard")
    parser.add_argument("case_id", help="Case record ID (rec...)")
    parser.add_argument("--live", action="store_true", help="Look the shipment up with the tracking provider")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--summary", action="store_true", help="Show the AI summary")
    action.add_argument("--refresh", action="store_true", help="Regenerate the AI summary, ignoring the cache")
    action.add_argument("--reply", action="store_true", help="Draft a customer reply")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    return parser


def print_result(result: dict):
    """Print the derived status of a case."""
    case = result.get("case") or {}
    print("-" * 60)
    print(f"📨 Case {result.get('case_id')}: {case.get('customer_name')} ({case.get('status')})")
    print(f"   Issue: {case.get('issue_category') or 'Unknown'}")

    aging = result.get("aging") or {}
    print(f"   Age: {aging.get('age_hours')}h - {result.get('escalation_level')}")

    if not result.get("has_order"):
        print("\n📭 No order found for this case")
    else:
        rec = result.get("reconciliation") or {}
        print(f"\n📦 Cancel eligibility: {result.get('cancel_eligibility')}")
        for note in result.get("cancel_notes", []):
            print(f"   • {note}")
        print(f"🚚 Customer tracking number: {rec.get('canonical_customer_tracking_number') or 'None'}")
        print(f"   Status: {rec.get('display_status_text') or 'Unknown'}{' (live)' if rec.get('live') else ''}")
        print(f"   Delivered: {'Yes' if rec.get('is_delivered') else 'No'}")
        for warning in result.get("tracking_warnings", []):
            print(f"   ⚠️ {warning}")
        for event in rec.get("display_events", [])[:5]:
            print(f"   {event['timestamp']}  {event['description']}")

    if result.get("tracking_error"):
        print(f"\n❌ Tracking: {result['tracking_error']}")

    summary = result.get("ai_summary")
    if summary:
        print(f"\n📝 AI Summary{' (cached)' if result.get('summary_cached') else ''}:")
        print(f"   {summary['summary']}")
        for finding in summary["key_findings"]:
            print(f"   • {finding}")
        print("   Recommendations:")
        for rec_item in summary["recommendations"]:
            print(f"   → {rec_item}")
        print(f"   Can fulfill: {'Yes' if summary['can_fulfill_request'] else 'No'} - {summary['reason']}")
    if result.get("summary_error"):
        print(f"\n❌ {result['summary_error']}")

    if result.get("draft_reply"):
        print(f"\n✉️ Draft reply (persona: {result.get('persona') or 'default'}):\n")
        print(result["draft_reply"])
    if result.get("reply_error"):
        print(f"\n❌ {result['reply_error']}")


def main(argv=None) -> int:
    """Main function to run the case workflow."""
    args = build_parser().parse_args(argv)

    from orchestrator.case_orchestrator import CaseOrchestrator

    print("=" * 60)
    print("📨 Customer-Service Case Dashboard - LangGraph")
    print("=" * 60)

    orchestrator = CaseOrchestrator()
    try:
        if args.summary or args.refresh:
            result = orchestrator.get_ai_summary(args.case_id, force_refresh=args.refresh, live_tracking=args.live)
        elif args.reply:
            result = orchestrator.generate_reply(args.case_id, live_tracking=args.live)
        else:
            # Merge the streamed node updates instead of running the flow twice
            final_state = {"case_id": args.case_id}
            for step_output in orchestrator.view_case_stream(args.case_id, live_tracking=args.live):
                for node_name, state_update in step_output.items():
                    print(f"✅ Completed: {STEP_NAMES.get(node_name, node_name)}")
                    if isinstance(state_update, dict):
                        final_state.update(state_update)
            result = orchestrator.get_case_result(final_state)
    except ValidationError as e:
        print(f"❌ {e.message}")
        return 2
    except DashboardError as e:
        print(f"❌ {e}")
        return 1

    if result.get("error"):
        print(f"❌ Error: {result['error']}")
        return 1

    if args.json:
        print(json.dumps(result, indent=2, default=str))
    else:
        print_result(result)
    print("\n" + "=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
