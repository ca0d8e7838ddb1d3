# CaseAgingAgent
# Derives how long a case has been open and which warning badge it earns.
# Purely advisory: never changes the case record.

import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from config import CASE_CRITICAL_HOURS, CASE_OVERDUE_HOURS, TERMINAL_CASE_STATUSES
from models.case import CaseAgingFacts, CSCase
from utils.dates import hours_between, parse_timestamp, utc_now


# Escalation levels, most severe first
ESCALATION_LEVELS = ["critical", "overdue", "attention", "normal"]


def is_terminal(status: Optional[str]) -> bool:
    return status in TERMINAL_CASE_STATUSES


def derive_case_aging(
    created_at: Union[datetime, str, None],
    status: Optional[str],
    now: Optional[datetime] = None,
    overdue_hours: int = CASE_OVERDUE_HOURS,
    critical_hours: int = CASE_CRITICAL_HOURS,
) -> CaseAgingFacts:
    """
    Args:
        created_at: Case creation time (datetime or ISO string)
        status: Current case status
        now: Reference time (defaults to the current UTC time)

    Returns:
        CaseAgingFacts with whole hours since creation. Terminal statuses never
        warn; an unknown creation time counts as age 0.
    """
    created = parse_timestamp(created_at)
    if created is None:
        return CaseAgingFacts(age_hours=0, is_overdue=False, is_critical=False)

    age_hours = max(0, math.floor(hours_between(now or utc_now(), created)))
    active = not is_terminal(status)
    return CaseAgingFacts(
        age_hours=age_hours,
        is_overdue=active and age_hours > overdue_hours,
        is_critical=active and age_hours > critical_hours,
    )


def escalation_level(
    aging: CaseAgingFacts,
    urgency: Optional[str] = None,
    sentiment: Optional[str] = None,
    status: Optional[str] = None,
) -> str:
    """Badge for a case: critical, overdue, attention (urgent or frustrated customer) or normal."""
    if aging.is_critical:
        return "critical"
    if aging.is_overdue:
        return "overdue"
    if not is_terminal(status) and (urgency == "High" or sentiment == "Frustrated"):
        return "attention"
    return "normal"


def case_aging(case: CSCase, now: Optional[datetime] = None) -> CaseAgingFacts:
    return derive_case_aging(case.created_time, case.status, now)


def sort_cases_for_triage(cases: List[CSCase], now: Optional[datetime] = None) -> List[CSCase]:
    """Most severe badge first, then oldest first. Stable for ties."""
    now = now or utc_now()

    def key(case: CSCase):
        aging = case_aging(case, now)
        level = escalation_level(aging, case.urgency, case.sentiment, case.status)
        return (ESCALATION_LEVELS.index(level), -aging.age_hours)

    return sorted(cases, key=key)


def derive_case_status(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Node function for the LangGraph workflow.
    Computes aging and escalation level for the loaded case.
    """
    from utils.logger import log_node_start, log_node_end, logger

    log_node_start("derive_case_status")

    case = state["case"]
    aging = case_aging(case, state.get("now"))
    level = escalation_level(aging, case.urgency, case.sentiment, case.status)

    logger.info(f"⏱️  Case age: {aging.age_hours}h ({level})")

    result = {"aging": aging, "escalation_level": level}
    log_node_end("derive_case_status", {"age_hours": aging.age_hours, "escalation_level": level})
    return result


def dashboard_stats(cases: List[CSCase], now: Optional[datetime] = None) -> Dict[str, int]:
    """Counts for the dashboard stats bar."""
    now = now or utc_now()
    stats = {
        "new": 0,
        "in_progress": 0,
        "pending": 0,
        "resolved_today": 0,
        "overdue": 0,
        "critical": 0,
    }
    for case in cases:
        if case.status == "New":
            stats["new"] += 1
        elif case.status == "In Progress":
            stats["in_progress"] += 1
        elif case.status in ("Pending Customer", "Pending Internal"):
            stats["pending"] += 1
        elif case.status == "Resolved":
            resolved_at = parse_timestamp(case.resolved_at)
            if resolved_at is not None and resolved_at.date() == now.date():
                stats["resolved_today"] += 1

        aging = case_aging(case, now)
        if aging.is_critical:
            stats["critical"] += 1
        elif aging.is_overdue:
            stats["overdue"] += 1
    return stats
