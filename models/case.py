# Case Models
# Support cases, store personas, playbooks and the AI summary payload

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.order import OrderInfo, _int, _text


@dataclass
class CSCase:
    """A customer-service case from the CS Cases table."""

    id: str
    platform_order_number: str = ""
    customer_name: str = ""
    customer_email: str = ""
    original_message: str = ""
    issue_category: Optional[str] = None
    sentiment: Optional[str] = None
    urgency: Optional[str] = None
    status: str = "New"
    ai_draft_reply: Optional[str] = None
    final_reply_sent: Optional[str] = None
    resolution_type: Optional[str] = None
    resolution_notes: Optional[str] = None
    internal_notes: Optional[str] = None
    resolved_at: Optional[str] = None
    follow_up_date: Optional[str] = None
    contact_reason: Optional[str] = None
    store_code: Optional[str] = None
    assigned_to: Optional[str] = None
    created_time: str = ""
    ai_summary: Optional[str] = None  # cached JSON
    ai_summary_generated_at: Optional[str] = None
    order: Optional[OrderInfo] = None  # enrichment, never persisted

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CSCase":
        f = record.get("fields", {}) or {}
        return cls(
            id=record.get("id", ""),
            platform_order_number=_text(f.get("Platform Order Number")) or "",
            customer_name=_text(f.get("Customer Name")) or "",
            customer_email=_text(f.get("Customer Email")) or "",
            original_message=_text(f.get("Original Message")) or "",
            issue_category=_text(f.get("Issue Category")),
            sentiment=_text(f.get("Sentiment")),
            urgency=_text(f.get("Urgency")),
            status=_text(f.get("Status")) or "New",
            ai_draft_reply=_text(f.get("AI Draft Reply")),
            final_reply_sent=_text(f.get("Final Reply Sent")),
            resolution_type=_text(f.get("Resolution Type")),
            resolution_notes=_text(f.get("Resolution Notes")),
            internal_notes=_text(f.get("Internal Notes")),
            resolved_at=_text(f.get("Resolved At")),
            follow_up_date=_text(f.get("Follow Up Date")),
            contact_reason=_text(f.get("Contact Reason")),
            store_code=_text(f.get("Store Code")),
            assigned_to=_text(f.get("Assigned To")),
            created_time=record.get("createdTime", ""),
            ai_summary=_text(f.get("AI Summary")),
            ai_summary_generated_at=_text(f.get("AI Summary Generated At")),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {k: v for k, v in self.__dict__.items() if k != "order"}
        result["order"] = self.order.to_dict() if self.order else None
        return result


# Case attribute name -> record store field name, for writes
CASE_FIELD_NAMES = {
    "platform_order_number": "Platform Order Number",
    "customer_name": "Customer Name",
    "customer_email": "Customer Email",
    "original_message": "Original Message",
    "issue_category": "Issue Category",
    "sentiment": "Sentiment",
    "urgency": "Urgency",
    "status": "Status",
    "ai_draft_reply": "AI Draft Reply",
    "final_reply_sent": "Final Reply Sent",
    "resolution_type": "Resolution Type",
    "resolution_notes": "Resolution Notes",
    "internal_notes": "Internal Notes",
    "resolved_at": "Resolved At",
    "follow_up_date": "Follow Up Date",
    "contact_reason": "Contact Reason",
    "store_code": "Store Code",
    "assigned_to": "Assigned To",
    "ai_summary": "AI Summary",
    "ai_summary_generated_at": "AI Summary Generated At",
}


@dataclass
class Store:
    """A sales-channel store and the persona used when replying on its behalf."""

    id: str
    store_code: str = ""
    store_name: str = ""
    platform: str = ""
    persona_name: Optional[str] = None
    persona_age: Optional[int] = None
    persona_location: Optional[str] = None
    persona_background: Optional[str] = None
    personality_traits: Optional[str] = None
    writing_style: Optional[str] = None
    greeting_template: Optional[str] = None
    signoff_template: Optional[str] = None
    cs_email: Optional[str] = None
    max_response_hours: Optional[int] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Store":
        f = record.get("fields", {}) or {}
        return cls(
            id=record.get("id", ""),
            store_code=_text(f.get("Store Code")) or "",
            store_name=_text(f.get("Store Name")) or "",
            platform=_text(f.get("Platform")) or "",
            persona_name=_text(f.get("Persona Name")),
            persona_age=_int(f.get("Persona Age")),
            persona_location=_text(f.get("Persona Location")),
            persona_background=_text(f.get("Persona Background")),
            personality_traits=_text(f.get("Personality Traits")),
            writing_style=_text(f.get("Writing Style")),
            greeting_template=_text(f.get("Greeting Template")),
            signoff_template=_text(f.get("Signoff Template")),
            cs_email=_text(f.get("CS Email")),
            max_response_hours=_int(f.get("Max Response Hours")),
        )


@dataclass
class Playbook:
    """Handling guidance for one issue category."""

    id: str
    scenario_name: str = ""
    issue_category: Optional[str] = None
    description: Optional[str] = None
    decision_tree: Optional[str] = None
    response_template: Optional[str] = None
    when_to_escalate: Optional[str] = None
    status: str = "Draft"

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Playbook":
        f = record.get("fields", {}) or {}
        return cls(
            id=record.get("id", ""),
            scenario_name=_text(f.get("Scenario Name")) or "",
            issue_category=_text(f.get("Issue Category")),
            description=_text(f.get("Description")),
            decision_tree=_text(f.get("Decision Tree")),
            response_template=_text(f.get("Response Template")),
            when_to_escalate=_text(f.get("When to Escalate")),
            status=_text(f.get("Playbook Status")) or "Draft",
        )


@dataclass(frozen=True)
class CaseAgingFacts:
    """How long a case has been open and whether that warrants a warning."""

    age_hours: int
    is_overdue: bool
    is_critical: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age_hours": self.age_hours,
            "is_overdue": self.is_overdue,
            "is_critical": self.is_critical,
        }


@dataclass
class CaseSummary:
    """Internal AI analysis of a case, cached on the case record as JSON."""

    summary: str
    key_findings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    can_fulfill_request: bool = False
    reason: str = ""

    def to_json(self) -> str:
        return json.dumps({
            "summary": self.summary,
            "keyFindings": self.key_findings,
            "recommendations": self.recommendations,
            "canFulfillRequest": self.can_fulfill_request,
            "reason": self.reason,
        })

    @classmethod
    def from_json(cls, text: str) -> "CaseSummary":
        """
        Parse a summary from JSON text.

        Raises:
            ValueError: If the text is not a JSON object with a string 'summary'.
        """
        return cls.from_data(json.loads(text))

    @classmethod
    def from_data(cls, data: Any) -> "CaseSummary":
        """Build a summary from already-parsed JSON. Raises ValueError on the wrong shape."""
        if not isinstance(data, dict) or not isinstance(data.get("summary"), str):
            raise ValueError("summary JSON must be an object with a 'summary' string")
        key_findings = data.get("keyFindings") or []
        recommendations = data.get("recommendations") or []
        if not isinstance(key_findings, list) or not isinstance(recommendations, list):
            raise ValueError("summary 'keyFindings' and 'recommendations' must be lists")
        return cls(
            summary=data["summary"],
            key_findings=[str(x) for x in key_findings],
            recommendations=[str(x) for x in recommendations],
            can_fulfill_request=bool(data.get("canFulfillRequest", False)),
            reason=str(data.get("reason") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "key_findings": self.key_findings,
            "recommendations": self.recommendations,
            "can_fulfill_request": self.can_fulfill_request,
            "reason": self.reason,
        }
